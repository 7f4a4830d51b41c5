"""
Records router - health record submission, listing and dashboard endpoints.

Architecture:
    HTTP Request → Router (this file) → HealthService → RecordStore / NotificationDeriver

Example flow for submit_record:
    1. Request arrives at /api/v1/patients/{patient_id}/records (POST)
    2. FastAPI resolves get_health_service() and its repositories
    3. HealthService builds the record, derives the notification,
       appends the record and publishes the notification
    4. ValidationError / PersistenceError are turned into JSON responses
       by the handlers registered in setup_exception_handlers()
"""
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from maternity_svc.core.dependencies import get_health_service
from maternity_svc.core.exceptions import RecordNotFoundError
from maternity_svc.models.health_record import RecordType
from maternity_svc.schemas import (
    DashboardResponse,
    HealthRecordResponse,
    HealthRecordSubmit,
    NotificationResponse,
    SubmissionResponse,
)
from maternity_svc.services import HealthService

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/v1/patients/{patient_id}",
    tags=["Health Records"],
)


@router.post(
    "/records",
    response_model=SubmissionResponse,
    status_code=201,
    summary="Submit a health record",
    description="Validate raw form fields for the selected record type, store the record "
                "and notify the monitoring clinician."
)
async def submit_record(
    patient_id: str,
    submission: HealthRecordSubmit,
    health_service: HealthService = Depends(get_health_service)
):
    """
    Submit a new health record.

    - **type**: blood_pressure, sugar_level, baby_movement or weekly_update
    - **fields**: raw form values for that type

    Raises:
    - 404 Not Found: If the patient is not registered
    - 422 Unprocessable Entity: If a form field is missing or not numeric
    - 500 Internal Server Error: If storage fails (nothing is stored)
    """
    record, notification = health_service.submit_record(
        patient_id=patient_id,
        record_type=submission.type,
        raw_fields=submission.fields,
    )
    return SubmissionResponse(
        record=HealthRecordResponse.from_record(record),
        notification=NotificationResponse.from_notification(notification),
    )


@router.get(
    "/records",
    response_model=List[HealthRecordResponse],
    summary="List health records",
    description="Records in the order they were submitted, optionally of a single type."
)
async def list_records(
    patient_id: str,
    type: Optional[RecordType] = Query(None, description="Filter by record type"),
    health_service: HealthService = Depends(get_health_service)
):
    records = health_service.get_records(patient_id, record_type=type)
    return [HealthRecordResponse.from_record(r) for r in records]


@router.get(
    "/records/latest",
    response_model=HealthRecordResponse,
    summary="Latest reading of a type",
    description="The record of the given type with the most recent date."
)
async def latest_record(
    patient_id: str,
    type: RecordType = Query(..., description="Record type"),
    health_service: HealthService = Depends(get_health_service)
):
    record = health_service.get_latest(patient_id, type)
    if record is None:
        raise RecordNotFoundError(
            f"No {type.value} records for patient '{patient_id}'",
            patient_id=patient_id,
            record_type=type.value,
        )
    return HealthRecordResponse.from_record(record)


@router.get(
    "/dashboard",
    response_model=DashboardResponse,
    summary="Pregnancy overview",
    description="Pregnancy progress, weeks remaining, latest readings and recent records."
)
async def dashboard(
    patient_id: str,
    health_service: HealthService = Depends(get_health_service)
):
    return health_service.get_dashboard(patient_id)
