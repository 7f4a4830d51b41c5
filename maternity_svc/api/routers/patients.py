"""
Patients router - registration and lookup endpoints.

Architecture:
    HTTP Request → Router (this file) → PatientService → PatientRepository → KeyValueStore
"""
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from maternity_svc.core.dependencies import get_patient_service
from maternity_svc.schemas import PatientCreate, PatientResponse
from maternity_svc.services import PatientService

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/v1/patients",
    tags=["Patients"],
)

DEFAULT_QUERY_LIMIT = 100
MAX_QUERY_LIMIT = 500


@router.post(
    "",
    response_model=PatientResponse,
    status_code=201,
    summary="Register a patient",
    description="Add a new patient with an empty health record list."
)
async def create_patient(
    patient: PatientCreate,
    patient_service: PatientService = Depends(get_patient_service)
):
    created = patient_service.register(
        name=patient.name,
        due_date=patient.due_date,
        current_week=patient.current_week,
        emergency_contacts=[c.model_dump() for c in patient.emergency_contacts],
    )
    return PatientResponse.from_patient(created)


@router.get(
    "",
    response_model=List[PatientResponse],
    summary="List patients",
    description=f"Retrieve registered patients in registration order. "
                f"Default limit is {DEFAULT_QUERY_LIMIT}, maximum is {MAX_QUERY_LIMIT}."
)
async def list_patients(
    limit: Optional[int] = Query(
        None,
        ge=1,
        le=MAX_QUERY_LIMIT,
        description=f"Maximum number of patients to return (1-{MAX_QUERY_LIMIT})",
    ),
    patient_service: PatientService = Depends(get_patient_service)
):
    effective_limit = limit
    if effective_limit is None:
        effective_limit = DEFAULT_QUERY_LIMIT
    patients = patient_service.get_patients()[:effective_limit]
    return [PatientResponse.from_patient(p) for p in patients]


@router.get(
    "/{patient_id}",
    response_model=PatientResponse,
    summary="Get a patient",
)
async def get_patient(
    patient_id: str,
    patient_service: PatientService = Depends(get_patient_service)
):
    # PatientNotFoundError is handled by setup_exception_handlers()
    return PatientResponse.from_patient(patient_service.get_patient(patient_id))
