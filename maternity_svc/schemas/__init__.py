"""
Pydantic schemas for API request/response validation.

This module contains all Pydantic models used at API boundaries.
"""
from maternity_svc.schemas.health_record import (
    DashboardResponse,
    EmergencyContactResponse,
    HealthRecordResponse,
    HealthRecordSubmit,
    NotificationResponse,
    SubmissionResponse,
)
from maternity_svc.schemas.patient import (
    EmergencyContactCreate,
    PatientCreate,
    PatientResponse,
)

__all__ = [
    # Patient schemas
    "EmergencyContactCreate",
    "PatientCreate",
    "PatientResponse",
    # Health record schemas
    "DashboardResponse",
    "EmergencyContactResponse",
    "HealthRecordResponse",
    "HealthRecordSubmit",
    "NotificationResponse",
    "SubmissionResponse",
]
