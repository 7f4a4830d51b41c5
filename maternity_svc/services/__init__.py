"""
Service layer for business logic.
"""
from maternity_svc.services.health_service import HealthService
from maternity_svc.services.notification_deriver import NotificationDeriver
from maternity_svc.services.patient_service import PatientService
from maternity_svc.services.record_builder import RecordBuilder
from maternity_svc.services.record_store import (
    RecordStore,
    pregnancy_progress,
    weeks_remaining,
)

__all__ = [
    "HealthService",
    "NotificationDeriver",
    "PatientService",
    "RecordBuilder",
    "RecordStore",
    "pregnancy_progress",
    "weeks_remaining",
]
