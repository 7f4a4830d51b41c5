"""
Domain models for the maternity health service.
"""
from maternity_svc.models.health_record import (
    BabyMovementData,
    BloodPressureData,
    HealthRecord,
    RecordData,
    RecordType,
    SugarLevelData,
    SugarTestType,
    WeeklyUpdateData,
)
from maternity_svc.models.notification import Notification, Severity
from maternity_svc.models.patient import EmergencyContact, Patient

__all__ = [
    "BabyMovementData",
    "BloodPressureData",
    "EmergencyContact",
    "HealthRecord",
    "Notification",
    "Patient",
    "RecordData",
    "RecordType",
    "Severity",
    "SugarLevelData",
    "SugarTestType",
    "WeeklyUpdateData",
]
