"""
Pydantic schemas for health record API operations.
"""
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from maternity_svc.core.datetime_utils import format_iso
from maternity_svc.models.health_record import HealthRecord, RecordType
from maternity_svc.models.notification import Notification, Severity


class HealthRecordSubmit(BaseModel):
    """Schema for submitting a new health record.

    ``fields`` carries the raw form values untouched. They are validated and
    coerced per record type by the record builder only.
    """
    type: RecordType = Field(..., description="Record type", examples=["blood_pressure"])
    fields: Dict[str, Any] = Field(
        default_factory=dict,
        description="Raw form fields for the selected record type",
    )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "type": "blood_pressure",
                "fields": {"systolic": "118", "diastolic": "76", "heartRate": "70", "notes": ""}
            }
        }
    )


class HealthRecordResponse(BaseModel):
    """Schema for a stored health record. ``data`` uses the persisted payload keys."""
    id: str = Field(..., description="Time-ordered record id", examples=["1735725600000"])
    patient_id: str = Field(..., description="Owning patient id")
    date: str = Field(..., description="ISO 8601 UTC timestamp of the submission")
    type: RecordType = Field(..., description="Record type")
    data: Dict[str, Any] = Field(..., description="Type-specific payload")

    @classmethod
    def from_record(cls, record: HealthRecord) -> "HealthRecordResponse":
        return cls(
            id=record.id,
            patient_id=record.patient_id,
            date=format_iso(record.date),
            type=record.type,
            data=record.data.to_dict(),
        )


class NotificationResponse(BaseModel):
    """Schema for a clinician notification."""
    id: str
    patient_id: str
    patient_name: str
    severity: Severity
    message: str = Field(..., examples=["High blood pressure reading: 150/85"])
    timestamp: str
    read: bool

    @classmethod
    def from_notification(cls, notification: Notification) -> "NotificationResponse":
        return cls(
            id=notification.id,
            patient_id=notification.patient_id,
            patient_name=notification.patient_name,
            severity=notification.severity,
            message=notification.message,
            timestamp=format_iso(notification.timestamp),
            read=notification.read,
        )


class SubmissionResponse(BaseModel):
    """The stored record and the notification derived from it."""
    record: HealthRecordResponse
    notification: NotificationResponse


class EmergencyContactResponse(BaseModel):
    id: str
    name: str
    relationship: str
    phone: str


class DashboardResponse(BaseModel):
    """Pregnancy progress and latest readings for one patient."""
    patient_id: str
    patient_name: str
    current_week: int = Field(0, description="Current pregnancy week (0 when unset)")
    progress_percent: int = Field(0, ge=0, le=100)
    due_date: Optional[str] = None
    weeks_remaining: int = Field(0, ge=0)
    latest_blood_pressure: Optional[HealthRecordResponse] = None
    latest_sugar_level: Optional[HealthRecordResponse] = None
    latest_baby_movement: Optional[HealthRecordResponse] = None
    recent_records: List[HealthRecordResponse] = Field(default_factory=list)
    emergency_contacts: List[EmergencyContactResponse] = Field(default_factory=list)
    total_records: int = 0
