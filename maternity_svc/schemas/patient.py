"""
Pydantic schemas for patient-related API operations.
"""
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from maternity_svc.core.datetime_utils import format_iso
from maternity_svc.models.patient import Patient
from maternity_svc.schemas.health_record import EmergencyContactResponse


class EmergencyContactCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    relationship: str = Field("", max_length=100)
    phone: str = Field(..., min_length=1, max_length=50)


class PatientCreate(BaseModel):
    """Schema for registering a patient."""
    name: str = Field(
        ...,
        min_length=1,
        max_length=200,
        description="Patient full name",
        examples=["Jane Doe"]
    )
    due_date: Optional[datetime] = Field(None, description="Expected due date")
    current_week: Optional[int] = Field(None, ge=0, le=45, description="Current pregnancy week")
    emergency_contacts: List[EmergencyContactCreate] = Field(default_factory=list)

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "name": "Jane Doe",
                "due_date": "2025-06-01",
                "current_week": 24,
                "emergency_contacts": [
                    {"name": "John Doe", "relationship": "Partner", "phone": "+1-555-0100"}
                ]
            }
        }
    )


class PatientResponse(BaseModel):
    """Schema for patient response."""
    id: str = Field(..., description="Patient id", examples=["1735725600000"])
    name: str = Field(..., description="Patient full name", examples=["Jane Doe"])
    due_date: Optional[str] = Field(None, description="ISO 8601 due date")
    current_week: Optional[int] = None
    emergency_contacts: List[EmergencyContactResponse] = Field(default_factory=list)
    record_count: int = Field(0, description="Number of stored health records")

    @classmethod
    def from_patient(cls, patient: Patient) -> "PatientResponse":
        return cls(
            id=patient.id,
            name=patient.name,
            due_date=format_iso(patient.due_date) if patient.due_date else None,
            current_week=patient.current_week,
            emergency_contacts=[
                EmergencyContactResponse(**c.to_dict()) for c in patient.emergency_contacts
            ],
            record_count=len(patient.health_records),
        )
