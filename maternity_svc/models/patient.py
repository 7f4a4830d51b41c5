"""
Domain model for patients.
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from maternity_svc.core.datetime_utils import format_iso, parse_datetime_safe
from maternity_svc.core.exceptions import InvalidRecordDataError
from maternity_svc.models.health_record import HealthRecord


@dataclass(frozen=True)
class EmergencyContact:
    id: str
    name: str
    relationship: str
    phone: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "relationship": self.relationship,
            "phone": self.phone,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EmergencyContact":
        return cls(
            id=str(data.get("id", "")),
            name=data.get("name", ""),
            relationship=data.get("relationship", ""),
            phone=data.get("phone", ""),
        )


@dataclass
class Patient:
    """Model representing a registered patient with embedded health records."""

    id: str
    name: str
    due_date: Optional[datetime] = None
    current_week: Optional[int] = None
    emergency_contacts: List[EmergencyContact] = field(default_factory=list)
    health_records: List[HealthRecord] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Convert patient to the registry entry shape."""
        return {
            "id": self.id,
            "name": self.name,
            "dueDate": format_iso(self.due_date) if self.due_date else None,
            "currentWeek": self.current_week,
            "emergencyContacts": [c.to_dict() for c in self.emergency_contacts],
            "healthRecords": [r.to_dict() for r in self.health_records],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Patient":
        """
        Create a Patient from a registry entry.

        Entries may carry extra keys (contact details, credentials) that
        this service neither reads nor rewrites.

        Raises:
            InvalidRecordDataError: If the entry has no id or holds a
                malformed contact or health record.
        """
        try:
            return cls(
                id=str(data["id"]),
                name=data.get("name", ""),
                due_date=parse_datetime_safe(data.get("dueDate")),
                current_week=data.get("currentWeek"),
                emergency_contacts=[
                    EmergencyContact.from_dict(c) for c in data.get("emergencyContacts") or []
                ],
                health_records=[
                    HealthRecord.from_dict(r) for r in data.get("healthRecords") or []
                ],
            )
        except (KeyError, TypeError, AttributeError) as e:
            raise InvalidRecordDataError(
                f"Malformed registry entry: {e}",
                patient_id=data.get("id") if isinstance(data, dict) else None,
            ) from e
