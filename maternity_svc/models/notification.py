"""
Domain model for clinician notifications.
"""
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Dict

from maternity_svc.core.datetime_utils import format_iso, parse_datetime
from maternity_svc.core.exceptions import InvalidRecordDataError


class Severity(str, Enum):
    INFO = "info"
    URGENT = "urgent"


@dataclass(frozen=True)
class Notification:
    """Clinician-facing alert derived from exactly one health record."""

    id: str
    patient_id: str
    patient_name: str
    severity: Severity
    message: str
    timestamp: datetime
    read: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "patientId": self.patient_id,
            "patientName": self.patient_name,
            "severity": self.severity.value,
            "message": self.message,
            "timestamp": format_iso(self.timestamp),
            "read": self.read,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Notification":
        """Raises InvalidRecordDataError for a malformed log entry."""
        try:
            return cls(
                id=str(data["id"]),
                patient_id=str(data["patientId"]),
                patient_name=data.get("patientName", ""),
                severity=Severity(data.get("severity") or data["type"]),
                message=data["message"],
                timestamp=parse_datetime(data["timestamp"]),
                read=bool(data.get("read", False)),
            )
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise InvalidRecordDataError(
                f"Malformed stored notification: {e}",
                notification_id=data.get("id") if isinstance(data, dict) else None,
            ) from e
