"""
Domain model for health records.

A record is a tagged union: ``HealthRecord.type`` selects exactly one payload
class, and the payload must be an instance of that class. Persisted blobs use
the camelCase keys the patient registry has always stored.
"""
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, FrozenSet, Union

from maternity_svc.core.datetime_utils import format_iso, parse_datetime
from maternity_svc.core.exceptions import InvalidRecordDataError


class RecordType(str, Enum):
    """Discriminant of the record payload."""

    BLOOD_PRESSURE = "blood_pressure"
    SUGAR_LEVEL = "sugar_level"
    BABY_MOVEMENT = "baby_movement"
    WEEKLY_UPDATE = "weekly_update"


class SugarTestType(str, Enum):
    FASTING = "fasting"
    RANDOM = "random"
    POST_MEAL = "post_meal"


@dataclass(frozen=True)
class BloodPressureData:
    systolic: int
    diastolic: int
    heart_rate: int
    notes: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "systolic": self.systolic,
            "diastolic": self.diastolic,
            "heartRate": self.heart_rate,
            "notes": self.notes,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BloodPressureData":
        return cls(
            systolic=data["systolic"],
            diastolic=data["diastolic"],
            heart_rate=data["heartRate"],
            notes=data.get("notes") or "",
        )


@dataclass(frozen=True)
class SugarLevelData:
    level: int
    test_type: SugarTestType = SugarTestType.FASTING
    notes: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "level": self.level,
            "testType": self.test_type.value,
            "notes": self.notes,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SugarLevelData":
        return cls(
            level=data["level"],
            test_type=SugarTestType(data.get("testType", SugarTestType.FASTING.value)),
            notes=data.get("notes") or "",
        )


@dataclass(frozen=True)
class BabyMovementData:
    count: int
    duration: int
    notes: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "count": self.count,
            "duration": self.duration,
            "notes": self.notes,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BabyMovementData":
        return cls(
            count=data["count"],
            duration=data["duration"],
            notes=data.get("notes") or "",
        )


@dataclass(frozen=True)
class WeeklyUpdateData:
    weight: float
    mood: int
    symptoms: FrozenSet[str] = field(default_factory=frozenset)
    notes: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "weight": self.weight,
            "symptoms": sorted(self.symptoms),
            "mood": self.mood,
            "notes": self.notes,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "WeeklyUpdateData":
        return cls(
            weight=float(data["weight"]),
            mood=data["mood"],
            symptoms=frozenset(data.get("symptoms") or ()),
            notes=data.get("notes") or "",
        )


RecordData = Union[BloodPressureData, SugarLevelData, BabyMovementData, WeeklyUpdateData]

PAYLOAD_CLASSES = {
    RecordType.BLOOD_PRESSURE: BloodPressureData,
    RecordType.SUGAR_LEVEL: SugarLevelData,
    RecordType.BABY_MOVEMENT: BabyMovementData,
    RecordType.WEEKLY_UPDATE: WeeklyUpdateData,
}


@dataclass(frozen=True)
class HealthRecord:
    """One timestamped health measurement submission. Immutable once created."""

    id: str
    patient_id: str
    date: datetime
    type: RecordType
    data: RecordData

    def __post_init__(self):
        expected = PAYLOAD_CLASSES.get(self.type)
        if expected is None:
            raise InvalidRecordDataError(f"Unknown record type: {self.type!r}")
        if not isinstance(self.data, expected):
            raise InvalidRecordDataError(
                f"Payload {type(self.data).__name__} does not match record type '{self.type.value}'",
                record_id=self.id,
            )

    def to_dict(self) -> Dict[str, Any]:
        """Convert the record to the JSON-serializable shape stored in the registry."""
        return {
            "id": self.id,
            "patientId": self.patient_id,
            "date": format_iso(self.date),
            "type": self.type.value,
            "data": self.data.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "HealthRecord":
        """
        Create a HealthRecord from its stored dictionary form.

        Raises:
            InvalidRecordDataError: If the blob is malformed or its payload
                does not match its type.
        """
        try:
            record_type = RecordType(data["type"])
            payload = PAYLOAD_CLASSES[record_type].from_dict(data["data"])
            return cls(
                id=str(data["id"]),
                patient_id=str(data["patientId"]),
                date=parse_datetime(data["date"]),
                type=record_type,
                data=payload,
            )
        except (KeyError, TypeError, ValueError) as e:
            raise InvalidRecordDataError(
                f"Malformed stored health record: {e}",
                record_id=data.get("id") if isinstance(data, dict) else None,
            ) from e
