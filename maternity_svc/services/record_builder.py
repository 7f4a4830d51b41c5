"""
Record builder: turns raw form fields into a typed HealthRecord.

Form values arrive as strings or numbers. Each record type has its own set
of required fields; anything missing or non-numeric is rejected with a
ValidationError naming the field. Building a record has no side effects.
"""
import math
import re
from datetime import datetime
from typing import Any, Callable, FrozenSet, Mapping, Optional

from maternity_svc.core.datetime_utils import to_utc, truncate_to_millis, utc_now
from maternity_svc.core.exceptions import ValidationError
from maternity_svc.core.identifiers import new_id
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

MOOD_MIN = 1
MOOD_MAX = 10

# Plain ASCII decimal form input only: no digit separators, no non-ASCII digits.
_INT_TEXT = re.compile(r"[+-]?[0-9]+")
_FLOAT_TEXT = re.compile(r"[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _required(fields: Mapping[str, Any], name: str) -> Any:
    value = fields.get(name)
    if _is_blank(value):
        raise ValidationError(field=name, reason="is required")
    return value


def parse_int(name: str, value: Any) -> int:
    """Coerce a form value to int using base-10 parsing."""
    if isinstance(value, bool):
        raise ValidationError(field=name, reason="must be a whole number")
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if value.is_integer():
            return int(value)
        raise ValidationError(field=name, reason="must be a whole number")
    if isinstance(value, str) and _INT_TEXT.fullmatch(value.strip()):
        return int(value.strip(), 10)
    raise ValidationError(field=name, reason="must be a whole number")


def parse_float(name: str, value: Any) -> float:
    """Coerce a form value to a finite float."""
    if isinstance(value, bool):
        raise ValidationError(field=name, reason="must be a number")
    if isinstance(value, (int, float)):
        result = float(value)
    elif isinstance(value, str) and _FLOAT_TEXT.fullmatch(value.strip()):
        result = float(value.strip())
    else:
        raise ValidationError(field=name, reason="must be a number")
    if not math.isfinite(result):
        raise ValidationError(field=name, reason="must be a finite number")
    return result


def _notes(fields: Mapping[str, Any]) -> str:
    value = fields.get("notes")
    if value is None:
        return ""
    return str(value).strip()


def _symptoms(fields: Mapping[str, Any]) -> FrozenSet[str]:
    value = fields.get("symptoms")
    if value is None:
        return frozenset()
    if isinstance(value, str):
        items = value.split(",")
    elif isinstance(value, (list, tuple, set, frozenset)):
        items = value
    else:
        raise ValidationError(field="symptoms", reason="must be a list of strings")
    symptoms = set()
    for item in items:
        if not isinstance(item, str):
            raise ValidationError(field="symptoms", reason="must be a list of strings")
        if item.strip():
            symptoms.add(item.strip())
    return frozenset(symptoms)


def _blood_pressure(fields: Mapping[str, Any]) -> BloodPressureData:
    return BloodPressureData(
        systolic=parse_int("systolic", _required(fields, "systolic")),
        diastolic=parse_int("diastolic", _required(fields, "diastolic")),
        heart_rate=parse_int("heartRate", _required(fields, "heartRate")),
        notes=_notes(fields),
    )


def _sugar_level(fields: Mapping[str, Any]) -> SugarLevelData:
    raw_test_type = fields.get("testType")
    if _is_blank(raw_test_type):
        test_type = SugarTestType.FASTING
    else:
        try:
            test_type = SugarTestType(str(raw_test_type).strip())
        except ValueError:
            allowed = ", ".join(t.value for t in SugarTestType)
            raise ValidationError(field="testType", reason=f"must be one of: {allowed}") from None
    return SugarLevelData(
        level=parse_int("level", _required(fields, "level")),
        test_type=test_type,
        notes=_notes(fields),
    )


def _baby_movement(fields: Mapping[str, Any]) -> BabyMovementData:
    return BabyMovementData(
        count=parse_int("count", _required(fields, "count")),
        duration=parse_int("duration", _required(fields, "duration")),
        notes=_notes(fields),
    )


def _weekly_update(fields: Mapping[str, Any]) -> WeeklyUpdateData:
    weight = parse_float("weight", _required(fields, "weight"))
    mood = parse_int("mood", _required(fields, "mood"))
    if not MOOD_MIN <= mood <= MOOD_MAX:
        raise ValidationError(field="mood", reason=f"must be between {MOOD_MIN} and {MOOD_MAX}")
    return WeeklyUpdateData(
        weight=weight,
        mood=mood,
        symptoms=_symptoms(fields),
        notes=_notes(fields),
    )


def parse_record_type(value: Any) -> RecordType:
    """Resolve a raw type value, rejecting anything outside the four variants."""
    if isinstance(value, RecordType):
        return value
    try:
        return RecordType(str(value).strip())
    except ValueError:
        allowed = ", ".join(t.value for t in RecordType)
        raise ValidationError(field="type", reason=f"must be one of: {allowed}") from None


def build_payload(record_type: RecordType, fields: Mapping[str, Any]) -> RecordData:
    """Validate and coerce the payload for one record type."""
    if record_type is RecordType.BLOOD_PRESSURE:
        return _blood_pressure(fields)
    if record_type is RecordType.SUGAR_LEVEL:
        return _sugar_level(fields)
    if record_type is RecordType.BABY_MOVEMENT:
        return _baby_movement(fields)
    if record_type is RecordType.WEEKLY_UPDATE:
        return _weekly_update(fields)
    raise ValidationError(field="type", reason=f"is not handled: {record_type!r}")


class RecordBuilder:
    """
    Builds validated HealthRecords from form submissions.

    The clock and id source are injectable so tests can pin them.
    """

    def __init__(
        self,
        clock: Callable[[], datetime] = utc_now,
        id_factory: Callable[[], str] = new_id,
    ):
        self._clock = clock
        self._id_factory = id_factory

    def build(
        self,
        record_type: Any,
        raw_fields: Optional[Mapping[str, Any]],
        patient_id: str,
    ) -> HealthRecord:
        """
        Build a record of the given type from raw form fields.

        Args:
            record_type: One of the RecordType values.
            raw_fields: Mapping of form field names to string/number values.
            patient_id: Owner of the new record.

        Returns:
            HealthRecord with a fresh id and the current time as its date.

        Raises:
            ValidationError: If a required field is missing or not numeric.
        """
        resolved_type = parse_record_type(record_type)
        payload = build_payload(resolved_type, raw_fields or {})
        return HealthRecord(
            id=self._id_factory(),
            patient_id=patient_id,
            date=truncate_to_millis(to_utc(self._clock())),
            type=resolved_type,
            data=payload,
        )
