"""
Tests for the per-patient record store and the pregnancy progress helpers.
"""
from datetime import date, datetime, timedelta, timezone

import pytest

from maternity_svc.core.exceptions import PatientNotFoundError, PersistenceError
from maternity_svc.models.health_record import (
    BabyMovementData,
    BloodPressureData,
    HealthRecord,
    RecordType,
    SugarLevelData,
    SugarTestType,
    WeeklyUpdateData,
)
from maternity_svc.repositories import PatientRepository
from maternity_svc.services import PatientService
from maternity_svc.services.record_store import (
    RecordStore,
    pregnancy_progress,
    weeks_remaining,
)

PATIENTS_KEY = "registeredUsers"

BASE = datetime(2025, 1, 1, 10, 0, tzinfo=timezone.utc)


def bp(record_id, systolic, diastolic, when, patient_id):
    return HealthRecord(
        id=record_id,
        patient_id=patient_id,
        date=when,
        type=RecordType.BLOOD_PRESSURE,
        data=BloodPressureData(systolic=systolic, diastolic=diastolic, heart_rate=72),
    )


def sugar(record_id, level, when, patient_id):
    return HealthRecord(
        id=record_id,
        patient_id=patient_id,
        date=when,
        type=RecordType.SUGAR_LEVEL,
        data=SugarLevelData(level=level),
    )


# =============================================================================
# Ordering
# =============================================================================

def test_latest_of_uses_date_not_insertion_order(patient_repo, patient):
    store = RecordStore.load(patient_repo, patient.id)
    store.append(bp("1000", 120, 80, BASE + timedelta(hours=2), patient.id))
    store.append(bp("1001", 150, 95, BASE, patient.id))

    latest = store.latest_of(RecordType.BLOOD_PRESSURE)
    assert latest.id == "1000"
    assert [r.id for r in store.all()] == ["1000", "1001"]


def test_latest_of_breaks_date_ties_by_id(patient_repo, patient):
    store = RecordStore.load(patient_repo, patient.id)
    store.append(bp("999", 120, 80, BASE, patient.id))
    store.append(bp("1000", 121, 80, BASE, patient.id))
    store.append(bp("998", 122, 80, BASE, patient.id))

    assert store.latest_of(RecordType.BLOOD_PRESSURE).id == "1000"


def test_latest_of_missing_type_returns_none(patient_repo, patient):
    store = RecordStore.load(patient_repo, patient.id)
    store.append(sugar("1000", 95, BASE, patient.id))
    assert store.latest_of(RecordType.BABY_MOVEMENT) is None


def test_recent_returns_first_records_in_insertion_order(patient_repo, patient):
    store = RecordStore.load(patient_repo, patient.id)
    for i in range(5):
        store.append(sugar(str(1000 + i), 90 + i, BASE + timedelta(minutes=i), patient.id))

    assert [r.id for r in store.recent()] == ["1000", "1001", "1002"]
    assert [r.id for r in store.recent(limit=10)] == ["1000", "1001", "1002", "1003", "1004"]
    assert len(store) == 5


def test_of_type_filters(patient_repo, patient):
    store = RecordStore.load(patient_repo, patient.id)
    store.append(sugar("1000", 95, BASE, patient.id))
    store.append(bp("1001", 120, 80, BASE, patient.id))
    store.append(sugar("1002", 100, BASE, patient.id))

    assert [r.id for r in store.of_type(RecordType.SUGAR_LEVEL)] == ["1000", "1002"]


# =============================================================================
# Persistence
# =============================================================================

def test_append_persists_and_reloads(patient_repo, patient):
    store = RecordStore.load(patient_repo, patient.id)
    record = bp("1000", 150, 85, BASE, patient.id)
    store.append(record)

    reloaded = RecordStore.load(patient_repo, patient.id)
    assert reloaded.all() == [record]


def test_round_trip_through_sqlite(temp_store):
    repo = PatientRepository(store=temp_store, key=PATIENTS_KEY)

    patient = PatientService(repo).register(name="Ana", current_week=20)
    store = RecordStore.load(repo, patient.id)
    records = [
        bp("1000", 150, 85, datetime(2025, 1, 1, 10, 0, 0, 123000, tzinfo=timezone.utc), patient.id),
        HealthRecord(
            id="1001",
            patient_id=patient.id,
            date=BASE,
            type=RecordType.BABY_MOVEMENT,
            data=BabyMovementData(count=12, duration=60, notes="after lunch"),
        ),
        HealthRecord(
            id="1002",
            patient_id=patient.id,
            date=BASE + timedelta(hours=1),
            type=RecordType.SUGAR_LEVEL,
            data=SugarLevelData(level=140, test_type=SugarTestType.POST_MEAL, notes="after dinner"),
        ),
        HealthRecord(
            id="1003",
            patient_id=patient.id,
            date=BASE + timedelta(hours=2),
            type=RecordType.WEEKLY_UPDATE,
            data=WeeklyUpdateData(
                weight=68.4,
                mood=7,
                symptoms=frozenset({"nausea", "back pain"}),
                notes="tired",
            ),
        ),
    ]
    for record in records:
        store.append(record)

    assert RecordStore.load(repo, patient.id).all() == records


def test_persisting_twice_is_idempotent(memory_store, patient_repo, patient):
    store = RecordStore.load(patient_repo, patient.id)
    store.append(sugar("1000", 95, BASE, patient.id))
    first = memory_store.raw(PATIENTS_KEY)

    patient_repo.save_records(patient.id, store.all())
    assert memory_store.raw(PATIENTS_KEY) == first


def test_save_records_keeps_other_patient_fields(memory_store, patient_repo, patient):
    entries = memory_store.get(PATIENTS_KEY)
    entries[0]["clinic"] = "North"
    memory_store.set(PATIENTS_KEY, entries)

    patient_repo.save_records(patient.id, [sugar("1000", 95, BASE, patient.id)])

    stored = memory_store.get(PATIENTS_KEY)[0]
    assert stored["clinic"] == "North"
    assert stored["name"] == "Jane Doe"
    assert len(stored["healthRecords"]) == 1


def test_load_unknown_patient_raises(patient_repo):
    with pytest.raises(PatientNotFoundError):
        RecordStore.load(patient_repo, "missing")


def test_append_failure_leaves_memory_unchanged(failing_store):
    repo = PatientRepository(store=failing_store, key=PATIENTS_KEY)

    patient = PatientService(repo).register(name="Ana")
    store = RecordStore.load(repo, patient.id)
    store.append(sugar("1000", 95, BASE, patient.id))

    failing_store.fail_keys.add(PATIENTS_KEY)
    with pytest.raises(PersistenceError):
        store.append(sugar("1001", 99, BASE, patient.id))

    assert [r.id for r in store.all()] == ["1000"]
    failing_store.fail_keys.clear()
    assert [r.id for r in RecordStore.load(repo, patient.id).all()] == ["1000"]


def test_discard_removes_record(patient_repo, patient):
    store = RecordStore.load(patient_repo, patient.id)
    kept = sugar("1000", 95, BASE, patient.id)
    dropped = sugar("1001", 99, BASE, patient.id)
    store.append(kept)
    store.append(dropped)

    store.discard(dropped)

    assert store.all() == [kept]
    assert RecordStore.load(patient_repo, patient.id).all() == [kept]


# =============================================================================
# Pregnancy progress
# =============================================================================

def test_weeks_remaining_rounds_up():
    today = datetime(2025, 1, 1, tzinfo=timezone.utc)
    assert weeks_remaining(today + timedelta(days=14), today) == 2
    assert weeks_remaining(today + timedelta(days=15), today) == 3
    assert weeks_remaining(today + timedelta(days=1), today) == 1


def test_weeks_remaining_never_negative():
    today = datetime(2025, 6, 1, tzinfo=timezone.utc)
    assert weeks_remaining(today - timedelta(days=30), today) == 0
    assert weeks_remaining(today, today) == 0


def test_weeks_remaining_unset_due_date():
    today = datetime(2025, 6, 1, tzinfo=timezone.utc)
    assert weeks_remaining(None, today) == 0
    assert weeks_remaining("", today) == 0


def test_weeks_remaining_accepts_iso_strings_and_dates():
    assert weeks_remaining("2025-01-15T00:00:00.000Z", "2025-01-01T00:00:00Z") == 2
    assert weeks_remaining(date(2025, 1, 15), date(2025, 1, 1)) == 2


def test_weeks_remaining_never_increases_as_time_passes():
    due = datetime(2025, 3, 1, tzinfo=timezone.utc)
    start = datetime(2024, 12, 1, tzinfo=timezone.utc)
    values = [weeks_remaining(due, start + timedelta(days=d)) for d in range(0, 120)]
    assert all(a >= b for a, b in zip(values, values[1:]))
    assert values[-1] == 0


@pytest.mark.parametrize(
    "week,expected",
    [(None, 0), (0, 0), (20, 50), (38, 95), (40, 100), (42, 100)],
)
def test_pregnancy_progress(week, expected):
    assert pregnancy_progress(week) == expected
