"""
Record store: one patient's health records for the length of a session.

The store keeps records in insertion order (the order the record list is
shown in) and answers "latest reading of type T" by recency, so the two
orderings stay distinct. Every append rewrites the patient's whole persisted
record set through the patient registry.
"""
import logging
import math
from datetime import date, datetime, timedelta
from typing import List, Optional, Union

from maternity_svc.core.datetime_utils import parse_datetime
from maternity_svc.core.identifiers import id_sort_key
from maternity_svc.models.health_record import HealthRecord, RecordType
from maternity_svc.repositories.patient_repository import PatientRepository

logger = logging.getLogger(__name__)

WEEK = timedelta(weeks=1)
FULL_TERM_WEEKS = 40


class RecordStore:
    """
    In-memory record collection for one patient, backed by the registry.

    Usage:
        store = RecordStore.load(patient_repository, patient_id)
        store.append(record)
        latest_bp = store.latest_of(RecordType.BLOOD_PRESSURE)
    """

    def __init__(
        self,
        patient_id: str,
        patient_repository: PatientRepository,
        records: Optional[List[HealthRecord]] = None,
    ):
        self.patient_id = patient_id
        self._repo = patient_repository
        self._records: List[HealthRecord] = list(records or [])

    @classmethod
    def load(cls, patient_repository: PatientRepository, patient_id: str) -> "RecordStore":
        """
        Restore a patient's records from the registry.

        Raises:
            PatientNotFoundError: If the patient is not registered.
        """
        records = patient_repository.get_records(patient_id)
        return cls(patient_id, patient_repository, records)

    def append(self, record: HealthRecord) -> None:
        """
        Add a record and persist the full record set.

        If persisting fails the in-memory append is undone and the error
        propagates, so memory and storage never disagree.
        """
        self._records.append(record)
        try:
            self._persist()
        except Exception:
            self._records.pop()
            raise

    def discard(self, record: HealthRecord) -> None:
        """
        Remove a just-appended record and persist the set without it.

        Used to undo an append when a later step of the same submission fails.
        """
        remaining = [r for r in self._records if r.id != record.id]
        if len(remaining) == len(self._records):
            return
        previous = self._records
        self._records = remaining
        try:
            self._persist()
        except Exception:
            self._records = previous
            raise

    def _persist(self) -> None:
        self._repo.save_records(self.patient_id, self._records)

    def all(self) -> List[HealthRecord]:
        """Records in insertion order."""
        return list(self._records)

    def recent(self, limit: int = 3) -> List[HealthRecord]:
        """The first ``limit`` records in insertion order."""
        return self._records[:limit]

    def of_type(self, record_type: RecordType) -> List[HealthRecord]:
        return [r for r in self._records if r.type is record_type]

    def latest_of(self, record_type: RecordType) -> Optional[HealthRecord]:
        """
        The record of the given type with the latest date.

        Ties on date go to the greater id, i.e. the later-created record.
        """
        candidates = self.of_type(record_type)
        if not candidates:
            return None
        return max(candidates, key=lambda r: (r.date, id_sort_key(r.id)))

    def __len__(self) -> int:
        return len(self._records)


DateLike = Union[datetime, date, str]


def weeks_remaining(due_date: Optional[DateLike], today: DateLike) -> int:
    """
    Whole weeks until the due date, rounded up and never negative.

    An unset due date counts as already due.
    """
    if due_date is None or due_date == "":
        return 0
    remaining = parse_datetime(due_date) - parse_datetime(today)
    weeks = math.ceil(remaining / WEEK)
    return max(0, weeks)


def pregnancy_progress(current_week: Optional[int]) -> int:
    """Percent of a full-term pregnancy completed, 0-100."""
    if not current_week:
        return 0
    percent = round(current_week / FULL_TERM_WEEKS * 100)
    return min(100, max(0, percent))
