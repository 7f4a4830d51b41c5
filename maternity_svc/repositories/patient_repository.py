"""
Repository for the patient registry.

The registry is a single JSON list stored under one key. Each entry is a
patient with an embedded ``healthRecords`` list. Every write replaces the
whole list (read-modify-write, last writer wins).

Architecture:
    PatientRepository is the data access layer for patients and their records.
    It should be injected via core.dependencies.get_patient_repository().
"""
import logging
from typing import Any, Dict, List, Optional

from maternity_svc.core.exceptions import (
    DuplicatePatientError,
    PatientNotFoundError,
    PersistenceError,
)
from maternity_svc.models.health_record import HealthRecord
from maternity_svc.models.patient import Patient
from maternity_svc.repositories.base import KeyValueStore

logger = logging.getLogger(__name__)


class PatientRepository:
    """
    Repository for patient registry operations.
    """

    def __init__(self, store: KeyValueStore, key: str):
        """
        Initialize the patient repository.

        Args:
            store: Key-value store holding the registry.
            key: Key the registry is stored under.
        """
        self._store = store
        self._key = key

    def _load_entries(self) -> List[Dict[str, Any]]:
        entries = self._store.get(self._key)
        if entries is None:
            return []
        if not isinstance(entries, list):
            logger.error(f"Patient registry under '{self._key}' is not a list")
            raise PersistenceError(operation=f"read of '{self._key}'")
        return entries

    @staticmethod
    def _find(entries: List[Dict[str, Any]], patient_id: str) -> Optional[int]:
        for index, entry in enumerate(entries):
            if str(entry.get("id")) == patient_id:
                return index
        return None

    def add(self, patient: Patient) -> Patient:
        """
        Append a patient to the registry.

        Raises:
            DuplicatePatientError: If a patient with the same id is registered.
        """
        entries = self._load_entries()
        if self._find(entries, patient.id) is not None:
            raise DuplicatePatientError(patient_id=patient.id)
        entries.append(patient.to_dict())
        self._store.set(self._key, entries)
        return patient

    def get_all(self) -> List[Patient]:
        """Get all registered patients in registration order."""
        return [Patient.from_dict(entry) for entry in self._load_entries()]

    def get_by_id(self, patient_id: str) -> Optional[Patient]:
        """
        Get a patient by id.

        Returns:
            Optional[Patient]: The patient or None if not registered.
        """
        entries = self._load_entries()
        index = self._find(entries, patient_id)
        if index is None:
            return None
        return Patient.from_dict(entries[index])

    def get_records(self, patient_id: str) -> List[HealthRecord]:
        """
        Get a patient's persisted records in stored order.

        Raises:
            PatientNotFoundError: If the patient is not registered.
        """
        patient = self.get_by_id(patient_id)
        if patient is None:
            raise PatientNotFoundError(patient_id=patient_id)
        return patient.health_records

    def save_records(self, patient_id: str, records: List[HealthRecord]) -> None:
        """
        Overwrite a patient's persisted record set.

        Only the ``healthRecords`` key of the entry is replaced; any other
        keys the entry carries are written back untouched.

        Raises:
            PatientNotFoundError: If the patient is not registered.
            PersistenceError: If the registry cannot be read or written.
        """
        entries = self._load_entries()
        index = self._find(entries, patient_id)
        if index is None:
            raise PatientNotFoundError(patient_id=patient_id)
        entries[index]["healthRecords"] = [r.to_dict() for r in records]
        self._store.set(self._key, entries)
        logger.debug(
            "Persisted patient records",
            extra={"patient_id": patient_id, "record_count": len(records)}
        )
