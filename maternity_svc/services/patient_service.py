"""
Service layer for patient operations.

Architecture:
    API Layer (routers) → PatientService → PatientRepository → KeyValueStore
"""
import logging
from datetime import datetime
from typing import Any, Iterable, List, Mapping, Optional

from maternity_svc.core.datetime_utils import to_utc
from maternity_svc.core.exceptions import PatientNotFoundError
from maternity_svc.core.identifiers import new_id
from maternity_svc.models.patient import EmergencyContact, Patient
from maternity_svc.repositories import PatientRepository

logger = logging.getLogger(__name__)


class PatientService:
    """
    Service layer for patient registration and lookup.
    """

    def __init__(self, patient_repository: PatientRepository):
        self._repo = patient_repository

    def register(
        self,
        name: str,
        due_date: Optional[datetime] = None,
        current_week: Optional[int] = None,
        emergency_contacts: Iterable[Mapping[str, Any]] = (),
    ) -> Patient:
        """
        Register a new patient with an empty record list.

        Args:
            name: Patient's full name.
            due_date: Expected due date (optional).
            current_week: Current pregnancy week (optional).
            emergency_contacts: Mappings with name, relationship and phone.

        Returns:
            Patient: The registered patient.
        """
        patient = Patient(
            id=new_id(),
            name=name,
            due_date=to_utc(due_date) if due_date else None,
            current_week=current_week,
            emergency_contacts=[
                EmergencyContact(
                    id=new_id(),
                    name=c["name"],
                    relationship=c.get("relationship", ""),
                    phone=c["phone"],
                )
                for c in emergency_contacts
            ],
        )
        logger.info(f"Registering patient: {name}")
        self._repo.add(patient)
        logger.info(f"Patient registered: {name} (id={patient.id})")
        return patient

    def get_patients(self) -> List[Patient]:
        """Get all patients in registration order."""
        return self._repo.get_all()

    def get_patient(self, patient_id: str) -> Patient:
        """
        Get a patient by id.

        Raises:
            PatientNotFoundError: If no patient with this id exists.
        """
        patient = self._repo.get_by_id(patient_id)
        if patient is None:
            raise PatientNotFoundError(patient_id=patient_id)
        return patient
