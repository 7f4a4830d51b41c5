"""
Service layer for health record operations.

This service contains the submission use case and the dashboard read models,
and orchestrates the record builder, record store and notification deriver.

Architecture:
    API Layer (routers) → HealthService → RecordStore / NotificationDeriver → Repositories

Dependency Injection:
    HealthService receives its collaborators via constructor injection.
    Use core.dependencies.get_health_service() in routers with Depends().
"""
import logging
from datetime import datetime
from typing import Any, List, Mapping, Optional, Tuple

from maternity_svc.core.config import RECENT_RECORDS_LIMIT
from maternity_svc.core.datetime_utils import format_iso, utc_now
from maternity_svc.core.exceptions import PatientNotFoundError, PersistenceError
from maternity_svc.models.health_record import HealthRecord, RecordType
from maternity_svc.models.notification import Notification, Severity
from maternity_svc.models.patient import Patient
from maternity_svc.repositories import NotificationRepository, PatientRepository
from maternity_svc.schemas import (
    DashboardResponse,
    EmergencyContactResponse,
    HealthRecordResponse,
)
from maternity_svc.services.notification_deriver import NotificationDeriver
from maternity_svc.services.record_builder import RecordBuilder
from maternity_svc.services.record_store import (
    RecordStore,
    pregnancy_progress,
    weeks_remaining,
)

logger = logging.getLogger(__name__)

DASHBOARD_CONTACTS_LIMIT = 2


def _response_or_none(record: Optional[HealthRecord]) -> Optional[HealthRecordResponse]:
    return HealthRecordResponse.from_record(record) if record else None


class HealthService:
    """
    Service layer for health record operations.

    A submission is all-or-nothing: either the record is stored and its
    notification is in the clinician log, or neither is.
    """

    def __init__(
        self,
        patient_repository: PatientRepository,
        notification_repository: NotificationRepository,
        record_builder: Optional[RecordBuilder] = None,
        notification_deriver: Optional[NotificationDeriver] = None,
        recent_limit: int = RECENT_RECORDS_LIMIT,
    ):
        """
        Initialize the health service.

        Args:
            patient_repository: Registry holding patients and their records.
            notification_repository: The clinician notification log.
            record_builder: Builder for new records (default builder if omitted).
            notification_deriver: Deriver publishing to notification_repository
                (created if omitted).
            recent_limit: Number of records in the dashboard's recent panel.
        """
        self._patient_repo = patient_repository
        self._notification_repo = notification_repository
        self._builder = record_builder or RecordBuilder()
        self._deriver = notification_deriver or NotificationDeriver(notification_repository)
        self._recent_limit = recent_limit

    def _get_patient(self, patient_id: str) -> Patient:
        patient = self._patient_repo.get_by_id(patient_id)
        if patient is None:
            logger.warning(f"Patient not found: {patient_id}")
            raise PatientNotFoundError(patient_id=patient_id)
        return patient

    def _store_for(self, patient: Patient) -> RecordStore:
        return RecordStore(patient.id, self._patient_repo, patient.health_records)

    def submit_record(
        self,
        patient_id: str,
        record_type: Any,
        raw_fields: Optional[Mapping[str, Any]],
    ) -> Tuple[HealthRecord, Notification]:
        """
        Validate, store and announce a new health record.

        The record and its notification are both computed before anything
        is written. If the notification cannot be persisted the record is
        removed again.

        Returns:
            Tuple of the stored record and the published notification.

        Raises:
            PatientNotFoundError: If the patient is not registered.
            ValidationError: If the form fields are invalid. Nothing is stored.
            PersistenceError: If storage fails. Nothing is left stored.
        """
        patient = self._get_patient(patient_id)
        record = self._builder.build(record_type, raw_fields, patient_id=patient.id)
        notification = self._deriver.derive(record, patient.id, patient.name)

        logger.info(
            "Submitting health record",
            extra={"patient_id": patient.id, "record_type": record.type.value}
        )

        store = self._store_for(patient)
        store.append(record)
        try:
            self._deriver.publish(notification)
        except Exception as e:
            logger.error(
                f"Failed to publish notification, rolling back record {record.id}: {e}",
                exc_info=True
            )
            try:
                store.discard(record)
            except Exception as rollback_error:
                logger.critical(
                    f"Rollback of record {record.id} failed: {rollback_error}",
                    extra={"patient_id": patient.id}
                )
            if isinstance(e, PersistenceError):
                raise
            raise PersistenceError(operation="publish_notification") from e

        logger.info(
            "Health record submitted",
            extra={
                "patient_id": patient.id,
                "record_id": record.id,
                "severity": notification.severity.value,
            }
        )
        return record, notification

    def get_records(
        self,
        patient_id: str,
        record_type: Optional[RecordType] = None
    ) -> List[HealthRecord]:
        """
        Get a patient's records in insertion order, optionally of one type.
        """
        store = self._store_for(self._get_patient(patient_id))
        if record_type is None:
            return store.all()
        return store.of_type(record_type)

    def get_latest(self, patient_id: str, record_type: RecordType) -> Optional[HealthRecord]:
        """Get the most recent record of a type, or None."""
        store = self._store_for(self._get_patient(patient_id))
        return store.latest_of(record_type)

    def get_dashboard(self, patient_id: str, today: Optional[datetime] = None) -> DashboardResponse:
        """
        Build the pregnancy overview for a patient.

        Args:
            patient_id: Patient to summarize.
            today: Reference time for weeks remaining (defaults to now).
        """
        patient = self._get_patient(patient_id)
        store = self._store_for(patient)
        today = today or utc_now()

        return DashboardResponse(
            patient_id=patient.id,
            patient_name=patient.name,
            current_week=patient.current_week or 0,
            progress_percent=pregnancy_progress(patient.current_week),
            due_date=format_iso(patient.due_date) if patient.due_date else None,
            weeks_remaining=weeks_remaining(patient.due_date, today),
            latest_blood_pressure=_response_or_none(store.latest_of(RecordType.BLOOD_PRESSURE)),
            latest_sugar_level=_response_or_none(store.latest_of(RecordType.SUGAR_LEVEL)),
            latest_baby_movement=_response_or_none(store.latest_of(RecordType.BABY_MOVEMENT)),
            recent_records=[
                HealthRecordResponse.from_record(r) for r in store.recent(self._recent_limit)
            ],
            emergency_contacts=[
                EmergencyContactResponse(**c.to_dict())
                for c in patient.emergency_contacts[:DASHBOARD_CONTACTS_LIMIT]
            ],
            total_records=len(store),
        )

    def get_notifications(
        self,
        patient_id: Optional[str] = None,
        severity: Optional[Severity] = None,
        limit: Optional[int] = None
    ) -> List[Notification]:
        """
        Get the clinician feed newest-first with optional filters.
        """
        notifications = self._notification_repo.get_all()
        if patient_id is not None:
            notifications = [n for n in notifications if n.patient_id == patient_id]
        if severity is not None:
            notifications = [n for n in notifications if n.severity is severity]
        if limit is not None:
            notifications = notifications[:limit]
        return notifications
