"""
Notification deriver: turns a newly created record into a clinician alert.

Blood pressure above 140 systolic or 90 diastolic (strictly greater) is the
only reading that raises an urgent alert; every other record is informational.
"""
import logging
from datetime import datetime
from typing import Callable

from maternity_svc.core.datetime_utils import to_utc, truncate_to_millis, utc_now
from maternity_svc.core.identifiers import new_id
from maternity_svc.models.health_record import (
    BabyMovementData,
    BloodPressureData,
    HealthRecord,
    SugarLevelData,
    WeeklyUpdateData,
)
from maternity_svc.models.notification import Notification, Severity
from maternity_svc.repositories.notification_repository import NotificationRepository

logger = logging.getLogger(__name__)

SYSTOLIC_URGENT_ABOVE = 140
DIASTOLIC_URGENT_ABOVE = 90


def is_high_blood_pressure(reading: BloodPressureData) -> bool:
    return reading.systolic > SYSTOLIC_URGENT_ABOVE or reading.diastolic > DIASTOLIC_URGENT_ABOVE


def severity_for(record: HealthRecord) -> Severity:
    if isinstance(record.data, BloodPressureData) and is_high_blood_pressure(record.data):
        return Severity.URGENT
    return Severity.INFO


def message_for(record: HealthRecord) -> str:
    data = record.data
    if isinstance(data, BloodPressureData):
        if is_high_blood_pressure(data):
            return f"High blood pressure reading: {data.systolic}/{data.diastolic}"
        return f"New blood pressure reading: {data.systolic}/{data.diastolic}"
    if isinstance(data, SugarLevelData):
        return f"New sugar level reading: {data.level} mg/dL ({data.test_type.value})"
    if isinstance(data, BabyMovementData):
        return f"Baby movement recorded: {data.count} movements in {data.duration} minutes"
    if isinstance(data, WeeklyUpdateData):
        return "New weekly update submitted"
    raise TypeError(f"Unhandled record payload: {type(data).__name__}")


class NotificationDeriver:
    """
    Derives one notification per record and publishes it to the clinician log.
    """

    def __init__(
        self,
        notification_repository: NotificationRepository,
        clock: Callable[[], datetime] = utc_now,
        id_factory: Callable[[], str] = new_id,
    ):
        self._repo = notification_repository
        self._clock = clock
        self._id_factory = id_factory

    def derive(self, record: HealthRecord, patient_id: str, patient_name: str) -> Notification:
        """Compute the notification for a record without touching storage."""
        return Notification(
            id=self._id_factory(),
            patient_id=patient_id,
            patient_name=patient_name,
            severity=severity_for(record),
            message=message_for(record),
            timestamp=truncate_to_millis(to_utc(self._clock())),
            read=False,
        )

    def publish(self, notification: Notification) -> None:
        """Prepend a notification to the log, keeping the feed newest-first."""
        self._repo.prepend(notification)
        log = logger.warning if notification.severity is Severity.URGENT else logger.info
        log(
            "Clinician notified",
            extra={
                "patient_id": notification.patient_id,
                "severity": notification.severity.value,
                "notification_id": notification.id,
            }
        )

    def notify(self, record: HealthRecord, patient_id: str, patient_name: str) -> Notification:
        """Derive the notification for a record and publish it."""
        notification = self.derive(record, patient_id, patient_name)
        self.publish(notification)
        return notification
