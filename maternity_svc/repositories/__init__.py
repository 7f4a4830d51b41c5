"""
Repository layer for persistence access.

All key-value store access is encapsulated here - services never touch
the store directly.
"""
from maternity_svc.repositories.base import (
    InMemoryKeyValueStore,
    KeyValueStore,
    SqliteKeyValueStore,
)
from maternity_svc.repositories.notification_repository import NotificationRepository
from maternity_svc.repositories.patient_repository import PatientRepository

__all__ = [
    "InMemoryKeyValueStore",
    "KeyValueStore",
    "NotificationRepository",
    "PatientRepository",
    "SqliteKeyValueStore",
]
