"""
Repository for the clinician notification log.

The log is one global JSON list (not keyed by patient) kept newest-first:
new notifications are prepended and the whole list is written back.
"""
import logging
from typing import List

from maternity_svc.core.exceptions import PersistenceError
from maternity_svc.models.notification import Notification
from maternity_svc.repositories.base import KeyValueStore

logger = logging.getLogger(__name__)


class NotificationRepository:
    """Append-only (prepend-only) access to the notification log."""

    def __init__(self, store: KeyValueStore, key: str):
        self._store = store
        self._key = key

    def _load_entries(self) -> list:
        entries = self._store.get(self._key)
        if entries is None:
            return []
        if not isinstance(entries, list):
            logger.error(f"Notification log under '{self._key}' is not a list")
            raise PersistenceError(operation=f"read of '{self._key}'")
        return entries

    def prepend(self, notification: Notification) -> None:
        """Put a notification at the head of the log and persist the whole log."""
        entries = self._load_entries()
        entries.insert(0, notification.to_dict())
        self._store.set(self._key, entries)

    def get_all(self) -> List[Notification]:
        """Return the log newest-first."""
        return [Notification.from_dict(entry) for entry in self._load_entries()]
