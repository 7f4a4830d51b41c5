"""
FastAPI dependency injection configuration.

Architecture Flow:
    API Layer (Routers)
         ↓ Depends()
    Service Layer (HealthService, PatientService)
         ↓ Injected
    Repository Layer (PatientRepository, NotificationRepository)
         ↓ Injected
    KeyValueStore (SQLite)

Testing:
    # Override dependencies in tests
    app.dependency_overrides[get_store] = lambda: InMemoryKeyValueStore()
"""
import logging
from typing import Optional

from fastapi import Depends

from maternity_svc.core.config import settings
from maternity_svc.repositories import (
    KeyValueStore,
    NotificationRepository,
    PatientRepository,
    SqliteKeyValueStore,
)
from maternity_svc.services import HealthService, PatientService

logger = logging.getLogger(__name__)


# =============================================================================
# STORE DEPENDENCY
# =============================================================================

_store_instance: Optional[SqliteKeyValueStore] = None


def get_store() -> KeyValueStore:
    """
    Get the process-wide key-value store, creating it on first use.
    """
    global _store_instance

    if _store_instance is None:
        logger.info(f"Initializing key-value store: {settings.database_path}")
        _store_instance = SqliteKeyValueStore(
            db_path=settings.database_path,
            busy_timeout=settings.maternity_svc_db_busy_timeout
        )
    return _store_instance


def reset_store() -> None:
    """Reset the store instance (for testing only)."""
    global _store_instance
    _store_instance = None


# =============================================================================
# REPOSITORY DEPENDENCIES
# =============================================================================

def get_patient_repository(store: KeyValueStore = Depends(get_store)) -> PatientRepository:
    """Get a PatientRepository bound to the registry key."""
    return PatientRepository(store=store, key=settings.maternity_svc_patients_key)


def get_notification_repository(store: KeyValueStore = Depends(get_store)) -> NotificationRepository:
    """Get a NotificationRepository bound to the notification log key."""
    return NotificationRepository(store=store, key=settings.maternity_svc_notifications_key)


# =============================================================================
# SERVICE DEPENDENCIES
# =============================================================================

def get_patient_service(
    patient_repo: PatientRepository = Depends(get_patient_repository)
) -> PatientService:
    return PatientService(patient_repository=patient_repo)


def get_health_service(
    patient_repo: PatientRepository = Depends(get_patient_repository),
    notification_repo: NotificationRepository = Depends(get_notification_repository),
) -> HealthService:
    return HealthService(
        patient_repository=patient_repo,
        notification_repository=notification_repo,
        recent_limit=settings.maternity_svc_recent_records_limit,
    )
