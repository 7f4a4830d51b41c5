"""
Service probes.

/health answers as long as the process is up. /ready additionally reads both
collections from the key-value store and reports 503 if either cannot be read,
so an orchestrator stops routing submissions to an instance whose storage is
broken.
"""
import logging
import time
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel, Field

from maternity_svc import __version__
from maternity_svc.core.config import settings
from maternity_svc.core.datetime_utils import format_iso, utc_now
from maternity_svc.core.dependencies import get_store
from maternity_svc.repositories import KeyValueStore

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Probes"])


class LivenessResponse(BaseModel):
    status: str = Field("healthy", examples=["healthy"])
    version: str
    timestamp: str = Field(..., description="ISO 8601 UTC")


class CollectionCheck(BaseModel):
    """Outcome of reading one collection from the store."""
    name: str = Field(..., examples=["patient_registry"])
    key: str = Field(..., examples=["registeredUsers"])
    status: str = Field(..., description="ok or unavailable")
    latency_ms: float
    error: Optional[str] = None


class ReadinessResponse(BaseModel):
    status: str = Field(..., description="ready or not_ready")
    checks: List[CollectionCheck]
    timestamp: str


def _read_collection(store: KeyValueStore, name: str, key: str) -> CollectionCheck:
    started = time.perf_counter()
    error = None
    try:
        store.get(key)
    except Exception as e:
        logger.error(f"Readiness read of '{key}' failed: {e}")
        error = type(e).__name__
    return CollectionCheck(
        name=name,
        key=key,
        status="unavailable" if error else "ok",
        latency_ms=round((time.perf_counter() - started) * 1000, 2),
        error=error,
    )


@router.get(
    "/health",
    response_model=LivenessResponse,
    summary="Liveness probe",
    description="Returns 200 while the process is serving requests. Storage is not touched."
)
async def liveness() -> LivenessResponse:
    return LivenessResponse(version=__version__, timestamp=format_iso(utc_now()))


@router.get(
    "/ready",
    response_model=ReadinessResponse,
    summary="Readiness probe",
    description="Reads the patient registry and the notification log. 503 if either fails."
)
async def readiness(
    response: Response,
    store: KeyValueStore = Depends(get_store)
) -> ReadinessResponse:
    checks = [
        _read_collection(store, "patient_registry", settings.maternity_svc_patients_key),
        _read_collection(store, "notification_log", settings.maternity_svc_notifications_key),
    ]
    ready = all(check.status == "ok" for check in checks)
    if not ready:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    return ReadinessResponse(
        status="ready" if ready else "not_ready",
        checks=checks,
        timestamp=format_iso(utc_now()),
    )


@router.get("/", summary="Service information")
async def service_info() -> Dict[str, Any]:
    return {
        "service": "Maternity Health Service",
        "version": __version__,
        "endpoints": {
            "docs": "/docs",
            "health": "/health",
            "ready": "/ready",
            "patients": "/api/v1/patients",
            "notifications": "/api/v1/notifications",
        },
    }
