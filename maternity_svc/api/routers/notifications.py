"""
Notifications router - the clinician-facing alert feed.
"""
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from maternity_svc.core.dependencies import get_health_service
from maternity_svc.models.notification import Severity
from maternity_svc.schemas import NotificationResponse
from maternity_svc.services import HealthService

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/v1/notifications",
    tags=["Notifications"],
)


@router.get(
    "",
    response_model=List[NotificationResponse],
    summary="List clinician notifications",
    description="The notification feed, newest first, across all patients."
)
async def list_notifications(
    patient_id: Optional[str] = Query(None, description="Only notifications for this patient"),
    severity: Optional[Severity] = Query(None, description="Only notifications of this severity"),
    limit: Optional[int] = Query(None, ge=1, le=1000, description="Maximum number to return"),
    health_service: HealthService = Depends(get_health_service)
):
    notifications = health_service.get_notifications(
        patient_id=patient_id,
        severity=severity,
        limit=limit,
    )
    return [NotificationResponse.from_notification(n) for n in notifications]
