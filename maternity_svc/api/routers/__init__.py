"""
API routers module.
"""
from maternity_svc.api.routers.health import router as health_router
from maternity_svc.api.routers.notifications import router as notifications_router
from maternity_svc.api.routers.patients import router as patients_router
from maternity_svc.api.routers.records import router as records_router

__all__ = ["health_router", "notifications_router", "patients_router", "records_router"]
