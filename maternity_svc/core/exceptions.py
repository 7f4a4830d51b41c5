"""
Domain errors for the Maternity Health Service and their HTTP mapping.

Every error the service raises on purpose derives from MaternityServiceError,
which knows its HTTP status and serializes to {"detail": ..., "context": ...}.
Routers never build error responses themselves; they raise, and the handler
registered by setup_exception_handlers() turns the error into JSON.

Usage:
    from maternity_svc.core.exceptions import ValidationError, PersistenceError

    raise ValidationError(field="systolic", reason="must be a whole number")
"""
import logging
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class MaternityServiceError(Exception):
    """
    Root of the service's error hierarchy.

    Subclasses set ``status_code`` and a fallback ``detail``; keyword
    arguments passed to the constructor become the response context.
    """

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    detail: str = "Internal service error"

    def __init__(self, detail: Optional[str] = None, status_code: Optional[int] = None, **context: Any):
        self.detail = detail if detail else type(self).detail
        self.status_code = status_code if status_code else type(self).status_code
        self.context = context
        super().__init__(self.detail)

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"detail": self.detail}
        if self.context:
            body["context"] = self.context
        return body


# =============================================================================
# PATIENTS
# =============================================================================

class PatientNotFoundError(MaternityServiceError):
    """No patient with the given id is registered."""

    status_code = status.HTTP_404_NOT_FOUND
    detail = "Patient not found"

    def __init__(self, patient_id: Optional[str] = None, **context: Any):
        message = f"Patient '{patient_id}' not found" if patient_id else None
        super().__init__(message, patient_id=patient_id, **context)


class DuplicatePatientError(MaternityServiceError):
    """A patient with the same id is already in the registry."""

    status_code = status.HTTP_409_CONFLICT
    detail = "Patient id already registered"

    def __init__(self, patient_id: Optional[str] = None, **context: Any):
        message = f"Patient '{patient_id}' is already registered" if patient_id else None
        super().__init__(message, patient_id=patient_id, **context)


# =============================================================================
# HEALTH RECORDS
# =============================================================================

class RecordNotFoundError(MaternityServiceError):
    status_code = status.HTTP_404_NOT_FOUND
    detail = "No matching health record"


class InvalidRecordDataError(MaternityServiceError):
    """A record payload does not match its type, or a stored record is malformed."""

    status_code = status.HTTP_400_BAD_REQUEST
    detail = "Malformed health record"


class ValidationError(InvalidRecordDataError):
    """
    A submitted form field is missing or cannot be coerced.

    Attributes:
        field: Name of the offending form field.
        reason: Why the value was rejected.
    """

    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    detail = "Invalid form field"

    def __init__(self, field: str, reason: str, **context: Any):
        self.field = field
        self.reason = reason
        super().__init__(f"Field '{field}' {reason}", field=field, reason=reason, **context)


# =============================================================================
# STORAGE
# =============================================================================

class PersistenceError(MaternityServiceError):
    """The key-value store could not be read or written."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    detail = "Storage unavailable"

    def __init__(self, operation: Optional[str] = None, **context: Any):
        message = f"Persistence error during {operation}" if operation else None
        super().__init__(message, operation=operation, **context)


# =============================================================================
# FASTAPI INTEGRATION
# =============================================================================

async def maternity_service_exception_handler(
    request: Request,
    exc: MaternityServiceError
) -> JSONResponse:
    """Log a domain error and render it as JSON with its own status code."""
    level = logging.ERROR if exc.status_code >= 500 else logging.WARNING
    logger.log(
        level,
        f"{type(exc).__name__}: {exc.detail}",
        extra={
            "status_code": exc.status_code,
            "path": request.url.path,
            "method": request.method,
            "context": exc.context,
        }
    )
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


def setup_exception_handlers(app: FastAPI) -> None:
    """Install the domain error handler on an application."""
    app.add_exception_handler(MaternityServiceError, maternity_service_exception_handler)
