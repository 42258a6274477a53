"""
Central error handling for HR Records Backend

Service functions raise RecordServiceError subclasses; the handlers below turn
them (and FastAPI's own errors) into one JSON envelope:
{"error": true, "status_code": ..., "detail": ..., "path": ...}
"""
import logging
import traceback
from typing import Optional

from fastapi import Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from fastapi import HTTPException
from sqlalchemy.exc import IntegrityError

logger = logging.getLogger(__name__)

# PostgreSQL SQLSTATE integrity classes
UNIQUE_VIOLATION = "23505"
FOREIGN_KEY_VIOLATION = "23503"


class RecordServiceError(Exception):
    """Base class for failures surfaced by the record service"""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class ValidationError(RecordServiceError):
    """Missing or malformed input, caught before persistence"""

    status_code = status.HTTP_400_BAD_REQUEST


class ConflictError(RecordServiceError):
    """Uniqueness or restrict-on-delete violation"""

    status_code = status.HTTP_409_CONFLICT


class NotFoundError(RecordServiceError):
    """Referential failure, e.g. attendance for an unknown employee"""

    status_code = status.HTTP_404_NOT_FOUND


class StoreError(RecordServiceError):
    """Store unavailable or an unmapped persistence failure"""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


def classify_integrity_error(exc: IntegrityError) -> Optional[str]:
    """
    Work out which constraint an IntegrityError violated

    Args:
        exc: SQLAlchemy IntegrityError wrapping the DB-API error

    Returns:
        "unique", "foreign_key", or None when the violation is something else
    """
    orig = getattr(exc, "orig", None)
    # psycopg2 exposes pgcode, psycopg 3 exposes sqlstate
    code = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    if code == UNIQUE_VIOLATION:
        return "unique"
    if code == FOREIGN_KEY_VIOLATION:
        return "foreign_key"

    # SQLite only carries the constraint kind in the message
    msg = str(orig if orig is not None else exc).lower()
    if "unique constraint" in msg or "duplicate key" in msg:
        return "unique"
    if "foreign key constraint" in msg:
        return "foreign_key"
    return None


def _error_content(status_code: int, detail, path: str) -> dict:
    return {
        "error": True,
        "status_code": status_code,
        "detail": detail,
        "path": path,
    }


def _is_prod(request: Request) -> bool:
    settings = getattr(request.app.state, "settings", None)
    return settings is not None and settings.APP_ENV == "prod"


async def record_service_exception_handler(request: Request, exc: RecordServiceError) -> JSONResponse:
    """
    Handle RecordServiceError subclasses with their mapped status code

    Args:
        request: FastAPI request object
        exc: RecordServiceError instance

    Returns:
        JSONResponse with error details
    """
    if exc.status_code >= 500:
        logger.error("Record service failure on %s: %s", request.url.path, exc.detail)
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_content(exc.status_code, exc.detail, str(request.url.path)),
    )


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """
    Handle HTTPException with consistent JSON response format
    """
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_content(exc.status_code, exc.detail, str(request.url.path)),
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """
    Handle RequestValidationError as a 400, the same status used for
    missing or malformed fields caught by the services.

    Does not leak internal validation details in production.
    """
    if _is_prod(request):
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=_error_content(400, "Invalid request data", str(request.url.path)),
        )

    # sanitize for JSON: e.g. ctx.error ValueError -> str
    errors = []
    for e in exc.errors():
        err = dict(e)
        if "ctx" in err and isinstance(err["ctx"], dict):
            err["ctx"] = {
                k: (str(v) if not isinstance(v, (str, int, float, bool, type(None))) else v)
                for k, v in err["ctx"].items()
            }
        errors.append(err)
    content = _error_content(400, "Invalid request data", str(request.url.path))
    content["errors"] = errors
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=content)


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Handle unexpected exceptions with consistent JSON response format

    Does not leak internal error details in production.
    """
    logger.error("Unhandled exception: %s", exc, exc_info=True)

    if _is_prod(request):
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=_error_content(500, "Internal server error", str(request.url.path)),
        )

    content = _error_content(500, str(exc), str(request.url.path))
    settings = getattr(request.app.state, "settings", None)
    content["traceback"] = (
        "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
        if settings is not None and settings.APP_ENV == "local"
        else None
    )
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=content)
