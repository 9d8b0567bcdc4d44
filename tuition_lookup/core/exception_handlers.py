"""Global exception handlers for consistent error responses.

Every error leaves the API as ``{"error": <message>, "code": <code>,
"request_id": <id>}``:
- AppError subclasses → the status code declared on the class
- Unexpected Exception → generic 500 (safety net)
"""

import logging

from fastapi import Request
from fastapi.responses import JSONResponse

from tuition_lookup.core.config import settings
from tuition_lookup.core.errors import MSG_UNEXPECTED, AppError
from tuition_lookup.core.logging import get_request_id

logger = logging.getLogger(__name__)


def error_payload(code: str, message: str, request_id: str | None = None) -> dict[str, str | None]:
    return {
        "error": message,
        "code": code,
        "request_id": request_id or get_request_id(),
    }


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """Render a domain error with its declared status code.

    Client faults (4xx) are logged as warnings and server faults (5xx) as
    errors. ``exc.details`` is logged but never included in the response.

    Args:
        request: FastAPI request object.
        exc: AppError instance (or subclass).

    Returns:
        JSONResponse with the error's status code and optional headers.
    """
    status_code = exc.status_code
    log = logger.error if status_code >= 500 else logger.warning
    log(
        "app_error_handled",
        extra={
            "error_code": exc.code,
            "status_code": status_code,
            "error_details": exc.details or {},
            "request_path": request.url.path,
        },
    )

    return JSONResponse(
        status_code=status_code,
        content=error_payload(exc.code, exc.message),
        headers=exc.headers,
    )


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Fallback handler for unexpected errors.

    Logs the exception type and message; the client only sees the generic
    localized message.

    Runs outside the request-id middleware, after the context id is cleared,
    so the id is read back from the request header when the client sent one.
    """
    logger.error(
        "unhandled_exception",
        extra={
            "error_type": type(exc).__name__,
            "error_msg": str(exc),
            "request_path": request.url.path,
            "request_method": request.method,
        },
    )

    return JSONResponse(
        status_code=500,
        content=error_payload(
            "internal_server_error",
            MSG_UNEXPECTED,
            request_id=request.headers.get(settings.log.request_id_header),
        ),
    )


def setup_exception_handlers(app) -> None:
    """Register all exception handlers with the FastAPI app.

    Example:
        >>> from fastapi import FastAPI
        >>> app = FastAPI()
        >>> setup_exception_handlers(app)
    """
    app.exception_handler(AppError)(app_error_handler)
    app.exception_handler(Exception)(general_exception_handler)
