from __future__ import annotations

"""Application factory for the FastAPI app.

Builds the app in one place (metadata, middleware, handlers, routers, static
search page) so tests and the ASGI entry point get the same wiring.
"""

from pathlib import Path

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from tuition_lookup.api.routes import health_router, lookup_router
from tuition_lookup.core.config import settings
from tuition_lookup.core.exception_handlers import setup_exception_handlers
from tuition_lookup.core.logging import configure_logging
from tuition_lookup.core.middleware import request_id_middleware

WEB_DIR = Path(__file__).resolve().parents[1] / "web"


def create_app() -> FastAPI:
    """Create and configure the FastAPI application instance.

    Returns:
        Configured FastAPI app with middleware, handlers, routers and the
        search page mounted at ``/``.
    """
    # Logging first so subsequent init logs are formatted as desired
    configure_logging(settings.log)

    app = FastAPI(
        title="Tra cứu học phí",
        description=(
            "Tra cứu học phí học sinh theo Họ tên và Lớp từ bảng tính Google Sheets. "
            "Giới hạn số lần tra cứu theo địa chỉ IP; số điện thoại được che một phần."
        ),
        version="0.1.0",
        debug=settings.app.debug,
        openapi_tags=[
            {"name": "Lookup", "description": "Tuition record lookup."},
            {"name": "Health", "description": "Liveness check."},
        ],
    )

    app.middleware("http")(request_id_middleware)

    setup_exception_handlers(app)

    app.include_router(lookup_router)
    app.include_router(health_router)

    # Mounted last: API routes above take precedence over static paths
    app.mount("/", StaticFiles(directory=WEB_DIR, html=True), name="web")

    return app
