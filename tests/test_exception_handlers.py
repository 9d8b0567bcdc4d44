"""Tests for global exception handlers.

Validates that every error type renders as ``{"error", "code", "request_id"}``
with the declared status code and without internal details.
"""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from tuition_lookup.core.errors import (
    MSG_NO_MATCH,
    MSG_UNEXPECTED,
    MisconfiguredError,
    NoMatchError,
    RateLimitedError,
    UpstreamUnavailableError,
    ValidationAppError,
)
from tuition_lookup.core.exception_handlers import setup_exception_handlers
from tuition_lookup.core.middleware import request_id_middleware


@pytest.fixture
def app_with_handlers() -> FastAPI:
    """Create FastAPI app with exception handlers registered."""
    app = FastAPI()
    app.middleware("http")(request_id_middleware)
    setup_exception_handlers(app)
    return app


@pytest.fixture
def client(app_with_handlers: FastAPI) -> TestClient:
    """Create test client; server exceptions are rendered, not re-raised."""
    return TestClient(app_with_handlers, raise_server_exceptions=False)


class TestAppErrorHandler:
    """Test handler for AppError and subclasses."""

    @pytest.mark.parametrize(
        ("error", "status"),
        [
            (ValidationAppError(), 400),
            (NoMatchError(), 404),
            (RateLimitedError(), 429),
            (MisconfiguredError(), 500),
            (UpstreamUnavailableError(), 502),
        ],
    )
    def test_status_code_per_error_type(
        self, client: TestClient, app_with_handlers: FastAPI, error, status: int
    ):
        @app_with_handlers.get("/boom")
        async def boom():
            raise error

        response = client.get("/boom")

        assert response.status_code == status
        data = response.json()
        assert data["code"] == error.code
        assert data["error"] == error.message
        assert set(data) == {"error", "code", "request_id"}

    def test_details_are_not_returned(self, client: TestClient, app_with_handlers: FastAPI):
        @app_with_handlers.get("/upstream")
        async def upstream():
            raise UpstreamUnavailableError(
                details={"reason": "bad_status", "upstream_status": 403}
            )

        response = client.get("/upstream")

        assert response.status_code == 502
        assert "bad_status" not in response.text
        assert "403" not in response.text

    def test_headers_are_forwarded(self, client: TestClient, app_with_handlers: FastAPI):
        @app_with_handlers.get("/limited")
        async def limited():
            raise RateLimitedError(headers={"Retry-After": "42"})

        response = client.get("/limited")

        assert response.status_code == 429
        assert response.headers["Retry-After"] == "42"

    def test_request_id_is_echoed_in_body(self, client: TestClient, app_with_handlers: FastAPI):
        @app_with_handlers.get("/missing")
        async def missing():
            raise NoMatchError()

        response = client.get("/missing", headers={"X-Request-ID": "req-abc"})

        assert response.json() == {
            "error": MSG_NO_MATCH,
            "code": "no_match",
            "request_id": "req-abc",
        }


class TestGeneralExceptionHandler:
    """Test the safety net for unexpected exceptions."""

    def test_unexpected_error_returns_generic_500(
        self, client: TestClient, app_with_handlers: FastAPI
    ):
        @app_with_handlers.get("/crash")
        async def crash():
            raise RuntimeError("database password is hunter2")

        response = client.get("/crash")

        assert response.status_code == 500
        data = response.json()
        assert data["error"] == MSG_UNEXPECTED
        assert data["code"] == "internal_server_error"
        assert "hunter2" not in response.text

    def test_unexpected_error_echoes_incoming_request_id(
        self, client: TestClient, app_with_handlers: FastAPI
    ):
        @app_with_handlers.get("/crash-with-id")
        async def crash_with_id():
            raise RuntimeError("boom")

        response = client.get("/crash-with-id", headers={"X-Request-ID": "req-crash-1"})

        assert response.status_code == 500
        assert response.json()["request_id"] == "req-crash-1"
