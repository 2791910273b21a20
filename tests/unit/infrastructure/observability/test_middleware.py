"""Unit tests for RequestLoggingMiddleware."""

from unittest.mock import patch

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from smartlink.infrastructure.observability import RequestLoggingMiddleware

LOGGER = "smartlink.infrastructure.observability.middleware.logger"


class TestRequestLoggingMiddleware:
    """Test suite for RequestLoggingMiddleware."""

    @pytest.fixture
    def app(self) -> FastAPI:
        """Create a FastAPI app with middleware for testing."""
        app = FastAPI()
        app.add_middleware(RequestLoggingMiddleware)

        @app.get("/test")
        async def test_endpoint():
            return {"message": "test"}

        @app.get("/missing")
        async def missing_endpoint():
            from fastapi.responses import PlainTextResponse

            return PlainTextResponse("Not Found", status_code=404)

        @app.get("/error")
        async def error_endpoint():
            raise ValueError("Test error")

        return app

    @pytest.fixture
    def client(self, app: FastAPI) -> TestClient:
        """Create a test client."""
        return TestClient(app)

    def test_successful_request_logs_once(self, client: TestClient):
        """One completion line with method, path, status and duration."""
        with patch(LOGGER) as mock_logger:
            response = client.get("/test")

        assert response.status_code == 200
        assert mock_logger.info.call_count == 1
        log_message = mock_logger.info.call_args[0][0]
        assert log_message.startswith("✓ GET /test → 200 (")
        assert log_message.endswith("ms)")
        extra = mock_logger.info.call_args.kwargs["extra"]
        assert extra["status_code"] == 200
        assert extra["duration_ms"] >= 0

    def test_client_errors_are_marked(self, client: TestClient):
        """4xx responses get the ✗ marker."""
        with patch(LOGGER) as mock_logger:
            client.get("/missing")

        assert mock_logger.info.call_args[0][0].startswith("✗ GET /missing → 404")

    def test_incoming_correlation_id_is_echoed(self, client: TestClient):
        """X-Correlation-ID from the request comes back on the response."""
        response = client.get("/test", headers={"X-Correlation-ID": "custom-correlation-id"})

        assert response.headers["X-Correlation-ID"] == "custom-correlation-id"

    def test_correlation_id_is_generated(self, client: TestClient):
        """Without the header a UUID is generated, blank headers count as missing."""
        first = client.get("/test").headers["X-Correlation-ID"]
        second = client.get("/test", headers={"X-Correlation-ID": "  "}).headers[
            "X-Correlation-ID"
        ]

        assert len(first) == 36
        assert len(second) == 36
        assert first != second

    def test_error_request_logs_exception(self, client: TestClient):
        """Unhandled errors are logged with context and re-raised."""
        with patch(LOGGER) as mock_logger:
            with pytest.raises(ValueError):
                client.get("/error")

        assert mock_logger.exception.call_count == 1
        assert mock_logger.exception.call_args[0][0] == "Request failed: GET /error"
        assert mock_logger.exception.call_args.kwargs["extra"]["error_type"] == "ValueError"
