"""
Unit tests for Logfire middleware.

This test suite covers:
- Request/response processing
- Error handling and exception tracking
- Slow request detection
- Header injection
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi import FastAPI, Request
from httpx import ASGITransport, AsyncClient
from starlette.responses import Response

from bornfidis_provisions.server.middleware.logfire_middleware import LogfireMiddleware


def _mock_request(method: str = "GET", path: str = "/api/v1/bookings"):
    request = AsyncMock(spec=Request)
    request.method = method
    request.url.path = path
    request.state = MagicMock()
    return request


class TestLogfireMiddlewareDispatch:
    """Test LogfireMiddleware.dispatch method."""

    async def test_middleware_logs_successful_request(self):
        async def call_next(request):
            return Response(content="ok", status_code=201)

        middleware = LogfireMiddleware(app=AsyncMock())

        with patch("bornfidis_provisions.server.middleware.logfire_middleware.log_api_request") as mock_log:
            response = await middleware.dispatch(_mock_request("POST"), call_next)

        assert response.status_code == 201
        mock_log.assert_called_once()
        assert mock_log.call_args[1]["method"] == "POST"
        assert mock_log.call_args[1]["path"] == "/api/v1/bookings"
        assert mock_log.call_args[1]["status_code"] == 201

    async def test_middleware_adds_process_time_header(self):
        async def call_next(request):
            return Response(content="ok")

        middleware = LogfireMiddleware(app=AsyncMock())

        with patch("bornfidis_provisions.server.middleware.logfire_middleware.log_api_request"):
            response = await middleware.dispatch(_mock_request(), call_next)

        assert float(response.headers["X-Process-Time"]) >= 0

    async def test_middleware_stores_request_context(self):
        request = _mock_request("DELETE", "/api/v1/invites/1")

        async def call_next(req):
            return Response()

        middleware = LogfireMiddleware(app=AsyncMock())

        with patch("bornfidis_provisions.server.middleware.logfire_middleware.log_api_request"):
            await middleware.dispatch(request, call_next)

        assert request.state.method == "DELETE"
        assert request.state.path == "/api/v1/invites/1"

    async def test_middleware_logs_and_reraises_errors(self):
        async def call_next(request):
            raise RuntimeError("handler crashed")

        middleware = LogfireMiddleware(app=AsyncMock())

        with patch("bornfidis_provisions.server.middleware.logfire_middleware.log_api_request") as mock_log, patch(
            "bornfidis_provisions.server.middleware.logfire_middleware.logger"
        ) as mock_logger:
            with pytest.raises(RuntimeError, match="handler crashed"):
                await middleware.dispatch(_mock_request(), call_next)

        assert mock_log.call_args[1]["status_code"] == 500
        mock_logger.error.assert_called_once()

    async def test_middleware_warns_on_slow_requests(self):
        async def call_next(request):
            return Response()

        middleware = LogfireMiddleware(app=AsyncMock())

        with patch("bornfidis_provisions.server.middleware.logfire_middleware.log_api_request"), patch(
            "bornfidis_provisions.server.middleware.logfire_middleware.logger"
        ) as mock_logger, patch(
            "bornfidis_provisions.server.middleware.logfire_middleware.time.time", side_effect=[100.0, 102.5]
        ):
            await middleware.dispatch(_mock_request(), call_next)

        mock_logger.warning.assert_called_once()
        assert "Slow API request" in mock_logger.warning.call_args[0][0]
        assert mock_logger.warning.call_args[1]["extra"]["duration_ms"] == 2500.0


class TestLogfireMiddlewareIntegration:
    async def test_header_on_real_application(self):
        app = FastAPI()
        app.add_middleware(LogfireMiddleware)

        @app.get("/ping")
        async def ping():
            return {"pong": True}

        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://localhost") as client:
            response = await client.get("/ping")

        assert response.status_code == 200
        assert "X-Process-Time" in response.headers
