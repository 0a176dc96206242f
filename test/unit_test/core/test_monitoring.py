"""
Unit tests for the Logfire monitoring module.

This test suite covers:
- Environment variable parsing
- Logfire initialization with various configurations
- Payout, API request and error logging helpers
- Graceful degradation when Logfire is not configured
"""

import importlib
import os
from unittest.mock import MagicMock, patch

import pytest

import bornfidis_provisions.core.monitoring as monitoring_module


@pytest.fixture
def reload_monitoring():
    """Reload the module under a patched environment, then restore it."""
    yield lambda: importlib.reload(monitoring_module)
    importlib.reload(monitoring_module)


class TestLogfireEnvironmentConfiguration:
    """Test environment variable configuration for Logfire."""

    def test_logfire_disabled_by_default(self, reload_monitoring):
        with patch.dict(os.environ, {}, clear=True):
            module = reload_monitoring()

            assert module.LOGFIRE_ENABLED is False
            assert module.LOGFIRE_SERVICE_NAME == "bornfidis-provisions-api"
            assert module.LOGFIRE_SAMPLE_RATE == 1.0

    @pytest.mark.parametrize("value", ["true", "1", "yes", "TRUE"])
    def test_logfire_enabled_values(self, reload_monitoring, value):
        with patch.dict(os.environ, {"LOGFIRE_ENABLED": value}):
            assert reload_monitoring().LOGFIRE_ENABLED is True

    def test_settings_from_environment(self, reload_monitoring):
        env = {
            "LOGFIRE_TOKEN": "tok",
            "LOGFIRE_ENVIRONMENT": "production",
            "LOGFIRE_SAMPLE_RATE": "0.25",
            "LOGFIRE_TRACE_HTTPX": "false",
        }
        with patch.dict(os.environ, env):
            module = reload_monitoring()

            assert module.LOGFIRE_TOKEN == "tok"
            assert module.LOGFIRE_ENVIRONMENT == "production"
            assert module.LOGFIRE_SAMPLE_RATE == 0.25
            assert module.LOGFIRE_TRACE_HTTPX is False
            assert module.LOGFIRE_TRACE_SQLALCHEMY is True


class TestInitializeLogfire:
    """Test initialize_logfire function."""

    @pytest.fixture(autouse=True)
    def _reset_ready(self):
        with patch.object(monitoring_module, "_logfire_ready", False):
            yield

    @patch("bornfidis_provisions.core.monitoring.logger")
    def test_initialize_logfire_disabled(self, mock_logger):
        with patch.object(monitoring_module, "LOGFIRE_ENABLED", False), patch.object(
            monitoring_module, "logfire"
        ) as mock_logfire:
            monitoring_module.initialize_logfire()

        mock_logfire.configure.assert_not_called()
        assert monitoring_module.is_logfire_ready() is False

    @patch("bornfidis_provisions.core.monitoring.logger")
    def test_initialize_logfire_no_token(self, mock_logger):
        with patch.object(monitoring_module, "LOGFIRE_ENABLED", True), patch.object(
            monitoring_module, "LOGFIRE_TOKEN", ""
        ), patch.object(monitoring_module, "logfire") as mock_logfire:
            monitoring_module.initialize_logfire()

        mock_logfire.configure.assert_not_called()
        mock_logger.warning.assert_called_once()

    @patch("bornfidis_provisions.core.monitoring.logger")
    def test_initialize_logfire_instruments_everything(self, mock_logger):
        app = MagicMock()
        with patch.object(monitoring_module, "LOGFIRE_ENABLED", True), patch.object(
            monitoring_module, "LOGFIRE_TOKEN", "tok"
        ), patch.object(monitoring_module, "logfire") as mock_logfire:
            monitoring_module.initialize_logfire(app)

            mock_logfire.configure.assert_called_once()
            assert mock_logfire.configure.call_args[1]["token"] == "tok"
            mock_logfire.instrument_sqlalchemy.assert_called_once()
            mock_logfire.instrument_httpx.assert_called_once()
            mock_logfire.instrument_fastapi.assert_called_once_with(app=app)
            assert monitoring_module.is_logfire_ready() is True

    @patch("bornfidis_provisions.core.monitoring.logger")
    def test_initialize_logfire_skips_fastapi_without_app(self, mock_logger):
        with patch.object(monitoring_module, "LOGFIRE_ENABLED", True), patch.object(
            monitoring_module, "LOGFIRE_TOKEN", "tok"
        ), patch.object(monitoring_module, "logfire") as mock_logfire:
            monitoring_module.initialize_logfire()

        mock_logfire.instrument_fastapi.assert_not_called()

    @patch("bornfidis_provisions.core.monitoring.logger")
    def test_initialize_logfire_handles_configure_failure(self, mock_logger):
        with patch.object(monitoring_module, "LOGFIRE_ENABLED", True), patch.object(
            monitoring_module, "LOGFIRE_TOKEN", "tok"
        ), patch.object(monitoring_module, "logfire") as mock_logfire:
            mock_logfire.configure.side_effect = RuntimeError("bad token")

            monitoring_module.initialize_logfire()

            mock_logger.error.assert_called_once()
            assert monitoring_module.is_logfire_ready() is False

    @patch("bornfidis_provisions.core.monitoring.logger")
    def test_initialize_logfire_survives_instrumentation_failure(self, mock_logger):
        with patch.object(monitoring_module, "LOGFIRE_ENABLED", True), patch.object(
            monitoring_module, "LOGFIRE_TOKEN", "tok"
        ), patch.object(monitoring_module, "logfire") as mock_logfire:
            mock_logfire.instrument_sqlalchemy.side_effect = RuntimeError("no engine")

            monitoring_module.initialize_logfire()

            mock_logger.warning.assert_called_once()
            assert monitoring_module.is_logfire_ready() is True


class TestLoggingHelpers:
    """Test the log_* helpers with and without Logfire."""

    def test_helpers_fall_back_to_standard_logging(self):
        with patch.object(monitoring_module, "_logfire_ready", False), patch.object(
            monitoring_module, "logfire"
        ) as mock_logfire, patch.object(monitoring_module, "logger") as mock_logger:
            monitoring_module.log_api_request("GET", "/health", 200, 1.5)
            monitoring_module.log_payout_event("chef", "created", "b1", 7000, transfer_id="tr_1")
            monitoring_module.log_error("ValueError", "bad")

        mock_logfire.info.assert_not_called()
        mock_logfire.error.assert_not_called()
        assert mock_logger.debug.call_count == 2

    def test_log_api_request(self):
        with patch.object(monitoring_module, "_logfire_ready", True), patch.object(
            monitoring_module, "logfire"
        ) as mock_logfire:
            monitoring_module.log_api_request("POST", "/api/v1/bookings", 201, 12.0)

        kwargs = mock_logfire.info.call_args[1]
        assert kwargs["method"] == "POST"
        assert kwargs["status_code"] == 201

    def test_log_payout_event(self):
        with patch.object(monitoring_module, "_logfire_ready", True), patch.object(
            monitoring_module, "logfire"
        ) as mock_logfire:
            monitoring_module.log_payout_event("farmer", "blocked", "bf1", 10_000, blockers=["Farmer has no payout account"])

        kwargs = mock_logfire.info.call_args[1]
        assert kwargs["kind"] == "farmer"
        assert kwargs["outcome"] == "blocked"
        assert kwargs["blockers"] == ["Farmer has no payout account"]

    def test_log_error_with_context(self):
        with patch.object(monitoring_module, "_logfire_ready", True), patch.object(
            monitoring_module, "logfire"
        ) as mock_logfire:
            monitoring_module.log_error("RuntimeError", "boom", {"path": "/x"})

        mock_logfire.error.assert_called_once_with("RuntimeError: boom", path="/x")

    def test_helpers_never_raise(self):
        with patch.object(monitoring_module, "_logfire_ready", True), patch.object(
            monitoring_module, "logfire"
        ) as mock_logfire:
            mock_logfire.info.side_effect = RuntimeError("exporter down")
            mock_logfire.error.side_effect = RuntimeError("exporter down")

            monitoring_module.log_api_request("GET", "/", 200, 1.0)
            monitoring_module.log_payout_event("chef", "failed", "b1")
            monitoring_module.log_error("X", "y")
