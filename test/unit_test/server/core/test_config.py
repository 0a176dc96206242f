"""Unit tests for server configuration settings model.

Tests verify that the Settings model correctly binds environment variables
from the .env.example file and that the grouped configuration views work as
expected.
"""

from pathlib import Path

import pytest

from bornfidis_provisions.server.core.config import (
    AuthConfig,
    CORSConfig,
    FeatureConfig,
    MessagingConfig,
    PaymentsConfig,
    Settings,
)


@pytest.fixture
def env_example_path() -> Path:
    """Get path to .env.example file."""
    return Path(__file__).resolve().parent.parent.parent.parent.parent / ".env.example"


@pytest.fixture
def env_example_vars(env_example_path: Path) -> dict[str, str]:
    """Parse .env.example file and return environment variables."""
    env_vars = {}
    with open(env_example_path) as f:
        for line in f:
            line = line.strip()
            # Skip comments and empty lines
            if not line or line.startswith("#"):
                continue
            if "=" in line:
                key, value = line.split("=", 1)
                env_vars[key.strip()] = value.strip()
    return env_vars


class TestSettingsBinding:
    """Test Settings model environment variable binding."""

    def test_server_host_binding(self, env_example_vars: dict[str, str], monkeypatch):
        host = env_example_vars.get("BORNFIDIS_SERVER_HOST", "0.0.0.0")
        monkeypatch.setenv("BORNFIDIS_SERVER_HOST", host)

        settings = Settings(_env_file=None)
        assert settings.server_host == host

    def test_server_port_binding(self, env_example_vars: dict[str, str], monkeypatch):
        port = env_example_vars.get("BORNFIDIS_SERVER_PORT", "8000")
        monkeypatch.setenv("BORNFIDIS_SERVER_PORT", port)

        settings = Settings(_env_file=None)
        assert settings.server_port == int(port)

    def test_log_level_binding(self, env_example_vars: dict[str, str], monkeypatch):
        log_level = env_example_vars.get("BORNFIDIS_LOG_LEVEL", "INFO")
        monkeypatch.setenv("BORNFIDIS_LOG_LEVEL", log_level)

        settings = Settings(_env_file=None)
        assert settings.log_level.upper() == log_level.upper()

    def test_app_base_url_binding(self, env_example_vars: dict[str, str], monkeypatch):
        monkeypatch.setenv("APP_BASE_URL", env_example_vars["APP_BASE_URL"])

        settings = Settings(_env_file=None)
        assert settings.app_base_url == "http://localhost:3000"

    def test_database_url_binding(self):
        """The test session points the application at in-memory SQLite."""
        settings = Settings(_env_file=None)
        assert settings.database_url == "sqlite+aiosqlite:///:memory:"
        assert settings.database.url == settings.database_url


class TestAuthConfigBinding:
    """Test JWT configuration binding."""

    def test_jwt_binding(self, monkeypatch):
        monkeypatch.setenv("JWT_SECRET", "s3cret")
        monkeypatch.setenv("JWT_ALGORITHM", "HS512")
        monkeypatch.setenv("JWT_EXPIRE_MINUTES", "30")

        auth = Settings(_env_file=None).auth
        assert isinstance(auth, AuthConfig)
        assert auth.jwt_secret == "s3cret"
        assert auth.jwt_algorithm == "HS512"
        assert auth.jwt_expire_minutes == 30


class TestPaymentsConfigBinding:
    """Test payments service configuration binding."""

    def test_payments_binding(self, env_example_vars: dict[str, str], monkeypatch):
        for key in ("PAYMENTS_API_URL", "PAYMENTS_API_KEY", "PAYMENTS_CURRENCY", "PAYMENTS_TIMEOUT"):
            monkeypatch.setenv(key, env_example_vars[key])

        payments = Settings(_env_file=None).payments
        assert isinstance(payments, PaymentsConfig)
        assert payments.api_url == "http://payments:8080/v1"
        assert payments.api_key == "sk_test_replace_me"
        assert payments.currency == "usd"
        assert payments.timeout == 10.0

    def test_webhook_secret_binding(self):
        assert Settings(_env_file=None).payments.webhook_secret == "whsec_test"


class TestMessagingConfigBinding:
    """Test messaging service configuration binding."""

    def test_messaging_binding(self, env_example_vars: dict[str, str], monkeypatch):
        for key in ("MESSAGING_API_KEY", "MESSAGING_SMS_FROM", "ADMIN_EMAIL", "COORDINATOR_PHONE", "SMS_MAX_ATTEMPTS"):
            monkeypatch.setenv(key, env_example_vars[key])

        messaging = Settings(_env_file=None).messaging
        assert isinstance(messaging, MessagingConfig)
        assert messaging.api_key == "msg_replace_me"
        assert messaging.sms_from == "+18765550000"
        assert messaging.admin_email == "admin@bornfidis.com"
        assert messaging.coordinator_phone == "+18765550100"
        assert messaging.sms_max_attempts == 3


class TestFeatureConfigBinding:
    """Test feature switch binding."""

    def test_tiered_rates_can_be_disabled(self, monkeypatch):
        monkeypatch.setenv("ENABLE_CHEF_TIERED_RATES", "false")

        features = Settings(_env_file=None).features
        assert isinstance(features, FeatureConfig)
        assert features.chef_tiered_rates is False

    def test_farmer_join_rate_limit_binding(self, monkeypatch):
        monkeypatch.setenv("FARMER_JOIN_RATE_LIMIT", "10/hour")

        assert Settings(_env_file=None).features.farmer_join_rate_limit == "10/hour"


class TestCORSConfigBinding:
    """Test CORS configuration binding."""

    def test_cors_origins_binding(self, monkeypatch):
        monkeypatch.setenv("CORS_ORIGINS", '["https://bornfidis.com", "http://localhost:3000"]')

        cors = Settings(_env_file=None).cors
        assert isinstance(cors, CORSConfig)
        assert cors.origins == ["https://bornfidis.com", "http://localhost:3000"]

    def test_cors_allow_credentials_binding(self, monkeypatch):
        monkeypatch.setenv("CORS_ALLOW_CREDENTIALS", "false")

        assert Settings(_env_file=None).cors.allow_credentials is False


class TestSettingsDefaults:
    """Test Settings defaults when nothing is configured."""

    @pytest.fixture(autouse=True)
    def _clear_env(self, monkeypatch):
        for key in (
            "BORNFIDIS_SERVER_HOST",
            "BORNFIDIS_SERVER_PORT",
            "BORNFIDIS_LOG_LEVEL",
            "APP_BASE_URL",
            "PAYMENTS_API_KEY",
            "PAYMENTS_CURRENCY",
            "MESSAGING_API_KEY",
            "ADMIN_EMAIL",
            "ENABLE_CHEF_TIERED_RATES",
            "FARMER_JOIN_RATE_LIMIT",
            "CORS_ORIGINS",
        ):
            monkeypatch.delenv(key, raising=False)

    def test_server_defaults(self):
        settings = Settings(_env_file=None)
        assert settings.server_host == "0.0.0.0"
        assert settings.server_port == 8000
        assert settings.log_level == "INFO"
        assert settings.app_base_url == "http://localhost:3000"

    def test_payments_defaults(self):
        payments = Settings(_env_file=None).payments
        assert payments.api_key is None
        assert payments.currency == "usd"

    def test_messaging_defaults(self):
        messaging = Settings(_env_file=None).messaging
        assert messaging.api_key is None
        assert messaging.admin_email is None
        assert messaging.sms_max_attempts == 3

    def test_feature_defaults(self):
        features = Settings(_env_file=None).features
        assert features.chef_tiered_rates is True
        assert features.farmer_join_rate_limit == "5/minute"

    def test_cors_defaults(self):
        cors = Settings(_env_file=None).cors
        assert cors.origins == ["*"]
        assert cors.allow_methods == ["*"]
