import pytest

from core import config as config_module
from launch.schemas import PricingStrategy


@pytest.fixture(autouse=True)
def _reset_settings_cache():
    config_module.get_settings.cache_clear()
    yield
    config_module.get_settings.cache_clear()


def test_non_local_debug_mode_is_blocked(monkeypatch):
    monkeypatch.setenv("APP_ENV", "production")
    monkeypatch.setenv("DEBUG", "true")
    monkeypatch.setenv("JWT_SECRET", "real-secret")

    with pytest.raises(ValueError, match="debug=true"):
        config_module.get_settings()


def test_non_local_default_secret_is_blocked(monkeypatch):
    monkeypatch.setenv("APP_ENV", "staging")
    monkeypatch.setenv("DEBUG", "false")
    monkeypatch.setenv("JWT_SECRET", config_module.DEFAULT_JWT_SECRET)

    with pytest.raises(ValueError, match="default JWT secret"):
        config_module.get_settings()


def test_non_local_requires_positive_notification_timeout(monkeypatch):
    monkeypatch.setenv("APP_ENV", "production")
    monkeypatch.setenv("DEBUG", "false")
    monkeypatch.setenv("JWT_SECRET", "real-secret")
    monkeypatch.setenv("LAUNCH_NOTIFICATION_TIMEOUT_SECONDS", "0")

    with pytest.raises(ValueError, match="timeout"):
        config_module.get_settings()


def test_local_allows_dev_defaults(monkeypatch):
    monkeypatch.setenv("APP_ENV", "local")
    monkeypatch.setenv("DEBUG", "true")
    monkeypatch.setenv("JWT_SECRET", config_module.DEFAULT_JWT_SECRET)

    settings = config_module.get_settings()
    assert settings.app_env == "local"
    assert settings.launch_default_currency == "EUR"


def test_launch_webhook_from_environment(monkeypatch):
    monkeypatch.setenv("APP_ENV", "test")
    monkeypatch.setenv("LAUNCH_NOTIFICATION_WEBHOOK_URL", "https://hooks.example.com/launch")

    assert config_module.get_settings().launch_notification_webhook_url == "https://hooks.example.com/launch"


def test_pricing_currency_defaults_from_environment(monkeypatch):
    monkeypatch.setenv("APP_ENV", "test")
    monkeypatch.setenv("LAUNCH_DEFAULT_CURRENCY", "USD")

    assert PricingStrategy().currency == "USD"
    assert PricingStrategy(currency="EUR").currency == "EUR"
