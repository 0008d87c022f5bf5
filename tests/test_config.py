import pytest
import structlog
from pydantic import ValidationError

from household_analytics.config import EngineSettings, IncomePolicy, get_settings
from household_analytics.domain import Scenario
from household_analytics.log import configure_logging, get_logger


def test_defaults():
    settings = EngineSettings()
    assert settings.forecast_months == 6
    assert settings.projection_years == 10
    assert settings.default_scenario is Scenario.MODERATE
    assert settings.income_policy is IncomePolicy.MAX
    assert settings.estimated_budget_buffer == 1.2


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("HOUSEHOLD_ANALYTICS_FORECAST_MONTHS", "12")
    monkeypatch.setenv("HOUSEHOLD_ANALYTICS_DEFAULT_SCENARIO", "aggressive")
    monkeypatch.setenv("HOUSEHOLD_ANALYTICS_INCOME_POLICY", "declared")
    settings = EngineSettings()
    assert settings.forecast_months == 12
    assert settings.default_scenario is Scenario.AGGRESSIVE
    assert settings.income_policy is IncomePolicy.DECLARED


def test_rejects_unsupported_horizons():
    with pytest.raises(ValidationError):
        EngineSettings(forecast_months=7)
    with pytest.raises(ValidationError):
        EngineSettings(projection_years=11)
    with pytest.raises(ValidationError):
        EngineSettings(estimated_budget_buffer=0.5)


def test_get_settings_is_cached():
    get_settings.cache_clear()
    assert get_settings() is get_settings()
    get_settings.cache_clear()


def test_configure_logging():
    try:
        configure_logging("DEBUG", json=True)
        get_logger("tests.config").info("config.checked", ok=True)
    finally:
        structlog.reset_defaults()


def test_configure_logging_falls_back_to_settings(monkeypatch):
    monkeypatch.setenv("HOUSEHOLD_ANALYTICS_LOG_JSON", "true")
    monkeypatch.setenv("HOUSEHOLD_ANALYTICS_LOG_LEVEL", "WARNING")
    get_settings.cache_clear()
    try:
        assert get_settings().log_json is True
        configure_logging()
        get_logger("tests.config").warning("config.fallback")
    finally:
        structlog.reset_defaults()
        get_settings.cache_clear()
