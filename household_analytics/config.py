"""
Configuration for the analytics engine.

Uses pydantic-settings so every tunable comes from the environment
(prefix ``HOUSEHOLD_ANALYTICS_``) or an optional ``.env`` file.

The two heuristic business rules (declared-vs-observed income and the
buffer applied to synthesized budgets) live here as named settings so
product owners can change them without touching the calculators.
"""

from enum import Enum
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from household_analytics.domain import Scenario

FORECAST_HORIZONS = (3, 6, 12, 24)
PROJECTION_HORIZONS = (5, 10, 15, 20, 30)

# observed spend x 1.2 when no budget is configured
DEFAULT_BUDGET_BUFFER = 1.2
DEFAULT_ESTIMATED_CATEGORIES = 6


class IncomePolicy(str, Enum):
    """How declared member income and observed transaction income combine."""

    MAX = "max"
    DECLARED = "declared"
    OBSERVED = "observed"


class EngineSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="HOUSEHOLD_ANALYTICS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    default_scenario: Scenario = Field(
        default=Scenario.MODERATE,
        description="Growth scenario used when the caller does not name one",
    )
    forecast_months: int = Field(
        default=6,
        description="Default cash-flow forecast horizon in months",
    )
    projection_years: int = Field(
        default=10,
        description="Default net-worth projection horizon in years",
    )
    income_policy: IncomePolicy = Field(
        default=IncomePolicy.MAX,
        description="Combine declared and observed income",
    )
    estimated_budget_buffer: float = Field(
        default=DEFAULT_BUDGET_BUFFER,
        ge=1.0,
        le=3.0,
        description="Multiplier applied to observed spend for synthesized budgets",
    )
    estimated_budget_categories: int = Field(
        default=DEFAULT_ESTIMATED_CATEGORIES,
        ge=1,
        le=20,
        description="How many top spending categories get a synthesized budget",
    )
    log_level: str = Field(default="INFO")
    log_json: bool = Field(default=False)

    @field_validator("forecast_months")
    @classmethod
    def validate_forecast_months(cls, v: int) -> int:
        if v not in FORECAST_HORIZONS:
            raise ValueError(f"forecast_months must be one of {FORECAST_HORIZONS}")
        return v

    @field_validator("projection_years")
    @classmethod
    def validate_projection_years(cls, v: int) -> int:
        if v not in PROJECTION_HORIZONS:
            raise ValueError(f"projection_years must be one of {PROJECTION_HORIZONS}")
        return v


@lru_cache()
def get_settings() -> EngineSettings:
    """
    Get engine settings (cached).

    Call get_settings.cache_clear() to reload after changing the environment.
    """
    return EngineSettings()
