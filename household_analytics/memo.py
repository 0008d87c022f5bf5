import hashlib
import json
from dataclasses import asdict
from datetime import date
from functools import lru_cache
from typing import Any

from household_analytics.aggregator import Totals
from household_analytics.domain import Account, Asset, Goal, Scenario, Snapshot, Transaction, VestingSchedule
from household_analytics.forecast import ForecastReport, forecast
from household_analytics.health import HealthReport, score
from household_analytics.history import Trend
from household_analytics.projection import ProjectionReport, project


def fingerprint(snapshot: Snapshot, **params: Any) -> str:
    """Content hash of a snapshot plus run parameters, usable as a cache key or version stamp."""
    payload = {"snapshot": asdict(snapshot), "params": params}
    encoded = json.dumps(payload, sort_keys=True, separators=(",", ":"), default=str).encode("utf-8")
    return hashlib.sha256(encoded).hexdigest()


# snapshots are frozen tuples of frozen records, so inputs hash by content

@lru_cache(maxsize=128)
def cached_forecast(
    totals: Totals,
    vesting_schedules: tuple[VestingSchedule, ...],
    goals: tuple[Goal, ...],
    horizon_months: int,
    as_of: date,
    trend: Trend,
) -> ForecastReport:
    return forecast(totals, vesting_schedules, goals, horizon_months, as_of=as_of, trend=trend)


@lru_cache(maxsize=128)
def cached_projection(
    accounts: tuple[Account, ...],
    assets: tuple[Asset, ...],
    totals: Totals,
    scenario: Scenario,
    years: int,
    goals: tuple[Goal, ...],
    vesting_schedules: tuple[VestingSchedule, ...],
    as_of: date,
) -> ProjectionReport:
    return project(accounts, assets, totals, scenario, years, goals, vesting_schedules, as_of=as_of)


@lru_cache(maxsize=128)
def cached_health(
    totals: Totals,
    goals: tuple[Goal, ...],
    transactions: tuple[Transaction, ...],
    as_of: date,
) -> HealthReport:
    return score(totals, goals, transactions, as_of=as_of)


def clear_caches() -> None:
    cached_forecast.cache_clear()
    cached_projection.cache_clear()
    cached_health.cache_clear()
