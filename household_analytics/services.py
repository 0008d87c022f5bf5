import time
from dataclasses import asdict, dataclass, is_dataclass
from datetime import date
from enum import Enum
from typing import Any, Callable, Dict, Optional, Sequence

from household_analytics.aggregator import aggregate, asset_performance
from household_analytics.alerts import evaluate
from household_analytics.bonus import track_bonuses
from household_analytics.budget import track
from household_analytics.config import FORECAST_HORIZONS, PROJECTION_HORIZONS, EngineSettings, IncomePolicy, get_settings
from household_analytics.dates import today_utc
from household_analytics.domain import Scenario, Snapshot
from household_analytics.emergency import emergency_fund
from household_analytics.errors import SnapshotValidationError
from household_analytics.functional import compose, errors_of, validate_snapshot
from household_analytics.goals import goals_overview
from household_analytics.history import monthly_history, summary_trend
from household_analytics.household import contributions
from household_analytics.log import get_logger
from household_analytics.memo import cached_forecast, cached_health, cached_projection, fingerprint
from household_analytics.transforms import snapshot_from_dict
from household_analytics.vesting import vesting_summary

logger = get_logger(__name__)


@dataclass(frozen=True)
class RunParams:
    as_of: date
    forecast_months: int
    projection_years: int
    scenario: Scenario
    income_policy: IncomePolicy
    budget_buffer: float
    estimated_categories: int


def _plain(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, dict):
        return {_plain(k): _plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_plain(_as_dict(v)) for v in value]
    return value


def _as_dict(value: Any) -> Any:
    return asdict(value) if is_dataclass(value) and not isinstance(value, type) else value


# dataclass view-model -> JSON-ready dict
to_view = compose(_plain, _as_dict)


def _calc_totals(s: Snapshot, p: RunParams, acc: Dict[str, Any]):
    return aggregate(s.members, s.accounts, s.transactions, s.assets, as_of=p.as_of, income_policy=p.income_policy)


def _calc_assets(s: Snapshot, p: RunParams, acc: Dict[str, Any]):
    return asset_performance(s.assets)


def _calc_vesting(s: Snapshot, p: RunParams, acc: Dict[str, Any]):
    return vesting_summary(s.vesting_schedules, p.as_of)


def _calc_budget(s: Snapshot, p: RunParams, acc: Dict[str, Any]):
    return track(
        s.budgets,
        s.budget_categories,
        s.transactions,
        as_of=p.as_of,
        buffer=p.budget_buffer,
        estimated_limit=p.estimated_categories,
    )


def _calc_bonus(s: Snapshot, p: RunParams, acc: Dict[str, Any]):
    return track_bonuses(s.transactions, s.vesting_schedules, p.as_of)


def _calc_history(s: Snapshot, p: RunParams, acc: Dict[str, Any]):
    return monthly_history(s.transactions)


def _calc_forecast(s: Snapshot, p: RunParams, acc: Dict[str, Any]):
    trend = summary_trend(s.monthly_summaries)
    return cached_forecast(acc["totals"], s.vesting_schedules, s.goals, p.forecast_months, p.as_of, trend)


def _calc_projection(s: Snapshot, p: RunParams, acc: Dict[str, Any]):
    return cached_projection(
        s.accounts, s.assets, acc["totals"], p.scenario, p.projection_years, s.goals, s.vesting_schedules, p.as_of
    )


def _calc_health(s: Snapshot, p: RunParams, acc: Dict[str, Any]):
    return cached_health(acc["totals"], s.goals, s.transactions, p.as_of)


def _calc_goals(s: Snapshot, p: RunParams, acc: Dict[str, Any]):
    return goals_overview(s.goals, p.as_of)


def _calc_household(s: Snapshot, p: RunParams, acc: Dict[str, Any]):
    return contributions(s.members, s.accounts, s.transactions, s.assets, as_of=p.as_of)


def _calc_emergency(s: Snapshot, p: RunParams, acc: Dict[str, Any]):
    return emergency_fund(acc["totals"])


def _calc_alerts(s: Snapshot, p: RunParams, acc: Dict[str, Any]):
    return evaluate(acc["totals"], s.budgets, s.goals, s.transactions, forecast=acc.get("forecast"), as_of=p.as_of)


DEFAULT_CALCULATORS: tuple[tuple[str, Callable[[Snapshot, RunParams, Dict[str, Any]], Any]], ...] = (
    ("totals", _calc_totals),
    ("assets", _calc_assets),
    ("vesting", _calc_vesting),
    ("budget", _calc_budget),
    ("bonus", _calc_bonus),
    ("history", _calc_history),
    ("forecast", _calc_forecast),
    ("projection", _calc_projection),
    ("health", _calc_health),
    ("goals", _calc_goals),
    ("household", _calc_household),
    ("emergency", _calc_emergency),
    ("alerts", _calc_alerts),
)


class DashboardService:
    """Facade that runs every calculator over one snapshot.

    validators: functions taking a Snapshot and returning a sequence of Either results;
        their Left values are reported, never raised.
    calculators: (name, fn) pairs; fn(snapshot, params, acc) sees earlier outputs in acc.
    """

    def __init__(
        self,
        settings: Optional[EngineSettings] = None,
        validators: Optional[Sequence[Callable[[Snapshot], Sequence[Any]]]] = None,
        calculators: Optional[Sequence[tuple[str, Callable[..., Any]]]] = None,
    ):
        self.settings = settings or get_settings()
        self.validators = validators if validators is not None else (validate_snapshot,)
        self.calculators = calculators if calculators is not None else DEFAULT_CALCULATORS

    def params(
        self,
        as_of: Optional[date] = None,
        forecast_months: Optional[int] = None,
        projection_years: Optional[int] = None,
        scenario: Optional[str | Scenario] = None,
    ) -> RunParams:
        months = forecast_months if forecast_months is not None else self.settings.forecast_months
        years = projection_years if projection_years is not None else self.settings.projection_years
        if months not in FORECAST_HORIZONS:
            raise SnapshotValidationError(
                f"forecast horizon must be one of {FORECAST_HORIZONS}",
                [{"error": "invalid_horizon", "forecast_months": months}],
            )
        if years not in PROJECTION_HORIZONS:
            raise SnapshotValidationError(
                f"projection horizon must be one of {PROJECTION_HORIZONS}",
                [{"error": "invalid_horizon", "projection_years": years}],
            )
        try:
            chosen = Scenario(scenario) if scenario is not None else self.settings.default_scenario
        except ValueError:
            raise SnapshotValidationError(
                f"unknown scenario '{scenario}'",
                [{"error": "unknown_scenario", "scenario": str(scenario)}],
            ) from None
        return RunParams(
            as_of=as_of or today_utc(),
            forecast_months=months,
            projection_years=years,
            scenario=chosen,
            income_policy=self.settings.income_policy,
            budget_buffer=self.settings.estimated_budget_buffer,
            estimated_categories=self.settings.estimated_budget_categories,
        )

    def dashboard(self, snapshot: Snapshot, **kwargs: Any) -> Dict[str, Any]:
        """Run validators and calculators and return a report with intermediate steps."""
        if not isinstance(snapshot, Snapshot):
            raise SnapshotValidationError(
                "dashboard expects a Snapshot",
                [{"error": "not_a_snapshot", "type": type(snapshot).__name__}],
            )
        started = time.perf_counter()
        params = self.params(**kwargs)
        key = fingerprint(
            snapshot,
            as_of=params.as_of,
            forecast_months=params.forecast_months,
            projection_years=params.projection_years,
            scenario=params.scenario.value,
        )

        report: Dict[str, Any] = {
            "as_of": params.as_of.isoformat(),
            "fingerprint": key,
            "validation": [],
            "steps": [],
            "result": {},
        }

        for v in self.validators:
            try:
                msgs = errors_of(v(snapshot))
            except Exception as e:
                logger.warning("dashboard.validator_failed", validator=getattr(v, "__name__", str(v)), error=str(e))
                msgs = [{"error": "validator_error", "message": str(e)}]
            report["validation"].append({"validator": getattr(v, "__name__", str(v)), "messages": msgs})

        acc: Dict[str, Any] = {}
        for name, calc in self.calculators:
            out = calc(snapshot, params, acc)
            acc[name] = out
            report["steps"].append({"calculator": name, "output": to_view(out)})

        report["result"] = {name: to_view(out) for name, out in acc.items()}

        logger.info(
            "dashboard.computed",
            fingerprint=key[:12],
            issues=sum(len(v["messages"]) for v in report["validation"]),
            duration_ms=round((time.perf_counter() - started) * 1000, 2),
        )
        return report

    def dashboard_from_dict(self, data: Any, **kwargs: Any) -> Dict[str, Any]:
        return self.dashboard(snapshot_from_dict(data), **kwargs)
