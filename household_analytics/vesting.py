"""Vested and unvested amounts for equity-style compensation schedules.

Months are counted whole, at day granularity: a schedule starting on the
15th has one month elapsed on the 15th of the following month. For a fixed
schedule the vested amount never decreases as the as-of date moves forward.
"""
from dataclasses import dataclass
from datetime import date

from household_analytics.dates import months_between, parse_date
from household_analytics.domain import VestingSchedule
from household_analytics.log import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class VestingStatus:
    schedule_id: str
    vested: float
    unvested: float
    months_elapsed: int
    total_months: int
    cliff_released: bool
    months_until_cliff: int
    progress_pct: float
    has_data: bool


@dataclass(frozen=True)
class VestingSummary:
    schedules: tuple[VestingStatus, ...]
    total_vested: float
    total_unvested: float
    monthly_vesting: float    # sum of monthly amounts of schedules still vesting
    has_data: bool


def compute_vesting(schedule: VestingSchedule, as_of: date) -> VestingStatus:
    start = parse_date(schedule.start_date)
    end = parse_date(schedule.end_date)
    if start is None or end is None:
        logger.debug("vesting.malformed_dates", schedule_id=schedule.id)
        return VestingStatus(schedule.id, 0.0, 0.0, 0, 0, False, 0, 0.0, False)

    total_months = max(0, months_between(start, end))
    cliff = schedule.cliff_amount or 0.0
    cliff_period = max(0, schedule.cliff_period or 0)
    grand_total = total_months * schedule.monthly_amount + cliff

    if as_of < start:
        return VestingStatus(
            schedule_id=schedule.id,
            vested=0.0,
            unvested=grand_total,
            months_elapsed=0,
            total_months=total_months,
            cliff_released=False,
            months_until_cliff=cliff_period + max(0, months_between(as_of, start)),
            progress_pct=0.0,
            has_data=True,
        )

    months_elapsed = max(0, months_between(start, as_of))
    vested_months = min(months_elapsed, total_months)
    vested = vested_months * schedule.monthly_amount
    unvested = (total_months - vested_months) * schedule.monthly_amount

    released = months_elapsed >= cliff_period
    if released:
        vested += cliff
    else:
        unvested += cliff

    return VestingStatus(
        schedule_id=schedule.id,
        vested=vested,
        unvested=unvested,
        months_elapsed=months_elapsed,
        total_months=total_months,
        cliff_released=released,
        months_until_cliff=max(0, cliff_period - months_elapsed),
        progress_pct=vested / grand_total * 100 if grand_total else 0.0,
        has_data=True,
    )


def vesting_delta(schedule: VestingSchedule, before: date, after: date) -> tuple[float, float]:
    """Amount that vested between two dates, split into (monthly, cliff) parts."""
    a = compute_vesting(schedule, before)
    b = compute_vesting(schedule, after)
    cliff = (schedule.cliff_amount or 0.0) if (b.cliff_released and not a.cliff_released) else 0.0
    monthly = max(0.0, b.vested - a.vested - cliff)
    return monthly, cliff


def vesting_summary(schedules: tuple[VestingSchedule, ...], as_of: date) -> VestingSummary:
    statuses = tuple(compute_vesting(s, as_of) for s in schedules)
    still_vesting = sum(
        s.monthly_amount
        for s, st in zip(schedules, statuses)
        if st.has_data and parse_date(s.start_date) <= as_of and st.months_elapsed < st.total_months
    )
    return VestingSummary(
        schedules=statuses,
        total_vested=sum(st.vested for st in statuses),
        total_unvested=sum(st.unvested for st in statuses),
        monthly_vesting=still_vesting,
        has_data=bool(schedules),
    )
