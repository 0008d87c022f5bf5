from dataclasses import dataclass
from datetime import date
from typing import Optional

from household_analytics.dates import calendar_month_diff, parse_date, today_utc
from household_analytics.domain import Goal

# on track: progress >= 100% minus the share of this window still left
ON_TRACK_WINDOW_DAYS = 365 * 2


@dataclass(frozen=True)
class GoalStatus:
    goal_id: str
    name: str
    target_amount: float
    current_amount: float
    progress_pct: float
    remaining: float
    days_remaining: int
    months_remaining: int
    required_monthly_saving: float
    status: str      # completed / at-risk / on-track / behind
    category: str


@dataclass(frozen=True)
class GoalsOverview:
    goals: tuple[GoalStatus, ...]
    active_count: int
    completed_count: int
    total_target: float
    total_saved: float
    average_progress: float
    monthly_required: float
    has_data: bool


def goal_progress(goal: Goal) -> float:
    """current / target as a percentage clamped to [0, 100]."""
    if goal.target_amount <= 0:
        return 100.0 if goal.current_amount > 0 else 0.0
    return min(100.0, max(0.0, goal.current_amount / goal.target_amount * 100))


def goal_status(goal: Goal, as_of: Optional[date] = None) -> GoalStatus:
    as_of = as_of or today_utc()
    progress = goal_progress(goal)
    remaining = max(0.0, goal.target_amount - goal.current_amount)
    target = parse_date(goal.target_date)

    days_left = max(0, (target - as_of).days) if target else 0
    months_left = max(1, calendar_month_diff(as_of, target)) if target else 1

    if progress >= 100:
        status = "completed"
    elif days_left <= 0:
        status = "at-risk"
    elif progress >= 100 - days_left / ON_TRACK_WINDOW_DAYS * 100:
        status = "on-track"
    else:
        status = "behind"

    return GoalStatus(
        goal_id=goal.id,
        name=goal.name,
        target_amount=goal.target_amount,
        current_amount=goal.current_amount,
        progress_pct=progress,
        remaining=remaining,
        days_remaining=days_left,
        months_remaining=months_left,
        required_monthly_saving=remaining / months_left,
        status=status,
        category=goal.category or "General",
    )


def goals_overview(goals: tuple[Goal, ...], as_of: Optional[date] = None) -> GoalsOverview:
    rows = tuple(
        sorted((goal_status(g, as_of) for g in goals), key=lambda s: (s.days_remaining, s.name))
    )
    active = [r for r in rows if r.status != "completed"]
    return GoalsOverview(
        goals=rows,
        active_count=len(active),
        completed_count=len(rows) - len(active),
        total_target=sum(r.target_amount for r in rows),
        total_saved=sum(r.current_amount for r in rows),
        average_progress=sum(r.progress_pct for r in rows) / len(rows) if rows else 0.0,
        monthly_required=sum(r.required_monthly_saving for r in active),
        has_data=bool(rows),
    )
