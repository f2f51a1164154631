from __future__ import annotations

import datetime as dt
from typing import Optional, Sequence

from savetrack_core.domain.models import (
    BalanceState,
    Goal,
    GoalProgress,
    Stage,
    Timeline,
    TimelineEntry,
    ViewModel,
    as_number,
)


COMFORTABLE_LEFTOVER = 3000.0


def _sum(a: Optional[float], b: Optional[float]) -> Optional[float]:
    if a is None or b is None:
        return None
    return a + b


def _diff(a: Optional[float], b: Optional[float]) -> Optional[float]:
    if a is None or b is None:
        return None
    return a - b


def _leftover_variant(leftover: Optional[float], comfortable: float) -> Optional[str]:
    if leftover is None:
        return None
    if leftover >= comfortable:
        return "good"
    if leftover >= 0:
        return "warn"
    return "bad"


def build_view_model(stage: Optional[Stage], comfortable_leftover: float = COMFORTABLE_LEFTOVER) -> ViewModel:
    """
    Display figures for one month. Missing inputs stay None all the way through;
    nothing is defaulted to zero.
    """
    income = as_number(stage.income) if stage else None
    net_income = as_number(stage.net_income) if stage else None
    fixed_costs = as_number(stage.fixed_costs) if stage else None
    household = as_number(stage.household) if stage else None
    saving_long = as_number(stage.saving_longterm) if stage else None
    saving_buf = as_number(stage.saving_buffer) if stage else None

    total_out = _sum(fixed_costs, household)
    savings_total = _sum(saving_long, saving_buf)
    leftover = _diff(_diff(net_income, total_out), savings_total)

    return ViewModel(
        stage_name=(stage.name if stage and stage.name else "Unknown stage"),
        income_pre_tax=income,
        net_income=net_income,
        tax=_diff(income, net_income),
        fixed_costs=fixed_costs,
        household=household,
        total_out=total_out,
        available_before_savings=_diff(net_income, total_out),
        savings_longterm=saving_long,
        savings_buffer=saving_buf,
        savings_total=savings_total,
        leftover=leftover,
        leftover_variant=_leftover_variant(leftover, comfortable_leftover),
    )


def _percent(current: float, target: Optional[float]) -> float:
    if target is None or target <= 0:
        return 0.0
    return max(0.0, min(100.0, current / target * 100))


def goal_progress(goal: Optional[Goal], state: BalanceState) -> GoalProgress:
    target_lt = as_number(goal.target_longterm) if goal else None
    target_buf = as_number(goal.target_buffer) if goal else None
    return GoalProgress(
        current_longterm=state.current_longterm,
        current_buffer=state.current_buffer,
        target_longterm=target_lt,
        target_buffer=target_buf,
        pct_longterm=_percent(state.current_longterm, target_lt),
        pct_buffer=_percent(state.current_buffer, target_buf),
        target_year=goal.target_year if goal else None,
    )


def scale_amount(value: Optional[float], mode: str = "monthly") -> Optional[float]:
    if value is None:
        return None
    return value * 12 if mode == "yearly" else value


def format_countdown(delta: dt.timedelta) -> str:
    # months are approximated as 30 days
    total_seconds = int(delta.total_seconds())
    if total_seconds <= 0:
        return "0mo 00d 00:00:00"
    total_days = total_seconds // 86400
    months, days = divmod(total_days, 30)
    hours = (total_seconds % 86400) // 3600
    mins = (total_seconds % 3600) // 60
    secs = total_seconds % 60
    return f"{months}mo {days:02d}d {hours:02d}:{mins:02d}:{secs:02d}"


def stage_timeline(stages: Sequence[Stage], ym: str, width: int = 3) -> Timeline:
    """
    A window of at most ``width`` stages around the active one, ordered by start.
    The window opens one stage before the active stage when there is one.
    """
    ordered = sorted(stages, key=lambda s: s.start)
    if not ordered:
        return Timeline(entries=[])

    active_index = next((i for i, s in enumerate(ordered) if s.contains(ym)), -1)
    start = active_index - 1 if active_index > 0 else 0
    end = min(start + width - 1, len(ordered) - 1)
    start = max(0, end - (width - 1))

    visible = ordered[start : end + 1]
    return Timeline(
        entries=[TimelineEntry(stage=s, active=s.contains(ym)) for s in visible],
        more_before=start > 0,
        more_after=end < len(ordered) - 1,
    )
