from __future__ import annotations

import datetime as dt
import math
from typing import Optional, Sequence

import numpy as np
import pandas as pd

from savetrack_core.domain.models import BalanceState, Goal, Projection, Stage, as_number
from savetrack_core.domain.yearmonth import add_months, current_year_month, month_start
from savetrack_core.services.stages import resolve_stage


DEFAULT_ANNUAL_RATE = 0.08
MAX_PROJECTION_MONTHS = 600  # 50 years


def monthly_rate(annual_rate: float) -> float:
    """True monthly-compounding equivalent of a nominal annual rate."""
    return math.pow(1 + annual_rate, 1 / 12) - 1


def _deposit(stage: Optional[Stage], field: str) -> float:
    value = as_number(getattr(stage, field)) if stage else None
    return np.nan if value is None else float(value)


def simulate_balances(
    stages: Sequence[Stage],
    state: BalanceState,
    start_ym: str,
    months: int,
    annual_rate: float = DEFAULT_ANNUAL_RATE,
) -> pd.DataFrame:
    """
    Month-by-month forward simulation starting at ``start_ym``.
    Each month: stage deposits land first, then long-term grows by one month.
    The buffer never grows. Unavailable deposits show as NaN and add nothing.
    """
    month_keys = list(pd.period_range(start=start_ym, periods=months, freq="M").strftime("%Y-%m"))
    resolved = [resolve_stage(stages, ym) for ym in month_keys]

    dep_long = np.array([_deposit(s, "saving_longterm") for s in resolved], dtype=float)
    dep_buf = np.array([_deposit(s, "saving_buffer") for s in resolved], dtype=float)

    growth = 1 + monthly_rate(annual_rate)
    longterm = np.empty(months, dtype=float)
    balance = float(state.current_longterm)
    for t, deposit in enumerate(np.nan_to_num(dep_long)):
        balance = (balance + deposit) * growth
        longterm[t] = balance

    buffer = float(state.current_buffer) + np.cumsum(np.nan_to_num(dep_buf))

    return pd.DataFrame(
        {
            "month": month_keys,
            "stage": [s.name if s else None for s in resolved],
            "deposit_longterm": dep_long,
            "deposit_buffer": dep_buf,
            "longterm": longterm,
            "buffer": buffer,
        }
    )


def _first_hit(schedule: pd.DataFrame, hit: pd.Series) -> Projection:
    mask = hit.to_numpy()
    if not mask.any():
        return Projection(status="not_reached")
    idx = int(np.argmax(mask))
    return Projection(status="reached", date=month_start(schedule["month"].iloc[idx]), months=idx + 1)


def project_longterm(
    stages: Sequence[Stage],
    goal: Optional[Goal],
    state: BalanceState,
    now: Optional[dt.datetime] = None,
    annual_rate: float = DEFAULT_ANNUAL_RATE,
    max_months: int = MAX_PROJECTION_MONTHS,
) -> Projection:
    """
    First month where long-term AND buffer both meet their targets.
    Long-term compounds monthly after each deposit; the buffer does not grow.
    """
    target_lt = as_number(goal.target_longterm) if goal else None
    target_buf = as_number(goal.target_buffer) if goal else None
    if target_lt is None or target_lt <= 0:
        return Projection(status="insufficient")
    if target_buf is None or target_buf < 0:
        return Projection(status="insufficient")

    now = now or dt.datetime.now()
    if state.current_longterm >= target_lt and state.current_buffer >= target_buf:
        return Projection(status="reached", date=now, months=0)

    start = add_months(current_year_month(now), 1)
    schedule = simulate_balances(stages, state, start, max_months, annual_rate)
    hit = (schedule["longterm"] >= target_lt) & (schedule["buffer"] >= target_buf)
    return _first_hit(schedule, hit)


def project_buffer(
    stages: Sequence[Stage],
    goal: Optional[Goal],
    state: BalanceState,
    now: Optional[dt.datetime] = None,
    max_months: int = MAX_PROJECTION_MONTHS,
) -> Projection:
    """First month where the buffer alone meets its target (no growth)."""
    target_buf = as_number(goal.target_buffer) if goal else None
    if target_buf is None or target_buf <= 0:
        return Projection(status="insufficient")

    now = now or dt.datetime.now()
    if state.current_buffer >= target_buf:
        return Projection(status="reached", date=now, months=0)

    start = add_months(current_year_month(now), 1)
    schedule = simulate_balances(stages, state, start, max_months, annual_rate=0.0)
    return _first_hit(schedule, schedule["buffer"] >= target_buf)
