from __future__ import annotations

import dataclasses
import datetime as dt
from typing import Any, List, Optional


def as_number(value: Any) -> Optional[float]:
    """Numbers pass through; anything else (bool included) is unavailable."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return value


@dataclasses.dataclass(frozen=True)
class Stage:
    name: str
    start: str  # "from" in plan.json
    end: Optional[str] = None  # "to"; None = open-ended
    income: Optional[float] = None
    net_income: Optional[float] = None
    fixed_costs: Optional[float] = None
    household: Optional[float] = None
    saving_longterm: Optional[float] = None
    saving_buffer: Optional[float] = None

    def contains(self, ym: str) -> bool:
        return self.start <= ym and (self.end is None or ym <= self.end)


@dataclasses.dataclass(frozen=True)
class Goal:
    target_longterm: Optional[float] = None
    target_buffer: Optional[float] = None
    current_longterm: Optional[float] = None
    current_buffer: Optional[float] = None
    target_year: Any = None


@dataclasses.dataclass(frozen=True)
class Plan:
    stages: List[Stage]
    goal: Optional[Goal] = None


@dataclasses.dataclass(frozen=True)
class BalanceState:
    current_longterm: float = 0.0
    current_buffer: float = 0.0
    last_rollover_ym: Optional[str] = None
    updated_at: Optional[str] = None

    def to_payload(self) -> dict:
        return {
            "current_longterm": self.current_longterm,
            "current_buffer": self.current_buffer,
            "last_rollover_ym": self.last_rollover_ym,
        }


@dataclasses.dataclass(frozen=True)
class Projection:
    status: str  # "reached" | "not_reached" | "insufficient"
    date: Optional[dt.datetime] = None
    months: Optional[int] = None

    @property
    def reached(self) -> bool:
        return self.status == "reached"


@dataclasses.dataclass(frozen=True)
class ViewModel:
    stage_name: str
    income_pre_tax: Optional[float]
    net_income: Optional[float]
    tax: Optional[float]
    fixed_costs: Optional[float]
    household: Optional[float]
    total_out: Optional[float]
    available_before_savings: Optional[float]
    savings_longterm: Optional[float]
    savings_buffer: Optional[float]
    savings_total: Optional[float]
    leftover: Optional[float]
    leftover_variant: Optional[str] = None  # "good" | "warn" | "bad"


@dataclasses.dataclass(frozen=True)
class GoalProgress:
    current_longterm: float
    current_buffer: float
    target_longterm: Optional[float]
    target_buffer: Optional[float]
    pct_longterm: float
    pct_buffer: float
    target_year: Any = None

    @property
    def configured(self) -> bool:
        return self.target_longterm is not None and self.target_buffer is not None


@dataclasses.dataclass(frozen=True)
class TimelineEntry:
    stage: Stage
    active: bool


@dataclasses.dataclass(frozen=True)
class Timeline:
    entries: List[TimelineEntry]
    more_before: bool = False
    more_after: bool = False


@dataclasses.dataclass
class DashboardSnapshot:
    year_month: str
    stage: Optional[Stage]
    view: ViewModel
    progress: GoalProgress
    longterm: Projection
    buffer: Projection
    next_stage: Optional[Stage]
    timeline: Timeline
    warning: str = ""
