from __future__ import annotations

import datetime as dt
import logging
from typing import Optional, Protocol

from savetrack_core.domain.models import BalanceState, DashboardSnapshot, Plan
from savetrack_core.domain.yearmonth import current_year_month
from savetrack_core.io.state_store import initialize_state
from savetrack_core.services.projector import (
    DEFAULT_ANNUAL_RATE,
    MAX_PROJECTION_MONTHS,
    project_buffer,
    project_longterm,
)
from savetrack_core.services.rollover import apply_rollover
from savetrack_core.services.stages import next_stage, resolve_stage
from savetrack_core.services.view_model import (
    COMFORTABLE_LEFTOVER,
    build_view_model,
    goal_progress,
    stage_timeline,
)


logger = logging.getLogger(__name__)

STATE_NOT_SAVED = "State not saved (server offline)"


class StateStore(Protocol):
    def load(self) -> Optional[BalanceState]: ...

    def save(self, state: BalanceState) -> bool: ...


class DashboardSession:
    """
    Holds the balance state for one running session and threads it through
    rollover and projection. A failed save leaves ``warning`` set until the
    next save succeeds; the session keeps working from memory meanwhile.
    """

    def __init__(
        self,
        plan: Plan,
        store: StateStore,
        annual_rate: float = DEFAULT_ANNUAL_RATE,
        max_months: int = MAX_PROJECTION_MONTHS,
        comfortable_leftover: float = COMFORTABLE_LEFTOVER,
    ):
        self.plan = plan
        self.store = store
        self.annual_rate = annual_rate
        self.max_months = max_months
        self.comfortable_leftover = comfortable_leftover
        self.state: Optional[BalanceState] = None
        self.warning = ""

    def _persist(self) -> bool:
        ok = self.store.save(self.state)
        self.warning = "" if ok else STATE_NOT_SAVED
        return ok

    def start(self, now: Optional[dt.datetime] = None) -> BalanceState:
        stored = self.store.load()
        if stored is None:
            logger.info("No stored balances; seeding from goal")
            self.state = initialize_state(self.plan.goal, now)
            self._persist()
        else:
            self.state = stored
        self.catch_up(now)
        return self.state

    def reseed(self, now: Optional[dt.datetime] = None) -> BalanceState:
        self.state = initialize_state(self.plan.goal, now)
        self._persist()
        return self.state

    def catch_up(self, now: Optional[dt.datetime] = None) -> bool:
        if self.state is None:
            raise RuntimeError("Session not started")
        self.state, changed = apply_rollover(self.state, self.plan.stages, current_year_month(now))
        if changed:
            logger.info("Rolled balances forward to %s", self.state.last_rollover_ym)
            self._persist()
        return changed

    def snapshot(self, now: Optional[dt.datetime] = None, year_month: Optional[str] = None) -> DashboardSnapshot:
        if self.state is None:
            raise RuntimeError("Session not started")
        now = now or dt.datetime.now()
        ym = year_month or current_year_month(now)
        stages = self.plan.stages
        stage = resolve_stage(stages, ym)
        return DashboardSnapshot(
            year_month=ym,
            stage=stage,
            view=build_view_model(stage, self.comfortable_leftover),
            progress=goal_progress(self.plan.goal, self.state),
            longterm=project_longterm(stages, self.plan.goal, self.state, now, self.annual_rate, self.max_months),
            buffer=project_buffer(stages, self.plan.goal, self.state, now, self.max_months),
            next_stage=next_stage(stages, ym),
            timeline=stage_timeline(stages, ym),
            warning=self.warning,
        )
