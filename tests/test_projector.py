import datetime as dt

import pytest

from savetrack_core.domain.models import BalanceState, Goal, Stage
from savetrack_core.services.projector import (
    monthly_rate,
    project_buffer,
    project_longterm,
    simulate_balances,
)


NOW = dt.datetime(2025, 1, 15, 12, 0, 0)


def _stages(longterm=None, buffer=None):
    return [Stage(name="Steady", start="2020-01", saving_longterm=longterm, saving_buffer=buffer)]


def _goal(target_longterm=1_000_000, target_buffer=50_000) -> Goal:
    return Goal(
        target_longterm=target_longterm,
        target_buffer=target_buffer,
        current_longterm=0,
        current_buffer=0,
        target_year=2040,
    )


def test_monthly_rate_is_true_compounding_equivalent():
    assert (1 + monthly_rate(0.08)) ** 12 == pytest.approx(1.08)
    assert monthly_rate(0.08) < 0.08 / 12


def test_twelve_months_without_deposits_compound_to_one_year():
    state = BalanceState(current_longterm=100_000, current_buffer=0, last_rollover_ym="2025-01")
    schedule = simulate_balances(_stages(), state, "2025-02", 12)
    assert schedule["longterm"].iloc[11] == pytest.approx(108_000)
    assert schedule["longterm"].iloc[11] != pytest.approx(100_000 * (1 + 0.08 / 12) ** 12)
    assert list(schedule["buffer"]) == [0] * 12


def test_deposit_lands_before_growth():
    state = BalanceState(current_longterm=0, current_buffer=0, last_rollover_ym="2025-01")
    schedule = simulate_balances(_stages(longterm=1000), state, "2025-02", 1)
    assert schedule["longterm"].iloc[0] == pytest.approx(1000 * (1 + monthly_rate(0.08)))


def test_schedule_marks_unavailable_deposits_as_nan():
    state = BalanceState(current_longterm=0, current_buffer=10, last_rollover_ym="2025-01")
    schedule = simulate_balances(_stages(buffer=5), state, "2025-02", 3)
    assert schedule["deposit_longterm"].isna().all()
    assert list(schedule["buffer"]) == [15, 20, 25]
    assert list(schedule["month"]) == ["2025-02", "2025-03", "2025-04"]
    assert list(schedule["stage"]) == ["Steady"] * 3


def test_buffer_projection_has_no_growth():
    state = BalanceState(current_longterm=0, current_buffer=1000, last_rollover_ym="2025-01")
    result = project_buffer(_stages(buffer=500), _goal(target_buffer=3000), state, now=NOW)
    assert result.reached
    assert result.months == 4
    assert result.date == dt.datetime(2025, 5, 1)


def test_longterm_projection_reaches_after_twelve_months_of_growth():
    state = BalanceState(current_longterm=100_000, current_buffer=0, last_rollover_ym="2025-01")
    goal = _goal(target_longterm=100_000 * 1.08 - 0.01, target_buffer=0)
    result = project_longterm(_stages(), goal, state, now=NOW)
    assert result.reached
    assert result.months == 12
    assert result.date == dt.datetime(2026, 1, 1)


def test_longterm_projection_waits_for_buffer_too():
    state = BalanceState(current_longterm=1_000_000, current_buffer=0, last_rollover_ym="2025-01")
    goal = _goal(target_longterm=1000, target_buffer=1000)
    result = project_longterm(_stages(buffer=500), goal, state, now=NOW)
    assert result.reached
    assert result.months == 2
    assert result.date == dt.datetime(2025, 3, 1)


def test_already_met_reports_now():
    state = BalanceState(current_longterm=2_000_000, current_buffer=60_000, last_rollover_ym="2025-01")
    result = project_longterm(_stages(), _goal(), state, now=NOW)
    assert result.reached
    assert result.date == NOW
    assert result.months == 0


def test_unreachable_goal_hits_the_ceiling():
    state = BalanceState(current_longterm=0, current_buffer=0, last_rollover_ym="2025-01")
    result = project_longterm(_stages(), _goal(), state, now=NOW)
    assert result.status == "not_reached"
    assert not result.reached
    assert result.date is None


def test_insufficient_configuration_is_distinct_from_not_reached():
    state = BalanceState(current_longterm=0, current_buffer=0, last_rollover_ym="2025-01")
    assert project_longterm(_stages(1000, 100), _goal(target_longterm=0), state, now=NOW).status == "insufficient"
    assert project_longterm(_stages(1000, 100), _goal(target_buffer=-1), state, now=NOW).status == "insufficient"
    assert project_longterm(_stages(1000, 100), None, state, now=NOW).status == "insufficient"
    assert project_buffer(_stages(1000, 100), _goal(target_buffer=0), state, now=NOW).status == "insufficient"


def test_projection_follows_stage_changes():
    stages = [
        Stage(name="Nothing", start="2020-01", end="2025-06"),
        Stage(name="Saving", start="2025-07", saving_buffer=1000),
    ]
    state = BalanceState(current_longterm=0, current_buffer=0, last_rollover_ym="2025-01")
    result = project_buffer(stages, _goal(target_buffer=2000), state, now=NOW)
    assert result.date == dt.datetime(2025, 8, 1)
