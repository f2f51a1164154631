import datetime as dt

from savetrack_core.domain.models import BalanceState, Goal, Stage
from savetrack_core.services.view_model import (
    build_view_model,
    format_countdown,
    goal_progress,
    scale_amount,
    stage_timeline,
)


def _full_stage(**overrides) -> Stage:
    values = dict(
        name="Job",
        start="2025-01",
        income=40000,
        net_income=30000,
        fixed_costs=9000,
        household=6000,
        saving_longterm=8000,
        saving_buffer=2000,
    )
    values.update(overrides)
    return Stage(**values)


def test_view_model_figures():
    vm = build_view_model(_full_stage())
    assert vm.stage_name == "Job"
    assert vm.total_out == 15000
    assert vm.savings_total == 10000
    assert vm.leftover == 5000
    assert vm.tax == 10000
    assert vm.available_before_savings == 15000
    assert vm.leftover_variant == "good"


def test_missing_input_propagates_as_unavailable():
    vm = build_view_model(_full_stage(household=None, income=None))
    assert vm.total_out is None
    assert vm.leftover is None
    assert vm.available_before_savings is None
    assert vm.tax is None
    assert vm.leftover_variant is None
    assert vm.savings_total == 10000


def test_leftover_variants():
    assert build_view_model(_full_stage(household=8500)).leftover_variant == "warn"
    assert build_view_model(_full_stage(household=20000)).leftover_variant == "bad"
    assert build_view_model(_full_stage(household=8500), comfortable_leftover=2000).leftover_variant == "good"


def test_no_stage_is_an_unknown_stage():
    vm = build_view_model(None)
    assert vm.stage_name == "Unknown stage"
    assert vm.net_income is None


def test_goal_progress_is_clamped():
    goal = Goal(target_longterm=100_000, target_buffer=10_000, current_longterm=0, current_buffer=0)
    progress = goal_progress(goal, BalanceState(current_longterm=25_000, current_buffer=50_000))
    assert progress.pct_longterm == 25.0
    assert progress.pct_buffer == 100.0
    assert progress.configured


def test_goal_progress_without_targets():
    progress = goal_progress(None, BalanceState(current_longterm=10, current_buffer=10))
    assert progress.pct_longterm == 0.0
    assert progress.pct_buffer == 0.0
    assert not progress.configured


def test_format_countdown():
    assert format_countdown(dt.timedelta(0)) == "0mo 00d 00:00:00"
    assert format_countdown(dt.timedelta(seconds=-5)) == "0mo 00d 00:00:00"
    assert format_countdown(dt.timedelta(days=65, hours=3, minutes=4, seconds=5)) == "2mo 05d 03:04:05"


def test_scale_amount():
    assert scale_amount(100, "yearly") == 1200
    assert scale_amount(100, "monthly") == 100
    assert scale_amount(None, "yearly") is None


def test_timeline_window_starts_one_before_active():
    stages = [Stage(name=n, start=f"202{i}-01", end=f"202{i}-12") for i, n in enumerate("ABCDE")]
    timeline = stage_timeline(stages, "2022-06")
    assert [e.stage.name for e in timeline.entries] == ["B", "C", "D"]
    assert [e.active for e in timeline.entries] == [False, True, False]
    assert timeline.more_before and timeline.more_after


def test_timeline_at_the_edges():
    stages = [Stage(name=n, start=f"202{i}-01", end=f"202{i}-12") for i, n in enumerate("ABCD")]
    first = stage_timeline(stages, "2020-03")
    assert [e.stage.name for e in first.entries] == ["A", "B", "C"]
    assert not first.more_before and first.more_after

    last = stage_timeline(stages, "2023-03")
    assert [e.stage.name for e in last.entries] == ["B", "C", "D"]
    assert last.more_before and not last.more_after
