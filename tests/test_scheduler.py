import pytest

from savetrack_core.services.scheduler import Scheduler


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


def test_jobs_run_on_their_own_interval():
    clock = FakeClock()
    scheduler = Scheduler(clock=clock)
    calls = []
    scheduler.every(1, lambda: calls.append("countdown"))
    scheduler.every(60, lambda: calls.append("rollover"))

    for second in range(1, 121):
        clock.now = float(second)
        scheduler.tick()

    assert calls.count("countdown") == 120
    assert calls.count("rollover") == 2


def test_cancel_stops_a_job():
    clock = FakeClock()
    scheduler = Scheduler(clock=clock)
    calls = []
    job = scheduler.every(1, lambda: calls.append(1))
    clock.now = 1.0
    scheduler.tick()
    scheduler.cancel(job)
    clock.now = 2.0
    assert scheduler.tick() == 0
    assert calls == [1]
    assert scheduler.next_due() is None


def test_failing_callback_does_not_stop_others():
    clock = FakeClock()
    scheduler = Scheduler(clock=clock)
    calls = []

    def broken():
        raise RuntimeError("boom")

    scheduler.every(1, broken, name="broken")
    scheduler.every(1, lambda: calls.append(1))
    clock.now = 1.0
    assert scheduler.tick() == 2
    assert calls == [1]


def test_run_forever_exits_when_all_jobs_cancelled():
    clock = FakeClock()
    scheduler = Scheduler(clock=clock)
    runs = []

    def once():
        runs.append(clock.now)
        scheduler.cancel_all()

    scheduler.every(5, once)

    def sleep(seconds):
        clock.now += seconds

    scheduler.run_forever(sleep=sleep)
    assert runs == [5.0]


def test_interval_must_be_positive():
    with pytest.raises(ValueError):
        Scheduler().every(0, lambda: None)
