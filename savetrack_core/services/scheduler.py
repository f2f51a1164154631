from __future__ import annotations

import dataclasses
import logging
import time
from typing import Callable, List, Optional


logger = logging.getLogger(__name__)


@dataclasses.dataclass
class Job:
    interval: float
    callback: Callable[[], None]
    next_run: float
    name: str = ""
    cancelled: bool = False


class Scheduler:
    """
    Cooperative, single-threaded periodic runner.
    Jobs only run inside ``tick``; nothing executes in the background.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self.clock = clock
        self._jobs: List[Job] = []

    @property
    def jobs(self) -> List[Job]:
        return [j for j in self._jobs if not j.cancelled]

    def every(self, interval: float, callback: Callable[[], None], name: str = "", run_now: bool = False) -> Job:
        if interval <= 0:
            raise ValueError("interval must be positive")
        now = self.clock()
        job = Job(interval=interval, callback=callback, next_run=now if run_now else now + interval, name=name)
        self._jobs.append(job)
        return job

    def cancel(self, job: Job) -> None:
        job.cancelled = True
        self._jobs = [j for j in self._jobs if j is not job]

    def cancel_all(self) -> None:
        for job in self._jobs:
            job.cancelled = True
        self._jobs = []

    def next_due(self) -> Optional[float]:
        pending = self.jobs
        if not pending:
            return None
        return min(j.next_run for j in pending)

    def tick(self, now: Optional[float] = None) -> int:
        """Run every job that is due at ``now``; returns how many ran."""
        now = self.clock() if now is None else now
        ran = 0
        for job in list(self._jobs):
            if job.cancelled or job.next_run > now:
                continue
            try:
                job.callback()
            except Exception:  # noqa: BLE001
                logger.exception("scheduled job %s failed", job.name or job.callback)
            job.next_run = now + job.interval
            ran += 1
        return ran

    def run_forever(self, sleep: Callable[[float], None] = time.sleep) -> None:
        while self.jobs:
            self.tick()
            due = self.next_due()
            if due is None:
                break
            sleep(max(0.0, due - self.clock()))
