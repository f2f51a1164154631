from __future__ import annotations

from typing import Optional, Sequence

from savetrack_core.domain.models import Stage


def resolve_stage(stages: Sequence[Stage], ym: str) -> Optional[Stage]:
    """
    Pick the stage that applies to ``ym``:
    1. stages containing ym; the latest start wins on overlap,
    2. otherwise the latest stage that started before ym (gap carries forward),
    3. otherwise the earliest stage (ym precedes the whole plan).
    """
    if not stages:
        return None

    containing = [s for s in stages if s.contains(ym)]
    if containing:
        return max(containing, key=lambda s: s.start)

    prior = [s for s in stages if s.start <= ym]
    if prior:
        return max(prior, key=lambda s: s.start)

    return min(stages, key=lambda s: s.start)


def next_stage(stages: Sequence[Stage], ym: str) -> Optional[Stage]:
    upcoming = [s for s in stages if s.start > ym]
    if not upcoming:
        return None
    return min(upcoming, key=lambda s: s.start)
