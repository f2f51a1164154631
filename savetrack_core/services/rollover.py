from __future__ import annotations

import dataclasses
import logging
from typing import Sequence, Tuple

from savetrack_core.domain.models import BalanceState, Stage, as_number
from savetrack_core.domain.yearmonth import iter_months
from savetrack_core.services.stages import resolve_stage


logger = logging.getLogger(__name__)


def apply_rollover(
    state: BalanceState, stages: Sequence[Stage], now_ym: str
) -> Tuple[BalanceState, bool]:
    """
    Applies each elapsed month's deposits exactly once, oldest first.
    ``last_rollover_ym`` is the watermark: months up to and including it are done.
    Returns the new state and whether any balance moved; persist it when True.
    """
    if not state.last_rollover_ym:
        return dataclasses.replace(state, last_rollover_ym=now_ym), False

    if now_ym <= state.last_rollover_ym:
        return state, False

    longterm = state.current_longterm
    buffer = state.current_buffer
    watermark = state.last_rollover_ym
    changed = False

    for ym in iter_months(state.last_rollover_ym, now_ym):
        stage = resolve_stage(stages, ym)
        add_long = as_number(stage.saving_longterm) if stage else None
        add_buf = as_number(stage.saving_buffer) if stage else None
        if add_long is not None:
            longterm += add_long
            changed = True
        if add_buf is not None:
            buffer += add_buf
            changed = True
        watermark = ym
        logger.debug("rollover %s via %s: +%s / +%s", ym, stage.name if stage else None, add_long, add_buf)

    return (
        dataclasses.replace(
            state,
            current_longterm=longterm,
            current_buffer=buffer,
            last_rollover_ym=watermark,
        ),
        changed,
    )
