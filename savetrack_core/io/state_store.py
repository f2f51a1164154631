from __future__ import annotations

import datetime as dt
import json
import logging
import math
import os
from pathlib import Path
from typing import Any, Dict, Optional

import requests

from savetrack_core.domain.models import BalanceState, Goal, as_number
from savetrack_core.domain.yearmonth import current_year_month, is_valid_year_month


logger = logging.getLogger(__name__)


def _coerce_amount(value: Any) -> float:
    if isinstance(value, bool):
        return 0.0
    try:
        amount = float(value)
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(amount) or math.isinf(amount):
        return 0.0
    return amount


def coerce_state_payload(body: Any) -> Dict[str, Any]:
    """
    Normalizes a write request the way storage accepts it: balances that are not
    numbers become 0, a non-string watermark becomes None, and the record is
    stamped with ``updated_at``.
    """
    body = body if isinstance(body, dict) else {}
    ym = body.get("last_rollover_ym")
    return {
        "current_longterm": _coerce_amount(body.get("current_longterm")),
        "current_buffer": _coerce_amount(body.get("current_buffer")),
        "last_rollover_ym": ym if isinstance(ym, str) else None,
        "updated_at": dt.datetime.now(dt.timezone.utc).isoformat(),
    }


def state_from_payload(data: Any, now: Optional[dt.datetime] = None) -> Optional[BalanceState]:
    """
    Stored record -> BalanceState. Without numeric balances the record is
    treated as absent; an unusable watermark falls back to the current month.
    """
    if not isinstance(data, dict) or not data:
        return None
    longterm = as_number(data.get("current_longterm"))
    buffer = as_number(data.get("current_buffer"))
    if longterm is None or buffer is None:
        return None
    ym = data.get("last_rollover_ym")
    return BalanceState(
        current_longterm=float(longterm),
        current_buffer=float(buffer),
        last_rollover_ym=ym if is_valid_year_month(ym) else current_year_month(now),
        updated_at=data.get("updated_at"),
    )


def initialize_state(goal: Optional[Goal], now: Optional[dt.datetime] = None) -> BalanceState:
    """
    Seed balances from the goal. The watermark starts at the current month so
    the first rollover pass does not add this month's deposit on top of the seed.
    """
    seed_long = as_number(goal.current_longterm) if goal else None
    seed_buf = as_number(goal.current_buffer) if goal else None
    return BalanceState(
        current_longterm=float(seed_long) if seed_long is not None else 0.0,
        current_buffer=float(seed_buf) if seed_buf is not None else 0.0,
        last_rollover_ym=current_year_month(now),
    )


class HttpStateStore:
    """Reads and writes the state record through the ``/api/state`` endpoint."""

    def __init__(self, base_url: str, session: Optional[requests.Session] = None, timeout: float = 5.0):
        self.url = base_url.rstrip("/") + "/api/state"
        self.session = session or requests.Session()
        self.timeout = timeout

    def load(self) -> Optional[BalanceState]:
        try:
            response = self.session.get(self.url, headers={"Cache-Control": "no-store"}, timeout=self.timeout)
            response.raise_for_status()
            data = response.json()
        except (requests.RequestException, ValueError) as exc:
            logger.warning("Could not load state from %s: %s", self.url, exc)
            return None
        return state_from_payload(data)

    def save(self, state: BalanceState) -> bool:
        try:
            response = self.session.put(self.url, json=state.to_payload(), timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as exc:
            logger.warning("State not saved to %s: %s", self.url, exc)
            return False
        logger.debug("State saved to %s", self.url)
        return True


class FileStateStore:
    """Local JSON file backend; writes go through a temp file and ``os.replace``."""

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def load(self) -> Optional[BalanceState]:
        if not self.path.exists():
            return None
        try:
            raw_text = self.path.read_text(encoding="utf-8").strip()
            if not raw_text:
                return None
            data = json.loads(raw_text)
        except (json.JSONDecodeError, OSError) as exc:
            logger.warning("Could not read state file %s: %s", self.path, exc)
            return None
        return state_from_payload(data)

    def save(self, state: BalanceState) -> bool:
        record = coerce_state_payload(state.to_payload())
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with tmp_path.open("w", encoding="utf-8") as f:
                json.dump(record, f, indent=2, allow_nan=False)
            os.replace(tmp_path, self.path)
        except (OSError, ValueError) as exc:
            logger.warning("State not saved to %s: %s", self.path, exc)
            return False
        return True
