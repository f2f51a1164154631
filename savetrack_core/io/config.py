from __future__ import annotations

import dataclasses
import json
import os
from pathlib import Path
from typing import Any, Dict, Optional


@dataclasses.dataclass(frozen=True)
class AppConfig:
    plan_path: str = "plan.json"
    state_url: Optional[str] = None
    state_file: str = "state.json"
    annual_growth_rate: float = 0.08
    max_projection_months: int = 600
    comfortable_leftover: float = 3000.0
    rollover_interval_seconds: float = 60.0
    countdown_interval_seconds: float = 1.0


def load_app_config(path: str | Path | None = None) -> AppConfig:
    data = _read_json(path) if path else {}
    return AppConfig(
        plan_path=os.environ.get("SAVETRACK_PLAN") or str(data.get("plan_path", "plan.json")),
        state_url=os.environ.get("SAVETRACK_STATE_URL") or data.get("state_url"),
        state_file=str(data.get("state_file", "state.json")),
        annual_growth_rate=float(data.get("annual_growth_rate", 0.08)),
        max_projection_months=int(data.get("max_projection_months", 600)),
        comfortable_leftover=float(data.get("comfortable_leftover", 3000.0)),
        rollover_interval_seconds=float(data.get("rollover_interval_seconds", 60.0)),
        countdown_interval_seconds=float(data.get("countdown_interval_seconds", 1.0)),
    )


def _read_json(path: str | Path) -> Dict[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)
