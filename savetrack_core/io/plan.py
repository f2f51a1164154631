from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict

from savetrack_core.domain.errors import PlanLoadError, PlanValidationError
from savetrack_core.domain.models import Goal, Plan, Stage, as_number
from savetrack_core.services.validator import validate_plan


STAGE_NUMBERS = (
    "income",
    "net_income",
    "fixed_costs",
    "household",
    "saving_longterm",
    "saving_buffer",
)


def read_plan(path: str | Path) -> Dict[str, Any]:
    path = Path(path)
    if not path.exists():
        raise PlanLoadError(f"Plan not found: {path}")
    try:
        with path.open("r", encoding="utf-8") as f:
            return json.load(f)
    except (json.JSONDecodeError, OSError) as exc:
        raise PlanLoadError(f"Could not read plan {path}: {exc}") from exc


def plan_from_dict(raw: Dict[str, Any]) -> Plan:
    """Build the domain plan from an already-validated document."""
    stages = [
        Stage(
            name=item["name"],
            start=item["from"],
            end=item.get("to") or None,
            **{key: as_number(item.get(key)) for key in STAGE_NUMBERS},
        )
        for item in raw["stages"]
    ]

    goal = None
    g = raw.get("goal")
    if g:
        goal = Goal(
            target_longterm=as_number(g.get("target_longterm")),
            target_buffer=as_number(g.get("target_buffer")),
            current_longterm=as_number(g.get("current_longterm")),
            current_buffer=as_number(g.get("current_buffer")),
            target_year=g.get("target_year"),
        )
    return Plan(stages=stages, goal=goal)


def load_plan(path: str | Path) -> Plan:
    raw = read_plan(path)
    issues = validate_plan(raw)
    if issues:
        raise PlanValidationError(issues)
    return plan_from_dict(raw)
