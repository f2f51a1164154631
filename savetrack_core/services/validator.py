from __future__ import annotations

from typing import Any, List

from savetrack_core.domain.yearmonth import is_valid_year_month


REQUIRED_GOAL_KEYS = (
    "target_longterm",
    "target_buffer",
    "current_longterm",
    "current_buffer",
    "target_year",
)


def validate_plan(plan: Any) -> List[str]:
    """
    Structural checks on a raw plan document.
    - Missing/empty stages short-circuits with a single issue.
    - Every stage problem is collected; nothing stops at the first one.
    - Goal keys are checked for presence only.
    """
    issues: List[str] = []

    stages = plan.get("stages") if isinstance(plan, dict) else None
    if not isinstance(stages, list) or not stages:
        issues.append("Plan must include a non-empty stages array.")
        return issues

    for i, stage in enumerate(stages, start=1):
        if not isinstance(stage, dict):
            issues.append(f"Stage {i} must be an object.")
            continue

        name = stage.get("name")
        if not isinstance(name, str) or not name.strip():
            issues.append(f"Stage {i} is missing a name.")

        start = stage.get("from")
        end = stage.get("to")
        if not is_valid_year_month(start):
            issues.append(f"Stage {i} must include a valid from (YYYY-MM).")
        if end and not is_valid_year_month(end):
            issues.append(f"Stage {i} has an invalid to (YYYY-MM).")
        elif end and is_valid_year_month(start) and end < start:
            issues.append(f"Stage {i} ends ({end}) before it starts ({start}).")

    goal = plan.get("goal")
    if goal is not None:
        if not isinstance(goal, dict):
            issues.append("Goal must be an object.")
        else:
            for key in REQUIRED_GOAL_KEYS:
                if key not in goal:
                    issues.append(f"Goal must include {key}.")

    return issues
