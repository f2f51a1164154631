from savetrack_core.services.dashboard import DashboardSession  # noqa: F401
from savetrack_core.services.projector import project_buffer, project_longterm, simulate_balances  # noqa: F401
from savetrack_core.services.rollover import apply_rollover  # noqa: F401
from savetrack_core.services.scheduler import Scheduler  # noqa: F401
from savetrack_core.services.stages import next_stage, resolve_stage  # noqa: F401
from savetrack_core.services.validator import validate_plan  # noqa: F401
from savetrack_core.services.view_model import build_view_model, goal_progress  # noqa: F401

__all__ = [
    "DashboardSession",
    "Scheduler",
    "apply_rollover",
    "build_view_model",
    "goal_progress",
    "next_stage",
    "project_buffer",
    "project_longterm",
    "resolve_stage",
    "simulate_balances",
    "validate_plan",
]
