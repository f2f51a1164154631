from savetrack_core.domain.errors import (  # noqa: F401
    PlanLoadError,
    PlanValidationError,
    SavetrackError,
)
from savetrack_core.domain.models import (  # noqa: F401
    BalanceState,
    DashboardSnapshot,
    Goal,
    GoalProgress,
    Plan,
    Projection,
    Stage,
    Timeline,
    TimelineEntry,
    ViewModel,
)

__all__ = [
    "BalanceState",
    "DashboardSnapshot",
    "Goal",
    "GoalProgress",
    "Plan",
    "PlanLoadError",
    "PlanValidationError",
    "Projection",
    "SavetrackError",
    "Stage",
    "Timeline",
    "TimelineEntry",
    "ViewModel",
]
