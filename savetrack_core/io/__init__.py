from savetrack_core.io.config import AppConfig, load_app_config  # noqa: F401
from savetrack_core.io.plan import load_plan, plan_from_dict, read_plan  # noqa: F401
from savetrack_core.io.state_store import (  # noqa: F401
    FileStateStore,
    HttpStateStore,
    initialize_state,
)

__all__ = [
    "AppConfig",
    "FileStateStore",
    "HttpStateStore",
    "initialize_state",
    "load_app_config",
    "load_plan",
    "plan_from_dict",
    "read_plan",
]
