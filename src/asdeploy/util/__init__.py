from .ids import new_action_id, new_plan_id, new_uuid, step_name
from .time import format_duration, monotonic, now_utc

__all__ = [
    "new_uuid",
    "new_plan_id",
    "new_action_id",
    "step_name",
    "now_utc",
    "monotonic",
    "format_duration",
]
