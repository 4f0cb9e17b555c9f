from __future__ import annotations

import uuid


def new_uuid() -> str:
    """Generate a UUID4 string."""
    return str(uuid.uuid4())


def new_plan_id() -> str:
    """Generate a new DeploymentPlan ID."""
    return new_uuid()


def new_action_id() -> str:
    """Generate a new DeploymentAction ID (correlates an action with its result)."""
    return new_uuid()


def step_name(seq: int) -> str:
    """Return the composite step key for the action at position ``seq`` (0-based)."""
    if seq < 0:
        raise ValueError("seq must be >= 0")
    return f"step-{seq + 1}"
