"""Public model exports for asdeploy."""

from __future__ import annotations

from .descriptor import DeploymentDescriptor
from .results import ActionOutcome, ActionResult, ExecutionOutcome, PlanResult, Status

__all__ = [
    "DeploymentDescriptor",
    "ActionOutcome",
    "ActionResult",
    "PlanResult",
    "Status",
    "ExecutionOutcome",
]
