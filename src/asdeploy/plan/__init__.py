"""Public plan exports for asdeploy."""

from __future__ import annotations

from .actions import CONTENT_ACTIONS, ActionKind
from .builder import DeploymentPlanBuilder, build_plan
from .deployment_action import DeploymentAction
from .deployment_plan import DeploymentPlan
from .operation import OperationType

__all__ = [
    "ActionKind",
    "CONTENT_ACTIONS",
    "OperationType",
    "DeploymentAction",
    "DeploymentPlan",
    "DeploymentPlanBuilder",
    "build_plan",
]
