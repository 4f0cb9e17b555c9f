"""asdeploy public API."""

from __future__ import annotations

from asdeploy.auth import ManagementCredentials
from asdeploy.config import ClientConfig
from asdeploy.errors import (
    AsDeployError,
    AuthError,
    DeploymentActionError,
    HttpErrorInfo,
    InvalidArgumentError,
    InvalidStateError,
    SubmissionFailedError,
    SubmissionInterruptedError,
    SubmissionTimeoutError,
    TransportError,
    map_http_error,
)
from asdeploy.executor import DeploymentExecutor
from asdeploy.models import (
    ActionOutcome,
    ActionResult,
    DeploymentDescriptor,
    ExecutionOutcome,
    PlanResult,
    Status,
)
from asdeploy.plan import (
    ActionKind,
    DeploymentAction,
    DeploymentPlan,
    DeploymentPlanBuilder,
    OperationType,
    build_plan,
)

__all__ = [
    # High-level
    "DeploymentExecutor",
    "ClientConfig",
    "ManagementCredentials",
    # Plan
    "OperationType",
    "ActionKind",
    "DeploymentAction",
    "DeploymentPlan",
    "DeploymentPlanBuilder",
    "build_plan",
    # Models
    "DeploymentDescriptor",
    "ActionOutcome",
    "ActionResult",
    "PlanResult",
    "Status",
    "ExecutionOutcome",
    # Errors
    "AsDeployError",
    "InvalidArgumentError",
    "InvalidStateError",
    "AuthError",
    "TransportError",
    "SubmissionInterruptedError",
    "SubmissionTimeoutError",
    "SubmissionFailedError",
    "DeploymentActionError",
    "HttpErrorInfo",
    "map_http_error",
]
