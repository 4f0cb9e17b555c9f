"""Build DeploymentPlans from an OperationType and an artifact."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from asdeploy.errors import InvalidStateError
from asdeploy.util.ids import new_action_id, new_plan_id
from asdeploy.util.time import now_utc

from .actions import ActionKind
from .deployment_action import DeploymentAction
from .deployment_plan import DeploymentPlan
from .operation import OperationType


class DeploymentPlanBuilder:
    """
    Fluent builder for DeploymentPlan.

    Actions keep the order in which they are added; ``seq`` is assigned
    from that order.
    """

    def __init__(self, *, rollback_on_failure: bool = True) -> None:
        self._actions: list[DeploymentAction] = []
        self._rollback_on_failure = rollback_on_failure

    def add(self, archive: Path, *, name: Optional[str] = None) -> "DeploymentPlanBuilder":
        return self._append(ActionKind.ADD, name or archive.name, archive)

    def replace(self, archive: Path, *, name: Optional[str] = None) -> "DeploymentPlanBuilder":
        return self._append(ActionKind.REPLACE, name or archive.name, archive)

    def deploy(self, name: str) -> "DeploymentPlanBuilder":
        return self._append(ActionKind.DEPLOY, name)

    def redeploy(self, name: str) -> "DeploymentPlanBuilder":
        return self._append(ActionKind.REDEPLOY, name)

    def undeploy(self, name: str) -> "DeploymentPlanBuilder":
        return self._append(ActionKind.UNDEPLOY, name)

    def remove(self, name: str) -> "DeploymentPlanBuilder":
        return self._append(ActionKind.REMOVE, name)

    def build(self) -> DeploymentPlan:
        return DeploymentPlan(
            plan_id=new_plan_id(),
            created_at=now_utc(),
            actions=tuple(self._actions),
            rollback_on_failure=self._rollback_on_failure,
        )

    def _append(
        self,
        kind: ActionKind,
        name: str,
        content_path: Optional[Path] = None,
    ) -> "DeploymentPlanBuilder":
        action = DeploymentAction(
            action_id=new_action_id(),
            seq=len(self._actions),
            kind=kind,
            deployment_name=name,
            content_path=content_path,
        )
        action.validate_required_fields()
        self._actions.append(action)
        return self


def build_plan(
    operation_type: OperationType,
    archive: Path | str,
    *,
    name: Optional[str] = None,
    rollback_on_failure: bool = True,
) -> DeploymentPlan:
    """
    Map an operation type and an artifact to its two-step plan.

    Rules:
        - DEPLOY   -> ADD(archive), DEPLOY(name)
        - REDEPLOY -> REPLACE(archive), REDEPLOY(name)
        - UNDEPLOY -> UNDEPLOY(name), REMOVE(name)

    ``name`` defaults to the archive's file name. Nothing is read from disk.

    Raises:
        InvalidStateError: if operation_type is not one of the three members.
    """
    archive_path = Path(archive)
    deployment_name = name or archive_path.name
    builder = DeploymentPlanBuilder(rollback_on_failure=rollback_on_failure)

    if operation_type is OperationType.DEPLOY:
        return builder.add(archive_path, name=deployment_name).deploy(deployment_name).build()

    if operation_type is OperationType.REDEPLOY:
        return builder.replace(archive_path, name=deployment_name).redeploy(deployment_name).build()

    if operation_type is OperationType.UNDEPLOY:
        return builder.undeploy(deployment_name).remove(deployment_name).build()

    raise InvalidStateError(
        f"Invalid type: {operation_type}",
        details={"operation_type": repr(operation_type)},
    )
