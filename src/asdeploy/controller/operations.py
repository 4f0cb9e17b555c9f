"""Management operation payloads (detyped JSON) for plan actions."""

from __future__ import annotations

from typing import Any, Mapping, Optional

from asdeploy.errors import InvalidStateError
from asdeploy.plan import ActionKind, DeploymentAction, DeploymentPlan

MANAGEMENT_PATH: str = "/management"
ADD_CONTENT_PATH: str = "/management/add-content"

ROLLBACK_HEADER: str = "rollback-on-runtime-failure"

_OPERATION_NAMES: dict[ActionKind, str] = {
    ActionKind.ADD: "add",
    ActionKind.DEPLOY: "deploy",
    ActionKind.REPLACE: "full-replace-deployment",
    ActionKind.REDEPLOY: "redeploy",
    ActionKind.UNDEPLOY: "undeploy",
    ActionKind.REMOVE: "remove",
}


def deployment_address(name: str) -> list[dict[str, str]]:
    return [{"deployment": name}]


def content_item(content_hash: str) -> list[dict[str, Any]]:
    return [{"hash": {"BYTES_VALUE": content_hash}}]


def read_attribute_operation(name: str) -> dict[str, Any]:
    return {"operation": "read-attribute", "address": [], "name": name}


def build_step(action: DeploymentAction, content_hash: Optional[str] = None) -> dict[str, Any]:
    """
    Build the operation for one action.

    REPLACE is addressed at the root (``full-replace-deployment`` takes the
    deployment name as a parameter); every other kind is addressed at
    ``deployment=<name>``.
    """
    op_name = _OPERATION_NAMES[action.kind]

    if action.carries_content and not content_hash:
        raise InvalidStateError(
            f"{action.kind.value} requires an uploaded content hash",
            details={"action_id": action.action_id},
        )

    if action.kind is ActionKind.ADD:
        return {
            "operation": op_name,
            "address": deployment_address(action.deployment_name),
            "runtime-name": action.deployment_name,
            "content": content_item(content_hash),  # type: ignore[arg-type]
        }

    if action.kind is ActionKind.REPLACE:
        return {
            "operation": op_name,
            "address": [],
            "name": action.deployment_name,
            "runtime-name": action.deployment_name,
            "content": content_item(content_hash),  # type: ignore[arg-type]
        }

    return {"operation": op_name, "address": deployment_address(action.deployment_name)}


def build_composite(
    plan: DeploymentPlan,
    content_hashes: Mapping[str, str],
) -> dict[str, Any]:
    """Build one composite operation holding every action of the plan, in order."""
    steps = [build_step(a, content_hashes.get(a.action_id)) for a in plan.actions]
    return {
        "operation": "composite",
        "address": [],
        "steps": steps,
        "operation-headers": {ROLLBACK_HEADER: plan.rollback_on_failure},
    }
