"""Map composite management responses to per-action results."""

from __future__ import annotations

from typing import Any, Optional

from asdeploy.errors import DeploymentActionError, SubmissionFailedError
from asdeploy.models import ActionOutcome, ActionResult, PlanResult
from asdeploy.plan import DeploymentAction, DeploymentPlan
from asdeploy.util.ids import step_name

_RESTART_STATES: frozenset[str] = frozenset({"restart-required", "reload-required"})


def parse_plan_response(plan: DeploymentPlan, payload: Any) -> PlanResult:
    """
    Build a PlanResult from the composite response for ``plan``.

    Step mapping:
        - "success" -> EXECUTED, or CONFIGURATION_MODIFIED_REQUIRES_RESTART
          when the step's response headers ask for a restart/reload
        - "success" inside a rolled-back composite -> ROLLED_BACK
        - "failed" -> FAILED
        - "cancelled" or no step entry -> NOT_EXECUTED

    Raises:
        SubmissionFailedError: if the payload is not a management response.
    """
    if not isinstance(payload, dict) or not isinstance(payload.get("outcome"), str):
        raise SubmissionFailedError(
            "Unexpected management response",
            details={"plan_id": plan.plan_id, "payload": repr(payload)[:200]},
        )

    failed = payload["outcome"] != "success"
    rolled_back = bool(payload.get("rolled-back", False))
    top_description = describe_failure(payload.get("failure-description")) if failed else None

    steps = payload.get("result")
    if not isinstance(steps, dict):
        steps = {}

    restart_on_last = _requires_restart(payload.get("response-headers"))

    results: dict[str, ActionResult] = {}
    for action in plan.actions:
        step = steps.get(step_name(action.seq))
        is_last = action.seq == len(plan.actions) - 1
        results[action.action_id] = _step_result(
            action,
            step if isinstance(step, dict) else None,
            rolled_back=rolled_back,
            fallback_description=top_description,
            plan_requires_restart=restart_on_last and is_last,
        )

    return PlanResult(plan_id=plan.plan_id, results=results, rolled_back=rolled_back)


def describe_failure(value: Any) -> Optional[str]:
    """Render a failure-description (string or nested object) as one line."""
    if value is None:
        return None
    if isinstance(value, str):
        return value
    if isinstance(value, dict):
        parts = []
        for key, inner in value.items():
            rendered = describe_failure(inner)
            parts.append(f"{key} {rendered}" if rendered else str(key))
        return "; ".join(parts)
    if isinstance(value, list):
        return "; ".join(filter(None, (describe_failure(v) for v in value)))
    return str(value)


def _step_result(
    action: DeploymentAction,
    step: Optional[dict[str, Any]],
    *,
    rolled_back: bool,
    fallback_description: Optional[str],
    plan_requires_restart: bool,
) -> ActionResult:
    outcome = step.get("outcome") if step else None

    if outcome == "success":
        if rolled_back:
            return _failure(
                action,
                ActionOutcome.ROLLED_BACK,
                fallback_description or "rolled back after another action failed",
            )
        if plan_requires_restart or _requires_restart(step.get("response-headers")):  # type: ignore[union-attr]
            return ActionResult(
                action_id=action.action_id,
                outcome=ActionOutcome.CONFIGURATION_MODIFIED_REQUIRES_RESTART,
            )
        return ActionResult(action_id=action.action_id, outcome=ActionOutcome.EXECUTED)

    if outcome == "failed":
        description = describe_failure(step.get("failure-description"))  # type: ignore[union-attr]
        return _failure(action, ActionOutcome.FAILED, description or fallback_description)

    return _failure(action, ActionOutcome.NOT_EXECUTED, fallback_description)


def _failure(
    action: DeploymentAction,
    outcome: ActionOutcome,
    description: Optional[str],
) -> ActionResult:
    verb = {
        ActionOutcome.FAILED: "failed",
        ActionOutcome.NOT_EXECUTED: "was not executed",
        ActionOutcome.ROLLED_BACK: "was rolled back",
    }[outcome]
    message = f"{action.describe()} {verb}"
    if description:
        message = f"{message}: {description}"

    cause = DeploymentActionError(
        message,
        details={
            "action_id": action.action_id,
            "kind": action.kind.value,
            "deployment_name": action.deployment_name,
            "outcome": outcome.value,
        },
    )
    return ActionResult(
        action_id=action.action_id,
        outcome=outcome,
        cause=cause,
        failure_description=description,
    )


def _requires_restart(headers: Any) -> bool:
    if not isinstance(headers, dict):
        return False
    if headers.get("operation-requires-restart") or headers.get("operation-requires-reload"):
        return True
    return headers.get("process-state") in _RESTART_STATES
