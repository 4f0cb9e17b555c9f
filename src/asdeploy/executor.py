"""DeploymentExecutor: build a plan, submit it, classify the results."""

from __future__ import annotations

import logging
from typing import Callable, Iterator, Optional, Protocol

from asdeploy.config import ClientConfig
from asdeploy.controller import ManagementController
from asdeploy.errors import AsDeployError, DeploymentActionError, InvalidArgumentError, InvalidStateError
from asdeploy.models import ActionOutcome, ActionResult, DeploymentDescriptor, ExecutionOutcome, PlanResult
from asdeploy.plan import DeploymentAction, DeploymentPlan, OperationType, build_plan
from asdeploy.util.time import format_duration, monotonic

logger = logging.getLogger(__name__)


class Controller(Protocol):
    def open(self) -> object: ...

    def close(self) -> None: ...

    def execute_plan(self, plan: DeploymentPlan) -> PlanResult: ...


ControllerFactory = Callable[[str, int], Controller]
PlanBuilder = Callable[..., Optional[DeploymentPlan]]


class DeploymentExecutor:
    """Runs DeploymentDescriptors against the remote controller: Plan -> Submit -> Classify."""

    def __init__(
        self,
        config: Optional[ClientConfig] = None,
        *,
        plan_builder: PlanBuilder = build_plan,
    ) -> None:
        self._config = config or ClientConfig()
        self._controller_factory: ControllerFactory = self._default_controller
        self._plan_builder = plan_builder

    @classmethod
    def from_controller_factory(
        cls,
        factory: ControllerFactory,
        *,
        config: Optional[ClientConfig] = None,
        plan_builder: PlanBuilder = build_plan,
    ) -> "DeploymentExecutor":
        """Create an executor with an injected controller factory (useful for tests)."""
        obj = cls(config, plan_builder=plan_builder)
        obj._controller_factory = factory
        return obj

    def execute(self, descriptor: DeploymentDescriptor) -> ExecutionOutcome:
        """
        Execute one descriptor and return the verdict.

        Policy:
            - Connection and submission failures become the single cause of a
              FAILURE outcome (no raise, no retry).
            - Every failed action is collected; classification does not stop
              at the first one.
            - InvalidStateError (a defect) is the only error that propagates.
        """
        controller = self._controller_factory(descriptor.hostname, descriptor.port)
        try:
            controller.open()
        except InvalidStateError:
            controller.close()
            raise
        except AsDeployError as exc:
            controller.close()
            logger.error("Unable to open management connection to %s:%s: %s",
                         descriptor.hostname, descriptor.port, exc)
            return ExecutionOutcome.failure([exc])

        try:
            return self._execute_with(controller, descriptor)
        finally:
            controller.close()

    def iterate(self, descriptor: DeploymentDescriptor, iterations: int) -> Iterator[ExecutionOutcome]:
        """
        Execute ``descriptor`` up to ``iterations`` times, strictly in sequence.

        - DEPLOY: after the first successful pass the descriptor transitions
          to REDEPLOY, so later passes redeploy.
        - REDEPLOY/UNDEPLOY: a single pass, whatever ``iterations`` is.

        Outcomes are yielded as they complete; stopping early is up to the caller.
        """
        if not isinstance(iterations, int) or iterations < 1:
            raise InvalidArgumentError("iterations must be >= 1", details={"iterations": iterations})

        repeatable = descriptor.operation_type is OperationType.DEPLOY

        for i in range(iterations):
            logger.info("Iteration %d/%d: %s %s", i + 1, iterations,
                        descriptor.operation_type.value, descriptor.archive_name)
            outcome = self.execute(descriptor)
            yield outcome

            if not repeatable:
                break
            if outcome.succeeded and descriptor.operation_type is OperationType.DEPLOY:
                descriptor.transition_to_redeploy()

    # ----------------------------
    # Internals
    # ----------------------------
    def _default_controller(self, hostname: str, port: int) -> ManagementController:
        return ManagementController(
            hostname,
            port,
            credentials=self._config.credentials,
            timeout_sec=self._config.timeout_sec,
            scheme=self._config.scheme,
        )

    def _execute_with(self, controller: Controller, descriptor: DeploymentDescriptor) -> ExecutionOutcome:
        plan = self._plan_builder(
            descriptor.operation_type,
            descriptor.archive,
            name=descriptor.archive_name,
            rollback_on_failure=self._config.rollback_on_failure,
        )
        if plan is None:
            raise InvalidStateError(
                f"Invalid type: {descriptor.operation_type}",
                details={"operation_type": descriptor.operation_type.value},
            )

        if plan.is_empty:
            logger.info("Nothing to execute for %s", descriptor.archive_name)
            return ExecutionOutcome.success(plan_id=plan.plan_id)

        logger.info("Submitting plan %s (%d actions) to %s:%s",
                    plan.plan_id, len(plan.actions), descriptor.hostname, descriptor.port)
        started = monotonic()
        try:
            plan_result = controller.execute_plan(plan)
        except InvalidStateError:
            raise
        except AsDeployError as exc:
            logger.error("Plan %s submission failed: %s", plan.plan_id, exc)
            return ExecutionOutcome.failure([exc], plan_id=plan.plan_id)

        logger.info("Plan %s completed in %s", plan.plan_id, format_duration(monotonic() - started))
        return _classify(plan, plan_result)


def _classify(plan: DeploymentPlan, plan_result: PlanResult) -> ExecutionOutcome:
    causes: list[BaseException] = []
    warnings: list[str] = []
    results: list[ActionResult] = []

    for action in plan.actions:
        result = plan_result.get(action.action_id) or _missing_result(action)
        results.append(result)

        if result.outcome.is_failure:
            cause = result.cause or _synthesized_cause(action, result)
            logger.error("%s: %s", result.outcome.value, cause)
            causes.append(cause)
            continue

        if result.outcome is ActionOutcome.CONFIGURATION_MODIFIED_REQUIRES_RESTART:
            message = f"{action.describe()} requires a server restart to take effect"
            logger.warning(message)
            warnings.append(message)

    if causes:
        return ExecutionOutcome.failure(causes, warnings=warnings, results=results, plan_id=plan.plan_id)
    return ExecutionOutcome.success(warnings=warnings, results=results, plan_id=plan.plan_id)


def _missing_result(action: DeploymentAction) -> ActionResult:
    return ActionResult(
        action_id=action.action_id,
        outcome=ActionOutcome.NOT_EXECUTED,
        failure_description="no result reported for this action",
    )


def _synthesized_cause(action: DeploymentAction, result: ActionResult) -> DeploymentActionError:
    message = f"{action.describe()}: {result.outcome.value}"
    if result.failure_description:
        message = f"{message}: {result.failure_description}"
    return DeploymentActionError(
        message,
        details={
            "action_id": action.action_id,
            "kind": action.kind.value,
            "outcome": result.outcome.value,
        },
    )
