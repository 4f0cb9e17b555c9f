import json
import unittest
from datetime import datetime, timezone
from pathlib import Path

import httpx

from asdeploy.controller import ManagementController
from asdeploy.errors import (
    DeploymentActionError,
    InvalidArgumentError,
    InvalidStateError,
    SubmissionFailedError,
    SubmissionInterruptedError,
    TransportError,
)
from asdeploy.executor import DeploymentExecutor
from asdeploy.models import ActionOutcome, ActionResult, DeploymentDescriptor, PlanResult, Status
from asdeploy.plan import ActionKind, DeploymentAction, DeploymentPlan, DeploymentPlanBuilder, OperationType

ARCHIVE = Path("/tmp/app.war")


class FakeController:
    """Records calls and answers execute_plan with per-kind outcomes."""

    def __init__(self, outcomes=None, submit_error=None, open_error=None) -> None:
        self.calls = []
        self.outcomes = outcomes or {}
        self.submit_error = submit_error
        self.open_error = open_error
        self.closed = False

    def open(self):
        self.calls.append(("open",))
        if self.open_error is not None:
            raise self.open_error
        return self

    def close(self) -> None:
        self.calls.append(("close",))
        self.closed = True

    def execute_plan(self, plan) -> PlanResult:
        self.calls.append(("execute_plan", [a.kind.value for a in plan.actions]))
        if self.submit_error is not None:
            raise self.submit_error

        results = {}
        for action in plan.actions:
            outcome = self.outcomes.get(action.kind.value, ActionOutcome.EXECUTED)
            cause = None
            if outcome.is_failure:
                cause = DeploymentActionError(f"{action.describe()} {outcome.value.lower()}")
            results[action.action_id] = ActionResult(action_id=action.action_id, outcome=outcome, cause=cause)
        return PlanResult(plan_id=plan.plan_id, results=results)


class FactoryRecorder:
    def __init__(self, make=FakeController) -> None:
        self.make = make
        self.controllers = []
        self.addresses = []

    def __call__(self, hostname: str, port: int):
        self.addresses.append((hostname, port))
        controller = self.make()
        self.controllers.append(controller)
        return controller


def _descriptor(op_type=OperationType.DEPLOY) -> DeploymentDescriptor:
    return DeploymentDescriptor.of("mgmt.example", 9999, ARCHIVE, op_type)


class TestExecute(unittest.TestCase):
    def test_all_success(self) -> None:
        factory = FactoryRecorder()
        executor = DeploymentExecutor.from_controller_factory(factory)

        outcome = executor.execute(_descriptor())

        self.assertIs(outcome.status, Status.SUCCESS)
        self.assertEqual(outcome.causes, ())
        self.assertEqual(len(outcome.results), 2)
        self.assertEqual(factory.addresses, [("mgmt.example", 9999)])

        controller = factory.controllers[0]
        self.assertIn(("execute_plan", ["ADD", "DEPLOY"]), controller.calls)
        self.assertTrue(controller.closed)

    def test_one_failure_among_three_actions(self) -> None:
        def three_actions(operation_type, archive, **kwargs):
            return DeploymentPlanBuilder().add(archive).deploy("app.war").redeploy("app.war").build()

        factory = FactoryRecorder(lambda: FakeController(outcomes={"DEPLOY": ActionOutcome.FAILED}))
        executor = DeploymentExecutor.from_controller_factory(factory, plan_builder=three_actions)

        outcome = executor.execute(_descriptor())

        self.assertIs(outcome.status, Status.FAILURE)
        self.assertEqual(len(outcome.causes), 1)
        self.assertIn("DEPLOY app.war", str(outcome.causes[0]))

    def test_all_failures_are_collected(self) -> None:
        factory = FactoryRecorder(
            lambda: FakeController(
                outcomes={"ADD": ActionOutcome.ROLLED_BACK, "DEPLOY": ActionOutcome.FAILED}
            )
        )
        outcome = DeploymentExecutor.from_controller_factory(factory).execute(_descriptor())

        self.assertTrue(outcome.failed)
        self.assertEqual(len(outcome.causes), 2)
        self.assertIn("ADD", str(outcome.causes[0]))
        self.assertIn("DEPLOY", str(outcome.causes[1]))

    def test_missing_result_counts_as_not_executed(self) -> None:
        class PartialController(FakeController):
            def execute_plan(self, plan):
                first = plan.actions[0]
                return PlanResult(
                    plan_id=plan.plan_id,
                    results={first.action_id: ActionResult(first.action_id, ActionOutcome.EXECUTED)},
                )

        factory = FactoryRecorder(PartialController)
        outcome = DeploymentExecutor.from_controller_factory(factory).execute(_descriptor())

        self.assertTrue(outcome.failed)
        self.assertEqual(len(outcome.causes), 1)
        self.assertIsInstance(outcome.causes[0], DeploymentActionError)
        self.assertEqual(outcome.results[1].outcome, ActionOutcome.NOT_EXECUTED)

    def test_failure_without_cause_gets_synthesized_cause(self) -> None:
        class NoCauseController(FakeController):
            def execute_plan(self, plan):
                return PlanResult(
                    plan_id=plan.plan_id,
                    results={
                        a.action_id: ActionResult(a.action_id, ActionOutcome.FAILED, failure_description="bad")
                        for a in plan.actions
                    },
                )

        outcome = DeploymentExecutor.from_controller_factory(FactoryRecorder(NoCauseController)).execute(
            _descriptor(OperationType.UNDEPLOY)
        )
        self.assertEqual(len(outcome.causes), 2)
        self.assertEqual(str(outcome.causes[0]), "UNDEPLOY app.war: FAILED: bad")

    def test_requires_restart_is_warning_only(self) -> None:
        factory = FactoryRecorder(
            lambda: FakeController(outcomes={"DEPLOY": ActionOutcome.CONFIGURATION_MODIFIED_REQUIRES_RESTART})
        )
        with self.assertLogs("asdeploy.executor", level="WARNING") as logs:
            outcome = DeploymentExecutor.from_controller_factory(factory).execute(_descriptor())

        self.assertTrue(outcome.succeeded)
        self.assertEqual(outcome.causes, ())
        self.assertEqual(len(outcome.warnings), 1)
        self.assertIn("restart", outcome.warnings[0])
        self.assertTrue(any("restart" in line for line in logs.output))

    def test_interruption_is_single_cause_without_classification(self) -> None:
        interrupted = SubmissionInterruptedError("interrupted")
        factory = FactoryRecorder(lambda: FakeController(submit_error=interrupted))

        outcome = DeploymentExecutor.from_controller_factory(factory).execute(_descriptor())

        self.assertTrue(outcome.failed)
        self.assertEqual(outcome.causes, (interrupted,))
        self.assertEqual(outcome.results, ())
        self.assertTrue(factory.controllers[0].closed)

    def test_connection_failure_is_single_cause(self) -> None:
        refused = TransportError("Unable to connect to mgmt.example:9999")
        factory = FactoryRecorder(lambda: FakeController(open_error=refused))

        outcome = DeploymentExecutor.from_controller_factory(factory).execute(_descriptor())

        self.assertTrue(outcome.failed)
        self.assertEqual(outcome.causes, (refused,))
        controller = factory.controllers[0]
        self.assertNotIn("execute_plan", [c[0] for c in controller.calls])
        self.assertTrue(controller.closed)

    def test_empty_plan_is_vacuous_success(self) -> None:
        factory = FactoryRecorder()
        executor = DeploymentExecutor.from_controller_factory(
            factory,
            plan_builder=lambda *args, **kwargs: DeploymentPlanBuilder().build(),
        )
        outcome = executor.execute(_descriptor())

        self.assertTrue(outcome.succeeded)
        self.assertEqual(outcome.causes, ())
        self.assertNotIn("execute_plan", [c[0] for c in factory.controllers[0].calls])

    def test_absent_plan_is_invariant_violation(self) -> None:
        factory = FactoryRecorder()
        executor = DeploymentExecutor.from_controller_factory(factory, plan_builder=lambda *a, **k: None)

        with self.assertRaises(InvalidStateError):
            executor.execute(_descriptor())
        self.assertTrue(factory.controllers[0].closed)

    def test_invalid_state_from_controller_propagates(self) -> None:
        factory = FactoryRecorder(lambda: FakeController(submit_error=InvalidStateError("not open")))
        with self.assertRaises(InvalidStateError):
            DeploymentExecutor.from_controller_factory(factory).execute(_descriptor())


class TestExecuteOverHttp(unittest.TestCase):
    """The executor driving a real ManagementController over httpx.MockTransport."""

    def _executor(self, handler, **kwargs) -> DeploymentExecutor:
        transport = httpx.MockTransport(handler)
        return DeploymentExecutor.from_controller_factory(
            lambda hostname, port: ManagementController(hostname, port, transport=transport),
            **kwargs,
        )

    def test_undecodable_response_is_failure_outcome(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, headers={"Content-Encoding": "gzip"}, content=b"not gzip")

        outcome = self._executor(handler).execute(_descriptor(OperationType.UNDEPLOY))

        self.assertTrue(outcome.failed)
        self.assertEqual(len(outcome.causes), 1)
        self.assertIsInstance(outcome.causes[0], SubmissionFailedError)

    def test_undeploy_succeeds_end_to_end(self) -> None:
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            op = json.loads(request.content)
            seen.append(op["operation"])
            if op["operation"] == "read-attribute":
                return httpx.Response(200, json={"outcome": "success", "result": "running"})
            return httpx.Response(200, json={
                "outcome": "success",
                "result": {"step-1": {"outcome": "success"}, "step-2": {"outcome": "success"}},
            })

        outcome = self._executor(handler).execute(_descriptor(OperationType.UNDEPLOY))

        self.assertTrue(outcome.succeeded)
        self.assertEqual(seen, ["read-attribute", "composite"])

    def test_malformed_plan_propagates_invalid_state(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"outcome": "success", "result": "running"})

        def malformed(*args, **kwargs) -> DeploymentPlan:
            action = DeploymentAction(action_id="a-1", seq=0, kind=ActionKind.ADD, deployment_name="app.war")
            return DeploymentPlan(plan_id="p-1", created_at=datetime.now(timezone.utc), actions=(action,))

        with self.assertRaises(InvalidStateError):
            self._executor(handler, plan_builder=malformed).execute(_descriptor())


class TestIterate(unittest.TestCase):
    def test_deploy_then_redeploy(self) -> None:
        factory = FactoryRecorder()
        executor = DeploymentExecutor.from_controller_factory(factory)
        descriptor = _descriptor(OperationType.DEPLOY)

        seen_types = []
        for outcome in executor.iterate(descriptor, 3):
            seen_types.append(factory.controllers[-1].calls[1][1])
            self.assertTrue(outcome.succeeded)

        self.assertEqual(
            seen_types,
            [["ADD", "DEPLOY"], ["REPLACE", "REDEPLOY"], ["REPLACE", "REDEPLOY"]],
        )
        self.assertIs(descriptor.operation_type, OperationType.REDEPLOY)

    def test_undeploy_runs_once(self) -> None:
        factory = FactoryRecorder()
        executor = DeploymentExecutor.from_controller_factory(factory)

        outcomes = list(executor.iterate(_descriptor(OperationType.UNDEPLOY), 5))

        self.assertEqual(len(outcomes), 1)
        self.assertEqual(len(factory.controllers), 1)

    def test_redeploy_runs_once(self) -> None:
        factory = FactoryRecorder()
        outcomes = list(DeploymentExecutor.from_controller_factory(factory).iterate(
            _descriptor(OperationType.REDEPLOY), 4))
        self.assertEqual(len(outcomes), 1)

    def test_failed_deploy_is_not_transitioned(self) -> None:
        factory = FactoryRecorder(lambda: FakeController(outcomes={"DEPLOY": ActionOutcome.FAILED}))
        descriptor = _descriptor(OperationType.DEPLOY)

        outcomes = list(DeploymentExecutor.from_controller_factory(factory).iterate(descriptor, 2))

        self.assertEqual([o.status for o in outcomes], [Status.FAILURE, Status.FAILURE])
        self.assertIs(descriptor.operation_type, OperationType.DEPLOY)

    def test_caller_can_stop_early(self) -> None:
        factory = FactoryRecorder()
        executor = DeploymentExecutor.from_controller_factory(factory)

        for _ in executor.iterate(_descriptor(), 5):
            break

        self.assertEqual(len(factory.controllers), 1)

    def test_iterations_must_be_positive(self) -> None:
        executor = DeploymentExecutor.from_controller_factory(FactoryRecorder())
        with self.assertRaises(InvalidArgumentError):
            list(executor.iterate(_descriptor(), 0))


if __name__ == "__main__":
    unittest.main()
