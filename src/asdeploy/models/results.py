"""Result models for plan execution."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Sequence


class ActionOutcome(str, Enum):
    """Outcome reported by the controller for one plan action."""

    EXECUTED = "EXECUTED"
    CONFIGURATION_MODIFIED = "CONFIGURATION_MODIFIED"
    CONFIGURATION_MODIFIED_REQUIRES_RESTART = "CONFIGURATION_MODIFIED_REQUIRES_RESTART"
    FAILED = "FAILED"
    NOT_EXECUTED = "NOT_EXECUTED"
    ROLLED_BACK = "ROLLED_BACK"

    @property
    def is_failure(self) -> bool:
        return self in _FAILURE_OUTCOMES


_FAILURE_OUTCOMES: frozenset[ActionOutcome] = frozenset(
    {ActionOutcome.FAILED, ActionOutcome.NOT_EXECUTED, ActionOutcome.ROLLED_BACK}
)


class Status(str, Enum):
    """Overall verdict of one execution."""

    SUCCESS = "SUCCESS"
    FAILURE = "FAILURE"


@dataclass(slots=True, frozen=True)
class ActionResult:
    """Result for a single DeploymentAction."""

    action_id: str
    outcome: ActionOutcome

    cause: Optional[BaseException] = None
    failure_description: Optional[str] = None


@dataclass(slots=True)
class PlanResult:
    """Aggregate controller response for one submitted plan."""

    plan_id: str
    results: dict[str, ActionResult] = field(default_factory=dict)
    rolled_back: bool = False

    def get(self, action_id: str) -> Optional[ActionResult]:
        return self.results.get(action_id)


@dataclass(slots=True, frozen=True)
class ExecutionOutcome:
    """
    Final verdict of DeploymentExecutor.execute().

    Invariant: status is FAILURE if and only if causes is non-empty. Use
    success()/failure() to build instances.
    """

    status: Status
    causes: tuple[BaseException, ...] = ()
    warnings: tuple[str, ...] = ()
    results: tuple[ActionResult, ...] = ()
    plan_id: Optional[str] = None

    def __post_init__(self) -> None:
        if self.status is Status.FAILURE and not self.causes:
            raise ValueError("FAILURE outcome requires at least one cause")
        if self.status is Status.SUCCESS and self.causes:
            raise ValueError("SUCCESS outcome cannot carry causes")

    @classmethod
    def success(
        cls,
        *,
        warnings: Sequence[str] = (),
        results: Sequence[ActionResult] = (),
        plan_id: Optional[str] = None,
    ) -> "ExecutionOutcome":
        return cls(
            status=Status.SUCCESS,
            warnings=tuple(warnings),
            results=tuple(results),
            plan_id=plan_id,
        )

    @classmethod
    def failure(
        cls,
        causes: Sequence[BaseException],
        *,
        warnings: Sequence[str] = (),
        results: Sequence[ActionResult] = (),
        plan_id: Optional[str] = None,
    ) -> "ExecutionOutcome":
        return cls(
            status=Status.FAILURE,
            causes=tuple(causes),
            warnings=tuple(warnings),
            results=tuple(results),
            plan_id=plan_id,
        )

    @property
    def succeeded(self) -> bool:
        return self.status is Status.SUCCESS

    @property
    def failed(self) -> bool:
        return self.status is Status.FAILURE

    @property
    def messages(self) -> list[str]:
        """Causes rendered as text, falling back to the class name when empty."""
        return [str(c) or c.__class__.__name__ for c in self.causes]
