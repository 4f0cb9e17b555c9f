"""Deployment action model (explicit fields)."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .actions import CONTENT_ACTIONS, ActionKind


@dataclass(slots=True, frozen=True)
class DeploymentAction:
    """
    A single step within a DeploymentPlan.

    ``action_id`` correlates the action with its ActionResult after the
    plan has been submitted.
    """

    action_id: str
    seq: int
    kind: ActionKind
    deployment_name: str

    content_path: Optional[Path] = None

    @property
    def carries_content(self) -> bool:
        return self.kind in CONTENT_ACTIONS

    def validate_required_fields(self) -> None:
        """Validate required fields according to kind. Raises ValueError."""
        _require(self.action_id, "action_id")
        _require(self.deployment_name, "deployment_name")

        if self.carries_content:
            _require(self.content_path, "content_path")
            return

        if self.content_path is not None:
            raise ValueError(f"{self.kind.value} does not take content_path")

    def describe(self) -> str:
        """Short human-readable label, e.g. ``DEPLOY app.war``."""
        return f"{self.kind.value} {self.deployment_name}"


def _require(value: object, field_name: str) -> None:
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValueError(f"Missing required field: {field_name}")
