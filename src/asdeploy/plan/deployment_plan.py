"""DeploymentPlan model."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from .deployment_action import DeploymentAction


@dataclass(slots=True, frozen=True)
class DeploymentPlan:
    """An ordered batch of actions submitted to the controller as one atomic unit."""

    plan_id: str
    created_at: datetime
    actions: tuple[DeploymentAction, ...]
    rollback_on_failure: bool = True

    @property
    def is_empty(self) -> bool:
        return not self.actions

    def action_ids(self) -> list[str]:
        return [action.action_id for action in self.actions]

    def get(self, action_id: str) -> Optional[DeploymentAction]:
        for action in self.actions:
            if action.action_id == action_id:
                return action
        return None
