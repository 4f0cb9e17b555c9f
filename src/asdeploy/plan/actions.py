"""Plan action kinds for asdeploy."""

from __future__ import annotations

from enum import Enum


class ActionKind(str, Enum):
    """Supported deployment plan actions."""

    ADD = "ADD"
    DEPLOY = "DEPLOY"
    REPLACE = "REPLACE"
    REDEPLOY = "REDEPLOY"
    UNDEPLOY = "UNDEPLOY"
    REMOVE = "REMOVE"


CONTENT_ACTIONS: frozenset[ActionKind] = frozenset({ActionKind.ADD, ActionKind.REPLACE})
