"""Lifecycle operation types requested by the caller."""

from __future__ import annotations

from enum import Enum
from typing import Optional

from asdeploy.errors import InvalidArgumentError


class OperationType(str, Enum):
    """
    The lifecycle operation to perform on an artifact.

    ``parse`` is best-effort and returns ``None`` for unknown text;
    ``of`` is the validating constructor and raises instead.
    """

    DEPLOY = "DEPLOY"
    REDEPLOY = "REDEPLOY"
    UNDEPLOY = "UNDEPLOY"

    @classmethod
    def parse(cls, text: Optional[str]) -> Optional["OperationType"]:
        """Parse ``text`` case-insensitively. Returns None when nothing matches."""
        if not isinstance(text, str):
            return None
        wanted = text.strip().upper()
        for member in cls:
            if member.value == wanted:
                return member
        return None

    @classmethod
    def is_valid(cls, text: Optional[str]) -> bool:
        return cls.parse(text) is not None

    @classmethod
    def of(cls, text: str) -> "OperationType":
        """Return the matching OperationType or raise InvalidArgumentError."""
        parsed = cls.parse(text)
        if parsed is None:
            raise InvalidArgumentError(
                f"Type {text} is an invalid type.",
                details={"valid": [m.value for m in cls]},
            )
        return parsed
