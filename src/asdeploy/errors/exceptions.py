"""Exception hierarchy and HTTP error mapping for asdeploy."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional


class AsDeployError(Exception):
    """
    Base exception for asdeploy.

    Attributes:
        details: Optional structured information (e.g., HTTP status, action id).
        cause: Optional original exception that triggered this error.
    """

    def __init__(
        self,
        message: str,
        *,
        details: Optional[dict[str, Any]] = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        super().__init__(message)
        self.details = details or {}
        self.cause = cause


class InvalidArgumentError(AsDeployError):
    """Raised when caller-supplied values are invalid (type, port, iterations)."""


class InvalidStateError(AsDeployError):
    """Raised on internal invariant violations (a programming defect)."""


class AuthError(AsDeployError):
    """Raised when the management realm rejects the credentials (HTTP 401/403)."""


class TransportError(AsDeployError):
    """Raised when the management endpoint cannot be reached."""


class SubmissionInterruptedError(AsDeployError):
    """Raised when the wait for a plan result is interrupted."""


class SubmissionTimeoutError(AsDeployError):
    """Raised when the plan result did not arrive within the configured timeout."""


class SubmissionFailedError(AsDeployError):
    """Raised when the plan submission itself fails (bad response, upload error)."""


class DeploymentActionError(AsDeployError):
    """Failure cause for a single plan action (FAILED/NOT_EXECUTED/ROLLED_BACK)."""


@dataclass(frozen=True)
class HttpErrorInfo:
    """Lightweight HTTP error information for mapping to asdeploy exceptions."""

    status_code: int
    reason: str | None = None
    message: str | None = None
    details: dict[str, Any] | None = None


def map_http_error(
    info: HttpErrorInfo,
    *,
    cause: Optional[BaseException] = None,
) -> AsDeployError:
    """
    Map a non-management HTTP error to an asdeploy exception.

    Responses carrying a management ``outcome`` are parsed by the controller
    and never reach this function.

    Policy:
        - 401/403 -> AuthError
        - 404 -> TransportError (no management endpoint at that address)
        - 408/504 -> SubmissionTimeoutError
        - otherwise -> SubmissionFailedError
    """
    details: dict[str, Any] = {
        "status_code": info.status_code,
        "reason": info.reason,
    }
    if info.details:
        details.update(info.details)

    message = info.message or f"HTTP error {info.status_code}"

    if info.status_code in (401, 403):
        return AuthError(message, details=details, cause=cause)
    if info.status_code == 404:
        return TransportError(message, details=details, cause=cause)
    if info.status_code in (408, 504):
        return SubmissionTimeoutError(message, details=details, cause=cause)

    return SubmissionFailedError(message, details=details, cause=cause)
