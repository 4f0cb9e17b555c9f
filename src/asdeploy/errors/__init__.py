"""Public error exports for asdeploy."""

from __future__ import annotations

from .exceptions import (
    AsDeployError,
    AuthError,
    DeploymentActionError,
    HttpErrorInfo,
    InvalidArgumentError,
    InvalidStateError,
    SubmissionFailedError,
    SubmissionInterruptedError,
    SubmissionTimeoutError,
    TransportError,
    map_http_error,
)

__all__ = [
    "AsDeployError",
    "InvalidArgumentError",
    "InvalidStateError",
    "AuthError",
    "TransportError",
    "SubmissionInterruptedError",
    "SubmissionTimeoutError",
    "SubmissionFailedError",
    "DeploymentActionError",
    "HttpErrorInfo",
    "map_http_error",
]
