"""HTTP management API controller (internal use only)."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Callable, Optional, TypeVar

import httpx

from asdeploy.auth import ManagementCredentials
from asdeploy.errors import (
    HttpErrorInfo,
    InvalidStateError,
    SubmissionFailedError,
    SubmissionInterruptedError,
    SubmissionTimeoutError,
    TransportError,
    map_http_error,
)
from asdeploy.models import PlanResult
from asdeploy.plan import DeploymentPlan

from .operations import ADD_CONTENT_PATH, MANAGEMENT_PATH, build_composite, read_attribute_operation
from .responses import describe_failure, parse_plan_response

T = TypeVar("T")

logger = logging.getLogger(__name__)


class ManagementController:
    """
    Connection to one server's HTTP management endpoint.

    Notes:
        - The httpx client is NOT exposed.
        - Every request is bounded by ``timeout_sec``; nothing is retried.
        - Use as a context manager so the connection is released on every path.
    """

    def __init__(
        self,
        hostname: str,
        port: int,
        *,
        credentials: Optional[ManagementCredentials] = None,
        timeout_sec: float = 60.0,
        scheme: str = "http",
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self._hostname = hostname
        self._port = port
        self._credentials = credentials
        self._timeout_sec = timeout_sec
        self._base_url = f"{scheme}://{hostname}:{port}"
        self._transport = transport
        self._client: Optional[httpx.Client] = None

    @property
    def address(self) -> str:
        return f"{self._hostname}:{self._port}"

    @property
    def is_open(self) -> bool:
        return self._client is not None

    # ----------------------------
    # Lifecycle
    # ----------------------------
    def open(self) -> "ManagementController":
        """
        Create the HTTP client and probe the endpoint.

        Raises:
            TransportError: if the endpoint cannot be reached.
            AuthError: if the credentials are rejected.
        """
        if self._client is not None:
            return self

        self._client = httpx.Client(
            base_url=self._base_url,
            auth=self._credentials.to_httpx_auth() if self._credentials else None,
            timeout=httpx.Timeout(self._timeout_sec),
            transport=self._transport,
            headers={"Accept": "application/json"},
        )
        try:
            state = self.read_attribute("server-state")
        except BaseException:
            self.close()
            raise

        logger.debug("Connected to %s (server-state=%s)", self.address, state)
        return self

    def close(self) -> None:
        if self._client is None:
            return
        client, self._client = self._client, None
        client.close()

    def __enter__(self) -> "ManagementController":
        return self.open()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # ----------------------------
    # Public API
    # ----------------------------
    def read_attribute(self, name: str) -> Any:
        payload = self._post_operation(read_attribute_operation(name))
        if payload.get("outcome") != "success":
            raise SubmissionFailedError(
                describe_failure(payload.get("failure-description")) or f"read-attribute {name} failed",
                details={"attribute": name},
            )
        return payload.get("result")

    def upload_content(self, path: Path) -> str:
        """
        Upload an archive to the content repository.

        Returns:
            The content hash to reference from add/full-replace-deployment.
        """
        client = self._require_client()
        try:
            with open(path, "rb") as fh:
                files = {"file": (path.name, fh, "application/octet-stream")}
                response = self._send(lambda: client.post(ADD_CONTENT_PATH, files=files))
        except OSError as exc:
            raise SubmissionFailedError(
                f"Unable to read archive {path}",
                details={"path": str(path)},
                cause=exc,
            ) from exc

        payload = _decode(response)
        result = payload.get("result")
        content_hash = result.get("BYTES_VALUE") if isinstance(result, dict) else None
        if payload.get("outcome") != "success" or not isinstance(content_hash, str):
            raise SubmissionFailedError(
                describe_failure(payload.get("failure-description")) or f"Content upload failed for {path.name}",
                details={"path": str(path)},
            )

        logger.debug("Uploaded %s to %s", path.name, self.address)
        return content_hash

    def execute_plan(self, plan: DeploymentPlan) -> PlanResult:
        """
        Upload content and submit the plan as one composite operation.

        Blocks until the server answers or the wait fails.

        Raises:
            SubmissionInterruptedError, SubmissionTimeoutError,
            SubmissionFailedError, TransportError, AuthError
        """
        self._require_client()

        content_hashes: dict[str, str] = {}
        for action in plan.actions:
            try:
                action.validate_required_fields()
            except ValueError as exc:
                raise InvalidStateError(
                    "Invalid action in plan",
                    details={"action_id": action.action_id, "kind": action.kind.value},
                    cause=exc,
                ) from exc
            if action.carries_content:
                content_hashes[action.action_id] = self.upload_content(action.content_path)  # type: ignore[arg-type]

        payload = self._post_operation(build_composite(plan, content_hashes))
        return parse_plan_response(plan, payload)

    # ----------------------------
    # Internals
    # ----------------------------
    def _require_client(self) -> httpx.Client:
        if self._client is None:
            raise InvalidStateError("Controller is not open. Call open() first.")
        return self._client

    def _post_operation(self, operation: dict[str, Any]) -> dict[str, Any]:
        client = self._require_client()
        response = self._send(lambda: client.post(MANAGEMENT_PATH, json=operation))
        return _decode(response)

    def _send(self, func: Callable[[], T]) -> T:
        try:
            return func()
        except KeyboardInterrupt as exc:
            raise SubmissionInterruptedError(
                "Interrupted while waiting for the management response",
                details={"address": self.address},
                cause=exc,
            ) from exc
        except (httpx.ConnectError, httpx.ConnectTimeout) as exc:
            raise TransportError(
                f"Unable to connect to {self.address}",
                details={"address": self.address},
                cause=exc,
            ) from exc
        except httpx.TimeoutException as exc:
            raise SubmissionTimeoutError(
                f"No response from {self.address} within {self._timeout_sec}s",
                details={"address": self.address, "timeout_sec": self._timeout_sec},
                cause=exc,
            ) from exc
        except httpx.TransportError as exc:
            raise TransportError(
                f"Transport failure talking to {self.address}: {exc}",
                details={"address": self.address},
                cause=exc,
            ) from exc
        except (httpx.RequestError, httpx.InvalidURL) as exc:
            raise SubmissionFailedError(
                f"Request to {self.address} failed: {exc}",
                details={"address": self.address},
                cause=exc,
            ) from exc


def _decode(response: httpx.Response) -> dict[str, Any]:
    """
    Return the management payload of ``response``.

    A JSON body with an ``outcome`` is a management response even when the
    HTTP status is an error (failed operations come back as 500).
    """
    try:
        payload = response.json()
    except ValueError:
        payload = None

    if isinstance(payload, dict) and "outcome" in payload:
        return payload

    if response.is_error:
        info = HttpErrorInfo(
            status_code=response.status_code,
            reason=response.reason_phrase or None,
            message=f"Management endpoint returned HTTP {response.status_code}",
        )
        raise map_http_error(info)

    raise SubmissionFailedError(
        "Unexpected management response",
        details={"status_code": response.status_code},
    )
