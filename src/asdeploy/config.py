"""Client configuration for asdeploy (defaults + environment overrides)."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from asdeploy.auth import ManagementCredentials
from asdeploy.errors import InvalidArgumentError

DEFAULT_HOSTNAME = "localhost"
DEFAULT_PORT = 9999
DEFAULT_TIMEOUT_SEC = 60.0
DEFAULT_SCHEME = "http"

ENV_PREFIX = "ASDEPLOY_"


@dataclass(slots=True, frozen=True)
class ClientConfig:
    """Connection settings for the management endpoint."""

    hostname: str = DEFAULT_HOSTNAME
    port: int = DEFAULT_PORT
    timeout_sec: float = DEFAULT_TIMEOUT_SEC
    scheme: str = DEFAULT_SCHEME
    credentials: Optional[ManagementCredentials] = None
    rollback_on_failure: bool = True

    def __post_init__(self) -> None:
        if not isinstance(self.hostname, str) or not self.hostname.strip():
            raise InvalidArgumentError("hostname must be a non-empty string")
        if not isinstance(self.port, int) or not 0 < self.port < 65536:
            raise InvalidArgumentError("port must be in 1..65535", details={"port": self.port})
        if not isinstance(self.timeout_sec, (int, float)) or self.timeout_sec <= 0:
            raise InvalidArgumentError(
                "timeout_sec must be a positive number",
                details={"timeout_sec": self.timeout_sec},
            )
        if self.scheme not in ("http", "https"):
            raise InvalidArgumentError("scheme must be 'http' or 'https'", details={"scheme": self.scheme})

    @classmethod
    def from_env(
        cls,
        environ: Optional[Mapping[str, str]] = None,
        **overrides: Any,
    ) -> "ClientConfig":
        """
        Build a config from ``ASDEPLOY_*`` environment variables.

        Recognised variables: HOSTNAME, PORT, TIMEOUT, SCHEME, USERNAME,
        PASSWORD. Overrides that are not None take precedence.

        Raises:
            InvalidArgumentError: if a variable cannot be converted.
        """
        env = os.environ if environ is None else environ
        values: dict[str, Any] = {}

        hostname = env.get(f"{ENV_PREFIX}HOSTNAME")
        if hostname:
            values["hostname"] = hostname

        port = env.get(f"{ENV_PREFIX}PORT")
        if port:
            values["port"] = _to_int(port, f"{ENV_PREFIX}PORT")

        timeout = env.get(f"{ENV_PREFIX}TIMEOUT")
        if timeout:
            values["timeout_sec"] = _to_float(timeout, f"{ENV_PREFIX}TIMEOUT")

        scheme = env.get(f"{ENV_PREFIX}SCHEME")
        if scheme:
            values["scheme"] = scheme.strip().lower()

        username = env.get(f"{ENV_PREFIX}USERNAME")
        if username:
            values["credentials"] = ManagementCredentials(
                username=username,
                password=env.get(f"{ENV_PREFIX}PASSWORD", ""),
            )

        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)


def _to_int(value: str, name: str) -> int:
    try:
        return int(value)
    except ValueError as exc:
        raise InvalidArgumentError(f"{name} must be an integer", details={name: value}, cause=exc) from exc


def _to_float(value: str, name: str) -> float:
    try:
        return float(value)
    except ValueError as exc:
        raise InvalidArgumentError(f"{name} must be a number", details={name: value}, cause=exc) from exc
