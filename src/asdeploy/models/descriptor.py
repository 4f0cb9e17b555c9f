"""Deployment descriptor: which artifact, where, and what to do with it."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from asdeploy.errors import InvalidArgumentError, InvalidStateError
from asdeploy.plan import OperationType


@dataclass(slots=True, frozen=True)
class DeploymentDescriptor:
    """
    Identity and intent of one deployment attempt.

    Notes:
        - The archive must exist when the descriptor is created; the CLI
          checks this, the descriptor does not.
        - operation_type changes only through transition_to_redeploy().
        - operation_type is left out of the hash so the transition does
          not move a descriptor already stored in a set or dict.
    """

    hostname: str
    port: int
    archive: Path
    operation_type: OperationType = field(hash=False)

    @classmethod
    def of(
        cls,
        hostname: str,
        port: int,
        archive: Path | str,
        operation_type: OperationType | str = OperationType.DEPLOY,
    ) -> "DeploymentDescriptor":
        if not isinstance(hostname, str) or not hostname.strip():
            raise InvalidArgumentError("hostname must be a non-empty string")
        if not isinstance(port, int) or not 0 < port < 65536:
            raise InvalidArgumentError("port must be in 1..65535", details={"port": port})

        if not isinstance(operation_type, OperationType):
            operation_type = OperationType.of(operation_type)

        return cls(
            hostname=hostname,
            port=port,
            archive=Path(archive),
            operation_type=operation_type,
        )

    @property
    def archive_name(self) -> str:
        """Deployment name on the server (the archive's file name)."""
        return self.archive.name

    def transition_to_redeploy(self) -> None:
        """
        Switch a DEPLOY descriptor to REDEPLOY.

        Raises:
            InvalidStateError: if the descriptor is not currently DEPLOY.
        """
        if self.operation_type is not OperationType.DEPLOY:
            raise InvalidStateError(
                "Only a DEPLOY descriptor can transition to REDEPLOY",
                details={"operation_type": self.operation_type.value},
            )
        object.__setattr__(self, "operation_type", OperationType.REDEPLOY)
