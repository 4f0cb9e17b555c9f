"""asdeploy command line: deploy, redeploy or undeploy one archive."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional, Sequence

import click

from asdeploy.auth import ManagementCredentials
from asdeploy.config import ClientConfig
from asdeploy.errors import InvalidArgumentError
from asdeploy.executor import DeploymentExecutor
from asdeploy.models import DeploymentDescriptor, ExecutionOutcome
from asdeploy.plan import OperationType

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _parse_type(ctx: click.Context, param: click.Parameter, value: str) -> OperationType:
    parsed = OperationType.parse(value)
    if parsed is None:
        valid = ", ".join(t.value for t in OperationType)
        raise click.BadParameter(f"Type {value} is an invalid type. Valid values are: {valid}.")
    return parsed


def _configure_logging(verbose: bool) -> None:
    if verbose:
        level = logging.DEBUG
    else:
        name = os.environ.get("LOG_LEVEL", "WARNING").strip().upper()
        level = logging.getLevelName(name)
        if not isinstance(level, int):
            raise click.UsageError(f"LOG_LEVEL {name!r} is not a valid logging level.")
    logging.basicConfig(level=level, format=LOG_FORMAT)


@click.command(context_settings={"help_option_names": ["-help", "--help"]})
@click.option("-hostname", "--hostname", default=None,
              help="The host name to connect to. Default is localhost.")
@click.option("-port", "--port", type=click.IntRange(1, 65535), default=None,
              help="The port to connect to. Default is 9999.")
@click.option("-type", "--type", "operation_type", default=OperationType.DEPLOY.value,
              callback=_parse_type, show_default=True,
              help="The type of the deployment: DEPLOY, REDEPLOY or UNDEPLOY (case-insensitive).")
@click.option("-iterations", "--iterations", type=click.IntRange(min=1), default=1, show_default=True,
              help="Number of passes. A DEPLOY is followed by redeploys; other types run once.")
@click.option("-timeout", "--timeout", "timeout_sec", type=click.FloatRange(min=0, min_open=True),
              default=None, help="Seconds to wait for the management response. Default is 60.")
@click.option("-username", "--username", default=None, help="Management realm user.")
@click.option("-password", "--password", default=None, help="Management realm password.")
@click.option("-verbose", "--verbose", is_flag=True, help="Enable debug logging.")
@click.argument("archive", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def deploy(
    hostname: Optional[str],
    port: Optional[int],
    operation_type: OperationType,
    iterations: int,
    timeout_sec: Optional[float],
    username: Optional[str],
    password: Optional[str],
    verbose: bool,
    archive: Path,
) -> int:
    """Execute the deployment type on ARCHIVE against a remote management endpoint."""
    _configure_logging(verbose)

    try:
        credentials = None
        if username:
            credentials = ManagementCredentials(username=username, password=password or "")
        config = ClientConfig.from_env(
            hostname=hostname,
            port=port,
            timeout_sec=timeout_sec,
            credentials=credentials,
        )
        descriptor = DeploymentDescriptor.of(config.hostname, config.port, archive, operation_type)
    except (InvalidArgumentError, ValueError) as exc:
        raise click.UsageError(str(exc)) from exc

    executor = DeploymentExecutor(config)
    for outcome in executor.iterate(descriptor, iterations):
        _render(outcome, descriptor)
        if outcome.failed:
            return 1
    return 0


def _render(outcome: ExecutionOutcome, descriptor: DeploymentDescriptor) -> None:
    if outcome.succeeded:
        click.echo(f"Deployment was successful for archive {descriptor.archive}.")
    else:
        click.echo(f"Deployment failed for archive {descriptor.archive}.")
        click.echo("  Errors:")
        for message in outcome.messages:
            click.echo(f"   {message}")

    for warning in outcome.warnings:
        click.echo(f"  Warning: {warning}")


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the command and return the process exit code (0 success, 1 otherwise)."""
    try:
        rv = deploy.main(args=list(argv) if argv is not None else None,
                         prog_name="asdeploy", standalone_mode=False)
    except click.ClickException as exc:
        exc.show()
        return 1
    except click.Abort:
        click.echo("Aborted!", err=True)
        return 1
    return rv if isinstance(rv, int) else 0


if __name__ == "__main__":
    raise SystemExit(main())
