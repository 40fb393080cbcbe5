"""
CLI: ``retrykit run``: run a shell command with retries.
"""

from __future__ import annotations

import subprocess

import typer

from retrykit.cli.utils import console, err_console, setup_logging
from retrykit.core.errors import CommandFailedError
from retrykit.execution.step import StepResult


def run_command(command: list[str]) -> int:
    """Run ``command`` once; a non-zero exit status is a failure."""
    completed = subprocess.run(command, check=False)
    if completed.returncode != 0:
        raise CommandFailedError(command, completed.returncode)
    return completed.returncode


def _exit_code(result: StepResult) -> int:
    """Return code of the last failed command, or 1 when it never ran."""
    details = result.details
    returncode = details.get("returncode") or details.get("last_error", {}).get("returncode")
    return returncode or 1


def run(
    command: list[str] = typer.Argument(..., help="Command to run (put it after --)"),
    retries: int | None = typer.Option(
        None, "--retries", "-r", help="Retries after the first attempt (negative = none)"
    ),
    backoff: float | None = typer.Option(
        None, "--backoff", "-b", min=0.0, help="Seconds to wait between attempts"
    ),
    json_logs: bool = typer.Option(False, "--json-logs", help="Emit JSON log lines"),
) -> None:
    """Run COMMAND, retrying it when it exits with a non-zero status."""
    from retrykit.core.settings import get_settings
    from retrykit.execution.retry import RetryConfig
    from retrykit.execution.step import RetryStep

    settings = get_settings()
    setup_logging(settings, json_logs or None)

    base = RetryConfig.from_settings(settings)
    config = RetryConfig(
        retry_count=retries if retries is not None else base.retry_count,
        retryable=base.retryable,
        backoff_seconds=backoff if backoff is not None else base.backoff_seconds,
    )

    result = RetryStep(lambda: run_command(command), config, name=command[0]).run()
    if result.success:
        console.print(f"[green]✓[/green] {' '.join(command)}")
        raise typer.Exit(0)

    err_console.print(f"[red]✗[/red] {result.error} (attempts: {result.attempts})")
    raise typer.Exit(_exit_code(result))
