"""
Root Typer application for the retrykit CLI.
"""

from __future__ import annotations

import typer
from typer import Typer

app = Typer(
    name="retrykit",
    help="retrykit: run units of work with bounded retries.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


def _version_callback(value: bool) -> None:
    if value:
        from retrykit import __version__

        typer.echo(f"retrykit {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool | None = typer.Option(  # noqa: UP007
        None,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """retrykit CLI. Retry shell commands and inspect settings."""


from retrykit.cli.config import app as config_app  # noqa: E402
from retrykit.cli.run import run  # noqa: E402

app.command("run")(run)
app.add_typer(config_app, name="config", help="Settings inspection.")


if __name__ == "__main__":
    app()
