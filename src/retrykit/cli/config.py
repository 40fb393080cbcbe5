"""
CLI: ``retrykit config``: settings inspection.
"""

from __future__ import annotations

import typer

from retrykit.cli.utils import console

app = typer.Typer(no_args_is_help=True)


@app.command("show")
def show_config(
    json_out: bool = typer.Option(False, "--json", help="Print settings as JSON"),
) -> None:
    """Show effective settings."""
    from retrykit.core.settings import get_settings

    settings = get_settings()

    if json_out:
        console.print_json(settings.model_dump_json())
        return

    from rich.markup import escape
    from rich.table import Table

    table = Table(title="retrykit settings")
    table.add_column("Setting", style="cyan")
    table.add_column("Value")
    for key, value in settings.model_dump().items():
        table.add_row(f"RETRYKIT_{key.upper()}", "" if value is None else escape(str(value)))
    console.print(table)
