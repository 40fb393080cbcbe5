"""
CLI utility helpers: consoles and logging setup.
"""

from __future__ import annotations

from rich.console import Console

from retrykit.core.logging import configure_logging
from retrykit.core.settings import RetrySettings

console = Console()
err_console = Console(stderr=True)


def setup_logging(settings: RetrySettings, json_logs: bool | None = None) -> None:
    """Configure structlog from settings, letting ``--json-logs`` win."""
    if json_logs is None:
        json_logs = settings.log_format == "json"
    configure_logging(level=settings.log_level, json_format=json_logs, service="retrykit")
