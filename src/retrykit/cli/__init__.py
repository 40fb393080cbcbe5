"""Command-line interface for retrykit."""

from retrykit.cli.app import app

__all__ = ["app"]
