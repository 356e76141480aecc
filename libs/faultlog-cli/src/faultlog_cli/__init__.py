"""faultlog-cli — Typer-based CLI for browsing error records."""

from faultlog_cli.cli import app

__all__ = ["app"]
