"""CLI application setup using Typer."""

from actionchat.cli.main import app

__all__ = ["app"]
