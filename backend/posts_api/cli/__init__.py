"""Command-line interface registration for the Flask application."""

from __future__ import annotations

from flask import Flask

from .seed import init_db_command, seed_cli


def init_app(app: Flask) -> None:
    """Register application-specific CLI commands.

    Parameters
    ----------
    app:
        Flask application instance whose CLI registry will receive the
        ``init-db`` command and the ``seed`` command group.
    """
    app.cli.add_command(init_db_command)
    app.cli.add_command(seed_cli)
