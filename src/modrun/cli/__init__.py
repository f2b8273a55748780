"""
CLI layer for modrun.

Provides a Typer application whose ``entrypoint`` command is the process the
engine starts for every function call.

Entry point::

    modrun --help
"""

from modrun.cli.app import app

__all__ = ["app"]
