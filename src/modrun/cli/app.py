"""
Root Typer application for the modrun CLI.

``modrun entrypoint`` is what the engine runs. ``functions`` and ``schema``
inspect a module locally without an engine session.
"""

from __future__ import annotations

from pathlib import Path

import typer
from typer import Typer

from modrun.cli.utils import fail, print_json, print_table, resolve_src
from modrun.client.client import connect
from modrun.core.errors import ModrunError
from modrun.framework.discovery import find_module_objects
from modrun.framework.entrypoint import Entrypoint
from modrun.framework.logging import configure_logging
from modrun.framework.registration import build_registration

app = Typer(
    name="modrun",
    help="modrun — Python runtime entry point for engine modules.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


# ── Version callback ─────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        from modrun import __version__

        typer.echo(f"modrun {__version__}")
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
    """modrun CLI — serve function calls and inspect modules."""
    try:
        configure_logging()
    except ModrunError as e:
        fail(e)


# ── Commands ─────────────────────────────────────────────────────────────


@app.command("entrypoint")
def entrypoint_cmd(
    src: Path | None = typer.Option(None, "--src", help="Module source directory."),
) -> None:
    """Serve the engine's current function call."""
    try:
        client = connect()
    except ModrunError as e:
        fail(e)

    with client:
        code = Entrypoint(client, src_dir=src).run()
    raise typer.Exit(code=code)


@app.command("functions")
def functions_cmd(
    src: Path | None = typer.Option(None, "--src", help="Module source directory."),
) -> None:
    """List module objects and their functions."""
    try:
        objects = find_module_objects(resolve_src(src))
        rows = [
            {
                "object": obj.name,
                "function": fn.name,
                "arguments": ", ".join(f"{a.name}: {a.type}" for a in fn.arguments),
                "returns": str(fn.return_type),
                "description": fn.description,
            }
            for obj in objects
            for fn in obj.functions
        ]
    except ModrunError as e:
        fail(e)

    print_table(rows, title="Module functions")


@app.command("schema")
def schema_cmd(
    src: Path | None = typer.Option(None, "--src", help="Module source directory."),
) -> None:
    """Print the module declaration as JSON without contacting the engine."""
    try:
        descriptor = build_registration(find_module_objects(resolve_src(src)))
    except ModrunError as e:
        fail(e)

    print_json(descriptor.to_dict())
