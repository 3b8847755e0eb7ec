"""
DOMCP command line interface.

Commands:
- serve: run the MCP stdio server for a workspace
- import / export: move a JSON domain model in and out of the store
- list: show stored projects
- diff: compare two JSON model files offline (optionally as a refactoring plan)
"""

from __future__ import annotations

import asyncio
import json
import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import NoReturn

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from domcp import __version__
from domcp.core.changes import diff_models
from domcp.core.config import load_settings
from domcp.core.errors import DomcpError
from domcp.core.ir import DomainModel
from domcp.core.loader import load_model_file
from domcp.core.planner import plan_refactoring
from domcp.core.store import ModelStore, canonicalize_workspace

logger = logging.getLogger("domcp.cli")

console = Console()
err_console = Console(stderr=True)

app = typer.Typer(
    help="DOMCP - Domain model context server for coding assistants.",
    no_args_is_help=True,
)


@dataclass
class CliState:
    """Options shared by all commands."""

    db_path: Path
    log_level: str


def version_callback(value: bool) -> None:
    if value:
        typer.echo(f"domcp {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    ctx: typer.Context,
    db: Path | None = typer.Option(  # noqa: B008
        None,
        "--db",
        help="Model store database (default: ~/.domcp/domcp.db, or DOMCP_DB_PATH)",
    ),
    version: bool | None = typer.Option(
        None,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
) -> None:
    """DOMCP CLI main callback for global options."""
    try:
        settings = load_settings()
    except DomcpError as e:
        _fail(e)
    ctx.obj = CliState(db_path=db or settings.db_path, log_level=settings.log_level)


def _fail(error: Exception) -> NoReturn:
    err_console.print(f"[red]Error: {escape(str(error))}[/red]")
    raise typer.Exit(code=1)


def _open_store(ctx: typer.Context) -> ModelStore:
    state: CliState = ctx.obj
    try:
        return ModelStore(state.db_path)
    except DomcpError as e:
        _fail(e)


# =============================================================================
# Store Commands
# =============================================================================


@app.command()
def serve(
    ctx: typer.Context,
    workspace: str = typer.Option(..., "--workspace", "-w", help="Workspace path"),
) -> None:
    """
    Run the DOMCP MCP server over stdio.

    Loads the stored model for the workspace, or starts from an empty model
    named after the workspace directory.
    """
    from domcp.mcp.server import configure_logging, run_server

    state: CliState = ctx.obj
    configure_logging(state.log_level)

    store = _open_store(ctx)
    key = canonicalize_workspace(workspace)
    try:
        model = store.load(key)
    except DomcpError as e:
        _fail(e)
    if model is None:
        logger.info("No model found for workspace: %s. Starting with empty model.", key)
        model = DomainModel.empty(key)
    else:
        logger.info("Loaded model '%s' for workspace: %s", model.name, key)

    try:
        asyncio.run(run_server(model, key, store))
    except KeyboardInterrupt:
        err_console.print("\nMCP server stopped.")


@app.command("import")
def import_model(
    ctx: typer.Context,
    file: Path = typer.Argument(..., help="JSON domain model file"),  # noqa: B008
    workspace: str = typer.Option(..., "--workspace", "-w", help="Workspace path"),
) -> None:
    """Validate a JSON domain model and store it for a workspace."""
    store = _open_store(ctx)
    try:
        model = store.import_from_file(workspace, file)
    except DomcpError as e:
        _fail(e)
    console.print(
        f"[green]Imported '{escape(model.name)}' ({len(model.bounded_contexts)} contexts) "
        f"into store for workspace: {escape(workspace)}[/green]"
    )


@app.command("export")
def export_model(
    ctx: typer.Context,
    file: Path = typer.Argument(..., help="Output JSON file"),  # noqa: B008
    workspace: str = typer.Option(..., "--workspace", "-w", help="Workspace path"),
) -> None:
    """Write the stored model of a workspace to a JSON file."""
    store = _open_store(ctx)
    try:
        store.export_to_file(workspace, file)
    except DomcpError as e:
        _fail(e)
    console.print(f"Exported model for workspace '{escape(workspace)}' to: {file}")


@app.command("list")
def list_projects(ctx: typer.Context) -> None:
    """List all projects in the model store."""
    store = _open_store(ctx)
    try:
        projects = store.list()
    except DomcpError as e:
        _fail(e)

    if not projects:
        console.print("[yellow]No projects in store.[/yellow]")
        return

    table = Table(title="Stored Projects")
    table.add_column("Workspace", style="cyan")
    table.add_column("Project")
    table.add_column("Updated", style="dim")
    for p in projects:
        table.add_row(p.workspace_path, p.project_name, p.updated_at)
    console.print(table)
    console.print(f"\n{len(projects)} project(s) total")


# =============================================================================
# Offline Diff
# =============================================================================


@app.command()
def diff(
    old: Path = typer.Argument(..., help="Previous model JSON"),  # noqa: B008
    new: Path = typer.Argument(..., help="Current model JSON"),  # noqa: B008
    plan: bool = typer.Option(False, "--plan", help="Print a refactoring plan instead"),
) -> None:
    """
    Compare two JSON domain models and print the changes as JSON.

    With --plan, the changes are turned into code actions and migration
    notes using the conventions of NEW.
    """
    try:
        old_model = load_model_file(old)
        new_model = load_model_file(new)
    except DomcpError as e:
        _fail(e)

    changes = diff_models(old_model, new_model)
    if plan:
        typer.echo(plan_refactoring(changes, new_model.conventions).to_json(indent=2))
    else:
        typer.echo(json.dumps([c.to_dict() for c in changes], indent=2))


def main(argv: list[str] | None = None) -> None:
    app(args=argv, standalone_mode=True)


if __name__ == "__main__":
    main(sys.argv[1:])
