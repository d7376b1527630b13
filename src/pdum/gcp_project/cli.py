"""CLI entry point for pdum_gcp_project."""

import logging
import sys
from dataclasses import fields, replace
from pathlib import Path
from typing import Callable, Optional

import typer
from InquirerPy import inquirer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from pdum.gcp_project.api import CloudAPI, GoogleCloudAPI
from pdum.gcp_project.config import Settings, load_settings
from pdum.gcp_project.reconciler import ProjectReconciler
from pdum.gcp_project.state_file import load_desired, load_record, save_record
from pdum.gcp_project.types import ChangeSet, ProjectError, ProjectRecord

app = typer.Typer(
    help="Create, update and delete Google Cloud projects from YAML files",
    no_args_is_help=True,
)
console = Console()

STATE_OPTION = typer.Option(
    Path("project-state.yaml"),
    "--state",
    "-s",
    help="State file tracking the managed project",
)


@app.callback()
def main_options(
    ctx: typer.Context,
    settings_file: Optional[Path] = typer.Option(
        None,
        "--settings",
        help="Settings file (defaults to ~/.config/gcloud/pdum_gcp_project/config.yaml)",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log every remote call"),
):
    """Load settings and set up logging for every command."""
    try:
        settings = load_settings(settings_file)
    except ProjectError as e:
        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        sys.exit(1)

    level = logging.DEBUG if verbose else getattr(logging, settings.log_level, logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )
    ctx.obj = settings


def build_api(settings: Settings) -> CloudAPI:
    """Build the remote API client from settings."""
    return GoogleCloudAPI(settings.credentials(), settings)


def _reconciler(ctx: typer.Context) -> ProjectReconciler:
    settings = ctx.obj or Settings()
    return ProjectReconciler(build_api(settings), settings=settings)


def _run(action: Callable[[], None]) -> None:
    try:
        action()
    except ProjectError as e:
        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        sys.exit(1)
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted by user.[/yellow]")
        sys.exit(130)


def render_record(record: ProjectRecord) -> Table:
    """Render a record as a two-column table."""
    table = Table(show_header=True, header_style="bold cyan", title=record.project_id)
    table.add_column("Attribute")
    table.add_column("Value")
    table.add_row("id", record.id or "[dim](none)[/dim]")
    for f in fields(record):
        if f.name == "id":
            continue
        value = getattr(record, f.name)
        if isinstance(value, dict):
            value = ", ".join(f"{k}={v}" for k, v in sorted(value.items()))
        table.add_row(f.name, escape(str(value)))
    return table


@app.command("version")
def version():
    """Show the version of pdum_gcp_project."""
    from pdum.gcp_project import __version__

    console.print(f"pdum_gcp_project version: [bold green]{__version__}[/bold green]")


@app.command("create")
def create(
    ctx: typer.Context,
    config_file: Path = typer.Argument(..., help="YAML file describing the project"),
    state_file: Path = STATE_OPTION,
):
    """
    Create a project and record it in the state file.

    Examples:
        pdum_gcp_project create my-project.yaml --state my-project.state.yaml
    """

    def action():
        if state_file.exists() and load_record(state_file).exists:
            raise ProjectError(f"{state_file} already tracks a project; use 'update' instead")

        record = load_desired(config_file)
        reconciler = _reconciler(ctx)
        try:
            reconciler.create(record)
        finally:
            # Keep whatever was created so it can be read, imported or deleted later
            if record.exists:
                save_record(state_file, record)

        console.print(f"[green]Created project {record.id}.[/green]")
        console.print(render_record(record))

    _run(action)


@app.command("read")
def read(ctx: typer.Context, state_file: Path = STATE_OPTION):
    """Refresh the state file from the remote project."""

    def action():
        record = load_record(state_file)
        _reconciler(ctx).read(record)
        if not record.exists:
            state_file.unlink()
            console.print(f"[yellow]Project {record.project_id} no longer exists; removed {state_file}.[/yellow]")
            return
        save_record(state_file, record)
        console.print(render_record(record))

    _run(action)


@app.command("update")
def update(
    ctx: typer.Context,
    config_file: Path = typer.Argument(..., help="YAML file describing the project"),
    state_file: Path = STATE_OPTION,
):
    """Apply changes from the config file to the project in the state file."""

    def action():
        current = load_record(state_file)
        desired = load_desired(config_file)
        if desired.project_id != current.project_id:
            raise ProjectError(
                f"project_id cannot change ({current.project_id!r} -> {desired.project_id!r}); "
                "delete and create the project instead"
            )

        changes = ChangeSet.between(current, desired)
        record = replace(desired, id=current.id, number=current.number, lifecycle_state=current.lifecycle_state)
        if changes:
            console.print(f"[cyan]Updating {', '.join(sorted(changes.changed))}...[/cyan]")
            reconciler = _reconciler(ctx)
            reconciler.update(record, changes)
            reconciler.read(record)
        else:
            console.print("[green]No changes.[/green]")

        save_record(state_file, record)
        console.print(render_record(record))

    _run(action)


@app.command("delete")
def delete(
    ctx: typer.Context,
    state_file: Path = STATE_OPTION,
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation"),
):
    """Delete the project in the state file (only forget it when skip_delete is set)."""

    def action():
        record = load_record(state_file)
        if not record.skip_delete and not yes:
            confirmed = inquirer.confirm(message=f"Delete project {record.id}?", default=False).execute()
            if not confirmed:
                console.print("[yellow]Aborted.[/yellow]")
                return

        _reconciler(ctx).delete(record)
        state_file.unlink()
        console.print(f"[green]Removed {record.project_id} from {state_file}.[/green]")

    _run(action)


@app.command("import")
def import_project(
    ctx: typer.Context,
    project_id: str = typer.Argument(..., help="ID of an existing project"),
    state_file: Path = STATE_OPTION,
):
    """Start tracking an existing project."""

    def action():
        reconciler = _reconciler(ctx)
        record = reconciler.import_state(ProjectRecord(project_id=project_id))
        reconciler.read(record)
        if not record.exists:
            raise ProjectError(f"Cannot import non-existent or inactive project {project_id!r}")
        save_record(state_file, record)
        console.print(f"[green]Imported project {project_id}.[/green]")
        console.print(render_record(record))

    _run(action)


def main():
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
