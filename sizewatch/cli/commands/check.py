"""``sizewatch check EVENT_JSON`` — run the size check for one status event.

The event file is a GitHub ``status`` webhook body as delivered.  With
``--dry-run`` statuses are printed rather than posted to GitHub; snapshots
are still written to the configured database.
"""

from __future__ import annotations

import json
from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape

from sizewatch.cli.commands import open_store
from sizewatch.clients.circleci import CircleCiClient
from sizewatch.clients.console import ConsoleStatusSink
from sizewatch.clients.github import GitHubClient, GitHubConfigSource
from sizewatch.config import ServiceConfig, configure_logging
from sizewatch.core.workflow import SizeCheckWorkflow
from sizewatch.models.events import StatusEvent
from sizewatch.models.status import CheckPath, WorkflowState
from sizewatch.repo_config import load_size_config

console = Console()


def check_cmd(
    event_file: Path = typer.Argument(
        ...,
        help="Path to a GitHub status webhook payload (JSON).",
    ),
    dry_run: bool = typer.Option(
        False,
        "--dry-run",
        "-n",
        help="Print commit statuses instead of posting them.",
    ),
    config_file: Path = typer.Option(
        None,
        "--config",
        "-c",
        help="Read the size config from a local file instead of the repository.",
    ),
    db: Path = typer.Option(
        None,
        "--db",
        "-d",
        help="Path to the snapshot database.",
    ),
) -> None:
    """Run the size check for a saved status event.

    Exits 1 when the size gate fails.
    """
    settings = ServiceConfig()
    configure_logging(settings)

    if not event_file.exists():
        console.print(f"[bold red]Event file not found:[/bold red] {escape(str(event_file))}")
        raise typer.Exit(code=2)
    try:
        event = StatusEvent.model_validate(json.loads(event_file.read_text(encoding="utf-8")))
    except ValueError as exc:
        console.print(f"[bold red]Invalid status event:[/bold red] {escape(str(exc))}")
        raise typer.Exit(code=2)

    github = GitHubClient(
        settings.github_token,
        settings.github_api_base,
        timeout=settings.http_timeout_seconds,
    )
    circleci = CircleCiClient(
        settings.circleci_api_base,
        settings.circleci_token,
        timeout=settings.http_timeout_seconds,
        max_workers=settings.max_fetch_workers,
    )
    workflow = SizeCheckWorkflow(
        store=open_store(db, settings),
        artifacts=circleci,
        pull_requests=github,
        statuses=ConsoleStatusSink(console) if dry_run else github,
        configs=GitHubConfigSource(github, settings.config_file_path),
    )

    size_config = load_size_config(config_file) if config_file else None
    try:
        outcome = workflow.handle(event, size_config)
    finally:
        circleci.close()
        github.close()

    if outcome.path is CheckPath.DISCARDED:
        console.print(f"[dim]Ignored: {escape(outcome.description)}[/dim]")
    elif outcome.path is CheckPath.STORED:
        console.print(f"[bold green]Stored[/bold green] {len(outcome.stored_keys)} snapshots")
        for key in outcome.stored_keys:
            console.print(f"  [cyan]{escape(key)}[/cyan]")
    else:
        style = "green" if outcome.state is WorkflowState.SUCCESS else "red"
        console.print(f"[bold {style}]{outcome.state.value}[/bold {style}] {escape(outcome.description)}")
        if outcome.state is WorkflowState.FAILURE:
            raise typer.Exit(code=1)
