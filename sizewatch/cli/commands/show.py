"""``sizewatch show PROJECT BRANCH SHA`` — list a snapshot's artifacts."""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from sizewatch.cli.commands import open_store
from sizewatch.core.path_codec import decode

console = Console()


def show_cmd(
    project: str = typer.Argument(..., help="Project name (first artifact path segment)."),
    branch: str = typer.Argument(..., help="Branch name."),
    sha: str = typer.Argument(..., help="Commit SHA."),
    db: Path = typer.Option(None, "--db", "-d", help="Path to the snapshot database."),
) -> None:
    """Show the decoded artifacts of one stored snapshot."""
    store = open_store(db)
    snapshot = store.get(project, branch, sha)
    if snapshot is None:
        console.print(f"[bold red]No snapshot for[/bold red] {escape(project)} @ {escape(branch)}/{escape(sha)}")
        keys = store.list_keys(project)
        if keys:
            console.print("\n[bold]Stored snapshots for this project:[/bold]")
            for key in keys[:10]:
                console.print(f"  [cyan]{escape(key)}[/cyan]")
            if len(keys) > 10:
                console.print(f"  [dim]... and {len(keys) - 10} more[/dim]")
        raise typer.Exit(code=1)

    artifacts = sorted(decode(snapshot), key=lambda a: a.full_path)
    table = Table(title=escape(f"{project} @ {branch} ({sha[:7]})"))
    table.add_column("Artifact", style="cyan")
    table.add_column("Bytes", justify="right", style="green")
    for artifact in artifacts:
        table.add_row(escape(artifact.full_path), str(artifact.size_bytes))
    console.print(table)
    if snapshot.metadata.message:
        console.print(f"[dim]{escape(snapshot.metadata.message)}[/dim]")
