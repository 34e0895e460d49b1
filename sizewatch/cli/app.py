"""Main Typer application — imports and registers all CLI commands.

Entry point: ``sizewatch`` (configured via pyproject.toml scripts).
"""

from __future__ import annotations

from pathlib import Path

import typer

from sizewatch.cli.commands.check import check_cmd
from sizewatch.cli.commands.compare import compare_cmd
from sizewatch.cli.commands.show import show_cmd

app = typer.Typer(
    name="sizewatch",
    help="Sizewatch: build artifact size regression checks.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
)

# Register subcommands
app.command(name="check", help="Run the size check for a saved status event.")(check_cmd)
app.command(name="show", help="Show the artifacts of a stored snapshot.")(show_cmd)
app.command(name="compare", help="Diff two stored snapshots of a project.")(compare_cmd)


@app.command(name="projects", help="List projects with stored snapshots.")
def projects_cmd(
    db: Path = typer.Option(
        None, "--db", "-d", help="Path to the snapshot database."
    ),
) -> None:
    """List every project that has at least one stored snapshot."""
    from rich.console import Console
    from rich.markup import escape

    from sizewatch.cli.commands import open_store

    console = Console()
    store = open_store(db)
    projects = store.list_projects()
    if not projects:
        console.print("[dim]No snapshots stored.[/dim]")
        return
    for project in projects:
        console.print(f"[cyan]{escape(project)}[/cyan]")


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
