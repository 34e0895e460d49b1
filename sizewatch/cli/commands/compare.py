"""``sizewatch compare`` — diff two stored snapshots and apply the gate."""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape

from sizewatch.cli.commands import open_store
from sizewatch.core.size_gate import evaluate
from sizewatch.core.workflow import compare_snapshots
from sizewatch.models.config import SizeConfig
from sizewatch.models.status import CommitState

console = Console()


def compare_cmd(
    project: str = typer.Argument(..., help="Project name."),
    base_branch: str = typer.Argument(..., help="Baseline branch."),
    base_sha: str = typer.Argument(..., help="Baseline commit SHA."),
    head_branch: str = typer.Argument(..., help="Candidate branch."),
    head_sha: str = typer.Argument(..., help="Candidate commit SHA."),
    max_increase: int = typer.Option(
        SizeConfig().max_size_increase,
        "--max-increase",
        "-m",
        min=0,
        help="Largest allowed increase in bytes.",
    ),
    db: Path = typer.Option(None, "--db", "-d", help="Path to the snapshot database."),
) -> None:
    """Report the largest size increase between two stored snapshots.

    Exits 1 when the increase exceeds ``--max-increase``.
    """
    store = open_store(db)
    result = compare_snapshots(
        store, project, (base_branch, base_sha), (head_branch, head_sha)
    )
    verdict = evaluate(result, SizeConfig(max_size_increase=max_increase))

    style = "green" if verdict.state is CommitState.SUCCESS else "red"
    console.print(f"[bold {style}]{verdict.state.value}[/bold {style}] {escape(verdict.description)}")
    if verdict.state is CommitState.FAILURE:
        raise typer.Exit(code=1)
