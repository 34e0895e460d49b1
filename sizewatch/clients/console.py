"""Status sink that prints instead of calling GitHub (dry runs)."""

from __future__ import annotations

import logging

from rich.console import Console
from rich.markup import escape

from sizewatch.models.events import StatusEvent
from sizewatch.models.status import CommitState

logger = logging.getLogger(__name__)

_STYLES: dict[CommitState, str] = {
    CommitState.PENDING: "yellow",
    CommitState.SUCCESS: "green",
    CommitState.FAILURE: "red",
    CommitState.ERROR: "red",
}


class ConsoleStatusSink:
    """Renders statuses to a rich console and keeps them for inspection."""

    def __init__(self, console: Console | None = None) -> None:
        self._console = console or Console()
        self.statuses: list[tuple[CommitState, str, str]] = []

    def set_status(
        self,
        event: StatusEvent,
        state: CommitState,
        description: str,
        context: str,
    ) -> None:
        self.statuses.append((state, description, context))
        style = _STYLES[state]
        self._console.print(
            f"[bold {style}]{state.value}[/bold {style}] "
            f"[cyan]{escape(context)}[/cyan] on {escape(event.sha[:7])}: {escape(description)}"
        )
        logger.debug("ConsoleStatusSink: %s %s", state.value, description)
