"""Rich console rendering of session progress."""

from __future__ import annotations

from typing import Optional

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from streampatch.errors import ErrorKind
from streampatch.types import BlockOutcome, BlockResult, SessionSummary

_PREVIEW_CHARS = 60

_WARNING_KINDS = {ErrorKind.INCOMPLETE_BLOCK, ErrorKind.IMPRECISE_LOCATION, ErrorKind.TRUNCATED_DOCUMENT}


def _preview(text: str) -> str:
    first_line = next((line.strip() for line in text.splitlines() if line.strip()), "")
    if len(first_line) > _PREVIEW_CHARS:
        first_line = first_line[: _PREVIEW_CHARS - 1] + "…"
    return escape(first_line or "<empty>")


class ConsoleObserver:
    """Print block outcomes and the session summary."""

    def __init__(self, console: Optional[Console] = None, *, verbose: bool = False) -> None:
        self.console = console or Console()
        self.verbose = verbose
        self.preview_frames = 0

    def on_partial_document(self, text: str) -> None:
        self.preview_frames += 1
        if self.verbose:
            self.console.print(f"[dim]preview frame {self.preview_frames} ({len(text)} chars)[/dim]")

    def on_final_document(self, text: str) -> None:
        self.console.print(f"[green]✓[/green] Document received ({len(text)} chars)")

    def on_block_outcome(self, result: BlockResult) -> None:
        preview = _preview(result.block.original)
        if result.outcome is BlockOutcome.APPLIED:
            self.console.print(f"[green]✓[/green] Applied change: [cyan]{preview}[/cyan]")
        elif result.outcome is BlockOutcome.IMPRECISE_LOCATION:
            self.console.print(
                f"[yellow]![/yellow] Could not precisely locate change, skipped: [cyan]{preview}[/cyan]"
            )
        elif result.outcome is BlockOutcome.NOT_FOUND:
            self.console.print(
                f"[red]✗[/red] Could not locate the code block to change: [cyan]{preview}[/cyan]"
            )
        else:
            self.console.print(f"[red]✗[/red] {escape(str(result.error))}")

    def on_session_complete(self, summary: SessionSummary) -> None:
        table = Table(title="Processing complete", show_header=False, box=None)
        table.add_column("key", style="dim")
        table.add_column("value")
        table.add_row("mode", summary.mode.value if summary.mode else "-")
        if summary.results:
            table.add_row("applied", f"[green]{summary.applied}[/green]")
            table.add_row("skipped", f"[yellow]{summary.skipped}[/yellow]")
            table.add_row("failed", f"[red]{summary.failed}[/red]")
        if summary.final_document is not None:
            table.add_row("document", f"{len(summary.final_document)} chars")
        self.console.print(table)

    def on_session_error(self, kind: ErrorKind, message: str, *, context=None) -> None:
        if kind in _WARNING_KINDS:
            self.console.print(f"[yellow]![/yellow] {escape(message)}")
            return
        self.console.print(f"[red]✗[/red] {escape(message)}")
