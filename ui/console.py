"""
Terminal output for the daemon: log handler setup and run summaries.

All modules log through the standard `logging` module; this module routes
those records to the terminal through Rich so that levels are colored and
tracebacks are readable.
"""

import logging
from enum import StrEnum
from typing import Iterable

from rich import print as pr
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from core.models import FileTaskResult
from core.settings import Settings
from models import TaskState

console: Console = Console(stderr=True)


class ResultStyle(StrEnum):
    """
    Colors used when listing file results.

    Attributes:
        DELETED: Green for files processed and removed.
        FAILED: Red for files left in the source directory.
    """

    DELETED = "green"
    FAILED = "red"


def configure_logging(level: str = "INFO") -> None:
    """
    Route all log records to a Rich handler on stderr.

    Calling it again replaces the previous configuration.

    Args:
        level: Name of the minimum level to display (e.g. "DEBUG", "INFO").

    Raises:
        ValueError: If the level name is unknown.
    """
    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        raise ValueError(f"Unknown log level: {level}")

    logging.basicConfig(
        level=numeric_level,
        format="%(threadName)s %(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True, show_path=False)],
        force=True,
    )


def print_banner(settings: Settings) -> None:
    """Print the settings the daemon runs with."""
    pr("\n[bold magenta]📥 Sales inbox[/bold magenta]")
    pr(f"[green]Source:[/green] {settings.source_path}")
    pr(f"[green]Destination:[/green] {settings.destination_path}")
    pr(
        f"[green]Polling every {settings.poll_interval}s "
        f"with {settings.max_workers} worker(s)[/green]\n"
    )


def print_results(results: Iterable[FileTaskResult]) -> None:
    """
    Print one line per processed file followed by a count.

    Args:
        results: The results of a single run.
    """
    results = list(results)
    if not results:
        pr("[yellow]No files to process.[/yellow]")
        return

    failed = 0
    for result in results:
        if result.state is TaskState.DELETED:
            style = ResultStyle.DELETED
            detail = str(result.output_path)
        else:
            style = ResultStyle.FAILED
            detail = str(result.error)
            failed += 1
        name = escape(result.source_path.name)
        pr(f"[{style}]{result.state.value:>8}[/{style}] {name}: {escape(detail)}")

    pr(f"\n✅ Processed {len(results) - failed} file(s), {failed} failed.")
