"""UI utilities: progress bars and log output."""

from __future__ import annotations

import logging

from rich.logging import RichHandler
from rich.progress import (
    BarColumn,
    Progress,
    SpinnerColumn,
    TaskID,
    TextColumn,
    TimeElapsedColumn,
)

from picrank.batch import ProgressCallback


def create_progress() -> Progress:
    """Create a standard progress bar for scoring runs.

    Returns:
        Configured Progress instance with spinner, description,
        bar, percentage, count, and elapsed time columns.
    """
    return Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TextColumn("[progress.percentage]{task.percentage:>3.0f}%"),
        TextColumn("({task.completed}/{task.total})"),
        TimeElapsedColumn(),
        console=None,
    )


def progress_callback(progress: Progress, task_id: TaskID) -> ProgressCallback:
    """Adapt a rich progress task to BatchScorer's (completed, total) callback."""

    def update(completed: int, total: int) -> None:
        progress.update(task_id, completed=completed, total=total)

    return update


def setup_logging(verbose: bool = False) -> None:
    """Route picrank logs through rich. DEBUG when verbose, else INFO."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, show_path=verbose)],
        force=True,
    )
