"""Tests for picrank.ui module."""

import logging

from rich.logging import RichHandler
from rich.progress import Progress

from picrank.ui import create_progress, progress_callback, setup_logging


def test_create_progress():
    assert isinstance(create_progress(), Progress)


def test_progress_callback_updates_task():
    progress = create_progress()
    task = progress.add_task("Scoring", total=None)
    callback = progress_callback(progress, task)

    callback(2, 5)

    state = progress.tasks[0]
    assert state.completed == 2
    assert state.total == 5


def test_setup_logging_installs_rich_handler():
    setup_logging(verbose=True)
    root = logging.getLogger()
    assert root.level == logging.DEBUG
    assert any(isinstance(h, RichHandler) for h in root.handlers)

    setup_logging()
    assert logging.getLogger().level == logging.INFO
