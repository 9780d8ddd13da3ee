# src/taskpulse/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures the local (gitignored) data directory exists,
- wires the console log, presenter and task controller into AppState.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.console_log import ConsoleLog
from ..core.ports import ConsoleView, MessagePresenter
from ..core.state import AppState
from ..tasks.task_controller import TaskController
from ..tasks.task_models import TaskConfig

logger = logging.getLogger(__name__)


def welcome_line(app_name: str) -> str:
    return f"Welcome to {app_name}"


def create_initial_state(
    *,
    presenter: MessagePresenter,
    view: ConsoleView | None = None,
    settings=None,
) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    data_dir = getattr(settings, "data_dir", None)
    if data_dir is not None:
        data_dir.mkdir(parents=True, exist_ok=True)

    console = ConsoleLog(welcome=welcome_line(settings.app_name))
    controller = TaskController(
        console=console,
        presenter=presenter,
        config=TaskConfig(iterations=settings.default_iterations),
        interval_seconds=settings.tick_seconds,
        count_field=settings.count_field,
    )
    console.attach(view)

    logger.debug(
        "State ready (default_iterations=%s tick=%s field=%s)",
        settings.default_iterations,
        settings.tick_seconds,
        settings.count_field,
    )
    return AppState(settings=settings, console=console, presenter=presenter, controller=controller)
