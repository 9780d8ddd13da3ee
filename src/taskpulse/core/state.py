# src/taskpulse/core/state.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..tasks.task_controller import TaskController
from .console_log import ConsoleLog
from .ports import MessagePresenter


@dataclass
class AppState:
    # Settings object (taskpulse.config.Settings or a test stand-in).
    settings: Any

    console: ConsoleLog
    presenter: MessagePresenter
    controller: TaskController
