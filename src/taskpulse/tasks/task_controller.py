# src/taskpulse/tasks/task_controller.py

from __future__ import annotations

"""
Task controller.

Owns the single task slot:
- submit(action, form_data) dispatches host button presses,
- stop() cancels the live run (if any) and empties the slot,
- teardown() is stop() for when the host closes the component.

All methods must be called from the event loop thread; the slot is only ever
touched there, which is what keeps at most one run live.
"""

import asyncio
import itertools
import logging
from collections.abc import Mapping

from ..core.console_log import ConsoleLog
from ..core.ports import MessagePresenter
from .task_models import FormAction, RunOutcome, TaskConfig, TaskHandle, TaskValidationError, parse_task_config
from .task_runner import run_background_task

logger = logging.getLogger(__name__)


class TaskController:
    def __init__(
        self,
        *,
        console: ConsoleLog,
        presenter: MessagePresenter,
        config: TaskConfig | None = None,
        interval_seconds: float = 1.0,
        count_field: str = "count",
    ) -> None:
        self.console = console
        self.presenter = presenter
        self.interval_seconds = interval_seconds
        self.count_field = count_field

        self._config = config if config is not None else TaskConfig(iterations=4)
        self._handle: TaskHandle | None = None
        self._last_task: asyncio.Task[RunOutcome] | None = None
        self._run_ids = itertools.count(1)

    @property
    def config(self) -> TaskConfig:
        return self._config

    @property
    def current(self) -> TaskHandle | None:
        return self._handle

    def submit(self, action: str, form_data: Mapping[str, str] | None = None) -> None:
        """
        Handle a host button press.

        Raises TaskValidationError for bad form input (after showing it to the
        user). Unknown actions are reported to the user but are not errors.
        """
        match FormAction.parse(action):
            case FormAction.CONFIRM | FormAction.DISMISS:
                return
            case FormAction.CANCEL:
                self.stop()
                return
            case FormAction.SUBMIT:
                self._start(form_data)
                return
            case _:
                logger.info("No action defined for button %r", action)
                self.presenter.show_message(
                    f"Button {action} is pressed",
                    "No action is defined for this button",
                )

    def stop(self) -> None:
        handle = self._handle
        if handle is None:
            return
        logger.info("Cancelling run %s", handle.run_id)
        handle.cancel()
        self._handle = None

    def teardown(self) -> None:
        self.stop()

    async def wait_idle(self) -> None:
        """Wait until the most recently launched run (and any superseding one) has exited."""
        while self._last_task is not None and not self._last_task.done():
            await asyncio.wait({self._last_task})

    def _start(self, form_data: Mapping[str, str] | None) -> None:
        try:
            config = parse_task_config(form_data, current=self._config, field_name=self.count_field)
        except TaskValidationError as e:
            logger.info("Rejected form data: %s", e)
            self.presenter.show_message("Invalid data", str(e))
            raise

        # Fails without a running loop; nothing has been touched yet.
        loop = asyncio.get_running_loop()

        self._config = config
        previous = self._last_task

        # Supersede: old token is set and the slot emptied before the new one goes in.
        self.stop()

        handle = TaskHandle(run_id=next(self._run_ids), config=config)
        task = loop.create_task(
            run_background_task(
                handle,
                self.console,
                interval_seconds=self.interval_seconds,
                previous=previous,
                release=self._release,
            ),
            name=f"taskpulse-run-{handle.run_id}",
        )
        task.add_done_callback(self._on_run_done)
        handle.task = task

        self._handle = handle
        self._last_task = task
        logger.info("Run %s scheduled (%d step(s))", handle.run_id, config.iterations)

    def _release(self, handle: TaskHandle) -> None:
        # A superseded run must not clear its successor's handle.
        if self._handle is handle:
            self._handle = None

    @staticmethod
    def _on_run_done(task: asyncio.Task) -> None:
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("Background run %s crashed", task.get_name(), exc_info=exc)
