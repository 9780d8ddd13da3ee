# src/taskpulse/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState around a terminal host, then either runs
the console REPL or (console disabled) a single task with the default count.
The task controller is always torn down on the way out.
"""

from __future__ import annotations

import asyncio
import logging

from ..cli.bootstrap import create_initial_state
from ..config import get_settings
from ..connectors.console_connector import TerminalHost, run_console_loop
from ..core.state import AppState
from ..logging_setup import setup_logging
from ..tasks.task_models import FormAction

logger = logging.getLogger(__name__)


async def _shutdown(state: AppState) -> None:
    """Cancel the live run and let it write its last line."""
    state.controller.teardown()
    await state.controller.wait_idle()


async def _amain(settings) -> None:
    host = TerminalHost()
    state = create_initial_state(presenter=host, view=host, settings=settings)

    try:
        if settings.console_enabled:
            await run_console_loop(state)
        else:
            logger.info("Console disabled. Running one task with the default count.")
            state.controller.submit(FormAction.SUBMIT, {})
            await state.controller.wait_idle()
    finally:
        await _shutdown(state)


def main() -> None:
    settings = get_settings()

    level_name = str(getattr(settings, "log_level", "INFO")).upper()
    console_level = getattr(logging, level_name, logging.INFO)

    log_dir = getattr(settings, "data_dir", ".local/taskpulse")
    setup_logging(log_dir=log_dir, console_level=console_level)

    logger.info("Starting %s...", getattr(settings, "app_name", "taskpulse"))

    try:
        asyncio.run(_amain(settings))
    except KeyboardInterrupt:
        logger.info("KeyboardInterrupt, shutting down...")
    finally:
        logger.info("Bye.")


if __name__ == "__main__":
    main()
