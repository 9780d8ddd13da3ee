# src/taskpulse/connectors/console_connector.py

from __future__ import annotations

import asyncio
import contextlib
import logging
import threading
from datetime import datetime

from ..cli.commands import registry as command_registry
from ..core.state import AppState

logger = logging.getLogger(__name__)


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}", flush=True)


class TerminalHost:
    """
    Terminal implementation of the host collaborators.

    - show_message(title, body) prints a notice line,
    - append_console(line) prints one console line.
    """

    def show_message(self, title: str, body: str) -> None:
        _print_ts(f"[{title}] {body}")

    def append_console(self, line: str) -> None:
        _print_ts(line)


def _start_stdin_reader(loop: asyncio.AbstractEventLoop, queue: asyncio.Queue[str | None]) -> None:
    """
    Read stdin on a daemon thread and feed lines into `queue` (None = EOF).

    A daemon thread (not the default executor) so a pending input() never
    blocks interpreter shutdown.
    """

    def _reader() -> None:
        while True:
            try:
                line: str | None = input()
            except EOFError:
                line = None
            with contextlib.suppress(RuntimeError):
                # Loop already closed: nobody is listening any more.
                loop.call_soon_threadsafe(queue.put_nowait, line)
            if line is None:
                return

    threading.Thread(target=_reader, name="taskpulse-stdin", daemon=True).start()


async def run_console_loop(state: AppState) -> None:
    logger.info("Console connector started (tick=%ss).", state.controller.interval_seconds)
    _print_ts("[CONSOLE] /run [count] starts a task, /cancel stops it. Use /help for commands, /exit to quit.\n")

    def emit(text: str) -> None:
        _print_ts(text)

    queue: asyncio.Queue[str | None] = asyncio.Queue()
    _start_stdin_reader(asyncio.get_running_loop(), queue)

    while True:
        raw = await queue.get()
        if raw is None:
            logger.info("Console EOF received, exiting.")
            break

        user_input = raw.strip()
        if not user_input:
            continue

        if user_input.lower() in ("/exit", "/quit"):
            logger.info("Console exit command received.")
            break

        try:
            response = command_registry.handle(state, user_input, emit=emit)
        except Exception:
            logger.exception("Command handler crashed.")
            response = "Internal error while handling a command."

        if response is None:
            _print_ts("Not a command. Use /help to list available commands.")
        elif response:
            _print_ts(response)

    logger.info("Console connector finished.")
