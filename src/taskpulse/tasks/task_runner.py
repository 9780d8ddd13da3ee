# src/taskpulse/tasks/task_runner.py

from __future__ import annotations

"""
Background task runner.

One run = one asyncio.Task that:
- waits for the run it superseded (if any) to exit,
- for each step races the cancellation event against the tick interval,
- appends a progress line per elapsed tick,
- appends exactly one terminal line (finished or canceled) and releases its slot.

The runner never polls: each step suspends until whichever of
{cancel requested, interval elapsed} happens first.
"""

import asyncio
import logging
from collections.abc import Callable

from ..core.console_log import ConsoleLog
from .task_models import RunOutcome, TaskHandle

logger = logging.getLogger(__name__)

CANCELLED_LINE = "Background Task Canceled"
COMPLETED_LINE = "Background Task Finished Successfully"

ReleaseCallback = Callable[[TaskHandle], None]


def progress_line(step: int, total: int) -> str:
    return f"{step} Background task {step} of {total} working..."


async def _cancelled_within(event: asyncio.Event, timeout: float) -> bool:
    """True if `event` fired before `timeout` seconds passed."""
    try:
        await asyncio.wait_for(event.wait(), timeout=timeout)
    except asyncio.TimeoutError:
        return False
    return True


def _finish(handle: TaskHandle, console: ConsoleLog, outcome: RunOutcome) -> RunOutcome:
    handle.outcome = outcome
    console.append(CANCELLED_LINE if outcome == RunOutcome.CANCELLED else COMPLETED_LINE)
    logger.info("Run %s %s", handle.run_id, outcome.value)
    return outcome


async def run_background_task(
    handle: TaskHandle,
    console: ConsoleLog,
    *,
    interval_seconds: float = 1.0,
    previous: asyncio.Task | None = None,
    release: ReleaseCallback | None = None,
) -> RunOutcome:
    """
    Execute one run bound to `handle`.

    `release` is called exactly once with the handle when the run exits, however
    it exits; the owner uses it to empty its slot (only if the slot still holds
    this handle).

    If the asyncio task itself is cancelled (e.g. the loop is shutting down),
    the run is reported as canceled and CancelledError propagates.
    """
    total = handle.config.iterations

    try:
        if previous is not None and not previous.done():
            # Superseded run writes its terminal line before our first one.
            await asyncio.wait({previous})

        if handle.cancel_requested:
            return _finish(handle, console, RunOutcome.CANCELLED)

        logger.info("Run %s started: %d step(s), tick=%.3fs", handle.run_id, total, interval_seconds)

        for step in range(1, total + 1):
            if await _cancelled_within(handle.cancel_event, interval_seconds):
                return _finish(handle, console, RunOutcome.CANCELLED)
            console.append(progress_line(step, total))
            logger.debug("Run %s step %d/%d", handle.run_id, step, total)

        return _finish(handle, console, RunOutcome.COMPLETED)

    except asyncio.CancelledError:
        if handle.running:
            _finish(handle, console, RunOutcome.CANCELLED)
        raise

    finally:
        if release is not None:
            release(handle)
