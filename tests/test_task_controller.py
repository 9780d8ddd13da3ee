# tests/test_task_controller.py

from __future__ import annotations

import asyncio

import pytest

from taskpulse.tasks.task_models import RunOutcome, TaskValidationError
from taskpulse.tasks.task_runner import CANCELLED_LINE, COMPLETED_LINE, progress_line

from .fakes import wait_until

WELCOME = "Welcome to taskpulse-test"


def _run_lines(state) -> list[str]:
    lines = state.console.lines
    assert lines[0] == WELCOME
    return lines[1:]


@pytest.mark.asyncio
async def test_submit_runs_to_completion_and_empties_slot(state, view) -> None:
    controller = state.controller

    controller.submit("submit", {"count": "3"})
    handle = controller.current
    assert handle is not None
    assert _run_lines(state) == []  # fire-and-forget: nothing written yet

    await controller.wait_idle()

    assert _run_lines(state) == [
        progress_line(1, 3),
        progress_line(2, 3),
        progress_line(3, 3),
        COMPLETED_LINE,
    ]
    assert controller.current is None
    assert handle.outcome == RunOutcome.COMPLETED
    assert view.lines == state.console.lines


@pytest.mark.asyncio
async def test_submit_zero_iterations_completes_immediately(state) -> None:
    state.controller.submit("submit", {"count": "0"})
    await state.controller.wait_idle()

    assert _run_lines(state) == [COMPLETED_LINE]
    assert state.controller.current is None


@pytest.mark.asyncio
async def test_cancel_action_stops_run(state) -> None:
    controller = state.controller
    controller.submit("submit", {"count": "50"})
    handle = controller.current
    await wait_until(lambda: len(_run_lines(state)) >= 2)

    controller.submit("cancel", {})
    assert controller.current is None
    assert handle is not None and handle.cancel_requested

    await controller.wait_idle()
    lines = _run_lines(state)
    assert lines[-1] == CANCELLED_LINE
    k = len(lines) - 1
    assert k < 50
    assert lines[:-1] == [progress_line(i, 50) for i in range(1, k + 1)]

    await asyncio.sleep(0.1)
    assert _run_lines(state) == lines


@pytest.mark.asyncio
async def test_resubmit_supersedes_running_task(state) -> None:
    controller = state.controller
    controller.submit("submit", {"count": "50"})
    first = controller.current
    await wait_until(lambda: len(_run_lines(state)) >= 1)

    controller.submit("submit", {"count": "2"})
    second = controller.current
    assert first is not None and second is not None
    assert second is not first
    assert first.cancel_requested
    assert not second.cancel_requested

    await controller.wait_idle()

    lines = _run_lines(state)
    cut = lines.index(CANCELLED_LINE)
    assert all(line.endswith("of 50 working...") for line in lines[:cut])
    assert lines[cut + 1 :] == [progress_line(1, 2), progress_line(2, 2), COMPLETED_LINE]
    assert first.outcome == RunOutcome.CANCELLED
    assert second.outcome == RunOutcome.COMPLETED
    assert controller.current is None


@pytest.mark.asyncio
async def test_superseded_run_does_not_clear_new_handle(state) -> None:
    controller = state.controller
    controller.submit("submit", {"count": "50"})
    await wait_until(lambda: len(_run_lines(state)) >= 1)
    controller.submit("submit", {"count": "50"})
    second = controller.current

    def new_run_wrote_a_line() -> bool:
        lines = _run_lines(state)
        return CANCELLED_LINE in lines and len(lines) > lines.index(CANCELLED_LINE) + 1

    # Old run has exited (and released) by the time the new one writes a line.
    await wait_until(new_run_wrote_a_line)
    assert controller.current is second

    controller.teardown()
    await controller.wait_idle()


def test_stop_without_run_is_noop(state, presenter) -> None:
    before = state.console.lines

    state.controller.stop()
    state.controller.stop()
    state.controller.teardown()

    assert state.console.lines == before
    assert presenter.messages == []
    assert state.controller.current is None


@pytest.mark.asyncio
async def test_invalid_input_leaves_running_task_untouched(state, presenter) -> None:
    controller = state.controller
    controller.submit("submit", {"count": "50"})
    handle = controller.current
    await wait_until(lambda: len(_run_lines(state)) >= 1)

    with pytest.raises(TaskValidationError):
        controller.submit("submit", {"count": "abc"})

    assert presenter.messages and presenter.messages[-1][0] == "Invalid data"
    assert "abc" in presenter.messages[-1][1]
    assert controller.current is handle
    assert handle is not None and not handle.cancel_requested
    assert controller.config.iterations == 50

    controller.teardown()
    await controller.wait_idle()
    assert handle.outcome == RunOutcome.CANCELLED


@pytest.mark.asyncio
async def test_invalid_input_starts_nothing(state, presenter) -> None:
    before = state.console.lines

    with pytest.raises(TaskValidationError):
        state.controller.submit("submit", {"count": "-2"})

    await asyncio.sleep(0.05)
    assert state.console.lines == before
    assert state.controller.current is None
    assert len(presenter.messages) == 1


@pytest.mark.asyncio
async def test_undefined_action_shows_message_only(state, presenter) -> None:
    before = state.console.lines

    state.controller.submit("reboot", {})

    assert presenter.messages == [("Button reboot is pressed", "No action is defined for this button")]
    assert state.console.lines == before
    assert state.controller.current is None


@pytest.mark.asyncio
@pytest.mark.parametrize("action", ["Cancel", " cancel ", "SUBMIT"])
async def test_action_tags_match_exactly(state, presenter, action: str) -> None:
    controller = state.controller
    controller.submit("submit", {"count": "50"})
    handle = controller.current

    controller.submit(action, {"count": "1"})

    assert controller.current is handle
    assert handle is not None and not handle.cancel_requested
    assert controller.config.iterations == 50
    assert presenter.messages == [(f"Button {action} is pressed", "No action is defined for this button")]

    controller.teardown()
    await controller.wait_idle()


@pytest.mark.asyncio
@pytest.mark.parametrize("raw", ["", "   "])
async def test_blank_count_is_rejected(state, presenter, raw: str) -> None:
    before = state.console.lines

    with pytest.raises(TaskValidationError):
        state.controller.submit("submit", {"count": raw})

    assert presenter.messages and presenter.messages[0][0] == "Invalid data"
    assert state.controller.current is None
    await asyncio.sleep(0.05)
    assert state.console.lines == before


@pytest.mark.asyncio
async def test_submit_without_event_loop_keeps_running_task(state) -> None:
    controller = state.controller
    controller.submit("submit", {"count": "50"})
    handle = controller.current

    # Worker thread has no running loop, so the submit cannot schedule a run.
    with pytest.raises(RuntimeError):
        await asyncio.to_thread(controller.submit, "submit", {"count": "9"})

    assert controller.current is handle
    assert handle is not None and not handle.cancel_requested
    assert controller.config.iterations == 50

    controller.teardown()
    await controller.wait_idle()


@pytest.mark.asyncio
@pytest.mark.parametrize("action", ["confirm", "dismiss"])
async def test_confirm_and_dismiss_are_noops(state, presenter, action: str) -> None:
    state.controller.submit("submit", {"count": "50"})
    handle = state.controller.current

    state.controller.submit(action, {})

    assert state.controller.current is handle
    assert presenter.messages == []

    state.controller.teardown()
    await state.controller.wait_idle()


@pytest.mark.asyncio
async def test_missing_count_reuses_last_accepted_value(state) -> None:
    controller = state.controller
    assert controller.config.iterations == 4

    controller.submit("submit", {"count": "1"})
    await controller.wait_idle()
    controller.submit("submit", {})
    await controller.wait_idle()

    assert controller.config.iterations == 1
    assert _run_lines(state) == [progress_line(1, 1), COMPLETED_LINE] * 2


@pytest.mark.asyncio
async def test_teardown_cancels_live_run(state) -> None:
    controller = state.controller
    controller.submit("submit", {"count": "50"})
    handle = controller.current

    controller.teardown()
    assert controller.current is None
    await controller.wait_idle()

    assert handle is not None and handle.outcome == RunOutcome.CANCELLED
    assert _run_lines(state)[-1] == CANCELLED_LINE
