# src/taskpulse/cli/commands.py

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable
from typing import cast

from ..core.state import AppState
from ..tasks.task_models import FormAction, TaskValidationError

CommandEmitter = Callable[[str], None]
CommandHandler2 = Callable[[AppState, list[str]], str]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], str]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Simple slash-command registry used by connectors (/help, /run, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            nparams = len(inspect.signature(handler).parameters)
        except Exception:
            nparams = 3

        if nparams >= 3:
            h3 = cast(CommandHandler3, handler)
            return h3(state, args, emit)

        h2 = cast(CommandHandler2, handler)
        return h2(state, args)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


def _parse_form_args(args: list[str], count_field: str) -> dict[str, str]:
    """`3` -> {count_field: "3"}; `key=value` pairs are passed through."""
    form: dict[str, str] = {}
    for arg in args:
        if "=" in arg:
            key, _, value = arg.partition("=")
            form[key.strip()] = value
        else:
            form[count_field] = arg
    return form


def _submit(state: AppState, action: str, form: dict[str, str]) -> bool:
    try:
        state.controller.submit(action, form)
    except TaskValidationError:
        # Already shown to the user by the controller.
        return False
    return True


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_run(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    """
    /run      -> start with the last accepted count
    /run 5    -> start a 5-step task (replaces a running one)
    """
    controller = state.controller
    replacing = controller.current is not None
    if not _submit(state, FormAction.SUBMIT, _parse_form_args(args, controller.count_field)):
        return "Task not started."

    if replacing and emit:
        emit("Previous task is being replaced.")
    return f"Task started: {controller.config.iterations} step(s)."


def cmd_cancel(state: AppState, args: list[str]) -> str:
    had_run = state.controller.current is not None
    state.controller.submit(FormAction.CANCEL, {})
    return "Cancel requested." if had_run else "No task is running."


def cmd_confirm(state: AppState, args: list[str]) -> str:
    state.controller.submit(FormAction.CONFIRM, {})
    return "OK."


def cmd_dismiss(state: AppState, args: list[str]) -> str:
    state.controller.submit(FormAction.DISMISS, {})
    return "Dismissed."


def cmd_press(state: AppState, args: list[str]) -> str:
    """
    /press <button> [count] [key=value ...]

    Sends a raw button tag to the controller, including ones it does not know.
    """
    if not args:
        return "Usage: /press <button> [key=value ...]"
    button, rest = args[0], args[1:]
    if not _submit(state, button, _parse_form_args(rest, state.controller.count_field)):
        return "Task not started."
    return f"Button {button} sent."


def cmd_status(state: AppState, args: list[str]) -> str:
    controller = state.controller
    handle = controller.current
    running = f"run #{handle.run_id} ({handle.config.iterations} step(s))" if handle else "idle"
    return (
        "Status:\n"
        f"  Task: {running}\n"
        f"  Count: {controller.config.iterations}\n"
        f"  Tick: {controller.interval_seconds:g}s"
    )


def cmd_log(state: AppState, args: list[str]) -> str:
    return state.console.text.rstrip("\n")


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("run", cmd_run, help_text="Start the background task: /run [count].", aliases=["submit"])
registry.register("cancel", cmd_cancel, help_text="Cancel the running task.", aliases=["stop"])
registry.register("confirm", cmd_confirm, help_text="Press the OK button (no-op).", aliases=["ok"])
registry.register("dismiss", cmd_dismiss, help_text="Press the Close button (no-op).", aliases=["close"])
registry.register("press", cmd_press, help_text="Press any button by tag: /press <button> [count].")
registry.register("status", cmd_status, help_text="Show task slot and settings.")
registry.register("log", cmd_log, help_text="Print the whole console log.")
