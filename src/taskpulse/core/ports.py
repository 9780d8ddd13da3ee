# src/taskpulse/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The task controller and runner talk to the surrounding host only through these
Protocols. A terminal REPL, a GUI panel or a test double can all sit behind them.
"""

from typing import Protocol


class MessagePresenter(Protocol):
    """Host-side notice dialog: validation errors, "no action" notices."""

    def show_message(self, title: str, body: str) -> None: ...


class ConsoleView(Protocol):
    """Host-side console widget; receives each console line once, in order."""

    def append_console(self, line: str) -> None: ...
