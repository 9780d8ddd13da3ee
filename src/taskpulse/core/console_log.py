# src/taskpulse/core/console_log.py

from __future__ import annotations

import logging

from .ports import ConsoleView

logger = logging.getLogger(__name__)


class ConsoleLog:
    """
    Append-only, user-visible console text.

    Writers call append(*parts); parts are joined without separators into one
    line. The core never reads the log back, it only pushes each new line to
    the attached view.
    """

    def __init__(self, *, welcome: str | None = None, view: ConsoleView | None = None) -> None:
        self._lines: list[str] = []
        self._view = view
        if welcome:
            self._lines.append(welcome)

    @property
    def lines(self) -> list[str]:
        return list(self._lines)

    @property
    def text(self) -> str:
        return "".join(f"{line}\n" for line in self._lines)

    def attach(self, view: ConsoleView | None) -> None:
        """Swap the rendering target; lines written so far are replayed into it."""
        self._view = view
        if view is not None:
            for line in self._lines:
                view.append_console(line)

    def append(self, *parts: object) -> str:
        line = "".join(str(p) for p in parts)
        self._lines.append(line)
        logger.debug("console += %r", line)
        if self._view is not None:
            self._view.append_console(line)
        return line

    def __len__(self) -> int:
        return len(self._lines)
