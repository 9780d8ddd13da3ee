# src/taskpulse/tasks/task_models.py

from __future__ import annotations

import asyncio
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import StrEnum


class FormAction(StrEnum):
    """Button tags the host can submit with a form."""

    CONFIRM = "confirm"
    DISMISS = "dismiss"
    CANCEL = "cancel"
    SUBMIT = "submit"

    @classmethod
    def parse(cls, raw: str) -> FormAction | None:
        try:
            return cls(raw)
        except ValueError:
            return None


class RunOutcome(StrEnum):
    RUNNING = "running"
    CANCELLED = "cancelled"
    COMPLETED = "completed"


class TaskValidationError(ValueError):
    """Form input that cannot become a TaskConfig."""


@dataclass(slots=True, frozen=True)
class TaskConfig:
    iterations: int

    def __post_init__(self) -> None:
        if self.iterations < 0:
            raise TaskValidationError(f"count must be >= 0, got {self.iterations}")


def parse_task_config(
    form_data: Mapping[str, str] | None,
    *,
    current: TaskConfig,
    field_name: str = "count",
) -> TaskConfig:
    """
    Build a TaskConfig from submitted form fields.

    Fields are merged onto `current`: a missing count keeps the previously
    accepted value. Anything else that is not a non-negative integer (blank
    included) raises TaskValidationError.
    """
    raw = (form_data or {}).get(field_name)
    if raw is None:
        return current

    text = str(raw).strip()
    try:
        iterations = int(text)
    except ValueError:
        raise TaskValidationError(f"{field_name} must be an integer, got {text!r}") from None
    if iterations < 0:
        raise TaskValidationError(f"{field_name} must be >= 0, got {iterations}")

    return TaskConfig(iterations=iterations)


@dataclass(slots=True, eq=False)
class TaskHandle:
    """
    Cancellation capability for one run.

    `cancel_event` is the token the runner races against its tick timer;
    `task` is the asyncio.Task executing the run (set right after scheduling).
    """

    run_id: int
    config: TaskConfig
    cancel_event: asyncio.Event = field(default_factory=asyncio.Event)
    task: asyncio.Task[RunOutcome] | None = None
    outcome: RunOutcome = RunOutcome.RUNNING

    @property
    def running(self) -> bool:
        return self.outcome == RunOutcome.RUNNING

    @property
    def cancel_requested(self) -> bool:
        return self.cancel_event.is_set()

    def cancel(self) -> None:
        """Request cancellation (idempotent)."""
        self.cancel_event.set()
