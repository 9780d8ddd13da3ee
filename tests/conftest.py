# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from taskpulse.cli.bootstrap import create_initial_state
from taskpulse.core.state import AppState

from .fakes import FakeConsoleView, FakePresenter

TICK = 0.02


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with bootstrap and the controller.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated from the environment.
    """
    return SimpleNamespace(
        app_name="taskpulse-test",
        log_level="DEBUG",
        data_dir=tmp_path / "data",
        tick_seconds=TICK,
        default_iterations=4,
        count_field="count",
        console_enabled=False,
    )


@pytest.fixture()
def presenter() -> FakePresenter:
    return FakePresenter()


@pytest.fixture()
def view() -> FakeConsoleView:
    return FakeConsoleView()


@pytest.fixture()
def state(settings: SimpleNamespace, presenter: FakePresenter, view: FakeConsoleView) -> AppState:
    """AppState wired with recording fakes for both host collaborators."""
    return create_initial_state(presenter=presenter, view=view, settings=settings)
