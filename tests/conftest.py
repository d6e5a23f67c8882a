"""Shared pytest fixtures for HIIT Timer tests."""

import os
import sys

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest

from PyQt6.QtWidgets import QApplication

from hiittimer.timer.controller import WorkoutController
from hiittimer.timer.engine import Configuration

from helpers import FakeClock, RecordingSink, DeferredSink


@pytest.fixture(scope="session")
def qapp():
    """A single QApplication instance shared across the entire test run."""
    app = QApplication.instance() or QApplication(sys.argv)
    yield app


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch):
    """Keep every test away from the real settings file."""
    path = tmp_path / "settings.json"
    monkeypatch.setattr("hiittimer.settings.SETTINGS_PATH", path)
    yield path


@pytest.fixture
def sink():
    return RecordingSink()


@pytest.fixture
def deferred_sink():
    return DeferredSink()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def small_config():
    """move 3 s, rest 2 s, 2 reps → 8 s total."""
    return Configuration(move_time=3, rest_time=2, repetitions=2)


@pytest.fixture
def controller(qapp, sink, clock, small_config):
    """Controller over the 3/2/2 workout with an instant sink."""
    return WorkoutController(sink, clock=clock, config=small_config)


@pytest.fixture
def slow_controller(qapp, deferred_sink, clock, small_config):
    """Controller whose sink only completes on ``deferred_sink.complete()``."""
    return WorkoutController(deferred_sink, clock=clock, config=small_config)
