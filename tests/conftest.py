"""Shared pytest fixtures for SetTimer tests."""

import os
import sys
import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from PyQt6.QtWidgets import QApplication

from settimer.timer.engine import WorkoutEngine

from helpers import FakeClock, RecordingSink


@pytest.fixture(scope="session")
def qapp():
    """A single QApplication instance shared across the entire test run."""
    app = QApplication.instance() or QApplication(sys.argv)
    yield app


@pytest.fixture(autouse=True)
def app_dirs(tmp_path, monkeypatch):
    """Keep settings and the sound cache out of the real home directory."""
    monkeypatch.setattr("settimer.settings.APP_SUPPORT_DIR", tmp_path)
    monkeypatch.setattr("settimer.settings.SETTINGS_PATH", tmp_path / "settings.json")
    monkeypatch.setattr("settimer.audio.sounds.SOUNDS_DIR", tmp_path / "sounds")
    yield tmp_path


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def sink():
    return RecordingSink()


@pytest.fixture
def engine(qapp, clock, sink):
    """Fresh WorkoutEngine on a fake clock, audio cues ON."""
    return WorkoutEngine(parent=None, feedback=sink, clock=clock)


@pytest.fixture
def engine_muted(qapp, clock, sink):
    """Fresh WorkoutEngine with the minute audio cue OFF."""
    return WorkoutEngine(parent=None, feedback=sink, clock=clock, audio_enabled=False)
