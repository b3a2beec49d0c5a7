"""Workout state machine for SetTimer.

States
------
READY        Nothing running. Initial state, also reached via stop / reset.
EXERCISING   A set is in progress; elapsed time counts up.
RESTING      Between sets; elapsed time counts up, rest cue at 1:30.

Transitions
-----------
READY | RESTING → EXERCISING     (start_exercise, increments the set)
RESTING → EXERCISING             (start_next_set)
EXERCISING → RESTING             (complete_set)
Any → READY                      (stop keeps the set count, reset zeroes it)

Timekeeping
-----------
Elapsed time is never accumulated.  It is always ``clock() - start``, so
a late or suspended tick cannot make the display drift.  The 1 s QTimer
only wakes the engine up to re-check the cue thresholds and to emit
``tick`` for the display.
"""

from __future__ import annotations

import logging
import math
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Protocol

from PyQt6.QtCore import QObject, QTimer, pyqtSignal


logger = logging.getLogger(__name__)


# ── enums ─────────────────────────────────────────────────────────────────


class Phase(Enum):
    READY = "ready"
    EXERCISING = "exercising"
    RESTING = "resting"


class CueKind(Enum):
    START = "start"
    SUCCESS = "success"
    STOP = "stop"
    RESET = "reset"
    NOTIFICATION = "notification"
    PERIODIC_PULSE = "periodic_pulse"
    AUDIO_PULSE = "audio_pulse"


# ── constants ─────────────────────────────────────────────────────────────

TICK_INTERVAL_MS = 1000
REST_CUE_SECONDS = 90.0       # "time to go again" at 1:30 of rest
PULSE_INTERVAL_SECONDS = 30.0
AUDIO_INTERVAL_SECONDS = 60.0


# ── feedback sink ─────────────────────────────────────────────────────────


class FeedbackSink(Protocol):
    """Anything that can turn a cue into a sound, a buzz or a banner."""

    def play_cue(self, kind: CueKind) -> None: ...


@dataclass(frozen=True)
class WorkoutSnapshot:
    """Everything a renderer needs, read against a single clock sample."""

    phase: Phase
    current_set: int
    elapsed: float
    audio_enabled: bool
    rest_cue_fired: bool


def _next_boundary(elapsed: float, interval: float) -> float:
    """First multiple of *interval* strictly after *elapsed*."""
    return (math.floor(elapsed / interval) + 1) * interval


# ── engine ────────────────────────────────────────────────────────────────


class WorkoutEngine(QObject):
    """Set counter + exercise/rest timer with scheduled feedback cues.

    Signals
    -------
    phase_changed(phase: Phase)
        Emitted on every phase transition.
    set_changed(current_set: int)
        Emitted when the set counter moves (start of a set, reset).
    audio_changed(enabled: bool)
        Emitted by ``toggle_audio``.
    tick(elapsed_seconds: float)
        Emitted once a second while a phase is active.
    cue_emitted(kind: CueKind)
        Emitted for every cue, after it has been handed to the sink.
    """

    phase_changed = pyqtSignal(object)
    set_changed = pyqtSignal(int)
    audio_changed = pyqtSignal(bool)
    tick = pyqtSignal(float)
    cue_emitted = pyqtSignal(object)

    def __init__(
        self,
        parent: QObject | None = None,
        *,
        feedback: FeedbackSink | None = None,
        clock: Callable[[], float] = time.time,
        audio_enabled: bool = True,
    ) -> None:
        super().__init__(parent)

        self._feedback = feedback
        self._clock = clock

        # ── session state ─────────────────────────────────────────────
        self._phase: Phase = Phase.READY
        self._current_set: int = 0
        self._phase_started_at: float | None = None
        self._audio_enabled: bool = audio_enabled
        self._rest_cue_fired: bool = False

        # ── cue schedule (elapsed-time thresholds, None = disarmed) ──
        self._next_pulse_at: float | None = None
        self._next_audio_at: float | None = None
        self._schedule_epoch: int = 0  # bumped whenever the schedule is torn down

        # ── Qt timer ──────────────────────────────────────────────────
        self._qt_timer = QTimer(self)
        self._qt_timer.setInterval(TICK_INTERVAL_MS)
        self._qt_timer.timeout.connect(self._on_tick)

    # ══════════════════════════════════════════════════════════════════
    #  PUBLIC PROPERTIES
    # ══════════════════════════════════════════════════════════════════

    @property
    def phase(self) -> Phase:
        return self._phase

    @property
    def current_set(self) -> int:
        return self._current_set

    @property
    def phase_started_at(self) -> float | None:
        """Clock reading when the current phase began (None when READY)."""
        return self._phase_started_at

    @property
    def elapsed(self) -> float:
        """Seconds spent in the current phase, recomputed on every read."""
        return self._elapsed_at(self._clock())

    @property
    def audio_enabled(self) -> bool:
        return self._audio_enabled

    @property
    def rest_cue_fired(self) -> bool:
        return self._rest_cue_fired

    @property
    def is_active(self) -> bool:
        """True while exercising or resting."""
        return self._phase in (Phase.EXERCISING, Phase.RESTING)

    @property
    def feedback(self) -> FeedbackSink | None:
        return self._feedback

    @feedback.setter
    def feedback(self, sink: FeedbackSink | None) -> None:
        self._feedback = sink

    # ── action availability (mirrors the guards below) ────────────────

    @property
    def can_start_exercise(self) -> bool:
        """True whenever ``start_exercise()`` would begin a set.

        That includes RESTING, where it behaves like ``start_next_set()``.
        """
        return self._phase != Phase.EXERCISING

    @property
    def can_complete_set(self) -> bool:
        return self._phase == Phase.EXERCISING

    @property
    def can_start_next_set(self) -> bool:
        return self._phase == Phase.RESTING

    @property
    def can_reset(self) -> bool:
        return self._current_set > 0

    @property
    def can_stop(self) -> bool:
        return self.is_active

    def snapshot(self) -> WorkoutSnapshot:
        return WorkoutSnapshot(
            phase=self._phase,
            current_set=self._current_set,
            elapsed=self.elapsed,
            audio_enabled=self._audio_enabled,
            rest_cue_fired=self._rest_cue_fired,
        )

    # ══════════════════════════════════════════════════════════════════
    #  CONTROLS
    # ══════════════════════════════════════════════════════════════════

    def start_exercise(self) -> None:
        """Begin a new set.  No-op while a set is already running."""
        if self._phase == Phase.EXERCISING:
            return
        self._begin_exercise()

    def complete_set(self) -> None:
        """Finish the running set and start resting."""
        if self._phase != Phase.EXERCISING:
            return
        self._cancel_schedule()
        self._rest_cue_fired = False
        self._enter_phase(Phase.RESTING)
        self._play(CueKind.SUCCESS)

    def start_next_set(self) -> None:
        """Go straight from resting into the next set."""
        if self._phase != Phase.RESTING:
            return
        self._begin_exercise()

    def reset(self) -> None:
        """New exercise: back to READY with the set counter at zero."""
        self._cancel_schedule()
        self._phase_started_at = None
        self._rest_cue_fired = False
        self._set_phase(Phase.READY)
        if self._current_set != 0:
            self._current_set = 0
            self.set_changed.emit(0)
        self._play(CueKind.RESET)

    def stop(self) -> None:
        """Halt the current phase.  The set counter is kept."""
        self._cancel_schedule()
        self._phase_started_at = None
        self._rest_cue_fired = False
        self._set_phase(Phase.READY)
        self._play(CueKind.STOP)

    def toggle_audio(self) -> None:
        """Flip the minute-by-minute audio cue on or off."""
        self._audio_enabled = not self._audio_enabled
        if self._audio_enabled and self.is_active:
            # Resume on the next boundary; missed minutes are not replayed.
            self._next_audio_at = _next_boundary(
                self.elapsed, AUDIO_INTERVAL_SECONDS,
            )
        else:
            self._next_audio_at = None
        logger.debug("Audio cues %s", "on" if self._audio_enabled else "off")
        self.audio_changed.emit(self._audio_enabled)

    # ══════════════════════════════════════════════════════════════════
    #  INTERNAL: phase mechanics
    # ══════════════════════════════════════════════════════════════════

    def _begin_exercise(self) -> None:
        self._cancel_schedule()
        self._current_set += 1
        self._rest_cue_fired = False
        self._enter_phase(Phase.EXERCISING)
        self.set_changed.emit(self._current_set)
        self._play(CueKind.START)

    def _enter_phase(self, phase: Phase) -> None:
        self._phase_started_at = self._clock()
        self._next_pulse_at = PULSE_INTERVAL_SECONDS
        self._next_audio_at = (
            AUDIO_INTERVAL_SECONDS if self._audio_enabled else None
        )
        self._set_phase(phase)
        self._qt_timer.start()

    def _cancel_schedule(self) -> None:
        self._qt_timer.stop()
        self._schedule_epoch += 1
        self._next_pulse_at = None
        self._next_audio_at = None

    def _set_phase(self, phase: Phase) -> None:
        if phase == self._phase:
            return
        self._phase = phase
        logger.debug("Phase -> %s (set %d)", phase.value, self._current_set)
        self.phase_changed.emit(phase)

    def _elapsed_at(self, now: float) -> float:
        if self._phase_started_at is None:
            return 0.0
        # A wall clock may be stepped backwards.
        return max(0.0, now - self._phase_started_at)

    # ══════════════════════════════════════════════════════════════════
    #  INTERNAL: tick & cue scheduling
    # ══════════════════════════════════════════════════════════════════

    def _on_tick(self) -> None:
        if not self.is_active:
            return  # stale timeout delivered after a stop

        epoch = self._schedule_epoch
        elapsed = self._elapsed_at(self._clock())
        self.tick.emit(elapsed)
        if self._schedule_epoch != epoch:
            return  # a tick observer already moved us to a new schedule

        due: list[CueKind] = []

        if (
            self._phase == Phase.RESTING
            and not self._rest_cue_fired
            and elapsed >= REST_CUE_SECONDS
        ):
            self._rest_cue_fired = True
            due.append(CueKind.NOTIFICATION)

        if self._next_pulse_at is not None and elapsed >= self._next_pulse_at:
            self._next_pulse_at = _next_boundary(elapsed, PULSE_INTERVAL_SECONDS)
            due.append(CueKind.PERIODIC_PULSE)

        if self._next_audio_at is not None and elapsed >= self._next_audio_at:
            self._next_audio_at = _next_boundary(elapsed, AUDIO_INTERVAL_SECONDS)
            due.append(CueKind.AUDIO_PULSE)

        for kind in due:
            # An observer may have stopped or advanced us mid-tick.
            if self._schedule_epoch != epoch:
                break
            self._play(kind)

    def _play(self, kind: CueKind) -> None:
        if self._feedback is not None:
            try:
                self._feedback.play_cue(kind)
            except Exception:
                logger.exception("Feedback sink failed to play %s", kind.value)
        self.cue_emitted.emit(kind)
