"""Main workout card.

Layout (top → bottom):
    - Primary action (one of Start Set / Complete Set / Start Next Set)
    - Secondary row: New Exercise + audio toggle
    - Set counter beside the phase caption and elapsed time
    - Stop (only while a phase is running)
"""

from __future__ import annotations

from PyQt6.QtCore import Qt
from PyQt6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout,
    QLabel, QPushButton, QFrame,
)

from ..timer.engine import WorkoutEngine, Phase
from .styles import phase_color


PHASE_LABELS: dict[Phase, str] = {
    Phase.READY:      "READY",
    Phase.EXERCISING: "EXERCISE",
    Phase.RESTING:    "REST",
}

AUDIO_ON_TEXT = "\U0001F50A"
AUDIO_OFF_TEXT = "\U0001F507"


def format_elapsed(seconds: float) -> str:
    """Whole seconds as ``MM:SS``."""
    minutes, secs = divmod(int(max(0.0, seconds)), 60)
    return f"{minutes:02d}:{secs:02d}"


class WorkoutWidget(QWidget):
    """Renders a ``WorkoutEngine`` and forwards button presses to it."""

    def __init__(self, engine: WorkoutEngine, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self._engine = engine
        self._build_ui()
        self._connect_signals()
        self._refresh_all()

    # ── build ─────────────────────────────────────────────────────────────

    def _build_ui(self) -> None:
        root = QVBoxLayout(self)
        root.setContentsMargins(16, 16, 16, 16)
        root.setSpacing(10)

        # ── primary action ───────────────────────────────────────────
        self._start_btn = QPushButton("Start Set", self)
        self._start_btn.setObjectName("startButton")

        self._complete_btn = QPushButton("Complete Set", self)
        self._complete_btn.setObjectName("completeButton")

        self._next_btn = QPushButton("Start Next Set", self)
        self._next_btn.setObjectName("nextSetButton")

        for btn in (self._start_btn, self._complete_btn, self._next_btn):
            root.addWidget(btn)

        # ── secondary row ────────────────────────────────────────────
        secondary = QHBoxLayout()
        secondary.setSpacing(8)
        secondary.setAlignment(Qt.AlignmentFlag.AlignCenter)

        self._reset_btn = QPushButton("New Exercise", self)
        self._reset_btn.setObjectName("dangerButton")

        self._audio_btn = QPushButton(AUDIO_ON_TEXT, self)
        self._audio_btn.setObjectName("secondaryButton")
        self._audio_btn.setToolTip("Minute audio cue")

        secondary.addWidget(self._reset_btn)
        secondary.addWidget(self._audio_btn)
        root.addLayout(secondary)

        divider = QFrame(self)
        divider.setObjectName("divider")
        divider.setFrameShape(QFrame.Shape.HLine)
        root.addWidget(divider)

        # ── set counter + timer, side by side ────────────────────────
        readout = QHBoxLayout()
        readout.setSpacing(16)

        set_col = QVBoxLayout()
        set_col.setSpacing(2)
        set_caption = QLabel("SET", self)
        set_caption.setObjectName("caption")
        set_caption.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self._set_label = QLabel("0", self)
        self._set_label.setObjectName("setCounter")
        self._set_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        set_col.addWidget(set_caption)
        set_col.addWidget(self._set_label)

        time_col = QVBoxLayout()
        time_col.setSpacing(2)
        self._phase_label = QLabel(PHASE_LABELS[Phase.READY], self)
        self._phase_label.setObjectName("caption")
        self._phase_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self._time_label = QLabel("--:--", self)
        self._time_label.setObjectName("timeLabel")
        self._time_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        time_col.addWidget(self._phase_label)
        time_col.addWidget(self._time_label)

        readout.addLayout(set_col, 1)
        readout.addLayout(time_col, 1)
        root.addLayout(readout)

        # ── stop (below the timer while active) ──────────────────────
        self._stop_btn = QPushButton("Stop", self)
        self._stop_btn.setObjectName("stopButton")
        root.addWidget(self._stop_btn, alignment=Qt.AlignmentFlag.AlignCenter)

        root.addStretch(1)

    # ── signals ───────────────────────────────────────────────────────────

    def _connect_signals(self) -> None:
        self._start_btn.clicked.connect(self._engine.start_exercise)
        self._complete_btn.clicked.connect(self._engine.complete_set)
        self._next_btn.clicked.connect(self._engine.start_next_set)
        self._reset_btn.clicked.connect(self._engine.reset)
        self._stop_btn.clicked.connect(self._engine.stop)
        self._audio_btn.clicked.connect(self._engine.toggle_audio)

        self._engine.phase_changed.connect(self._on_phase_changed)
        self._engine.set_changed.connect(self._on_set_changed)
        self._engine.audio_changed.connect(self._on_audio_changed)
        self._engine.tick.connect(self._refresh_time)

    # ── slots ─────────────────────────────────────────────────────────────

    def _on_phase_changed(self, phase: Phase) -> None:
        color = phase_color(phase)
        self._phase_label.setText(PHASE_LABELS[phase])
        self._phase_label.setStyleSheet(f"color: {color};")
        self._time_label.setStyleSheet(f"color: {color};")
        self._refresh_time(self._engine.elapsed)
        self._update_button_visibility()

    def _on_set_changed(self, current_set: int) -> None:
        self._set_label.setText(str(current_set))
        self._update_button_visibility()

    def _on_audio_changed(self, enabled: bool) -> None:
        self._audio_btn.setText(AUDIO_ON_TEXT if enabled else AUDIO_OFF_TEXT)

    def _refresh_time(self, elapsed: float) -> None:
        if self._engine.is_active:
            self._time_label.setText(format_elapsed(elapsed))
        else:
            self._time_label.setText("--:--")

    def _refresh_all(self) -> None:
        self._on_set_changed(self._engine.current_set)
        self._on_audio_changed(self._engine.audio_enabled)
        self._on_phase_changed(self._engine.phase)

    def _update_button_visibility(self) -> None:
        """Offer exactly the actions the engine would act on right now."""
        e = self._engine
        # One primary button per phase: resting offers "Start Next Set" only.
        self._start_btn.setVisible(e.can_start_exercise and e.phase == Phase.READY)
        self._complete_btn.setVisible(e.can_complete_set)
        self._next_btn.setVisible(e.can_start_next_set)
        self._reset_btn.setVisible(e.can_reset)
        self._stop_btn.setVisible(e.can_stop)
