"""Main application window for SetTimer."""

from __future__ import annotations

from PyQt6.QtCore import Qt, QTimer
from PyQt6.QtGui import QAction, QKeySequence
from PyQt6.QtWidgets import QMainWindow, QMessageBox

from .timer.engine import WorkoutEngine, Phase, CueKind
from .ui.workout_widget import WorkoutWidget
from .ui.styles import build_stylesheet
from .settings import Settings, load_settings, save_settings
from .audio.sounds import SoundManager


STATUS_MESSAGES: dict[Phase, str] = {
    Phase.READY:      "Ready when you are",
    Phase.EXERCISING: "Set in progress",
    Phase.RESTING:    "Resting",
}


class SetTimerApp(QMainWindow):
    """Main application window."""

    def __init__(self) -> None:
        super().__init__()
        self.setWindowTitle("SetTimer")
        self.setMinimumSize(300, 360)

        self._geometry_save_timer = QTimer(self)
        self._geometry_save_timer.setSingleShot(True)
        self._geometry_save_timer.setInterval(500)
        self._geometry_save_timer.timeout.connect(self._save_geometry)

        # ── settings ──────────────────────────────────────────────────
        self._settings: Settings = load_settings()

        # ── sound manager (the engine's feedback sink) ────────────────
        self._sound_manager = SoundManager(parent=self)
        self._sound_manager.set_volume(self._settings.sound_volume)
        self._sound_manager.set_enabled(self._settings.sound_enabled)

        # ── engine ────────────────────────────────────────────────────
        self._engine = WorkoutEngine(
            self,
            feedback=self._sound_manager,
            audio_enabled=self._settings.audio_cues_default,
        )
        self._engine.phase_changed.connect(self._on_phase_changed)
        self._engine.set_changed.connect(lambda _n: self._update_actions())
        self._engine.cue_emitted.connect(self._on_cue)

        # ── UI ────────────────────────────────────────────────────────
        self._workout_widget = WorkoutWidget(self._engine, self)
        self.setCentralWidget(self._workout_widget)
        self.setStyleSheet(build_stylesheet())

        self._status_bar = self.statusBar()
        self._status_bar.showMessage(STATUS_MESSAGES[Phase.READY])

        self._build_menu_bar()
        self._restore_geometry()
        if self._settings.always_on_top:
            self.setWindowFlag(Qt.WindowType.WindowStaysOnTopHint, True)

    # ══════════════════════════════════════════════════════════════════
    #  MENU BAR
    # ══════════════════════════════════════════════════════════════════

    def _build_menu_bar(self) -> None:
        menu_bar = self.menuBar()

        # ── SetTimer menu (About, Quit: macOS roles) ─────────────────
        about_action = QAction("About SetTimer", self)
        about_action.setMenuRole(QAction.MenuRole.AboutRole)
        about_action.triggered.connect(self._show_about)

        quit_action = QAction("Quit SetTimer", self)
        quit_action.setMenuRole(QAction.MenuRole.QuitRole)
        quit_action.setShortcut(QKeySequence("Ctrl+Q"))
        quit_action.triggered.connect(self._quit_with_confirm)

        app_menu = menu_bar.addMenu("SetTimer")
        app_menu.addAction(about_action)
        app_menu.addAction(quit_action)

        # ── Workout menu (the whole engine surface) ──────────────────
        workout_menu = menu_bar.addMenu("Workout")

        self._start_action = QAction("Start Set", self)
        self._start_action.triggered.connect(self._engine.start_exercise)
        self._complete_action = QAction("Complete Set", self)
        self._complete_action.triggered.connect(self._engine.complete_set)
        self._next_action = QAction("Start Next Set", self)
        self._next_action.triggered.connect(self._engine.start_next_set)
        self._stop_action = QAction("Stop", self)
        self._stop_action.triggered.connect(self._engine.stop)

        self._reset_action = QAction("New Exercise", self)
        self._reset_action.setShortcut(QKeySequence("Ctrl+N"))
        self._reset_action.triggered.connect(self._engine.reset)

        self._audio_action = QAction("Audio Cues", self)
        self._audio_action.setCheckable(True)
        self._audio_action.setChecked(self._engine.audio_enabled)
        self._audio_action.setShortcut(QKeySequence("Ctrl+M"))
        self._audio_action.triggered.connect(self._engine.toggle_audio)
        self._engine.audio_changed.connect(self._audio_action.setChecked)

        for action in (
            self._start_action, self._complete_action,
            self._next_action, self._stop_action,
        ):
            workout_menu.addAction(action)
        workout_menu.addSeparator()
        workout_menu.addAction(self._reset_action)
        workout_menu.addAction(self._audio_action)
        self._update_actions()

        # ── View menu ────────────────────────────────────────────────
        view_menu = menu_bar.addMenu("View")

        self._aot_action = QAction("Always on Top", self)
        self._aot_action.setCheckable(True)
        self._aot_action.setChecked(self._settings.always_on_top)
        self._aot_action.triggered.connect(self._toggle_always_on_top)
        view_menu.addAction(self._aot_action)

    def _update_actions(self) -> None:
        e = self._engine
        self._start_action.setEnabled(e.can_start_exercise and e.phase == Phase.READY)
        self._complete_action.setEnabled(e.can_complete_set)
        self._next_action.setEnabled(e.can_start_next_set)
        self._stop_action.setEnabled(e.can_stop)
        self._reset_action.setEnabled(e.can_reset)

    def _show_about(self) -> None:
        QMessageBox.about(
            self,
            "About SetTimer",
            "<h3>SetTimer</h3>"
            "<p>Counts your sets and times each set and rest.</p>"
            "<p>A tap every 30 seconds, an optional beep every minute, "
            "and a bell once you've rested for 1:30.</p>",
        )

    # ══════════════════════════════════════════════════════════════════
    #  ENGINE SIGNALS
    # ══════════════════════════════════════════════════════════════════

    def _on_phase_changed(self, phase: Phase) -> None:
        self._status_bar.showMessage(STATUS_MESSAGES[phase])
        self._update_actions()

    def _on_cue(self, kind: CueKind) -> None:
        if kind == CueKind.NOTIFICATION:
            self._status_bar.showMessage("Rested 1:30, ready for the next set")

    # ══════════════════════════════════════════════════════════════════
    #  WINDOW STATE (geometry, always-on-top)
    # ══════════════════════════════════════════════════════════════════

    def _restore_geometry(self) -> None:
        """Restore window position and size from settings."""
        s = self._settings
        if s.window_x is not None and s.window_y is not None:
            self.move(s.window_x, s.window_y)
        if s.window_width and s.window_height:
            self.resize(s.window_width, s.window_height)

    def _save_geometry(self) -> None:
        """Persist current window geometry to settings."""
        if not self.isVisible():
            return
        pos = self.pos()
        size = self.size()
        self._settings.window_x = pos.x()
        self._settings.window_y = pos.y()
        self._settings.window_width = size.width()
        self._settings.window_height = size.height()
        save_settings(self._settings)

    def _schedule_geometry_save(self) -> None:
        """Debounce geometry saves: restart 500ms timer on each move/resize."""
        if hasattr(self, "_geometry_save_timer"):
            self._geometry_save_timer.start()

    def _toggle_always_on_top(self) -> None:
        new_val = not self._settings.always_on_top
        self._settings.always_on_top = new_val
        save_settings(self._settings)
        self._aot_action.setChecked(new_val)
        self.setWindowFlag(Qt.WindowType.WindowStaysOnTopHint, new_val)
        self.show()  # setWindowFlag hides the window

    def _quit_with_confirm(self) -> None:
        """Quit, but ask first if a set or rest is being timed."""
        if self._engine.is_active:
            reply = QMessageBox.question(
                self,
                "Quit SetTimer?",
                "A timer is still running. Quit anyway?",
                QMessageBox.StandardButton.Yes | QMessageBox.StandardButton.No,
                QMessageBox.StandardButton.No,
            )
            if reply != QMessageBox.StandardButton.Yes:
                return
        self.close()

    # ══════════════════════════════════════════════════════════════════
    #  KEYBOARD
    # ══════════════════════════════════════════════════════════════════

    def _on_space(self) -> None:
        """Run whichever primary action the current phase offers."""
        phase = self._engine.phase
        if phase == Phase.READY:
            self._engine.start_exercise()
        elif phase == Phase.EXERCISING:
            self._engine.complete_set()
        else:
            self._engine.start_next_set()

    def _on_escape(self) -> None:
        """Stop the running phase (no-op when ready)."""
        if self._engine.is_active:
            self._engine.stop()

    # ══════════════════════════════════════════════════════════════════
    #  WINDOW EVENTS
    # ══════════════════════════════════════════════════════════════════

    def closeEvent(self, event) -> None:  # type: ignore[override]
        self._save_geometry()
        event.accept()

    def resizeEvent(self, event) -> None:  # type: ignore[override]
        super().resizeEvent(event)
        self._schedule_geometry_save()

    def moveEvent(self, event) -> None:  # type: ignore[override]
        super().moveEvent(event)
        self._schedule_geometry_save()

    def keyPressEvent(self, event) -> None:  # type: ignore[override]
        """Handle Space (primary action) and Escape (stop) globally."""
        key = event.key()
        if key == Qt.Key.Key_Space and not event.modifiers():
            self._on_space()
            event.accept()
            return
        if key == Qt.Key.Key_Escape:
            self._on_escape()
            event.accept()
            return
        super().keyPressEvent(event)
