"""Main application window for HIIT Timer."""

from __future__ import annotations

import logging

from PyQt6.QtGui import QCloseEvent
from PyQt6.QtWidgets import QMainWindow, QStatusBar

from .audio.sounds import SoundManager
from .settings import Settings, load_settings, save_settings
from .timer.controller import ClockSource, NotificationSink, WorkoutController
from .timer.engine import Configuration, Phase, Status, WorkoutState
from .ui.styles import build_stylesheet
from .ui.timer_widget import TimerWidget

logger = logging.getLogger(__name__)


STATUS_MESSAGES: dict[Status, str] = {
    Status.READY:  "Set your intervals and press Start",
    Status.PAUSED: "Paused — press Resume to continue",
    Status.DONE:   "Workout complete!",
}

PHASE_MESSAGES: dict[Phase, str] = {
    Phase.MOVE: "Move!",
    Phase.REST: "Rest — breathe",
}


class HIITTimerApp(QMainWindow):
    """Main application window."""

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        sink: NotificationSink | None = None,
        clock: ClockSource | None = None,
    ) -> None:
        super().__init__()
        self.setWindowTitle("HIIT Timer")
        self.setMinimumSize(380, 640)

        # ── settings ──────────────────────────────────────────────────
        self._settings: Settings = settings or load_settings()
        self.resize(self._settings.window_width, self._settings.window_height)

        # ── audio ─────────────────────────────────────────────────────
        if sink is None:
            sound_manager = SoundManager(parent=self)
            sound_manager.set_volume(self._settings.sound_volume)
            sound_manager.set_enabled(self._settings.sound_enabled)
            sink = sound_manager
        self._sink = sink

        # ── controller ────────────────────────────────────────────────
        self._controller = WorkoutController(
            self._sink,
            self,
            clock=clock,
            config=self._settings.configuration(),
        )
        self._controller.state_changed.connect(self._on_state_changed)
        self._controller.configuration_changed.connect(self._on_config_changed)

        # ── UI ────────────────────────────────────────────────────────
        self.setStyleSheet(build_stylesheet())
        self._timer_widget = TimerWidget(self._controller, self)
        self.setCentralWidget(self._timer_widget)

        self._status_bar = QStatusBar(self)
        self.setStatusBar(self._status_bar)
        self._on_state_changed(self._controller.state)

    @property
    def controller(self) -> WorkoutController:
        return self._controller

    @property
    def settings(self) -> Settings:
        return self._settings

    # ══════════════════════════════════════════════════════════════════
    #  CONTROLLER SIGNALS
    # ══════════════════════════════════════════════════════════════════

    def _on_state_changed(self, state: WorkoutState) -> None:
        if state.status == Status.RUNNING:
            message = PHASE_MESSAGES[state.phase]
        else:
            message = STATUS_MESSAGES[state.status]
        self._status_bar.showMessage(message)

    def _on_config_changed(self, config: Configuration) -> None:
        self._settings.update_configuration(config)
        self._save_settings()

    # ══════════════════════════════════════════════════════════════════
    #  PERSISTENCE
    # ══════════════════════════════════════════════════════════════════

    def _save_settings(self) -> None:
        try:
            save_settings(self._settings)
        except OSError:
            logger.warning("Could not save settings", exc_info=True)

    def closeEvent(self, event: QCloseEvent) -> None:  # noqa: N802
        self._controller.reset()
        size = self.size()
        self._settings.window_width = size.width()
        self._settings.window_height = size.height()
        self._save_settings()
        super().closeEvent(event)
