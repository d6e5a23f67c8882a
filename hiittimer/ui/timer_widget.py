"""Main timer card.

Layout (top → bottom):
    - Move / Rest / Reps inputs (editable only when idle)
    - Status word (READY, MOVE, REST, PAUSED, DONE!)
    - Seconds left in the current phase
    - "Rep n / N" (hidden while READY)
    - Progress through the current phase
    - Start/Pause button and Reset button
    - Total and remaining workout time
"""

from __future__ import annotations

from PyQt6.QtCore import Qt
from PyQt6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QGridLayout,
    QLabel, QPushButton, QSpinBox, QFrame, QProgressBar,
)

from ..timer.controller import WorkoutController
from ..timer.engine import (
    Configuration, Phase, Status, WorkoutState, phase_progress,
)
from .styles import background_for


MAX_INPUT = 3600  # one hour per phase / 3600 reps is plenty
PROGRESS_STEPS = 1000

PHASE_LABELS: dict[Phase, str] = {
    Phase.MOVE: "MOVE",
    Phase.REST: "REST",
}

STATUS_LABELS: dict[Status, str] = {
    Status.READY:  "READY",
    Status.PAUSED: "PAUSED",
    Status.DONE:   "DONE!",
}

BUTTON_TEXT: dict[Status, tuple[str, str]] = {
    # status → (label, stylesheet mode)
    Status.READY:   ("Start", "start"),
    Status.RUNNING: ("Pause", "pause"),
    Status.PAUSED:  ("Resume", "start"),
    Status.DONE:    ("New Workout", "restart"),
}


def format_time(seconds: int) -> str:
    """``mm:ss`` with both fields zero-padded."""
    minutes, secs = divmod(max(0, seconds), 60)
    return f"{minutes:02d}:{secs:02d}"


def status_text(state: WorkoutState) -> str:
    if state.status == Status.RUNNING:
        return PHASE_LABELS[state.phase]
    return STATUS_LABELS[state.status]


class TimerWidget(QWidget):
    """The interval timer card.  All state comes from the controller."""

    def __init__(
        self, controller: WorkoutController, parent: QWidget | None = None
    ) -> None:
        super().__init__(parent)
        self._controller = controller
        self._syncing_inputs = False
        self._build_ui()
        self._connect_signals()
        self._sync_inputs(controller.configuration)
        self._on_state_changed(controller.state)

    # ── build ─────────────────────────────────────────────────────────────

    def _build_ui(self) -> None:
        root = QVBoxLayout(self)
        root.setContentsMargins(0, 0, 0, 0)

        self._card = QFrame(self)
        self._card.setObjectName("card")
        root.addWidget(self._card)

        layout = QVBoxLayout(self._card)
        layout.setContentsMargins(24, 24, 24, 24)
        layout.setSpacing(18)
        layout.setAlignment(Qt.AlignmentFlag.AlignCenter)

        title = QLabel("HIIT Interval Timer", self._card)
        title.setAlignment(Qt.AlignmentFlag.AlignCenter)
        title.setStyleSheet("font-size: 24px; font-weight: 700;")
        layout.addWidget(title)

        # ── inputs ───────────────────────────────────────────────────
        inputs = QGridLayout()
        inputs.setHorizontalSpacing(18)
        self._move_spin = self._add_input(inputs, 0, "MOVE")
        self._rest_spin = self._add_input(inputs, 1, "REST")
        self._reps_spin = self._add_input(inputs, 2, "REPS")
        layout.addLayout(inputs)

        # ── display ──────────────────────────────────────────────────
        self._status_label = QLabel(self._card)
        self._status_label.setObjectName("statusLabel")
        self._status_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(self._status_label)

        self._time_label = QLabel(self._card)
        self._time_label.setObjectName("timeLabel")
        self._time_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(self._time_label)

        self._rep_label = QLabel(self._card)
        self._rep_label.setObjectName("repLabel")
        self._rep_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(self._rep_label)

        self._phase_bar = QProgressBar(self._card)
        self._phase_bar.setRange(0, PROGRESS_STEPS)
        self._phase_bar.setTextVisible(False)
        layout.addWidget(self._phase_bar)

        # ── controls ─────────────────────────────────────────────────
        self._start_pause_btn = QPushButton("Start", self._card)
        self._start_pause_btn.setObjectName("primaryButton")
        layout.addWidget(self._start_pause_btn)

        self._reset_btn = QPushButton("Reset", self._card)
        layout.addWidget(self._reset_btn)

        # ── totals ───────────────────────────────────────────────────
        totals = QHBoxLayout()
        self._total_label = QLabel(self._card)
        self._total_label.setObjectName("totalLabel")
        self._remaining_label = QLabel(self._card)
        self._remaining_label.setObjectName("totalLabel")
        totals.addWidget(self._total_label)
        totals.addStretch(1)
        totals.addWidget(self._remaining_label)
        layout.addLayout(totals)

    def _add_input(self, grid: QGridLayout, column: int, text: str) -> QSpinBox:
        label = QLabel(text, self._card)
        label.setObjectName("inputLabel")
        label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        spin = QSpinBox(self._card)
        spin.setRange(1, MAX_INPUT)
        spin.setAlignment(Qt.AlignmentFlag.AlignCenter)
        grid.addWidget(label, 0, column)
        grid.addWidget(spin, 1, column)
        return spin

    # ── signals ───────────────────────────────────────────────────────────

    def _connect_signals(self) -> None:
        self._start_pause_btn.clicked.connect(self._controller.toggle)
        self._reset_btn.clicked.connect(self._controller.reset)
        self._move_spin.valueChanged.connect(self._on_input_changed)
        self._rest_spin.valueChanged.connect(self._on_input_changed)
        self._reps_spin.valueChanged.connect(self._on_input_changed)

        self._controller.state_changed.connect(self._on_state_changed)
        self._controller.configuration_changed.connect(self._on_config_changed)

    # ── slots ─────────────────────────────────────────────────────────────

    def _on_input_changed(self, _value: int) -> None:
        if self._syncing_inputs:
            return
        accepted = self._controller.set_configuration(
            move_time=self._move_spin.value(),
            rest_time=self._rest_spin.value(),
            repetitions=self._reps_spin.value(),
        )
        if not accepted:
            self._sync_inputs(self._controller.configuration)

    def _on_config_changed(self, config: Configuration) -> None:
        self._sync_inputs(config)
        self._on_state_changed(self._controller.state)

    def _on_state_changed(self, state: WorkoutState) -> None:
        self._status_label.setText(status_text(state))
        self._time_label.setText(str(state.time_left))
        self._phase_bar.setValue(
            round(phase_progress(state, self._controller.configuration) * PROGRESS_STEPS)
        )

        config = self._controller.configuration
        self._rep_label.setText(f"Rep {state.current_rep} / {config.repetitions}")
        self._rep_label.setVisible(state.status != Status.READY)

        text, mode = BUTTON_TEXT[state.status]
        self._start_pause_btn.setText(text)
        if self._start_pause_btn.property("mode") != mode:
            self._start_pause_btn.setProperty("mode", mode)
            # Re-evaluate [mode="..."] selectors
            style = self._start_pause_btn.style()
            style.unpolish(self._start_pause_btn)
            style.polish(self._start_pause_btn)

        idle = self._controller.is_idle
        self._reset_btn.setEnabled(not idle)
        for spin in (self._move_spin, self._rest_spin, self._reps_spin):
            spin.setEnabled(idle)

        self._card.setStyleSheet(
            f"QFrame#card {{ background-color: {background_for(state)};"
            " border-radius: 12px; }"
        )
        self._refresh_totals()

    # ── helpers ───────────────────────────────────────────────────────────

    def _sync_inputs(self, config: Configuration) -> None:
        self._syncing_inputs = True
        try:
            for spin, value in (
                (self._move_spin, config.move_time),
                (self._rest_spin, config.rest_time),
                (self._reps_spin, config.repetitions),
            ):
                # Stored or programmatic values may exceed what the box offers.
                spin.setMaximum(max(MAX_INPUT, value))
                spin.setValue(value)
        finally:
            self._syncing_inputs = False

    def _refresh_totals(self) -> None:
        c = self._controller
        self._total_label.setText(
            f"Total Workout Time: {format_time(c.total_workout_time)}"
        )
        self._remaining_label.setText(
            f"Remaining: {format_time(c.remaining_workout_time)}"
        )
