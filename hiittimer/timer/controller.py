"""Workout controller: owns the live state, the 1 s clock and cue dispatch.

Transitions
-----------
READY   → RUNNING            (start, once the sink is ready; MOVE_START cue)
RUNNING → PAUSED             (pause; clock stops)
PAUSED  → RUNNING            (start; no cue, no reset)
RUNNING → DONE               (tick past the last Move second; clock stops)
DONE    → RUNNING            (start; implicit reset first)
Any     → READY              (reset)

Everything else is a logged no-op.  The controller is single-threaded:
ticks, commands and cue dispatch all run on the Qt event loop, so there
is nothing to lock.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import replace
from typing import Protocol

from PyQt6.QtCore import QObject, QTimer, pyqtSignal

from .engine import (
    Configuration,
    Cue,
    IDLE_STATUSES,
    Status,
    WorkoutState,
    remaining_workout_time,
    tick,
)

logger = logging.getLogger(__name__)

TICK_INTERVAL_MS = 1000


# ── collaborators ─────────────────────────────────────────────────────────


class NotificationSink(Protocol):
    """Where cues go.  Must always call *on_ready*, even if audio fails."""

    def ensure_ready(self, on_ready: Callable[[], None]) -> None: ...

    def notify(self, cue: Cue) -> None: ...


class ClockSource(Protocol):
    """Periodic 1 Hz driver.  ``arm``/``disarm`` are idempotent."""

    @property
    def armed(self) -> bool: ...

    def bind(self, callback: Callable[[], None]) -> None: ...

    def arm(self) -> None: ...

    def disarm(self) -> None: ...


class QtClock(QObject):
    """``ClockSource`` backed by a single repeating ``QTimer``."""

    def __init__(
        self, parent: QObject | None = None, *, interval_ms: int = TICK_INTERVAL_MS
    ) -> None:
        super().__init__(parent)
        self._callback: Callable[[], None] | None = None
        self._timer = QTimer(self)
        self._timer.setInterval(interval_ms)
        self._timer.timeout.connect(self._on_timeout)

    @property
    def armed(self) -> bool:
        return self._timer.isActive()

    def bind(self, callback: Callable[[], None]) -> None:
        self._callback = callback

    def arm(self) -> None:
        if not self._timer.isActive():
            self._timer.start()

    def disarm(self) -> None:
        self._timer.stop()

    def _on_timeout(self) -> None:
        if self._callback is not None:
            self._callback()


# ── controller ────────────────────────────────────────────────────────────


class WorkoutController(QObject):
    """Command surface for the interval timer.

    Signals
    -------
    state_changed(state: WorkoutState)
        Emitted after every applied state, including each tick.
    cue_emitted(cue: Cue)
        Emitted after a cue has been handed to the sink.
    configuration_changed(config: Configuration)
        Emitted after an accepted ``set_configuration``.
    """

    state_changed = pyqtSignal(object)
    cue_emitted = pyqtSignal(object)
    configuration_changed = pyqtSignal(object)

    def __init__(
        self,
        sink: NotificationSink,
        parent: QObject | None = None,
        *,
        clock: ClockSource | None = None,
        config: Configuration | None = None,
    ) -> None:
        super().__init__(parent)
        self._sink = sink
        self._config: Configuration = config or Configuration()
        self._state: WorkoutState = WorkoutState.initial(self._config)

        # Bumped by every start request and every reset; a sink completion
        # only applies if its token is still current.
        self._start_token: int = 0
        self._start_pending: bool = False

        self._clock: ClockSource = clock if clock is not None else QtClock(self)
        self._clock.bind(self.clock_tick)

    # ══════════════════════════════════════════════════════════════════
    #  PUBLIC PROPERTIES
    # ══════════════════════════════════════════════════════════════════

    @property
    def state(self) -> WorkoutState:
        return self._state

    @property
    def configuration(self) -> Configuration:
        return self._config

    @property
    def status(self) -> Status:
        return self._state.status

    @property
    def is_running(self) -> bool:
        return self._state.status == Status.RUNNING

    @property
    def is_idle(self) -> bool:
        """True when the configuration may be edited (READY or DONE)."""
        return self._state.status in IDLE_STATUSES

    @property
    def start_pending(self) -> bool:
        """True while waiting for the sink to finish ``ensure_ready``."""
        return self._start_pending

    @property
    def total_workout_time(self) -> int:
        return self._config.total_time

    @property
    def remaining_workout_time(self) -> int:
        return remaining_workout_time(self._state, self._config)

    # ══════════════════════════════════════════════════════════════════
    #  COMMANDS
    # ══════════════════════════════════════════════════════════════════

    def start(self) -> None:
        """Start, resume or restart once the sink reports ready."""
        if self._state.status == Status.RUNNING:
            logger.debug("start ignored: already running")
            return
        if self._start_pending:
            logger.debug("start ignored: waiting for notification sink")
            return

        self._start_token += 1
        token = self._start_token
        self._start_pending = True
        try:
            self._sink.ensure_ready(lambda: self._on_sink_ready(token))
        except Exception:
            logger.warning(
                "Notification sink failed to get ready; starting without cues",
                exc_info=True,
            )
            # The sink may have completed before raising.
            if token == self._start_token and self._start_pending:
                self._on_sink_ready(token)

    def pause(self) -> None:
        if self._state.status != Status.RUNNING:
            logger.debug("pause ignored: status is %s", self._state.status.value)
            return
        self._clock.disarm()
        self._set_state(_with_status(self._state, Status.PAUSED))
        logger.info(
            "Paused at rep %d, %ds left in %s",
            self._state.current_rep,
            self._state.time_left,
            self._state.phase.value,
        )

    def toggle(self) -> None:
        """Single-button control: pause when running, start otherwise."""
        if self._state.status == Status.RUNNING:
            self.pause()
        else:
            self.start()

    def reset(self) -> None:
        """Back to the canonical READY state.  Valid from any status."""
        self._clock.disarm()
        self._start_token += 1  # cancel any pending start
        self._start_pending = False
        self._set_state(WorkoutState.initial(self._config))
        logger.info("Reset")

    def set_configuration(
        self,
        move_time: int | None = None,
        rest_time: int | None = None,
        repetitions: int | None = None,
    ) -> bool:
        """Change the workout shape.  Only allowed while READY or DONE.

        Returns ``False`` (and changes nothing) when rejected.
        """
        if not self.is_idle:
            logger.info(
                "Configuration change rejected while %s", self._state.status.value,
            )
            return False

        new_config = self._config.replace(
            move_time=move_time,
            rest_time=rest_time,
            repetitions=repetitions,
        )
        if new_config == self._config:
            return True

        old_move_time = self._config.move_time
        self._config = new_config
        self.configuration_changed.emit(new_config)

        if (
            self._state.status == Status.READY
            and new_config.move_time != old_move_time
        ):
            self._set_state(WorkoutState.initial(new_config))
        return True

    def clock_tick(self) -> None:
        """Advance one second.  Driven by the clock while RUNNING."""
        if self._state.status != Status.RUNNING:
            logger.debug("stale tick dropped: status is %s", self._state.status.value)
            return

        next_state, cue = tick(self._state, self._config)
        if next_state.status == Status.DONE:
            self._clock.disarm()

        self._set_state(next_state)
        if next_state.status == Status.DONE:
            logger.info(
                "Workout complete: %d reps in %ds",
                self._config.repetitions,
                next_state.time_elapsed,
            )
        elif cue in (Cue.MOVE_START, Cue.REST_START):
            logger.info(
                "Rep %d: %s for %ds",
                next_state.current_rep,
                next_state.phase.value,
                next_state.time_left,
            )

        if cue is not None:
            self._dispatch(cue)

    # ══════════════════════════════════════════════════════════════════
    #  INTERNAL
    # ══════════════════════════════════════════════════════════════════

    def _on_sink_ready(self, token: int) -> None:
        if token != self._start_token:
            logger.debug("stale sink completion ignored")
            return
        self._start_pending = False

        status = self._state.status
        if status == Status.RUNNING:
            return

        if status == Status.PAUSED:
            self._set_state(_with_status(self._state, Status.RUNNING))
            self._clock.arm()
            logger.info("Resumed")
            return

        if status == Status.DONE:
            self.reset()

        running = _with_status(WorkoutState.initial(self._config), Status.RUNNING)
        self._set_state(running)
        self._clock.arm()
        logger.info(
            "Workout started: %d x (%ds move / %ds rest), %ds total",
            self._config.repetitions,
            self._config.move_time,
            self._config.rest_time,
            self._config.total_time,
        )
        self._dispatch(Cue.MOVE_START)

    def _dispatch(self, cue: Cue) -> None:
        try:
            self._sink.notify(cue)
        except Exception:
            logger.warning("Notification sink failed on %s", cue.value, exc_info=True)
        self.cue_emitted.emit(cue)

    def _set_state(self, new_state: WorkoutState) -> None:
        self._state = new_state
        self.state_changed.emit(new_state)


def _with_status(state: WorkoutState, status: Status) -> WorkoutState:
    return replace(state, status=status)
