"""Interval timer state machine for HIIT Timer.

This module is pure: no Qt, no clock, no audio.  ``tick()`` takes the
current state and configuration and returns the next state plus at
most one cue for the controller to dispatch.

Statuses
--------
READY     Configured, waiting for the user to start.
RUNNING   Counting down the current phase.
PAUSED    Frozen mid-phase; resumes exactly where it stopped.
DONE      Last Move phase finished.  Restartable.

Phases
------
MOVE → REST → MOVE → ... → MOVE   (no Rest after the final repetition)

Cues
----
MOVE_START       A Move phase begins (also on the very first start).
REST_START       A Rest phase begins.
COUNTDOWN_BEEP   3, 2 or 1 seconds left in the current phase.
FINISHED         The workout is complete.

One tick never yields two cues: a phase boundary cue always wins over
the countdown beep.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum

from .errors import IllegalTransitionError, InvalidConfigurationError


# ── enums ─────────────────────────────────────────────────────────────────


class Status(Enum):
    READY = "ready"
    RUNNING = "running"
    PAUSED = "paused"
    DONE = "done"


class Phase(Enum):
    MOVE = "move"
    REST = "rest"


class Cue(Enum):
    MOVE_START = "move_start"
    REST_START = "rest_start"
    COUNTDOWN_BEEP = "countdown_beep"
    FINISHED = "finished"


# ── constants ─────────────────────────────────────────────────────────────

DEFAULT_MOVE_TIME = 150  # seconds
DEFAULT_REST_TIME = 60
DEFAULT_REPETITIONS = 15

COUNTDOWN_SECONDS = 3  # beep on 3, 2, 1

ACTIVE_STATUSES = frozenset({Status.RUNNING, Status.PAUSED})
IDLE_STATUSES = frozenset({Status.READY, Status.DONE})


def coerce_positive(value: object) -> int:
    """Turn raw input into an int >= 1.  Garbage becomes 1."""
    try:
        number = int(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return 1
    return max(1, number)


# ── configuration ─────────────────────────────────────────────────────────


@dataclass(frozen=True)
class Configuration:
    """Workout shape.  All values are whole seconds / counts, >= 1."""

    move_time: int = DEFAULT_MOVE_TIME
    rest_time: int = DEFAULT_REST_TIME
    repetitions: int = DEFAULT_REPETITIONS

    def __post_init__(self) -> None:
        for name in ("move_time", "rest_time", "repetitions"):
            value = getattr(self, name)
            if not isinstance(value, int) or value < 1:
                raise InvalidConfigurationError(
                    f"{name} must be a positive integer, got {value!r}"
                )

    @classmethod
    def coerced(
        cls,
        move_time: object = DEFAULT_MOVE_TIME,
        rest_time: object = DEFAULT_REST_TIME,
        repetitions: object = DEFAULT_REPETITIONS,
    ) -> Configuration:
        """Build a configuration from unsanitised input, clamping to >= 1."""
        return cls(
            move_time=coerce_positive(move_time),
            rest_time=coerce_positive(rest_time),
            repetitions=coerce_positive(repetitions),
        )

    def replace(self, **changes: object) -> Configuration:
        """Copy with *changes* applied; ``None`` values are left alone."""
        values = {
            "move_time": self.move_time,
            "rest_time": self.rest_time,
            "repetitions": self.repetitions,
        }
        for key, value in changes.items():
            if key not in values:
                raise TypeError(f"unknown configuration field: {key}")
            if value is not None:
                values[key] = value
        return Configuration.coerced(**values)

    @property
    def total_time(self) -> int:
        return total_workout_time(
            self.move_time, self.rest_time, self.repetitions,
        )


# ── state ─────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class WorkoutState:
    status: Status
    phase: Phase
    current_rep: int
    time_left: int
    time_elapsed: int

    @classmethod
    def initial(cls, config: Configuration) -> WorkoutState:
        """The canonical READY state for *config*."""
        return cls(
            status=Status.READY,
            phase=Phase.MOVE,
            current_rep=1,
            time_left=config.move_time,
            time_elapsed=0,
        )

    @property
    def is_active(self) -> bool:
        """True while RUNNING or PAUSED."""
        return self.status in ACTIVE_STATUSES


# ── derived values ────────────────────────────────────────────────────────


def total_workout_time(move_time: int, rest_time: int, repetitions: int) -> int:
    """Seconds from first Move to final Move (no trailing Rest)."""
    if repetitions <= 0:
        return 0
    return move_time * repetitions + rest_time * (repetitions - 1)


def remaining_workout_time(state: WorkoutState, config: Configuration) -> int:
    total = config.total_time
    if state.is_active:
        return max(0, total - state.time_elapsed)
    return total


def phase_duration(state: WorkoutState, config: Configuration) -> int:
    """Full length of the phase *state* is in."""
    if state.phase == Phase.REST:
        return config.rest_time
    return config.move_time


def phase_progress(state: WorkoutState, config: Configuration) -> float:
    """0.0 → 1.0 progress through the current phase."""
    if state.status == Status.DONE:
        return 1.0
    duration = phase_duration(state, config)
    if duration <= 0:
        return 0.0
    return max(0.0, min(1.0, (duration - state.time_left) / duration))


# ── transition ────────────────────────────────────────────────────────────


def tick(
    state: WorkoutState, config: Configuration
) -> tuple[WorkoutState, Cue | None]:
    """Advance a running workout by one second.

    Returns the next state and the cue to play, if any.
    """
    if state.status != Status.RUNNING:
        raise IllegalTransitionError(
            f"cannot tick a workout that is {state.status.value}"
        )

    elapsed = state.time_elapsed + 1
    new_time_left = state.time_left - 1

    cue: Cue | None = None
    if 0 < new_time_left <= COUNTDOWN_SECONDS:
        cue = Cue.COUNTDOWN_BEEP

    if new_time_left > 0:
        return replace(state, time_left=new_time_left, time_elapsed=elapsed), cue

    # Phase boundary: its cue replaces any countdown beep.
    if state.phase == Phase.MOVE:
        if state.current_rep >= config.repetitions:
            return (
                replace(
                    state,
                    status=Status.DONE,
                    time_left=0,
                    time_elapsed=elapsed,
                ),
                Cue.FINISHED,
            )
        return (
            replace(
                state,
                phase=Phase.REST,
                time_left=config.rest_time,
                time_elapsed=elapsed,
            ),
            Cue.REST_START,
        )

    return (
        replace(
            state,
            phase=Phase.MOVE,
            current_rep=state.current_rep + 1,
            time_left=config.move_time,
            time_elapsed=elapsed,
        ),
        Cue.MOVE_START,
    )
