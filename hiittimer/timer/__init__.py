"""Timer package."""

from .engine import (
    Configuration,
    Cue,
    Phase,
    Status,
    WorkoutState,
    COUNTDOWN_SECONDS,
    DEFAULT_MOVE_TIME,
    DEFAULT_REST_TIME,
    DEFAULT_REPETITIONS,
    tick,
    total_workout_time,
    remaining_workout_time,
)
from .controller import WorkoutController, QtClock, NotificationSink, ClockSource
from .errors import TimerError, InvalidConfigurationError, IllegalTransitionError

__all__ = [
    "Configuration",
    "Cue",
    "Phase",
    "Status",
    "WorkoutState",
    "COUNTDOWN_SECONDS",
    "DEFAULT_MOVE_TIME",
    "DEFAULT_REST_TIME",
    "DEFAULT_REPETITIONS",
    "tick",
    "total_workout_time",
    "remaining_workout_time",
    "WorkoutController",
    "QtClock",
    "NotificationSink",
    "ClockSource",
    "TimerError",
    "InvalidConfigurationError",
    "IllegalTransitionError",
]
