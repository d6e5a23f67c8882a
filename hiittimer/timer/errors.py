"""Error types raised by the timer core."""

from __future__ import annotations


class TimerError(Exception):
    """Base class for all timer errors."""


class InvalidConfigurationError(TimerError, ValueError):
    """A configuration value is below the allowed minimum of 1."""


class IllegalTransitionError(TimerError):
    """A transition was requested from a status that does not allow it."""
