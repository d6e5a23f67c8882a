"""Shared test helpers for HIIT Timer."""

from hiittimer.timer.controller import WorkoutController
from hiittimer.timer.engine import Cue


class SignalCollector:
    """Utility to capture pyqtSignal emissions into a list."""

    def __init__(self):
        self.items: list = []

    def slot(self, *args):
        self.items.append(args if len(args) > 1 else args[0] if args else None)

    def __call__(self, *args):
        self.slot(*args)

    def __len__(self):
        return len(self.items)

    def __getitem__(self, idx):
        return self.items[idx]

    @property
    def last(self):
        return self.items[-1] if self.items else None

    def clear(self):
        self.items.clear()


class FakeClock:
    """Manual ``ClockSource``: call ``fire()`` to deliver a tick."""

    def __init__(self):
        self._callback = None
        self.armed = False
        self.arm_calls = 0
        self.disarm_calls = 0

    def bind(self, callback):
        self._callback = callback

    def arm(self):
        self.arm_calls += 1
        self.armed = True

    def disarm(self):
        self.disarm_calls += 1
        self.armed = False

    def fire(self, times: int = 1) -> None:
        """Deliver *times* ticks, but only while armed (like a real timer)."""
        for _ in range(times):
            if not self.armed:
                return
            self._callback()


class RecordingSink:
    """``NotificationSink`` that completes instantly and records cues."""

    def __init__(self):
        self.cues: list[Cue] = []
        self.ready_calls = 0

    def ensure_ready(self, on_ready):
        self.ready_calls += 1
        on_ready()

    def notify(self, cue):
        self.cues.append(cue)


class DeferredSink(RecordingSink):
    """Sink whose readiness completes only when the test says so."""

    def __init__(self):
        super().__init__()
        self._pending: list = []

    def ensure_ready(self, on_ready):
        self.ready_calls += 1
        self._pending.append(on_ready)

    def complete(self) -> None:
        pending, self._pending = self._pending, []
        for callback in pending:
            callback()


class ExplodingSink(RecordingSink):
    """Sink whose ``notify`` always raises."""

    def notify(self, cue):
        super().notify(cue)
        raise RuntimeError("audio device went away")


class RaisingReadySink(RecordingSink):
    """Sink whose ``ensure_ready`` raises, optionally after completing."""

    def __init__(self, complete_first: bool = False):
        super().__init__()
        self.complete_first = complete_first

    def ensure_ready(self, on_ready):
        self.ready_calls += 1
        if self.complete_first:
            on_ready()
        raise RuntimeError("audio context refused")


def run_to_completion(controller: WorkoutController, clock: FakeClock, limit: int = 10_000) -> int:
    """Tick until the clock is disarmed; return the number of ticks used."""
    ticks = 0
    while clock.armed and ticks < limit:
        clock.fire()
        ticks += 1
    return ticks
