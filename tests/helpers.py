"""Shared test helpers for SetTimer."""

from settimer.timer.engine import WorkoutEngine, CueKind


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
    """Manually advanced stand-in for ``time.time``."""

    def __init__(self, start: float = 1_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class RecordingSink:
    """Feedback sink that remembers every cue it was asked to play."""

    def __init__(self):
        self.cues: list[CueKind] = []

    def play_cue(self, kind: CueKind) -> None:
        self.cues.append(kind)

    def count(self, kind: CueKind) -> int:
        return self.cues.count(kind)

    def clear(self):
        self.cues.clear()


def run_until(engine: WorkoutEngine, clock: FakeClock, elapsed: float,
              step: float = 1.0) -> None:
    """Advance the clock in *step* increments, ticking the engine each time,
    until the current phase has been running for *elapsed* seconds."""
    while engine.is_active and engine.elapsed + step <= elapsed:
        clock.advance(step)
        engine._on_tick()
    remainder = elapsed - engine.elapsed
    if engine.is_active and remainder > 0:
        clock.advance(remainder)
        engine._on_tick()
