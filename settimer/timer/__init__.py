"""Timer package."""

from .engine import (
    WorkoutEngine,
    WorkoutSnapshot,
    Phase,
    CueKind,
    FeedbackSink,
    REST_CUE_SECONDS,
    PULSE_INTERVAL_SECONDS,
    AUDIO_INTERVAL_SECONDS,
)

__all__ = [
    "WorkoutEngine",
    "WorkoutSnapshot",
    "Phase",
    "CueKind",
    "FeedbackSink",
    "REST_CUE_SECONDS",
    "PULSE_INTERVAL_SECONDS",
    "AUDIO_INTERVAL_SECONDS",
]
