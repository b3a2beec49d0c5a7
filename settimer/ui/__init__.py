"""UI package."""

from .workout_widget import WorkoutWidget, format_elapsed

__all__ = [
    "WorkoutWidget",
    "format_elapsed",
]
