"""SetTimer: a set counter and exercise/rest timer for the desktop."""

__version__ = "0.1.0"
