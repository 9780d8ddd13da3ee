"""taskpulse: single-slot cancellable background task controller with a console host."""

__version__ = "0.1.0"
