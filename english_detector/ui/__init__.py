"""Terminal presentation for the English detector."""

from .session_screen import SessionScreen

__all__ = ["SessionScreen"]
