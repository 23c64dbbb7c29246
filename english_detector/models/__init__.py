"""Data models for the English detector."""

from .session import SessionStatus, SessionInfo, SessionSnapshot, new_session_id
from .analysis import AnalysisResult, AnalysisResponse

__all__ = [
    "SessionStatus",
    "SessionInfo",
    "SessionSnapshot",
    "new_session_id",
    "AnalysisResult",
    "AnalysisResponse",
]
