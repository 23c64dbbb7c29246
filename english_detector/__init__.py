"""English detector: live transcription sessions scored for English content."""

from .exceptions import (
    EnglishDetectorError,
    EngineConfigurationError,
    EngineStartError,
    EngineRuntimeError,
    AnalysisError,
)
from .models import SessionStatus, SessionSnapshot, AnalysisResult
from .services import SpeechSession, SessionStateMachine, AnalysisTrigger
from .transcription import AbstractSpeechEngine, TranscriptBuffer, StatePublisher
from .analysis import LanguageAnalysisClient

__version__ = "0.1.0"

__all__ = [
    "EnglishDetectorError",
    "EngineConfigurationError",
    "EngineStartError",
    "EngineRuntimeError",
    "AnalysisError",
    "SessionStatus",
    "SessionSnapshot",
    "AnalysisResult",
    "SpeechSession",
    "SessionStateMachine",
    "AnalysisTrigger",
    "AbstractSpeechEngine",
    "TranscriptBuffer",
    "StatePublisher",
    "LanguageAnalysisClient",
]
