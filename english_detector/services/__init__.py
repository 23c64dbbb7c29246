"""Services layer for the English detector session lifecycle."""

from .state_machine import SessionStateMachine
from .analysis_trigger import AnalysisTrigger, round_percent
from .speech_session import SpeechSession

__all__ = [
    "SessionStateMachine",
    "AnalysisTrigger",
    "round_percent",
    "SpeechSession",
]
