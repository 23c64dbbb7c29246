"""Transcription module for the English detector."""

from .base import AbstractSpeechEngine
from .buffer import TranscriptBuffer
from .publisher import StatePublisher, STATE_TOPIC
from .google_streaming import GoogleStreamingEngine

__all__ = [
    "AbstractSpeechEngine",
    "TranscriptBuffer",
    "StatePublisher",
    "STATE_TOPIC",
    "GoogleStreamingEngine",
]
