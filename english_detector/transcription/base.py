"""Abstract base class for streaming speech engines."""

from abc import ABC, abstractmethod
from typing import Callable
import logging

logger = logging.getLogger(__name__)

TextCallback = Callable[[str], None]
ErrorCallback = Callable[[BaseException], None]

REQUIRED_CAPABILITIES = ("start", "stop", "on_partial", "on_final", "on_error")


class AbstractSpeechEngine(ABC):
    """Streaming recognition engine emitting partial, final and error events."""

    @abstractmethod
    async def start(self) -> None:
        """Begin streaming recognition.

        Raises:
            Exception: If the engine cannot be activated (permission denied,
                device unavailable, bad credentials)
        """
        pass

    @abstractmethod
    def stop(self) -> None:
        """Halt streaming. Must be synchronous and idempotent."""
        pass

    @abstractmethod
    def on_partial(self, callback: TextCallback) -> None:
        """Register the callback receiving revisable partial text."""
        pass

    @abstractmethod
    def on_final(self, callback: TextCallback) -> None:
        """Register the callback receiving committed final text."""
        pass

    @abstractmethod
    def on_error(self, callback: ErrorCallback) -> None:
        """Register the callback receiving mid-session engine faults."""
        pass
