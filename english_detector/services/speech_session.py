"""Speech session controller: owns the listen-to-analyze lifecycle."""

import logging
from typing import Optional

from ..exceptions import (
    AnalysisError,
    EngineConfigurationError,
    EngineRuntimeError,
    EngineStartError,
)
from ..models.analysis import AnalysisResult
from ..models.session import SessionInfo, SessionSnapshot, SessionStatus, new_session_id
from ..transcription.base import AbstractSpeechEngine, REQUIRED_CAPABILITIES
from ..transcription.buffer import TranscriptBuffer
from ..transcription.publisher import StatePublisher
from .analysis_trigger import AnalysisTrigger, Scorer
from .state_machine import SessionStateMachine

logger = logging.getLogger(__name__)


def check_engine_capabilities(engine: object) -> None:
    """Verify the engine exposes every capability the session relies on.

    Raises:
        EngineConfigurationError: If any capability, including on_error, is missing
    """
    for name in REQUIRED_CAPABILITIES:
        if not callable(getattr(engine, name, None)):
            raise EngineConfigurationError(
                f"Speech engine {type(engine).__name__} lacks required capability '{name}'"
            )


class SpeechSession:
    """Bridges a streaming speech engine to the transcript buffer and state machine.

    Only start() and stop() mutate state from the outside. Engine handlers are
    installed once, here, for the lifetime of this object. Errors never escape
    the handlers or stop(); they are recorded in `last_error` and reflected by
    the ERROR status.
    """

    def __init__(self,
                 engine: AbstractSpeechEngine,
                 scorer: Scorer,
                 publisher: Optional[StatePublisher] = None):
        """Initialize speech session.

        Args:
            engine: Streaming speech engine
            scorer: Coroutine function returning the raw English percent for a text
            publisher: Publisher for state snapshots (default topic if None)
        """
        check_engine_capabilities(engine)

        self.engine = engine
        self.buffer = TranscriptBuffer()
        self.state_machine = SessionStateMachine()
        self.publisher = publisher or StatePublisher()
        self.analysis_trigger = AnalysisTrigger(scorer, self.state_machine, self._is_current)

        self.session: Optional[SessionInfo] = None
        self.result: Optional[AnalysisResult] = None
        self.last_error: Optional[Exception] = None

        self._starting = False
        self._closed = False

        engine.on_partial(self._on_partial)
        engine.on_final(self._on_final)
        engine.on_error(self._on_error)

        logger.info(f"SpeechSession initialized with engine: {type(engine).__name__}")

    @property
    def status(self) -> SessionStatus:
        return self.state_machine.status

    @property
    def session_id(self) -> Optional[str]:
        return self.session.session_id if self.session else None

    @property
    def percent(self) -> Optional[int]:
        return self.result.percent if self.result else None

    def snapshot(self) -> SessionSnapshot:
        """Get a read-only view of the current state."""
        return SessionSnapshot(
            status=self.status,
            partial_text=self.buffer.partial,
            final_text=self.buffer.final_text(),
            percent=self.percent,
            session_id=self.session_id,
            last_error=self.last_error,
        )

    async def start(self) -> bool:
        """Start a new listening session.

        Starting while listening, or while a previous start is still pending, is
        a no-op. Starting while analyzing begins a new session; the outstanding
        analysis becomes stale.

        Returns:
            True if the session is now listening, False otherwise. On engine
            failure `last_error` holds an EngineStartError and status is ERROR.
        """
        if self._closed:
            logger.warning("Start ignored: session has been closed")
            return False
        if self._starting or self.state_machine.is_listening:
            logger.warning(f"Start ignored: already {'starting' if self._starting else 'listening'}")
            return False

        self._starting = True
        self.session = SessionInfo(session_id=self._next_session_id())
        session_id = self.session.session_id
        self.buffer.reset()
        self.result = None
        self.last_error = None
        logger.info(f"Starting session: {session_id}")

        try:
            await self.engine.start()
        except Exception as e:
            if self._is_current(session_id):
                self._fail(EngineStartError(f"Speech engine failed to start: {e}", cause=e))
            return False
        finally:
            self._starting = False

        if not self._is_current(session_id):
            logger.info(f"Session {session_id} was closed while the engine started")
            self._stop_engine()
            return False
        if self.last_error is not None:
            # engine reported a fault while activating
            self._stop_engine()
            return False

        self.state_machine.transition(SessionStatus.LISTENING)
        self._publish()
        return True

    async def stop(self) -> Optional[AnalysisResult]:
        """Stop listening and analyze the frozen final transcript.

        Never raises for analysis failures; those leave status at ERROR with the
        AnalysisError in `last_error`.

        Returns:
            The applied AnalysisResult, or None if not listening, the analysis
            failed, or the result went stale
        """
        if not self.state_machine.is_listening:
            logger.debug(f"Stop ignored: status is {self.status.value}")
            return None

        session_id = self.session_id
        self._stop_engine()
        self.state_machine.transition(SessionStatus.ANALYZING)
        transcript = self.buffer.final_text()
        self._publish()

        try:
            result = await self.analysis_trigger.analyze(session_id, transcript)
        except AnalysisError as e:
            self.last_error = e
            self._publish()
            return None

        if result is not None:
            self.result = result
            self._publish()
        return result

    def close(self) -> None:
        """Tear down: always stop the engine stream, regardless of status.

        After close() no engine event mutates state and any outstanding
        analysis is discarded as stale.
        """
        if self._closed:
            return
        self._closed = True
        self._stop_engine()
        logger.info(f"SpeechSession closed (last session: {self.session_id})")

    def __enter__(self):
        return self

    def __exit__(self, _exc_type, _exc_val, _exc_tb):
        self.close()

    def _on_partial(self, text: str) -> None:
        if not self._accepts_text_events():
            logger.debug(f"Discarding partial received while {self.status.value}: '{text[:50]}'")
            return
        self.buffer.apply_partial(text)
        self._publish()

    def _on_final(self, text: str) -> None:
        if not self._accepts_text_events():
            logger.debug(f"Discarding final received while {self.status.value}: '{text[:50]}'")
            return
        self.buffer.apply_final(text)
        self._publish()

    def _on_error(self, error: BaseException) -> None:
        if self._closed:
            logger.debug(f"Discarding engine error after close: {error}")
            return
        if self.state_machine.is_listening:
            self._stop_engine()
        self._fail(EngineRuntimeError(f"Speech engine error: {error}", cause=error))

    def _accepts_text_events(self) -> bool:
        return not self._closed and self.state_machine.is_listening

    def _fail(self, error: Exception) -> None:
        logger.error(f"Session {self.session_id} failed: {error}")
        self.last_error = error
        self.state_machine.transition(SessionStatus.ERROR)
        self._publish()

    def _is_current(self, session_id: Optional[str]) -> bool:
        return not self._closed and session_id is not None and session_id == self.session_id

    def _next_session_id(self) -> str:
        session_id = new_session_id()
        while session_id == self.session_id:
            session_id = new_session_id()
        return session_id

    def _stop_engine(self) -> None:
        try:
            self.engine.stop()
        except Exception as e:
            logger.warning(f"Error stopping speech engine: {e}")

    def _publish(self) -> None:
        self.publisher.publish_snapshot(self.snapshot())
