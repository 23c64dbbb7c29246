"""Analysis trigger: runs the one-shot English scoring when a session stops."""

import logging
import math
from typing import Awaitable, Callable, Optional

from ..exceptions import AnalysisError
from ..models.analysis import AnalysisResult
from ..models.session import SessionStatus
from .state_machine import SessionStateMachine

logger = logging.getLogger(__name__)

Scorer = Callable[[str], Awaitable[float]]


def round_percent(value: float) -> int:
    """Round half up to the nearest integer. No clamping to [0, 100]."""
    return math.floor(value + 0.5)


def _is_finite_number(value: object) -> bool:
    # bool is an int subclass but never a valid percent
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


class AnalysisTrigger:
    """Decides whether to call the scorer, applies the outcome to the state machine.

    Outcomes are applied only while `session_id` is still the active session and
    the state machine is still analyzing; anything else is discarded as stale.
    """

    def __init__(self,
                 scorer: Scorer,
                 state_machine: SessionStateMachine,
                 is_current: Callable[[str], bool]):
        """Initialize analysis trigger.

        Args:
            scorer: Coroutine function taking text and returning the raw percent,
                e.g. LanguageAnalysisClient.analyze
            state_machine: State machine to move to STOPPED or ERROR
            is_current: Predicate telling whether a session ID is still active
        """
        self.scorer = scorer
        self.state_machine = state_machine
        self.is_current = is_current
        self._last_session_id: Optional[str] = None

    async def analyze(self, session_id: str, text: str) -> Optional[AnalysisResult]:
        """Score a frozen transcript for a session.

        Args:
            session_id: Session the transcript belongs to
            text: Frozen final transcript

        Returns:
            AnalysisResult when applied to the current session, None when the
            outcome was discarded as stale or the session was already analyzed

        Raises:
            AnalysisError: If scoring failed for the still-current session; the
                state machine has already moved to ERROR
        """
        if session_id == self._last_session_id:
            logger.warning(f"Session {session_id} already analyzed, ignoring repeat request")
            return None
        self._last_session_id = session_id

        transcript = text.strip()
        if not transcript:
            logger.info(f"Empty transcript for session {session_id}, skipping remote analysis")
            return self._apply_success(session_id, 0, remote_call=False)

        logger.info(f"Analyzing {len(transcript)} chars for session {session_id}")
        try:
            raw_percent = await self.scorer(transcript)
        except AnalysisError as e:
            return self._apply_failure(session_id, e)
        except Exception as e:
            return self._apply_failure(session_id, AnalysisError(f"Analysis failed: {e}", cause=e))

        if not _is_finite_number(raw_percent):
            return self._apply_failure(session_id, AnalysisError(
                f"Scorer returned a non-numeric percent: {raw_percent!r}", cause=raw_percent))

        return self._apply_success(session_id, round_percent(raw_percent), remote_call=True)

    def _is_applicable(self, session_id: str) -> bool:
        return self.is_current(session_id) and self.state_machine.is_analyzing

    def _apply_success(self, session_id: str, percent: int, remote_call: bool) -> Optional[AnalysisResult]:
        if not self._is_applicable(session_id):
            logger.info(f"Discarding stale analysis result for session {session_id} ({percent}%)")
            return None

        self.state_machine.transition(SessionStatus.STOPPED)
        logger.info(f"Session {session_id}: {percent}% English")
        return AnalysisResult(session_id=session_id, percent=percent, remote_call=remote_call)

    def _apply_failure(self, session_id: str, error: AnalysisError) -> None:
        if not self._is_applicable(session_id):
            logger.info(f"Discarding stale analysis failure for session {session_id}: {error}")
            return None

        logger.error(f"Analysis failed for session {session_id}: {error}")
        self.state_machine.transition(SessionStatus.ERROR)
        raise error
