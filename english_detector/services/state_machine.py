"""Session state machine governing lifecycle transitions."""

import logging
from typing import Dict, FrozenSet

from ..models.session import SessionStatus

logger = logging.getLogger(__name__)

# target -> states it may be entered from
_ALLOWED_SOURCES: Dict[SessionStatus, FrozenSet[SessionStatus]] = {
    SessionStatus.LISTENING: frozenset(s for s in SessionStatus if s is not SessionStatus.LISTENING),
    SessionStatus.ANALYZING: frozenset({SessionStatus.LISTENING}),
    SessionStatus.STOPPED: frozenset({SessionStatus.ANALYZING}),
    SessionStatus.ERROR: frozenset(SessionStatus),
    SessionStatus.IDLE: frozenset(),
}


class SessionStateMachine:
    """Authoritative session status and the rules for changing it.

    State machine:
        IDLE -> LISTENING -> ANALYZING -> STOPPED
                    |            |
                    v            v
                  ERROR  <-------+

    Any state except LISTENING may re-enter LISTENING on a new start, and any
    state may fall into ERROR. IDLE is only ever the initial state.

    Holds only the status; transcript and analysis data live with the session.
    """

    def __init__(self):
        self.status = SessionStatus.IDLE

    def can_transition(self, target: SessionStatus) -> bool:
        return self.status in _ALLOWED_SOURCES[target]

    def transition(self, target: SessionStatus) -> bool:
        """Move to `target` if the transition is legal.

        Args:
            target: Desired status

        Returns:
            True if the status changed, False if the transition was refused
        """
        previous = self.status
        if not self.can_transition(target):
            logger.warning(f"Refused transition: {previous.value} -> {target.value}")
            return False

        self.status = target
        logger.info(f"Session status: {previous.value} -> {target.value}")
        return True

    @property
    def is_listening(self) -> bool:
        return self.status is SessionStatus.LISTENING

    @property
    def is_analyzing(self) -> bool:
        return self.status is SessionStatus.ANALYZING
