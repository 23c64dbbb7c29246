"""Session-related data models."""

import random
import string
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional


class SessionStatus(Enum):
    """Lifecycle status of the current listening session."""
    IDLE = "idle"
    LISTENING = "listening"
    ANALYZING = "analyzing"
    STOPPED = "stopped"
    ERROR = "error"


@dataclass
class SessionInfo:
    """Identity of one listen-to-analyze cycle."""
    session_id: str
    created_at: datetime = field(default_factory=datetime.now)


@dataclass(frozen=True)
class SessionSnapshot:
    """Read-only view of the session state handed to presentation layers."""
    status: SessionStatus
    partial_text: str = ""
    final_text: str = ""
    percent: Optional[int] = None
    session_id: Optional[str] = None
    last_error: Optional[Exception] = None

    @property
    def word_count(self) -> int:
        return len(self.final_text.split())

    @property
    def display_percent(self) -> int:
        """Percent for progress bars; 0 until a result is available."""
        return self.percent if self.percent is not None else 0


def new_session_id() -> str:
    """Create a session ID from the current timestamp and a random suffix.

    Returns:
        Session ID in the form YYYYMMDD_HHMMSS_xxxx
    """
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    random_suffix = ''.join(random.choices(string.ascii_lowercase + string.digits, k=4))
    return f"{timestamp}_{random_suffix}"
