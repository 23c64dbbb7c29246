"""Transcript buffer that accumulates streamed recognition fragments."""

import logging
from typing import List

logger = logging.getLogger(__name__)


class TranscriptBuffer:
    """Ordered, append-only store of finalized fragments plus the latest partial.

    Partial text is replaced wholesale on every update. Final fragments are
    appended once, in arrival order, and are only cleared by reset().
    """

    def __init__(self):
        self.partial: str = ""
        self._final_chunks: List[str] = []

    @property
    def final_chunks(self) -> List[str]:
        return list(self._final_chunks)

    def apply_partial(self, text: str) -> None:
        """Replace the pending partial text. Empty string means nothing pending."""
        self.partial = text

    def apply_final(self, text: str) -> None:
        """Append a finalized fragment and drop the partial it supersedes.

        Args:
            text: Finalized fragment; empty or whitespace-only fragments are ignored
        """
        self.partial = ""
        if not text or not text.strip():
            logger.debug("Ignoring empty final fragment")
            return
        self._final_chunks.append(text)
        logger.debug(f"Appended final fragment #{len(self._final_chunks)}: '{text[:50]}'")

    def reset(self) -> None:
        """Clear partial text and all final fragments."""
        self.partial = ""
        self._final_chunks.clear()

    def final_text(self) -> str:
        """Get the finalized transcript.

        Returns:
            Space-joined final fragments, trimmed
        """
        return " ".join(self._final_chunks).strip()
