"""Remote language analysis."""

from .client import LanguageAnalysisClient

__all__ = [
    "LanguageAnalysisClient",
]
