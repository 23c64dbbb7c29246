"""Error types raised and recorded by the English detector."""

from typing import Optional


class EnglishDetectorError(Exception):
    """Base class for all English detector errors."""


class EngineConfigurationError(EnglishDetectorError, TypeError):
    """Speech engine is missing a required capability."""


class EngineStartError(EnglishDetectorError):
    """Speech engine refused or failed to activate."""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.cause = cause


class EngineRuntimeError(EnglishDetectorError):
    """Speech engine reported a fault mid-session."""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.cause = cause


class AnalysisError(EnglishDetectorError):
    """Remote language analysis failed or returned a malformed response.

    Attributes:
        cause: Underlying exception or raw response body, if any
        status: HTTP status code when the service answered with a non-2xx status
    """

    def __init__(self, message: str, cause: object = None, status: Optional[int] = None):
        super().__init__(message)
        self.cause = cause
        self.status = status
