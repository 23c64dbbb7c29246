"""HTTP client for the remote English-percentage scoring service."""

import asyncio
import json
import logging

import aiohttp
from pydantic import ValidationError

from ..exceptions import AnalysisError
from ..models.analysis import AnalysisResponse

logger = logging.getLogger(__name__)


class LanguageAnalysisClient:
    """Sends transcripts to the scoring endpoint and returns the raw percent."""

    def __init__(self, endpoint: str, timeout_seconds: float = 10.0):
        """Initialize language analysis client.

        Args:
            endpoint: Full URL of the analysis endpoint
            timeout_seconds: Total timeout for one request
        """
        self.endpoint = endpoint
        self.timeout = aiohttp.ClientTimeout(total=timeout_seconds)

        logger.info(f"LanguageAnalysisClient initialized with endpoint: {endpoint}")

    async def analyze(self, text: str) -> float:
        """Send text to the analysis endpoint and get the English percent.

        Makes exactly one attempt.

        Args:
            text: Transcript to score

        Returns:
            Percent as returned by the service, unrounded and unclamped

        Raises:
            AnalysisError: On network failure, timeout, non-2xx status or a body
                without a numeric `percent`
        """
        headers = {"Content-Type": "application/json"}
        try:
            async with aiohttp.ClientSession(timeout=self.timeout) as session:
                async with session.post(self.endpoint, headers=headers, json={"text": text}) as response:
                    body = await response.text()
                    if not 200 <= response.status < 300:
                        raise AnalysisError(
                            f"Analysis API error: {response.status} - {body[:200]}",
                            cause=body,
                            status=response.status,
                        )
        except asyncio.TimeoutError as e:
            raise AnalysisError(f"Analysis request timed out after {self.timeout.total}s", cause=e) from e
        except aiohttp.ClientError as e:
            raise AnalysisError(f"Analysis request failed: {e}", cause=e) from e

        return self._parse_percent(body)

    @staticmethod
    def _parse_percent(body: str) -> float:
        try:
            payload = json.loads(body)
        except ValueError as e:
            raise AnalysisError(f"Analysis response is not JSON: {body[:200]}", cause=e) from e

        try:
            return AnalysisResponse.model_validate(payload).percent
        except ValidationError as e:
            raise AnalysisError(f"Analysis response has no numeric percent: {payload!r}", cause=e) from e
