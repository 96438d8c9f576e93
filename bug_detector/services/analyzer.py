"""
Analyze Facade
==============
Single entry point used by the UI layer.

Routing:
    - DEMO config       → mock_analyze (local heuristics, never awaits I/O)
    - CONNECTED config  → call_remote against config.api_base

The routing decision uses the AppConfig captured when the service was
built; configuration is never re-read per call.

Contract:
    analyze() never raises. Every failure, including unexpected ones,
    comes back as an AnalysisResponse with `error` set.
"""
import logging
from typing import Optional

import httpx

from bug_detector.core.config import AppConfig
from bug_detector.core.constants import INTERNAL_ERROR, INTERNAL_ERROR_MESSAGE, REQUEST_TIMEOUT_SECONDS
from bug_detector.models.finding import AnalysisResponse
from bug_detector.services.mock_analyzer import mock_analyze
from bug_detector.services.remote_client import call_remote
from bug_detector.utils.languages import format_bytes

logger = logging.getLogger(__name__)


class AnalysisService:
    """
    Routes analysis calls to the demo analyzer or the remote service.

    Usage:
        service = AnalysisService(load_config())
        result = await service.analyze("eval(x)", "javascript")
    """

    def __init__(
        self,
        config: AppConfig,
        *,
        timeout: float = REQUEST_TIMEOUT_SECONDS,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.config = config
        self.timeout = timeout
        self._transport = transport

    async def analyze(self, snippet: str, language: str) -> AnalysisResponse:
        """
        Analyze a code snippet for potential bugs and issues.

        Parameters
        ----------
        snippet : str
            Source code submitted by the user.
        language : str
            Language tag (e.g. "javascript").

        Returns
        -------
        AnalysisResponse
            Findings and summary, or an error result.
        """
        snippet = snippet or ""
        language = language or ""
        logger.info(
            "Analyzing %s snippet (%s) in %s mode",
            language or "unknown", format_bytes(len(snippet.encode("utf-8"))), self.config.mode,
        )

        try:
            if self.config.is_demo or not self.config.api_base:
                result = mock_analyze(snippet, language)
            else:
                result = await call_remote(
                    self.config.api_base,
                    snippet,
                    language,
                    timeout=self.timeout,
                    transport=self._transport,
                )
        except Exception as exc:
            logger.exception("Unexpected failure during analysis")
            return AnalysisResponse.failure(
                INTERNAL_ERROR_MESSAGE,
                code=INTERNAL_ERROR,
                details={"name": type(exc).__name__, "message": str(exc)},
            )

        if result.error:
            logger.warning("Analysis finished with error: %s", result.error.code or result.error.message)
        else:
            logger.info("Analysis finished: %d finding(s)", result.summary.total)
        return result


async def analyze(snippet: str, language: str, config: AppConfig) -> AnalysisResponse:
    """One-off analysis with a freshly built service."""
    return await AnalysisService(config).analyze(snippet, language)
