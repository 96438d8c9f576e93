"""
Remote Analysis Client
======================
Time-bounded async HTTP call to the configured analysis service.

Request:
    POST {api_base}/analyze
    Content-Type: application/json
    {"snippet": "...", "language": "..."}

Timeout:
    The whole exchange (connect, send, receive) is bounded by a single
    asyncio.wait_for budget of REQUEST_TIMEOUT_SECONDS. On expiry the
    in-flight request is cancelled and a TIMEOUT result is returned.

Outcomes (never raises):
    - timeout                 → TIMEOUT
    - no response obtained    → NETWORK_ERROR, details = {name, message, stack[:3 lines]}
    - non-2xx response        → HTTP_<status> with a fixed message by status,
                                details = server error body when it parses
    - 2xx response            → body parsed and passed to the normalizer

Each call opens its own httpx.AsyncClient, so concurrent calls share nothing.
No retries happen here; the caller decides whether to try again.
"""
import asyncio
import json
import logging
import traceback
from typing import Any, Optional

import httpx

from bug_detector.core.constants import (
    ANALYZE_PATH,
    HTTP_ERROR_MESSAGES,
    NETWORK_ERROR,
    NETWORK_ERROR_MESSAGE,
    REQUEST_TIMEOUT_SECONDS,
    SERVER_ERROR_MESSAGE,
    STACK_LINES,
    TIMEOUT,
    TIMEOUT_MESSAGE,
)
from bug_detector.models.finding import AnalysisResponse
from bug_detector.services.normalizer import normalize

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Error helpers
# ---------------------------------------------------------------------------
def http_error_message(status: int) -> str:
    """Map an HTTP status to a user-facing message."""
    if status in HTTP_ERROR_MESSAGES:
        return HTTP_ERROR_MESSAGES[status]
    if 500 <= status < 600:
        return SERVER_ERROR_MESSAGE
    return f"Unexpected error (HTTP {status})."


def error_details(exc: BaseException) -> dict:
    """
    Redacted diagnostics for a failed call.

    Only the exception name, its message and the first lines of the
    formatted traceback are kept.
    """
    details = {"name": type(exc).__name__, "message": str(exc)}
    if exc.__traceback__ is not None:
        formatted = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
        details["stack"] = "\n".join(formatted.splitlines()[:STACK_LINES])
    return details


# ---------------------------------------------------------------------------
# Body parsing
# ---------------------------------------------------------------------------
def _is_json(response: httpx.Response) -> bool:
    return "application/json" in response.headers.get("content-type", "")


def safe_parse_text(text: str) -> Any:
    """Parse text as JSON, or wrap it as an empty-findings envelope."""
    try:
        return json.loads(text)
    except ValueError:
        return {"findings": [], "raw": text}


def _parse_success_body(response: httpx.Response) -> Any:
    if _is_json(response):
        try:
            return response.json()
        except ValueError:
            logger.warning("Response declared JSON but did not parse; using text fallback")
    return safe_parse_text(response.text)


def _parse_error_body(response: httpx.Response) -> Optional[Any]:
    try:
        return response.json() if _is_json(response) else response.text
    except (ValueError, UnicodeDecodeError):
        return None


# ---------------------------------------------------------------------------
# Call
# ---------------------------------------------------------------------------
async def _post(
    url: str,
    body: dict,
    timeout: float,
    transport: Optional[httpx.AsyncBaseTransport],
) -> httpx.Response:
    async with httpx.AsyncClient(
        timeout=httpx.Timeout(timeout),
        transport=transport,
        follow_redirects=True,
    ) as client:
        return await client.post(url, json=body, headers={"Content-Type": "application/json"})


async def call_remote(
    api_base: str,
    snippet: str,
    language: str,
    *,
    timeout: float = REQUEST_TIMEOUT_SECONDS,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> AnalysisResponse:
    """
    Submit a snippet to the remote analysis service.

    Parameters
    ----------
    api_base : str
        Base URL without trailing slash.
    snippet : str
        Source code to analyze.
    language : str
        Language tag forwarded as-is.
    timeout : float
        Total time budget in seconds.
    transport : httpx.AsyncBaseTransport, optional
        Alternative transport (used by tests).

    Returns
    -------
    AnalysisResponse
        Normalized findings, or an error result.
    """
    url = f"{api_base}{ANALYZE_PATH}"
    body = {"snippet": snippet, "language": language}

    try:
        response = await asyncio.wait_for(_post(url, body, timeout, transport), timeout=timeout)
    except (asyncio.TimeoutError, httpx.TimeoutException) as exc:
        logger.warning("Analysis request to %s timed out after %.1fs", url, timeout)
        return AnalysisResponse.failure(TIMEOUT_MESSAGE, code=TIMEOUT, details=error_details(exc))
    except Exception as exc:
        logger.warning("Analysis request to %s failed: %s", url, exc)
        return AnalysisResponse.failure(
            NETWORK_ERROR_MESSAGE, code=NETWORK_ERROR, details=error_details(exc)
        )

    if not response.is_success:
        status = response.status_code
        logger.warning("Analysis service answered HTTP %d", status)
        return AnalysisResponse.failure(
            http_error_message(status),
            status=status,
            code=f"HTTP_{status}",
            details=_parse_error_body(response),
        )

    return normalize(_parse_success_body(response))
