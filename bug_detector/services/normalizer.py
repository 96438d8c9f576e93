"""
Finding Normalizer
==================
Turns loosely-typed analysis payloads into the strict AnalysisResponse shape.

Decode Step:
    Upstream services disagree on where findings live. decode_payload()
    tries each known container shape in priority order and returns a
    DecodedPayload tagged with the shape that matched:
        1. canonical     — {"findings": [...], "summary"?: {...}}
        2. issues        — {"issues": [...]}
        3. results       — {"results": [...]}
        4. unrecognized  — anything else (no findings)
    Only the canonical shape may carry a trusted summary.

Per-Finding Mapping:
    Each field is read through an ordered alias table (first non-null
    wins). Severity falls back to "info", line numbers fall back to 1 and
    are kept ordered, missing ids are generated.

Summary Trust:
    A canonical payload with a mapping under "summary" is trusted as given
    (numbers coerced, missing counts default to 0 and a missing total to
    the number of findings). Every other case is recomputed.
"""
import json
import logging
import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from bug_detector.core.constants import (
    DEFAULT_RECOMMENDATION,
    DEFAULT_RULE,
    DEFAULT_TITLE,
    EMPTY_RESPONSE,
    EMPTY_RESPONSE_MESSAGE,
    SEVERITIES,
)
from bug_detector.models.finding import AnalysisResponse, Finding, Severity, Summary
from bug_detector.services.summarizer import summarize
from bug_detector.utils.ids import generate_id

logger = logging.getLogger(__name__)

SHAPE_CANONICAL = "canonical"
SHAPE_ISSUES = "issues"
SHAPE_RESULTS = "results"
SHAPE_UNRECOGNIZED = "unrecognized"

# Alternate container keys, in priority order
_ALTERNATE_SHAPES = [(SHAPE_ISSUES, "issues"), (SHAPE_RESULTS, "results")]

# Field alias tables: first non-null value wins
_SEVERITY_KEYS = ("severity", "level")
_LINE_START_KEYS = ("lineStart", "line")
_LINE_END_KEYS = ("lineEnd", "endLine")
_ID_KEYS = ("id", "ruleId", "rule")
_TITLE_KEYS = ("title", "message")
_DESCRIPTION_KEYS = ("description", "detail", "message")
_RULE_KEYS = ("rule", "ruleId")
_RECOMMENDATION_KEYS = ("recommendation", "suggestion")

_RADIX_PREFIXES = ("0x", "0o", "0b")


@dataclass(frozen=True)
class DecodedPayload:
    """Canonical intermediate form of an upstream payload."""
    shape: str
    raw_findings: List[Any] = field(default_factory=list)
    summary: Optional[Dict[str, Any]] = None


# ---------------------------------------------------------------------------
# Coercion helpers
# ---------------------------------------------------------------------------
def to_number(value: Any) -> float:
    """
    Loose numeric coercion. Returns NaN when the value has no numeric reading.

    None and blank strings read as 0, booleans as 0/1. Strings are parsed
    as decimal floats, or as integers when prefixed with 0x / 0o / 0b.
    Integers too large for a float read as +/-inf. Containers are not numbers.
    """
    if value is None:
        return 0.0
    if isinstance(value, bool):
        return 1.0 if value else 0.0
    if isinstance(value, int):
        try:
            return float(value)
        except OverflowError:
            return math.copysign(math.inf, value)
    if isinstance(value, float):
        return value
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return 0.0
        if "_" in text:
            return math.nan
        if text[:2].lower() in _RADIX_PREFIXES:
            try:
                return to_number(int(text, 0))
            except ValueError:
                return math.nan
        try:
            return float(text)
        except ValueError:
            return math.nan
    return math.nan


def to_text(value: Any) -> str:
    """String coercion matching how JSON values read as text."""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (dict, list)):
        return json.dumps(value)
    return str(value)


def _first_present(raw: Dict[str, Any], keys: Sequence[str], default: Any = None) -> Any:
    for key in keys:
        value = raw.get(key)
        if value is not None:
            return value
    return default


def _first_truthy(raw: Dict[str, Any], keys: Sequence[str], default: Any) -> Any:
    for key in keys:
        value = raw.get(key)
        if value:
            return value
    return default


def _count(value: Any, default: int) -> int:
    if value is None:
        return default
    number = to_number(value)
    if not math.isfinite(number):
        return default
    return int(number)


# ---------------------------------------------------------------------------
# Decode
# ---------------------------------------------------------------------------
def decode_payload(payload: Any) -> DecodedPayload:
    """
    Classify a payload by container shape.

    Parameters
    ----------
    payload : Any
        Parsed JSON document from the analysis service.

    Returns
    -------
    DecodedPayload
        The first matching shape with its raw findings list.
    """
    if not isinstance(payload, dict):
        return DecodedPayload(shape=SHAPE_UNRECOGNIZED)

    findings = payload.get("findings")
    if isinstance(findings, list):
        summary = payload.get("summary")
        return DecodedPayload(
            shape=SHAPE_CANONICAL,
            raw_findings=findings,
            summary=summary if isinstance(summary, dict) else None,
        )

    for shape, key in _ALTERNATE_SHAPES:
        candidate = payload.get(key)
        if isinstance(candidate, list):
            return DecodedPayload(shape=shape, raw_findings=candidate)

    return DecodedPayload(shape=SHAPE_UNRECOGNIZED)


# ---------------------------------------------------------------------------
# Per-finding mapping
# ---------------------------------------------------------------------------
def _resolve_severity(raw: Dict[str, Any]) -> Severity:
    value = to_text(_first_truthy(raw, _SEVERITY_KEYS, "info")).lower()
    if value not in SEVERITIES:
        return Severity.INFO
    return Severity(value)


def _resolve_lines(raw: Dict[str, Any]) -> tuple:
    raw_start = _first_present(raw, _LINE_START_KEYS, 1)
    start = to_number(raw_start)
    line_start = max(1, int(start)) if math.isfinite(start) and start > 0 else 1

    raw_end = _first_present(raw, _LINE_END_KEYS, raw_start)
    end = to_number(raw_end)
    line_end = int(end) if math.isfinite(end) and end >= line_start else line_start
    return line_start, line_end


def map_finding(raw: Any) -> Finding:
    """
    Map one raw finding of any shape into a Finding.

    Non-mapping values are treated as an empty mapping, so every field
    takes its default.
    """
    if not isinstance(raw, dict):
        raw = {}

    line_start, line_end = _resolve_lines(raw)
    raw_id = _first_present(raw, _ID_KEYS)

    return Finding(
        id=to_text(raw_id) if raw_id is not None else generate_id(),
        title=to_text(_first_present(raw, _TITLE_KEYS, DEFAULT_TITLE)),
        description=to_text(_first_present(raw, _DESCRIPTION_KEYS, "")),
        severity=_resolve_severity(raw),
        line_start=line_start,
        line_end=line_end,
        rule=to_text(_first_present(raw, _RULE_KEYS, DEFAULT_RULE)),
        recommendation=to_text(_first_present(raw, _RECOMMENDATION_KEYS, DEFAULT_RECOMMENDATION)),
    )


def _dedupe_ids(findings: List[Finding]) -> List[Finding]:
    """Suffix repeated ids with -2, -3, ... so ids stay unique in one response."""
    taken = {f.id for f in findings}
    seen: set = set()
    unique: List[Finding] = []
    for finding in findings:
        if finding.id not in seen:
            seen.add(finding.id)
            unique.append(finding)
            continue
        n = 2
        while f"{finding.id}-{n}" in taken:
            n += 1
        new_id = f"{finding.id}-{n}"
        taken.add(new_id)
        seen.add(new_id)
        unique.append(finding.model_copy(update={"id": new_id}))
    return unique


def _trusted_summary(summary: Dict[str, Any], finding_count: int) -> Summary:
    by_severity = summary.get("bySeverity")
    if not isinstance(by_severity, dict):
        by_severity = {}
    return Summary(
        total=_count(summary.get("total"), finding_count),
        by_severity={severity: _count(by_severity.get(severity), 0) for severity in SEVERITIES},
    )


# ---------------------------------------------------------------------------
# Normalize
# ---------------------------------------------------------------------------
def is_empty_payload(payload: Any) -> bool:
    """None and falsy scalars count as empty; empty containers do not."""
    if payload is None:
        return True
    if isinstance(payload, (dict, list)):
        return False
    return not payload


def normalize(payload: Any) -> AnalysisResponse:
    """
    Normalize a parsed payload into an AnalysisResponse.

    Parameters
    ----------
    payload : Any
        Parsed body of a successful analysis call.

    Returns
    -------
    AnalysisResponse
        Findings in upstream order. An empty payload yields an
        EMPTY_RESPONSE error result.
    """
    if is_empty_payload(payload):
        logger.warning("Analysis service returned an empty payload")
        return AnalysisResponse.failure(EMPTY_RESPONSE_MESSAGE, code=EMPTY_RESPONSE)

    decoded = decode_payload(payload)
    findings = _dedupe_ids([map_finding(raw) for raw in decoded.raw_findings])

    if decoded.shape == SHAPE_CANONICAL and decoded.summary is not None:
        summary = _trusted_summary(decoded.summary, len(findings))
    else:
        summary = summarize(findings)

    logger.debug("Normalized %d finding(s) from %s payload", len(findings), decoded.shape)
    return AnalysisResponse(findings=findings, summary=summary)
