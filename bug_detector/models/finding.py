"""
Finding Models
==============
Pydantic models for analysis results.
This is the contract between the analysis pipeline and the UI.

All models are frozen. Python attributes are snake_case; the JSON form uses
camelCase aliases (lineStart, bySeverity, ...) and either form is accepted
on input.

Fields (Finding):
    id              — unique within one response
    title           — short headline
    description     — longer explanation (may be empty)
    severity        — info / low / medium / high / critical
    line_start      — 1-based first line, >= 1
    line_end        — 1-based last line, >= line_start
    rule            — opaque rule identifier ("N/A" when unknown)
    recommendation  — remediation text
"""
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from bug_detector.core.constants import DEFAULT_RECOMMENDATION, DEFAULT_RULE, SEVERITIES


class Severity(str, Enum):
    INFO = "info"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


def zero_counts() -> Dict[str, int]:
    return {severity: 0 for severity in SEVERITIES}


class _WireModel(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class Finding(_WireModel):
    id: str
    title: str
    description: str = ""
    severity: Severity = Severity.INFO
    line_start: int = Field(default=1, ge=1)
    line_end: int = Field(default=1, ge=1)
    rule: str = DEFAULT_RULE
    recommendation: str = DEFAULT_RECOMMENDATION

    @model_validator(mode="after")
    def _check_line_range(self) -> "Finding":
        if self.line_end < self.line_start:
            raise ValueError("line_end must be >= line_start")
        return self


class Summary(_WireModel):
    total: int = 0
    by_severity: Dict[str, int] = Field(default_factory=zero_counts)


class ErrorInfo(_WireModel):
    message: str
    status: Optional[int] = None
    code: Optional[str] = None
    details: Optional[Any] = None


class AnalysisResponse(_WireModel):
    findings: List[Finding] = Field(default_factory=list)
    summary: Summary = Field(default_factory=Summary)
    error: Optional[ErrorInfo] = None

    @model_validator(mode="after")
    def _check_error_is_empty(self) -> "AnalysisResponse":
        if self.error is not None and (self.findings or self.summary.total):
            raise ValueError("an error response must carry no findings")
        return self

    @classmethod
    def failure(
        cls,
        message: str,
        *,
        status: Optional[int] = None,
        code: Optional[str] = None,
        details: Any = None,
    ) -> "AnalysisResponse":
        """Build an error result: no findings, all-zero summary."""
        return cls(
            findings=[],
            summary=Summary(),
            error=ErrorInfo(message=message, status=status, code=code, details=details),
        )

    def to_wire(self) -> dict:
        """JSON-ready dict with camelCase keys; unset optionals are omitted."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
