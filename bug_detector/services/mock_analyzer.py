"""
Demo Heuristic Analyzer
=======================
Offline stand-in for the remote analysis service.

NO NETWORK HERE. Each heuristic is a single substring/regex test over the
whole snippet, so findings are not line-aware (lines are always 1..1).

Heuristics run in a fixed order and independently of each other:
    1. "todo" anywhere (case-insensitive)     → info     style/todo-comment
    2. eval(...) call                          → high     security/no-eval
    3. password = "<literal>" (any quote)      → critical security/no-hardcoded-secrets
    4. `var` declaration in a JS-like language → low      style/no-var

If none fire, a single info finding (mock/none) is returned.
"""
import re
from dataclasses import dataclass
from typing import Callable, List, Optional

from bug_detector.models.finding import AnalysisResponse, Finding, Severity
from bug_detector.services.summarizer import summarize
from bug_detector.utils.ids import generate_id

_EVAL_RE = re.compile(r"\beval\s*\(")
_PASSWORD_RE = re.compile(r"password\s*=\s*[\"'`].+[\"'`]", re.IGNORECASE)
_VAR_RE = re.compile(r"\bvar\b")


@dataclass(frozen=True)
class Heuristic:
    """One demo check and the finding it produces."""
    rule: str
    severity: Severity
    title: str
    description: str
    recommendation: str
    matches: Callable[[str, str], bool]

    def to_finding(self) -> Finding:
        return Finding(
            id=generate_id(),
            title=self.title,
            description=self.description,
            severity=self.severity,
            line_start=1,
            line_end=1,
            rule=self.rule,
            recommendation=self.recommendation,
        )


HEURISTICS: List[Heuristic] = [
    Heuristic(
        rule="style/todo-comment",
        severity=Severity.INFO,
        title="TODO present in code",
        description="A TODO comment is present; unresolved tasks may indicate incomplete logic.",
        recommendation="Create an issue and track a clear action item or address the TODO before release.",
        matches=lambda code, language: "todo" in code.lower(),
    ),
    Heuristic(
        rule="security/no-eval",
        severity=Severity.HIGH,
        title="Use of eval detected",
        description="The use of eval can introduce security vulnerabilities and should be avoided.",
        recommendation="Refactor code to avoid eval; use safer alternatives such as JSON parsing or function mappings.",
        matches=lambda code, language: bool(_EVAL_RE.search(code)),
    ),
    Heuristic(
        rule="security/no-hardcoded-secrets",
        severity=Severity.CRITICAL,
        title="Hardcoded secret detected",
        description="Potential hardcoded credential or secret found.",
        recommendation="Remove secrets from code and load from secure environment variables or a secret manager.",
        matches=lambda code, language: bool(_PASSWORD_RE.search(code)),
    ),
    Heuristic(
        rule="style/no-var",
        severity=Severity.LOW,
        title="var usage",
        description="Use of var can lead to unexpected hoisting behavior.",
        recommendation="Prefer let or const for block-scoped declarations.",
        matches=lambda code, language: "js" in language.lower() and bool(_VAR_RE.search(code)),
    ),
]

NO_ISSUES = Heuristic(
    rule="mock/none",
    severity=Severity.INFO,
    title="No issues detected in mock mode",
    description="Mock analysis did not find notable issues. Run against a connected backend for full analysis.",
    recommendation="Proceed, or integrate with the backend for deeper analysis.",
    matches=lambda code, language: True,
)


def run_heuristics(snippet: str, language: str) -> List[Finding]:
    """Return one finding per matching heuristic, in HEURISTICS order."""
    if not snippet:
        return []
    return [h.to_finding() for h in HEURISTICS if h.matches(snippet, language)]


def mock_analyze(snippet: Optional[str], language: Optional[str]) -> AnalysisResponse:
    """
    Analyze a snippet with the demo heuristics.

    Parameters
    ----------
    snippet : str
        Source code; surrounding whitespace is ignored.
    language : str
        Language tag, only consulted by the `var` check.

    Returns
    -------
    AnalysisResponse
        Never empty: falls back to the single mock/none finding.
    """
    trimmed = (snippet or "").strip()
    findings = run_heuristics(trimmed, language or "")
    if not findings:
        findings = [NO_ISSUES.to_finding()]
    return AnalysisResponse(findings=findings, summary=summarize(findings))
