"""
Severity Summarizer
===================
Reduce a list of findings to per-severity counts.

total always equals len(findings). A severity outside the known set is
included in total but not in any bucket.
"""
from typing import Iterable

from bug_detector.models.finding import Finding, Summary, zero_counts


def summarize(findings: Iterable[Finding]) -> Summary:
    """Count findings per severity."""
    counts = zero_counts()
    total = 0
    for finding in findings:
        total += 1
        key = getattr(finding.severity, "value", finding.severity)
        if key in counts:
            counts[key] += 1
    return Summary(total=total, by_severity=counts)
