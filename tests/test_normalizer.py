"""
Unit Tests — Finding Normalizer
================================
Covers the payload decode step, per-finding field aliases and summary trust rules.
"""
import json
import math

import pytest

from bug_detector.core.constants import DEFAULT_RECOMMENDATION, EMPTY_RESPONSE
from bug_detector.models.finding import Severity
from bug_detector.services.normalizer import (
    SHAPE_CANONICAL,
    SHAPE_ISSUES,
    SHAPE_RESULTS,
    SHAPE_UNRECOGNIZED,
    decode_payload,
    map_finding,
    normalize,
    to_number,
)
from bug_detector.services.summarizer import summarize

ZERO = {"info": 0, "low": 0, "medium": 0, "high": 0, "critical": 0}


# ===================================================================
# Empty payloads
# ===================================================================
@pytest.mark.parametrize("payload", [None, False, 0, ""])
def test_empty_payload_is_error(payload):
    result = normalize(payload)
    assert result.findings == []
    assert result.summary.total == 0
    assert result.summary.by_severity == ZERO
    assert result.error.message == "Empty response received from server"
    assert result.error.code == EMPTY_RESPONSE


def test_empty_dict_is_not_an_error():
    result = normalize({})
    assert result.error is None
    assert result.findings == []
    assert result.summary.total == 0


# ===================================================================
# Decode step
# ===================================================================
def test_decode_canonical_with_summary():
    decoded = decode_payload({"findings": [{"id": "a"}], "summary": {"total": 1}})
    assert decoded.shape == SHAPE_CANONICAL
    assert decoded.raw_findings == [{"id": "a"}]
    assert decoded.summary == {"total": 1}


def test_decode_canonical_ignores_non_mapping_summary():
    decoded = decode_payload({"findings": [], "summary": "lots"})
    assert decoded.shape == SHAPE_CANONICAL
    assert decoded.summary is None


def test_decode_issues_before_results():
    decoded = decode_payload({"issues": [1], "results": [2]})
    assert decoded.shape == SHAPE_ISSUES
    assert decoded.raw_findings == [1]


def test_decode_results():
    decoded = decode_payload({"results": [{"title": "x"}], "findings": "not-a-list"})
    assert decoded.shape == SHAPE_RESULTS


@pytest.mark.parametrize("payload", [{"raw": "OK"}, [1, 2], "text", 42, {"issues": "nope"}])
def test_decode_unrecognized(payload):
    decoded = decode_payload(payload)
    assert decoded.shape == SHAPE_UNRECOGNIZED
    assert decoded.raw_findings == []


# ===================================================================
# Per-finding mapping
# ===================================================================
def test_invalid_severity_downgrades_to_info():
    assert map_finding({"severity": "WARN"}).severity == Severity.INFO


def test_severity_is_lowercased():
    assert map_finding({"severity": "HIGH"}).severity == Severity.HIGH


def test_level_used_when_severity_missing():
    assert map_finding({"level": "Critical"}).severity == Severity.CRITICAL


def test_empty_severity_falls_through_to_level():
    assert map_finding({"severity": "", "level": "low"}).severity == Severity.LOW


def test_line_end_defaults_to_line_start():
    finding = map_finding({"lineStart": 5})
    assert finding.line_start == 5
    assert finding.line_end == 5


def test_line_alias_and_end_line_alias():
    finding = map_finding({"line": "3", "endLine": 7})
    assert finding.line_start == 3
    assert finding.line_end == 7


@pytest.mark.parametrize("value", [0, -4, "abc", None, float("inf"), float("nan"), [1]])
def test_bad_line_start_defaults_to_one(value):
    finding = map_finding({"lineStart": value})
    assert finding.line_start == 1
    assert finding.line_end >= finding.line_start


def test_line_end_before_start_is_clamped():
    finding = map_finding({"lineStart": 10, "lineEnd": 2})
    assert finding.line_start == 10
    assert finding.line_end == 10


def test_line_end_compared_against_resolved_start():
    finding = map_finding({"lineStart": -3, "lineEnd": -1})
    assert finding.line_start == 1
    assert finding.line_end == 1


def test_id_aliases_in_order():
    assert map_finding({"id": 7, "ruleId": "r", "rule": "q"}).id == "7"
    assert map_finding({"ruleId": "r", "rule": "q"}).id == "r"
    assert map_finding({"rule": "q"}).id == "q"


def test_missing_id_is_generated():
    first = map_finding({})
    second = map_finding({})
    assert first.id
    assert first.id != second.id


def test_text_fields_and_defaults():
    finding = map_finding({})
    assert finding.title == "Finding"
    assert finding.description == ""
    assert finding.rule == "N/A"
    assert finding.recommendation == DEFAULT_RECOMMENDATION


def test_message_feeds_title_and_description():
    finding = map_finding({"message": "Unused variable"})
    assert finding.title == "Unused variable"
    assert finding.description == "Unused variable"


def test_detail_preferred_over_message_for_description():
    finding = map_finding({"message": "m", "detail": "d"})
    assert finding.description == "d"


def test_rule_id_and_suggestion_aliases():
    finding = map_finding({"ruleId": "no-eval", "suggestion": "Don't."})
    assert finding.rule == "no-eval"
    assert finding.recommendation == "Don't."


def test_non_mapping_finding_gets_defaults():
    finding = map_finding("just a string")
    assert finding.title == "Finding"
    assert finding.severity == Severity.INFO
    assert finding.line_start == finding.line_end == 1


def test_to_number_readings():
    assert to_number(True) == 1.0
    assert to_number("  12 ") == 12.0
    assert to_number("") == 0.0
    assert to_number(None) == 0.0
    assert to_number("1_000") != to_number("1_000")  # NaN


# ===================================================================
# Summary handling
# ===================================================================
def test_well_formed_summary_is_trusted():
    result = normalize({
        "findings": [{"id": "a", "severity": "high"}],
        "summary": {"total": "9", "bySeverity": {"high": 4, "low": "2"}},
    })
    assert result.summary.total == 9
    assert result.summary.by_severity == {"info": 0, "low": 2, "medium": 0, "high": 4, "critical": 0}


def test_summary_missing_total_uses_finding_count():
    result = normalize({"findings": [{"id": "a"}, {"id": "b"}], "summary": {}})
    assert result.summary.total == 2
    assert result.summary.by_severity == ZERO


def test_summary_non_numeric_values_default():
    result = normalize({"findings": [{}], "summary": {"total": "many", "bySeverity": {"info": "x"}}})
    assert result.summary.total == 1
    assert result.summary.by_severity["info"] == 0


def test_malformed_summary_is_recomputed():
    result = normalize({"findings": [{"id": "a", "severity": "medium"}], "summary": [1, 2]})
    assert result.summary == summarize(result.findings)
    assert result.summary.by_severity["medium"] == 1


def test_alternate_shape_always_recomputes():
    result = normalize({"issues": [{"level": "high"}, {"level": "low"}], "summary": {"total": 99}})
    assert result.summary.total == 2
    assert result.summary.by_severity["high"] == 1
    assert result.summary.by_severity["low"] == 1


def test_results_shape_is_mapped():
    result = normalize({"results": [{"message": "m", "line": 4}]})
    assert len(result.findings) == 1
    assert result.findings[0].title == "m"
    assert result.findings[0].line_start == 4


def test_unrecognized_payload_has_no_findings_and_no_error():
    result = normalize({"findings": [], "raw": "OK"})
    assert result.findings == []
    assert result.error is None
    assert result.summary.total == 0


def test_findings_keep_upstream_order():
    result = normalize({"findings": [{"id": "z"}, {"id": "a"}, {"id": "m"}]})
    assert [f.id for f in result.findings] == ["z", "a", "m"]


def test_repeated_ids_are_made_unique():
    result = normalize({"findings": [{"rule": "r"}, {"rule": "r"}, {"rule": "r-2"}]})
    ids = [f.id for f in result.findings]
    assert len(set(ids)) == 3
    assert ids[0] == "r"
    assert ids[2] == "r-2"
    assert all(f.rule.startswith("r") for f in result.findings)


# ===================================================================
# Oversized and prefixed numbers
# ===================================================================
HUGE = int("1" + "0" * 400)


def test_huge_integer_line_start_falls_back():
    result = normalize({"findings": [{"id": "a", "lineStart": HUGE}]})
    assert result.error is None
    assert result.findings[0].line_start == 1
    assert result.findings[0].line_end == 1


def test_huge_integer_line_end_falls_back_to_start():
    finding = map_finding({"lineStart": 4, "lineEnd": HUGE})
    assert finding.line_start == 4
    assert finding.line_end == 4


def test_huge_summary_counts_fall_back():
    result = normalize({
        "findings": [{"id": "a"}, {"id": "b"}],
        "summary": {"total": HUGE, "bySeverity": {"high": -HUGE, "low": 1}},
    })
    assert result.summary.total == 2
    assert result.summary.by_severity["high"] == 0
    assert result.summary.by_severity["low"] == 1


def test_huge_integer_parsed_from_json_body():
    payload = json.loads('{"findings": [{"id": "a", "lineStart": 1' + "0" * 400 + "}]}")
    assert normalize(payload).findings[0].line_start == 1


def test_to_number_overflow_keeps_sign():
    assert to_number(HUGE) == math.inf
    assert to_number(-HUGE) == -math.inf


def test_to_number_radix_prefixes():
    assert to_number("0x10") == 16.0
    assert to_number("0B11") == 3.0
    assert to_number("0o7") == 7.0
    assert math.isnan(to_number("0xZZ"))
    assert math.isnan(to_number("-0x10"))


def test_hex_line_number():
    assert map_finding({"line": "0x1A"}).line_start == 26
