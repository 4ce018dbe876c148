"""
Tests for focus_audit.schemas.

This module tests:
- Snapshot immutability and evidence helpers
- Report bookkeeping
- Report reloading and text rendering
"""

import pytest
from pydantic import ValidationError

from focus_audit.schemas import (
    AuditReport,
    CheckStatus,
    Direction,
    Geometry,
    Role,
    Verdict,
    WalkResult,
    format_report,
    get_report_schema,
    validate_and_parse,
)

from fakes import make_snapshot


class TestNodeSnapshot:

    def test_frozen(self):
        snapshot = make_snapshot("a")
        with pytest.raises(ValidationError):
            snapshot.text = "changed"

    def test_describe_truncates(self):
        snapshot = make_snapshot(
            "a", text="x" * 80, attributes={"id": "nav", "href": "/" + "p" * 80}
        )
        description = snapshot.describe()
        assert description.startswith("a (id=nav)")
        assert 'Text: "' + "x" * 50 + '..."' in description
        assert "[href: /" + "p" * 59 + "...]" in description

    def test_html_snippet_for_input(self):
        snapshot = make_snapshot("i", role=Role.INPUT, attributes={"id": "q", "type": "search"})
        assert snapshot.html_snippet() == '<input id="q" type="search">'

    def test_missing_style_is_empty(self):
        assert make_snapshot("a", style={}).style("outline") == ""

    def test_negative_geometry_rejected(self):
        with pytest.raises(ValidationError):
            Geometry(width=-1, height=10)


class TestAuditReport:

    def _report(self):
        report = AuditReport(target_url="https://example.test/", device="iPhone 15")
        report.record(Verdict(check_name="One", status=CheckStatus.PASSED, summary="ok"))
        report.record(Verdict(check_name="Two", status=CheckStatus.WARNING, summary="hm"))
        report.record(Verdict(check_name="Three", status=CheckStatus.ERROR, summary="boom"))
        return report

    def test_counts_and_filters(self):
        report = self._report()
        assert report.counts == {"passed": 1, "failed": 0, "warning": 1, "error": 1}
        assert [v.check_name for v in report.by_status(CheckStatus.WARNING)] == ["Two"]
        assert not report.passed

    def test_get_returns_latest(self):
        report = self._report()
        report.record(Verdict(check_name="One", status=CheckStatus.FAILED, summary="again"))
        assert report.get("One").summary == "again"
        assert report.get("Missing") is None

    def test_json_round_trip(self):
        report = self._report()
        parsed, error = validate_and_parse(report.model_dump_json())
        assert error is None
        assert parsed.counts == report.counts

    def test_invalid_json_reports_error(self):
        parsed, error = validate_and_parse("{not json")
        assert parsed is None
        assert error

    def test_schema_names_fields(self):
        assert "verdicts" in get_report_schema()["properties"]

    def test_format_report(self):
        text = format_report(self._report())
        assert "URL: https://example.test/" in text
        assert "Device: iPhone 15" in text
        assert "Status: WARNING" in text
        assert "passed=1" in text


def test_walk_result_summary_for_budget_stop():
    result = WalkResult(direction=Direction.FORWARD, steps=7, stopped_by_budget=True)
    assert result.summary == "stopped at 7 steps without closing the cycle"
