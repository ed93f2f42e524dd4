"""Tests for jsonreport.py - machine readable reports."""

import json
import logging

from spanrite import Diagnostic, JSONReportHandler, LabeledSpan, NamedSource, Severity
from spanrite.jsonreport import report_dict


def test_minimal_report():
    output = JSONReportHandler().render_report(Diagnostic("oops!"))
    assert output == (
        '{"message": "oops!", "severity": "error", "causes": [], '
        '"filename": "", "labels": [], "related": []}'
    )


def test_full_report():
    diagnostic = Diagnostic(
        "oops!",
        code="oops::my::bad",
        help="try doing it better next time?",
        url="https://example.com",
        source_code=NamedSource("bad_file.rs", "source\n  text\n    here"),
        labels=[LabeledSpan(9, 4, "this bit here"), LabeledSpan(0, 0)],
        cause=ValueError("underlying"),
    )
    report = json.loads(JSONReportHandler().render_report(diagnostic))
    assert list(report) == [
        "message",
        "code",
        "severity",
        "causes",
        "url",
        "help",
        "filename",
        "labels",
        "related",
    ]
    assert report["causes"] == ["underlying"]
    assert report["filename"] == "bad_file.rs"
    assert report["labels"] == [
        {"label": "this bit here", "span": {"offset": 9, "length": 4}},
        {"span": {"offset": 0, "length": 0}},
    ]


def test_labels_keep_their_offsets():
    # Points past the final newline are not moved in data output
    diagnostic = Diagnostic(
        "oops!", source_code="abc\n", labels=[LabeledSpan(4, 0, "eof")]
    )
    assert report_dict(diagnostic)["labels"][0]["span"]["offset"] == 4


def test_out_of_bounds_labels_are_reported_as_given():
    diagnostic = Diagnostic(
        "oops!", source_code="abc", labels=[LabeledSpan(50, 6, "bad")]
    )
    assert report_dict(diagnostic)["labels"] == [
        {"label": "bad", "span": {"offset": 50, "length": 6}}
    ]


def test_related():
    diagnostic = Diagnostic(
        "oops!",
        related=[Diagnostic("careful", severity=Severity.WARNING)],
    )
    related = report_dict(diagnostic)["related"]
    assert len(related) == 1
    assert related[0]["message"] == "careful"
    assert related[0]["severity"] == "warning"


def test_plain_exception():
    report = report_dict(KeyError("missing"))
    assert report["message"] == "'missing'"
    assert report["severity"] == "error"


def test_unicode_and_indent():
    diagnostic = Diagnostic("ünïcode ✓")
    output = JSONReportHandler(indent=2).render_report(diagnostic)
    assert "ünïcode ✓" in output
    assert output.startswith('{\n  "message"')


def test_deep_related_is_cut(caplog):
    diagnostic = Diagnostic("level 0")
    for level in range(1, 21):
        diagnostic = Diagnostic(f"level {level}", related=[diagnostic])
    with caplog.at_level(logging.WARNING, logger="spanrite"):
        report = report_dict(diagnostic)
    depth = 0
    while report["related"]:
        report = report["related"][0]
        depth += 1
    assert depth == 15
    assert any("nested deeper" in r.getMessage() for r in caplog.records)
