from __future__ import annotations

import json
from typing import Any

from .diagnostic import (
    Diagnostic,
    cause_message,
    causes,
    into_diagnostic,
    source_name_of,
)
from .logging import logger
from .tty import MAX_RELATED_DEPTH


class JSONReportHandler:
    """Machine readable reports, one JSON object per diagnostic."""

    def __init__(self, *, indent: int | None = None):
        self.indent = indent

    def render_report(self, diagnostic: BaseException) -> str:
        report = report_dict(diagnostic)
        return json.dumps(report, indent=self.indent, ensure_ascii=False)


def report_dict(diagnostic: BaseException, depth: int = 0) -> dict[str, Any]:
    """Diagnostic as plain data, with related diagnostics nested."""
    diagnostic = into_diagnostic(diagnostic)
    report: dict[str, Any] = {"message": diagnostic.message}
    if diagnostic.code:
        report["code"] = diagnostic.code
    report["severity"] = diagnostic.effective_severity.value
    report["causes"] = [cause_message(exc) for exc in causes(diagnostic)]
    if diagnostic.url:
        report["url"] = diagnostic.url
    if diagnostic.help:
        report["help"] = diagnostic.help
    report["filename"] = source_name_of(diagnostic) or ""
    report["labels"] = [_label_dict(label) for label in diagnostic.labels]
    report["related"] = _related(diagnostic, depth)
    return report


def _label_dict(label: Any) -> dict[str, Any]:
    data: dict[str, Any] = {}
    if label.label is not None:
        data["label"] = label.label
    data["span"] = {"offset": label.offset, "length": label.length}
    return data


def _related(diagnostic: Diagnostic, depth: int) -> list[dict[str, Any]]:
    if not diagnostic.related:
        return []
    if depth + 1 >= MAX_RELATED_DEPTH:
        logger.warning(
            "Related diagnostics nested deeper than %d levels were not rendered",
            MAX_RELATED_DEPTH,
        )
        return []
    return [report_dict(related, depth + 1) for related in diagnostic.related]
