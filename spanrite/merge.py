from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

from .columns import safe_column
from .logging import logger
from .source import (
    LabeledSpan,
    OutOfBounds,
    Source,
    SourceSpan,
    SpanContents,
    read_span,
    source_bytes,
)


@dataclass
class Window:
    """Source excerpt shown as one snippet, with the labels it displays."""

    span: SourceSpan
    contents: SpanContents
    labels: list[LabeledSpan] = field(default_factory=list)


def anchor_label(labels: Sequence[LabeledSpan]) -> LabeledSpan | None:
    """The label whose position titles a snippet: primary, else earliest."""
    if not labels:
        return None
    for label in labels:
        if label.primary:
            return label
    return min(labels, key=lambda label: label.offset)


def anchor_position(source: Source, labels: Sequence[LabeledSpan]) -> tuple[int, int]:
    """1-based line and display column where a snippet's anchor label starts.

    The column counts terminal columns, not bytes, so it agrees with the
    columns used when narrating labels.
    """
    label = anchor_label(labels)
    assert label is not None, "a snippet always has labels"
    contents = read_span(source, label.span)
    prefix = source_bytes(source)[label.offset - contents.column : label.offset]
    text = prefix.decode("utf-8", errors="replace")
    return contents.line + 1, safe_column(text, len(text.encode("utf-8")), True)


def merge_windows(
    source: Source,
    labels: Iterable[LabeledSpan],
    before: int = 1,
    after: int = 1,
) -> tuple[list[Window], list[LabeledSpan]]:
    """Group labels into display windows over a shared source.

    Labels are visited by offset. A label joins the current window when the
    window's lines reach its first line; the window is then re-resolved
    over the union of both spans. Windows whose line ranges neither touch
    nor overlap stay separate.

    Returns:
        (windows, failures) where failures are labels that do not fit in
        the source.
    """
    resolved: list[tuple[LabeledSpan, SpanContents]] = []
    failures: list[LabeledSpan] = []
    for label in sorted(labels, key=lambda label: label.offset):
        try:
            resolved.append((label, read_span(source, label.span, before, after)))
        except OutOfBounds:
            logger.debug("Label %r does not fit in its source", label)
            failures.append(label)

    windows: list[Window] = []
    for label, contents in resolved:
        if windows:
            last = windows[-1]
            if last.contents.line + last.contents.line_count >= contents.line:
                offset = min(last.span.offset, label.offset)
                end = max(last.span.end, label.end)
                span = SourceSpan(offset, end - offset)
                try:
                    merged = read_span(source, span, before, after)
                except OutOfBounds:
                    pass
                else:
                    last.span = span
                    last.contents = merged
                    last.labels.append(label)
                    continue
        windows.append(Window(label.span, contents, [label]))
    return windows, failures


def display_label(label: LabeledSpan, data: bytes) -> LabeledSpan:
    """Move a point just past a final line terminator onto the last line."""
    if label.length or label.offset != len(data) or not data.endswith(b"\n"):
        return label
    offset = len(data) - (2 if data.endswith(b"\r\n") else 1)
    return LabeledSpan(offset, 0, label.label, label.primary)
