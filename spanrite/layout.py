from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Any

from .lines import Line

# How a span relates to a line
CONTAINED = "contained"
STARTS = "starts"
ENDS = "ends"
FLYBY = "flyby"

GUTTER_KINDS = (STARTS, ENDS, FLYBY)


def classify(line: Line, span: Any) -> str | None:
    """Relation of a span to a line: contained, starts, ends, flyby or None.

    A span is anything with ``offset`` and ``length``. A span that begins
    and finishes on the same line is always contained, so only spans over
    several lines ever need a gutter.
    """
    lo, hi = line.offset, line.offset + line.length
    start, end = span.offset, span.offset + span.length
    if span.length == 0:
        if lo <= start < hi or (line.at_end_of_file and start == hi):
            return CONTAINED
        return None
    if lo <= start < hi:
        return CONTAINED if end <= hi else STARTS
    if start < lo:
        if lo < end <= hi:
            return ENDS
        if end > hi:
            return FLYBY
    return None


def is_multiline(line: Line, span: Any) -> bool:
    return classify(line, span) in GUTTER_KINDS


def gutter_spans(line: Line, spans: Iterable[Any]) -> list[Any]:
    """Spans that need the gutter on this line, in label order."""
    return [span for span in spans if is_multiline(line, span)]


def max_gutter(lines: Sequence[Line], spans: Sequence[Any]) -> int:
    """Gutter depth of a window: the most multi-line spans crossing any line."""
    return max((len(gutter_spans(line, spans)) for line in lines), default=0)


def contained_spans(line: Line, spans: Iterable[Any]) -> list[Any]:
    return [span for span in spans if classify(line, span) == CONTAINED]
