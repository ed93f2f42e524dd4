"""Tests for layout.py - span classification and gutter depth."""

from spanrite.layout import (
    CONTAINED,
    ENDS,
    FLYBY,
    STARTS,
    classify,
    contained_spans,
    gutter_spans,
    max_gutter,
)
from spanrite.lines import split_lines
from spanrite.source import LabeledSpan, SourceSpan

SOURCE = b"source\n  text\n    here"
L1, L2, L3 = split_lines(SOURCE, source_length=len(SOURCE))


def test_lines_fixture():
    assert (L1.offset, L1.length) == (0, 7)
    assert (L2.offset, L2.length) == (7, 7)
    assert (L3.offset, L3.length, L3.at_end_of_file) == (14, 8, True)


class TestClassify:
    """Tests for the relation of one span to one line."""

    def test_contained(self):
        assert classify(L2, SourceSpan(9, 4)) == CONTAINED

    def test_contained_including_terminator(self):
        assert classify(L2, SourceSpan(9, 5)) == CONTAINED

    def test_starts(self):
        assert classify(L2, SourceSpan(9, 6)) == STARTS

    def test_starts_then_ends(self):
        span = SourceSpan(2, 10)
        assert classify(L1, span) == STARTS
        assert classify(L2, span) == ENDS
        assert classify(L3, span) is None

    def test_flyby(self):
        span = SourceSpan(2, 15)
        assert classify(L1, span) == STARTS
        assert classify(L2, span) == FLYBY
        assert classify(L3, span) == ENDS

    def test_ends_at_end_of_file(self):
        assert classify(L3, SourceSpan(9, 13)) == ENDS

    def test_point(self):
        assert classify(L2, SourceSpan(7, 0)) == CONTAINED
        assert classify(L1, SourceSpan(7, 0)) is None

    def test_point_on_terminator(self):
        assert classify(L1, SourceSpan(6, 0)) == CONTAINED

    def test_point_at_end_of_file(self):
        assert classify(L3, SourceSpan(22, 0)) == CONTAINED
        # Only the final unterminated line takes a point at its end
        assert classify(L2, SourceSpan(14, 0)) is None

    def test_no_intersection(self):
        assert classify(L1, SourceSpan(9, 4)) is None
        assert classify(L3, SourceSpan(0, 3)) is None

    def test_single_line_is_always_contained(self):
        for offset in range(7, 14):
            assert classify(L2, SourceSpan(offset, 14 - offset)) == CONTAINED


class TestGutter:
    """Tests for gutter depth over a window."""

    def test_single_line_spans_need_no_gutter(self):
        spans = [SourceSpan(0, 3), SourceSpan(9, 4), SourceSpan(16, 2)]
        assert max_gutter([L1, L2, L3], spans) == 0

    def test_nested_spans(self):
        outer = SourceSpan(2, 15)
        inner = SourceSpan(9, 10)
        assert max_gutter([L1, L2, L3], [outer, inner]) == 2
        assert gutter_spans(L1, [outer, inner]) == [outer]
        assert gutter_spans(L2, [outer, inner]) == [outer, inner]

    def test_gutter_keeps_label_order(self):
        first = LabeledSpan(9, 10, "b")
        second = LabeledSpan(2, 15, "a")
        assert gutter_spans(L2, [first, second]) == [first, second]

    def test_empty_window(self):
        assert max_gutter([], [SourceSpan(0, 1)]) == 0

    def test_contained_spans(self):
        multi = SourceSpan(2, 10)
        single = SourceSpan(9, 2)
        assert contained_spans(L2, [multi, single]) == [single]
