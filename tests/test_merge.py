"""Tests for merge.py - grouping labels into windows."""

from spanrite.merge import (
    anchor_label,
    anchor_position,
    display_label,
    merge_windows,
)
from spanrite.source import LabeledSpan, NamedSource, SourceSpan

SOURCE = "source\n  text\n    here"


def test_overlapping_lines_merge():
    first = LabeledSpan(0, 8, "first")
    second = LabeledSpan(9, 10, "second")
    windows, failures = merge_windows(SOURCE, [first, second], 1, 1)
    assert failures == []
    assert len(windows) == 1
    window = windows[0]
    assert window.labels == [first, second]
    assert window.span == SourceSpan(0, 19)
    assert window.contents.data == SOURCE.encode()
    assert window.contents.line == 0


def test_labels_are_sorted_by_offset():
    late = LabeledSpan(16, 4, "late")
    early = LabeledSpan(0, 6, "early")
    windows, _ = merge_windows(SOURCE, [late, early], 1, 1)
    assert windows[0].labels == [early, late]


def test_distant_labels_stay_apart():
    source = "\n".join(f"line {i}" for i in range(20))
    top = LabeledSpan(0, 4, "top")
    offset = source.index("line 10")
    bottom = LabeledSpan(offset, 4, "bottom")
    windows, failures = merge_windows(source, [top, bottom], 1, 1)
    assert failures == []
    assert [window.labels for window in windows] == [[top], [bottom]]
    assert windows[1].contents.line == 9


def test_abutting_windows_merge():
    # The first label includes its line terminator, reaching the next line
    source = "abc\ndef\n"
    first = LabeledSpan(0, 4, "a")
    second = LabeledSpan(4, 3, "d")
    windows, _ = merge_windows(source, [first, second], 0, 0)
    assert len(windows) == 1
    assert windows[0].span == SourceSpan(0, 7)


def test_adjacent_lines_without_context_stay_apart():
    source = "abc\ndef\n"
    first = LabeledSpan(0, 3, "a")
    second = LabeledSpan(4, 3, "d")
    windows, _ = merge_windows(source, [first, second], 0, 0)
    assert len(windows) == 2


def test_out_of_bounds_label_is_a_failure():
    source = "source\n  text"
    good = LabeledSpan(9, 4, "good")
    bad = LabeledSpan(50, 6, "bad")
    windows, failures = merge_windows(source, [bad, good], 1, 1)
    assert failures == [bad]
    assert [window.labels for window in windows] == [[good]]


def test_no_labels():
    assert merge_windows(SOURCE, [], 1, 1) == ([], [])


class TestAnchor:
    """Tests for choosing the label that titles a window."""

    def test_earliest_wins(self):
        labels = [LabeledSpan(9, 4, "b"), LabeledSpan(2, 1, "a")]
        assert anchor_label(labels).label == "a"

    def test_primary_wins(self):
        labels = [LabeledSpan(2, 1, "a"), LabeledSpan(9, 4, "b", primary=True)]
        assert anchor_label(labels).label == "b"

    def test_primary_at_same_position(self):
        labels = [LabeledSpan(9, 4, "plain"), LabeledSpan(9, 4, "main", primary=True)]
        assert anchor_label(labels).label == "main"

    def test_empty(self):
        assert anchor_label([]) is None

    def test_position_is_in_display_columns(self):
        labels = [LabeledSpan(10, 1, "x")]
        assert anchor_position("日本語 x", labels) == (1, 8)
        named = NamedSource("a.txt", SOURCE)
        assert anchor_position(named, [LabeledSpan(16, 2)]) == (3, 3)


class TestDisplayLabel:
    """Tests for placing a point after the final newline."""

    def test_point_after_final_newline(self):
        label = LabeledSpan(4, 0, "eof")
        assert display_label(label, b"abc\n") == LabeledSpan(3, 0, "eof")

    def test_point_after_final_crlf(self):
        label = LabeledSpan(5, 0, "eof")
        assert display_label(label, b"abc\r\n").offset == 3

    def test_other_labels_unchanged(self):
        label = LabeledSpan(1, 0, "x")
        assert display_label(label, b"abc\n") is label
        at_end = LabeledSpan(3, 0, "end")
        assert display_label(at_end, b"abc") is at_end
