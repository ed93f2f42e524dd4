"""Tests for columns.py - display widths and columns."""

import pytest

from spanrite.columns import (
    char_width,
    display_width,
    expand_tabs,
    safe_column,
    visual_offset,
)
from spanrite.lines import Line


@pytest.mark.parametrize(
    "char, width",
    [("a", 1), ("中", 2), ("Ａ", 2), ("\u0301", 0), ("\u200b", 0), ("😀", 2)],
)
def test_char_width(char, width):
    assert char_width(char) == width


def test_display_width():
    assert display_width("a中b") == 4
    assert display_width("") == 0
    assert display_width("é") == 1


def test_display_width_tabs():
    assert display_width("\tab", 4) == 6
    assert display_width("a\tb", 4) == 5
    assert display_width("abcd\t", 4) == 8
    # Without a tab width, a tab is one column
    assert display_width("a\tb") == 3


def test_expand_tabs():
    assert expand_tabs("a\tb", 4) == "a   b"
    assert expand_tabs("\t", 4) == "    "
    # Wide characters take two columns towards the next tab stop
    assert expand_tabs("中\tx", 4) == "中  x"
    assert expand_tabs("日本語 x\tyz", 4) == "日本語 x    yz"
    text = "中文\tab\t!"
    assert display_width(expand_tabs(text, 4)) == display_width(text, 4)


class TestSafeColumn:
    """Tests for 1-based narration columns."""

    def test_start_is_inclusive(self):
        assert safe_column("hello", 2, True) == 3

    def test_end_is_exclusive(self):
        assert safe_column("hello", 2, False) == 2

    def test_wide_characters(self):
        assert safe_column("中文x", 6, True) == 5
        assert safe_column("中文x", 3, True) == 3

    def test_offset_inside_character(self):
        # Starts round down, ends round up
        assert safe_column("中文", 1, True) == 1
        assert safe_column("中文", 1, False) == 2

    def test_offset_past_text(self):
        assert safe_column("abc", 10, False) == 3


class TestVisualOffset:
    """Tests for drawing columns on a line."""

    line = Line(1, 0, 7, "source\n")

    def test_line_start(self):
        assert visual_offset(self.line, 0, True) == 0

    def test_end_of_text(self):
        assert visual_offset(self.line, 6, True) == 6
        assert visual_offset(self.line, 6, False) == 6

    def test_terminator_is_one_past_text(self):
        assert visual_offset(self.line, 7, False) == 7

    def test_absolute_offsets(self):
        line = Line(2, 7, 7, "  text\n")
        assert visual_offset(line, 9, True) == 2
        assert visual_offset(line, 13, False) == 6
        assert visual_offset(line, 14, False) == 7

    def test_tabs(self):
        line = Line(1, 0, 11, "text =\ttext")
        assert visual_offset(line, 7, True, 4) == 8
        assert visual_offset(line, 11, False, 4) == 12

    def test_wide_characters(self):
        line = Line(1, 0, 7, "中文x")
        assert visual_offset(line, 3, True) == 2
        assert visual_offset(line, 6, False) == 4
        assert visual_offset(line, 4, True) == 2
        assert visual_offset(line, 4, False) == 4

    def test_end_of_file(self):
        line = Line(1, 0, 4, "abcd", True)
        assert visual_offset(line, 4, True) == 4
