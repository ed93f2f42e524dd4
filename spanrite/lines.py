from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Line:
    """One source line of a display window.

    ``text`` includes the line terminator (if any) so that the lines of a
    window concatenate back to the window itself.
    """

    line_number: int
    offset: int
    length: int
    text: str
    at_end_of_file: bool = False

    @property
    def content(self) -> str:
        """Line text without its terminator."""
        if self.text.endswith("\r\n"):
            return self.text[:-2]
        if self.text.endswith("\n"):
            return self.text[:-1]
        return self.text

    @property
    def end(self) -> int:
        return self.offset + self.length


def split_lines(
    data: bytes,
    offset: int = 0,
    line_number: int = 1,
    source_length: int | None = None,
) -> list[Line]:
    """Split a window of source bytes into lines.

    Args:
        data: The window bytes.
        offset: Absolute byte offset of the window in its source.
        line_number: 1-based number of the first line of the window.
        source_length: Length of the whole source, used to tell whether an
            unterminated final line really is the end of the file.

    Returns:
        Lines in order, each with absolute offsets.
    """
    text = data.decode("utf-8", errors="replace")
    lines: list[Line] = []
    current: list[str] = []
    line_offset = offset
    length = 0
    previous = ""
    for c in text:
        current.append(c)
        length += len(c.encode("utf-8"))
        if c == "\n":
            lines.append(Line(line_number, line_offset, length, "".join(current)))
            line_number += 1
            line_offset += length
            length = 0
            current = []
        previous = c
    if current:
        window_end = offset + len(data)
        at_eof = previous != "\n" and (
            source_length is None or window_end >= source_length
        )
        lines.append(
            Line(line_number, line_offset, length, "".join(current), at_eof)
        )
    return lines


def whole_lines(data: bytes, start: int, end: int) -> tuple[int, int]:
    """Widen a byte range of data to full lines, terminators included."""
    start = data.rfind(b"\n", 0, start) + 1
    if end > start and data[end - 1] == 0x0A:
        return start, end
    newline = data.find(b"\n", end)
    return start, len(data) if newline < 0 else newline + 1


def window_lines(data: bytes, start: int, end: int, line_number: int) -> list[Line]:
    """Lines of a display window, always at least one.

    The range is widened to whole lines first. An empty source (or a point
    at its very end) gives a single empty line at end of file.
    """
    start, end = whole_lines(data, start, end)
    lines = split_lines(data[start:end], start, line_number, len(data))
    return lines or [Line(line_number, start, 0, "", True)]
