"""Span types and context extraction over raw source bytes.

Offsets and lengths are always in bytes of the UTF-8 encoded source. Lines
end at ``\\n`` or at ``\\r\\n`` (counted as a single boundary); a lone ``\\r``
is ordinary content.
"""

from __future__ import annotations

from collections import deque, namedtuple
from dataclasses import dataclass
from typing import Any, Union

LF = 0x0A
CR = 0x0D


class SpanriteError(Exception):
    """Base class for errors raised by spanrite."""


class OutOfBounds(SpanriteError):
    """A span reaches past the end of its source."""

    def __init__(self, span: SourceSpan):
        super().__init__(f"span {span.offset}+{span.length} is out of bounds")
        self.span = span


class SourceSpan(namedtuple("SourceSpan", ["offset", "length"])):
    """Half-open byte range ``[offset, offset + length)``."""

    __slots__ = ()

    def __new__(cls, offset: int, length: int = 0):
        if offset < 0 or length < 0:
            raise ValueError(f"Invalid span ({offset}, {length})")
        return super().__new__(cls, offset, length)

    @property
    def end(self) -> int:
        return self.offset + self.length

    @property
    def is_empty(self) -> bool:
        return self.length == 0


@dataclass(frozen=True)
class LabeledSpan:
    """A span with an optional label, as shown under the source."""

    offset: int
    length: int = 0
    label: str | None = None
    primary: bool = False

    def __post_init__(self):
        if self.offset < 0 or self.length < 0:
            raise ValueError(f"Invalid span ({self.offset}, {self.length})")

    @classmethod
    def at(cls, span: SourceSpan | tuple[int, int], label: str) -> LabeledSpan:
        offset, length = span
        return cls(offset, length, label)

    @classmethod
    def at_offset(cls, offset: int, label: str) -> LabeledSpan:
        """Point label at a single offset."""
        return cls(offset, 0, label)

    @classmethod
    def underline(cls, span: SourceSpan | tuple[int, int]) -> LabeledSpan:
        """Unlabeled span, drawn as a plain underline."""
        offset, length = span
        return cls(offset, length)

    @property
    def span(self) -> SourceSpan:
        return SourceSpan(self.offset, self.length)

    @property
    def end(self) -> int:
        return self.offset + self.length


@dataclass(frozen=True)
class SpanContents:
    """Bytes extracted around a span, with their position in the source.

    ``line`` and ``column`` are 0-based and refer to the first extracted
    byte. Without context lines before the span that is the span start
    itself; with context the extraction starts at a line boundary so the
    column is 0.
    """

    data: bytes
    span: SourceSpan
    line: int
    column: int
    line_count: int
    name: str | None = None

    @property
    def text(self) -> str:
        return self.data.decode("utf-8", errors="replace")


class NamedSource:
    """Source text with a name, usually a file name."""

    def __init__(self, name: str, source: Any):
        self.name = name
        self.source = source_bytes(source)

    def __repr__(self):
        return f"NamedSource({self.name!r}, {len(self.source)} bytes)"


Source = Union[str, bytes, bytearray, memoryview, NamedSource]


def source_bytes(source: Source) -> bytes:
    if isinstance(source, NamedSource):
        return source.source
    if isinstance(source, str):
        return source.encode("utf-8")
    if isinstance(source, (bytes, bytearray, memoryview)):
        return bytes(source)
    raise TypeError(f"Unsupported source type {type(source).__name__}")


def source_name(source: Source | None) -> str | None:
    return source.name if isinstance(source, NamedSource) else None


def _boundary(data: bytes, offset: int) -> int:
    """Length of the line terminator at offset, or 0 if there is none."""
    byte = data[offset]
    if byte == LF:
        return 1
    if byte == CR and data[offset + 1 : offset + 2] == b"\n":
        return 2
    return 0


def context_info(
    data: bytes, span: SourceSpan, before: int = 0, after: int = 0
) -> SpanContents:
    """Extract the span from data, widened by context lines before and after.

    Args:
        data: The whole source as bytes.
        span: The span to extract.
        before: Number of full lines to include before the span's line.
        after: Number of full lines to include after the span's last line.

    Returns:
        SpanContents with the extracted bytes and their position.

    Raises:
        OutOfBounds: If the span reaches past the end of data.
    """
    span = SourceSpan(*span)
    size = len(data)
    # Offset of the span's last byte (or the byte before a point span)
    last = max(span.end - 1, 0)
    offset = 0
    start_line = 0
    start_column = 0
    line_start = 0
    before_starts: deque[int] = deque()
    end_lines = 0
    post_span = False
    closed_span_line = False

    while offset < size:
        newline = _boundary(data, offset)
        if newline:
            # Stand on the final byte of the terminator
            offset += newline - 1
            if offset < span.offset:
                start_column = 0
                before_starts.append(line_start)
                if len(before_starts) > before:
                    start_line += 1
                    before_starts.popleft()
            elif offset >= last:
                if not post_span:
                    # The span's own last byte terminates its line
                    closed_span_line = True
                else:
                    if closed_span_line:
                        end_lines += 1
                    else:
                        closed_span_line = True
                    if end_lines >= after:
                        offset += 1
                        break
            line_start = offset + 1
        elif offset < span.offset:
            start_column += 1

        if offset >= last:
            post_span = True
            if end_lines >= after:
                offset += 1
                break

        offset += 1

    if offset < span.end:
        raise OutOfBounds(span)

    if before_starts:
        window_start = before_starts[0]
    elif before == 0:
        window_start = span.offset
    else:
        # The span is on the very first line
        window_start = 0
    window = data[window_start:offset]
    return SpanContents(
        data=window,
        span=SourceSpan(window_start, len(window)),
        line=start_line,
        column=start_column if before == 0 else 0,
        line_count=window.count(b"\n"),
    )


def read_span(
    source: Source, span: SourceSpan | tuple[int, int], before: int = 0, after: int = 0
) -> SpanContents:
    """Resolve a span against any supported source.

    Raises OutOfBounds if the span does not fit in the source.
    """
    contents = context_info(source_bytes(source), SourceSpan(*span), before, after)
    name = source_name(source)
    if name is not None:
        contents = SpanContents(
            contents.data,
            contents.span,
            contents.line,
            contents.column,
            contents.line_count,
            name,
        )
    return contents
