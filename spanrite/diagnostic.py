"""Diagnostic type rendered by the report handlers.

A diagnostic is an exception carrying everything needed to explain an error
to a human: a message, an optional code and url, help text, the source code
it concerns with labeled spans, related diagnostics and a cause chain.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from enum import Enum

from .source import LabeledSpan, NamedSource, Source


class Severity(Enum):
    ERROR = "error"
    WARNING = "warning"
    ADVICE = "advice"


class Diagnostic(Exception):
    """An exception with the extra information needed for a report.

    Args:
        message: The main message.
        code: Short identifier such as ``"oops::my::bad"``.
        severity: Severity, defaults to error when not given.
        help: Help text shown below the snippets.
        url: Link to documentation about this diagnostic.
        source_code: Text, bytes or NamedSource the labels point into.
        labels: Labeled spans within source_code.
        related: Other diagnostics reported alongside this one.
        cause: The underlying error, set as ``__cause__``.
    """

    def __init__(
        self,
        message: str,
        *,
        code: str | None = None,
        severity: Severity | None = None,
        help: str | None = None,
        url: str | None = None,
        source_code: Source | None = None,
        labels: Iterable[LabeledSpan] = (),
        related: Iterable[Diagnostic] = (),
        cause: BaseException | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.severity = severity
        self.help = help
        self.url = url
        self.source_code = source_code
        self.labels = list(labels)
        self.related = list(related)
        for label in self.labels:
            if not isinstance(label, LabeledSpan):
                raise TypeError(f"Expected LabeledSpan, got {type(label).__name__}")
        if cause is not None:
            self.__cause__ = cause
            self.__suppress_context__ = True

    def __str__(self):
        return self.message

    def __repr__(self):
        return f"{type(self).__name__}({self.message!r}, code={self.code!r})"

    @property
    def effective_severity(self) -> Severity:
        return self.severity or Severity.ERROR

    def with_source_code(self, source_code: Source) -> Diagnostic:
        """Attach source code and return self, for chaining after construction."""
        self.source_code = source_code
        return self


def into_diagnostic(exc: BaseException) -> Diagnostic:
    """Wrap any exception as a Diagnostic with the same message and causes.

    Diagnostics are returned as they are.
    """
    if isinstance(exc, Diagnostic):
        return exc
    return Diagnostic(str(exc) or type(exc).__name__, cause=_next_cause(exc))


def _next_cause(exc: BaseException) -> BaseException | None:
    return exc.__cause__ or (None if exc.__suppress_context__ else exc.__context__)


def causes(exc: BaseException) -> Iterator[BaseException]:
    """Walk the chain of underlying errors, newest first, excluding exc."""
    seen = {id(exc)}
    exc = _next_cause(exc)
    while exc and id(exc) not in seen:
        seen.add(id(exc))
        yield exc
        exc = _next_cause(exc)


def cause_message(exc: BaseException) -> str:
    """Text shown for an entry of the cause chain."""
    if isinstance(exc, Diagnostic):
        return exc.message
    return str(exc) or type(exc).__name__


def source_name_of(diagnostic: Diagnostic) -> str | None:
    source = diagnostic.source_code
    return source.name if isinstance(source, NamedSource) else None
