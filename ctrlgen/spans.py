"""Terminal output spans that know their visual width."""

from __future__ import annotations

import io
import os
import sys
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import IntEnum
from typing import Callable, Optional, TextIO

from .table import TableCalculator


class Span(ABC):
    """A chunk of terminal output with a known visual width."""

    @abstractmethod
    def visual_length(self) -> int:
        """Width as seen on the terminal, ignoring escape sequences."""

    @abstractmethod
    def write_to(self, out: TextIO) -> None:
        """Write the full contents to ``out``."""


def _render(span: Span) -> str:
    buf = io.StringIO()
    span.write_to(buf)
    return buf.getvalue()


@dataclass(frozen=True)
class Text(Span):
    """Plain text."""

    text: str

    def visual_length(self) -> int:
        return len(self.text)

    def write_to(self, out: TextIO) -> None:
        out.write(self.text)


@dataclass
class Indented(Span):
    """Indents every non-empty line of its content by some tabs."""

    amount: int
    content: Span

    def visual_length(self) -> int:
        return self.content.visual_length()

    def write_to(self, out: TextIO) -> None:
        for index, text in enumerate(_render(self.content).split("\n")):
            if index:
                out.write("\n")
            if not text:
                continue
            out.write("\t" * self.amount)
            out.write(text)


class FromWriter(Span):
    """Takes its content from a function that writes to a stream.

    Measuring the span runs the function once and caches its output, which
    later writes reuse.
    """

    def __init__(self, run: Callable[[TextIO], None]) -> None:
        self._run = run
        self._cache: Optional[str] = None
        self._cache_error: Optional[BaseException] = None

    def visual_length(self) -> int:
        if self._cache is None:
            buf = io.StringIO()
            try:
                self._run(buf)
            except Exception as err:  # replayed on write
                self._cache_error = err
            self._cache = buf.getvalue()
        return len(self._cache)

    def write_to(self, out: TextIO) -> None:
        if self._cache is not None:
            if self._cache_error is not None:
                raise self._cache_error
            out.write(self._cache)
            return
        self._run(out)


class Attribute(IntEnum):
    """SGR terminal attributes."""

    RESET = 0
    BOLD = 1
    FAINT = 2
    ITALIC = 3
    UNDERLINE = 4
    CROSSED_OUT = 9
    FG_GREEN = 32


def _colors_enabled() -> bool:
    if os.environ.get("TERM") == "dumb":
        return False
    isatty = getattr(sys.stdout, "isatty", None)
    return bool(isatty is not None and isatty())


class Decoration:
    """A set of terminal attributes to apply around a span."""

    def __init__(self, *args: int) -> None:
        self.attributes = tuple(int(a) for a in args)

    @property
    def escape(self) -> str:
        return "\x1b[" + ";".join(str(a) for a in self.attributes) + "m"

    def containing(self, contents: Span) -> Span:
        """Return a span with this decoration applied to ``contents``."""
        return Decorated(contents, self)


_RESET = "\x1b[0m"


@dataclass
class Decorated(Span):
    """A span wrapped in terminal decoration.

    Escape sequences are only written when standard output is a terminal
    and TERM is not ``dumb``.
    """

    contents: Span
    decoration: Decoration

    def visual_length(self) -> int:
        return self.contents.visual_length()

    def write_to(self, out: TextIO) -> None:
        if not _colors_enabled():
            self.contents.write_to(out)
            return
        out.write(self.decoration.escape)
        try:
            self.contents.write_to(out)
        finally:
            out.write(_RESET)


class SpanWriter(Span):
    """A sequence of spans written one after another."""

    def __init__(self) -> None:
        self._contents: list[Span] = []

    def print(self, span: Span) -> None:
        """Append a span."""
        self._contents.append(span)

    def visual_length(self) -> int:
        return sum(span.visual_length() for span in self._contents)

    def write_to(self, out: TextIO) -> None:
        for span in self._contents:
            span.write_to(out)


@dataclass
class Lines(Span):
    """Some newlines, optionally followed by content."""

    content: Optional[Span] = None
    amount_before: int = 0

    def visual_length(self) -> int:
        return 0 if self.content is None else self.content.visual_length()

    def write_to(self, out: TextIO) -> None:
        out.write("\n" * self.amount_before)
        if self.content is not None:
            self.content.write_to(out)


def newlines(amount: int) -> Span:
    """A span holding only ``amount`` newlines."""
    return Lines(amount_before=amount)


def line(content: Span) -> Span:
    """A span that writes a newline followed by ``content``."""
    return Lines(content=content, amount_before=1)


class Table(Span):
    """Spans laid out in padded columns.

    Rows are built with ``start_row``, some ``column`` calls and ``end_row``.
    """

    def __init__(self, sizing: TableCalculator) -> None:
        self.sizing = sizing
        self._rows: list[list[Span]] = []
        self._col_sizes: Optional[list[int]] = None

    def start_row(self) -> None:
        self._rows.append([])

    def end_row(self) -> None:
        self.sizing.add_row_sizes(*(cell.visual_length() for cell in self._rows[-1]))

    def column(self, contents: Span) -> None:
        self._rows[-1].append(contents)

    def skip_row(self, contents: Span) -> None:
        """Add a row that does not take part in width calculation."""
        self._rows.append([contents])

    def _sizes(self) -> list[int]:
        if self._col_sizes is None:
            self._col_sizes = self.sizing.column_widths()
        return self._col_sizes

    def write_to(self, out: TextIO) -> None:
        sizes = self._sizes()
        for cells in self._rows:
            for col_size, cell in zip(sizes, cells, strict=False):
                cell.write_to(out)
                diff = col_size - cell.visual_length()
                if diff > 0:
                    out.write(" " * diff)
            if len(cells) > len(sizes):
                raise IndexError("row has more cells than the table has columns")
            out.write("\n")

    def visual_length(self) -> int:
        return sum(self._sizes())