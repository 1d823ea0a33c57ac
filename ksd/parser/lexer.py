"""Cursor over a Kusto source stream.

The cursor pulls text from the stream into a buffer it owns and walks that
buffer with an offset, so any earlier position can be returned to with
``mark()``/``rewind()``. Every primitive returns a ``Read``: the span it
consumed, whether more input is available, and the fault recorded on the
cursor, if any. Once a fault is recorded every later primitive returns it
without advancing.
"""

from dataclasses import dataclass
from typing import Callable, TextIO

from ..errors import ParseError

CHUNK_SIZE = 64 * 1024
QUOTES = ("'", '"')


class NonDelimiterFound(Exception):
    """A non-whitespace character other than the expected delimiter was found."""

    def __init__(self, char: str):
        super().__init__(f"non-whitespace, non-delimiter character found: {char!r}")
        self.char = char


@dataclass(frozen=True)
class Read:
    """Result of a cursor primitive."""
    span: str
    more: bool
    fault: Exception | None = None


@dataclass(frozen=True)
class Mark:
    """A saved cursor position."""
    offset: int
    row: int
    col: int


def locate(start: Mark, span: str, index: int) -> tuple[int, int]:
    """Return the (row, col) of ``span[index]`` for a span read from ``start``."""
    row, col = start.row, start.col
    for char in span[:index]:
        if char == "\n":
            row += 1
            col = 0
        else:
            col += 1
    return row, col + 1


class Cursor:
    """Owned-buffer cursor with row/column tracking.

    ``row`` is 1-based. ``col`` is the column of the last character consumed
    on the current row, 0 at the start of a row.
    """

    def __init__(self, stream: TextIO):
        self._stream = stream
        self._buf = ""
        self._offset = 0
        self._eof = False
        self.fault: Exception | None = None
        self.row = 1
        self.col = 0

    # Buffer management

    def _fill(self) -> bool:
        """Pull the next chunk from the stream. False at end of input or on fault."""
        if self._eof or self.fault is not None:
            return False
        try:
            chunk = self._stream.read(CHUNK_SIZE)
        except (OSError, UnicodeDecodeError) as e:
            self.fault = e
            return False
        if not chunk:
            self._eof = True
            return False
        self._buf += chunk
        return True

    def _peek(self) -> str | None:
        if self._offset >= len(self._buf) and not self._fill():
            return None
        return self._buf[self._offset]

    def _advance(self) -> str:
        char = self._buf[self._offset]
        self._offset += 1
        if char == "\n":
            self.row += 1
            self.col = 0
        else:
            self.col += 1
        return char

    def _span(self, start: int) -> str:
        return self._buf[start:self._offset]

    def _failed(self) -> Read:
        return Read("", False, self.fault)

    # Positions

    def mark(self) -> Mark:
        return Mark(self._offset, self.row, self.col)

    def rewind(self, mark: Mark) -> None:
        """Return to a position saved with ``mark()``."""
        self._offset = mark.offset
        self.row = mark.row
        self.col = mark.col

    def error(self, msg: str) -> ParseError:
        """Build a ParseError at the current position."""
        return ParseError(self.row, self.col, msg)

    # Primitives

    def consume_line(self) -> Read:
        """Consume through the next newline, inclusive.

        The last line of the input is returned even without a newline. At end
        of input with nothing read, ``more`` is False.
        """
        if self.fault is not None:
            return self._failed()
        start = self._offset
        while True:
            char = self._peek()
            if char is None:
                break
            self._advance()
            if char == "\n":
                break
        span = self._span(start)
        return Read(span, bool(span) and self.fault is None, self.fault)

    def skip_space(self) -> Read:
        """Consume a run of whitespace.

        The span is the first non-whitespace character, which is left
        unconsumed.
        """
        if self.fault is not None:
            return self._failed()
        while True:
            char = self._peek()
            if char is None:
                return Read("", False, self.fault)
            if not char.isspace():
                return Read(char, True)
            self._advance()

    def consume_token(self) -> Read:
        """Consume characters up to, not including, the next whitespace."""
        if self.fault is not None:
            return self._failed()
        start = self._offset
        while True:
            char = self._peek()
            if char is None:
                return Read(self._span(start), False, self.fault)
            if char.isspace():
                return Read(self._span(start), True)
            self._advance()

    def consume_till(self, delim: str) -> Read:
        """Consume through the first ``delim`` found outside a quoted string.

        A single or double quote toggles the quoted state. The span includes
        the delimiter. When the delimiter is never found, ``more`` is False and
        the span holds everything read.
        """
        if self.fault is not None:
            return self._failed()
        start = self._offset
        in_string = False
        while True:
            char = self._peek()
            if char is None:
                return Read(self._span(start), False, self.fault)
            self._advance()
            if char in QUOTES:
                in_string = not in_string
            if not in_string and char == delim:
                return Read(self._span(start), True)

    def read_spaced_func(self, is_delim: Callable[[str], bool]) -> Read:
        """Skip whitespace, then consume one character accepted by ``is_delim``.

        Any other character records a NonDelimiterFound fault.
        """
        found = self.skip_space()
        if not found.more:
            return found
        char = self._advance()
        if is_delim(char):
            return Read(char, True)
        self.fault = NonDelimiterFound(char)
        return self._failed()

    def read_spaced(self, delim: str) -> Read:
        return self.read_spaced_func(lambda char: char == delim)

    def read_rest(self) -> Read:
        """Consume everything up to the end of input."""
        if self.fault is not None:
            return self._failed()
        start = self._offset
        while self._peek() is not None:
            self._advance()
        return Read(self._span(start), False, self.fault)
