"""Parser for Kusto function and table declarations.

Two shapes are recognized, sharing the ``let <name> =`` prefix::

    let <name> = (<signature>) { <body> }
    let <name> = datatable (<signature>) [ <rows> ]

Function bodies are passed through verbatim. Datatable rows are dropped with a
warning. A block of ``//`` comments directly above ``let`` becomes the doc
string.
"""

import logging
from dataclasses import dataclass
from typing import Callable, TextIO

from ..errors import ParseError, StreamError
from ..models import Declaration, DeclarationKind
from .lexer import Cursor, Mark, NonDelimiterFound, Read, locate

logger = logging.getLogger(__name__)

WarningSink = Callable[[str], None]

LET = "let"
DATATABLE = "datatable"
COMMENT_PREFIX = "//"

UNSUPPORTED_ROWS = (
    "Syncing data within datatable syntax is not currently supported. "
    "The following contents will be ignored:\n"
)


def parse(stream: TextIO, on_warning: WarningSink | None = None) -> Declaration:
    """Parse the single declaration in ``stream``.

    Args:
        stream: Text stream holding one source file.
        on_warning: Receives non-fatal diagnostics. Defaults to this module's
            logger.

    Raises:
        ParseError: The source does not match either declaration shape.
        StreamError: Reading the stream failed.
    """
    cursor = Cursor(stream)
    doc, let_mark = _harvest_doc(cursor)
    cursor.rewind(let_mark)
    return DeclarationParser(cursor, doc, on_warning or _log_warning).run()


def _log_warning(message: str) -> None:
    logger.warning("%s", message)


def _check(read: Read) -> Read:
    """Raise StreamError for an I/O fault recorded on the cursor."""
    if read.fault is not None and not isinstance(read.fault, NonDelimiterFound):
        raise StreamError(f"reading source: {read.fault}") from read.fault
    return read


def _harvest_doc(cursor: Cursor) -> tuple[str, Mark]:
    """Read lines up to the ``let`` line.

    Returns the doc string and the mark at the start of the ``let`` line.
    """
    lines: list[str] = []
    while True:
        mark = cursor.mark()
        read = _check(cursor.consume_line())
        if not read.more:
            raise cursor.error(f"missing '{LET}' statement")
        if read.span.lstrip().startswith(LET):
            return _docstring(lines), mark
        lines.append(read.span)


def _docstring(lines: list[str]) -> str:
    # Only the comment run directly above `let` counts.
    start = len(lines)
    while start > 0 and lines[start - 1].startswith(COMMENT_PREFIX):
        start -= 1

    comments = (
        line[len(COMMENT_PREFIX):].strip().replace('"', '\\"')
        for line in lines[start:]
    )
    return " ".join(comments)


def _is_identifier(char: str) -> bool:
    return char.isalpha() or char.isdecimal() or char == "_"


# Parser states. Each carries what has been validated so far.

@dataclass(frozen=True)
class ExpectLet:
    pass


@dataclass(frozen=True)
class ExpectName:
    pass


@dataclass(frozen=True)
class ExpectKind:
    name: str


@dataclass(frozen=True)
class ExpectTableBody:
    name: str
    signature: str


@dataclass(frozen=True)
class Done:
    declaration: Declaration


State = ExpectLet | ExpectName | ExpectKind | ExpectTableBody | Done


class DeclarationParser:
    """State machine over a cursor positioned at the start of the ``let`` line."""

    def __init__(self, cursor: Cursor, doc: str, on_warning: WarningSink):
        self.cursor = cursor
        self.doc = doc
        self.on_warning = on_warning
        self._transitions: dict[type, Callable[..., State]] = {
            ExpectLet: self._expect_let,
            ExpectName: self._expect_name,
            ExpectKind: self._expect_kind,
            ExpectTableBody: self._expect_table_body,
        }

    def run(self) -> Declaration:
        state: State = ExpectLet()
        while not isinstance(state, Done):
            state = self._transitions[type(state)](state)
        return state.declaration

    def _expect_let(self, state: ExpectLet) -> State:
        _check(self.cursor.skip_space())
        token = _check(self.cursor.consume_token()).span
        if token != LET:
            raise self.cursor.error(f"expected '{LET}' statement, found {token}")
        return ExpectName()

    def _expect_name(self, state: ExpectName) -> State:
        _check(self.cursor.skip_space())
        start = self.cursor.mark()
        read = _check(self.cursor.consume_till("="))
        if not read.more:
            raise self.cursor.error("expected variable assignment '=' after identifier")

        name = []
        for i, char in enumerate(read.span[:-1]):
            if _is_identifier(char):
                name.append(char)
            elif not char.isspace():
                row, col = locate(start, read.span, i)
                raise ParseError(row, col, f"unexpected character '{char}'")

        if not name:
            raise self.cursor.error("expected identifier before '='")
        return ExpectKind("".join(name))

    def _expect_kind(self, state: ExpectKind) -> State:
        read = self.cursor.read_spaced_func(lambda char: char in ("(", "d"))
        if isinstance(read.fault, NonDelimiterFound) or (not read.more and read.fault is None):
            raise self.cursor.error(
                "expected '(' for function declaration, or 'datatable' for table declaration"
            )
        _check(read)

        if read.span == "(":
            return self._function(state.name)
        return self._table_signature(state.name)

    def _function(self, name: str) -> State:
        # The signature grammar is too loose to parse. Everything is kept as
        # the body; the only requirement is that a `)` appears somewhere.
        rest = _check(self.cursor.read_rest()).span
        close = rest.find(")")
        if close < 0:
            raise self.cursor.error("unmatched parenthesis, missing ')' in declaration signature")
        signature = "(" + rest[:close + 1]
        return Done(Declaration(
            name=name,
            kind=DeclarationKind.FUNCTION,
            signature=signature,
            body="(" + rest,
            doc=self.doc,
        ))

    def _table_signature(self, name: str) -> State:
        # `d` has been consumed already
        after_d = self.cursor.mark()
        read = _check(self.cursor.consume_till("("))
        keyword = "d" + read.span
        if not keyword.startswith(DATATABLE):
            raise self.cursor.error(
                f"invalid keyword. expected '{DATATABLE}' for table declaration"
            )
        if not read.more:
            raise self.cursor.error(f"expected '(' after '{DATATABLE}' in table declaration")

        for i in range(len(DATATABLE), len(keyword) - 1):
            char = keyword[i]
            if not char.isspace():
                row, col = locate(after_d, read.span, i - 1)
                raise ParseError(row, col, f"invalid character '{char}'")

        read = _check(self.cursor.consume_till(")"))
        if not read.more:
            raise self.cursor.error("unmatched parenthesis, missing ')' in declaration signature")
        return ExpectTableBody(name, "(" + read.span)

    def _expect_table_body(self, state: ExpectTableBody) -> State:
        read = self.cursor.read_spaced("[")
        if isinstance(read.fault, NonDelimiterFound):
            raise self.cursor.error(
                "unexpected character found. expected '[' for beginning of table body"
            )
        _check(read)
        if not read.more:
            raise self.cursor.error("expected '[' for beginning of table body")

        read = _check(self.cursor.consume_till("]"))
        if not read.more:
            raise self.cursor.error("unmatched brackets, missing ']' for end of table body")

        rows = read.span[:-1]
        for i, char in enumerate(rows):
            if char not in "[]" and not char.isspace():
                self.on_warning(UNSUPPORTED_ROWS + rows[i:])
                break

        return Done(Declaration(
            name=state.name,
            kind=DeclarationKind.TABLE,
            signature=state.signature,
            doc=self.doc,
        ))
