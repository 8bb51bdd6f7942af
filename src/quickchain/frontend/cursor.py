"""
Speculative parsing primitive

A Cursor is a position in one level of a token stream. Grammar rules are plain
callables ``rule(cursor) -> T`` that raise ParseError on failure; they are
always invoked through ``Cursor.try_parse``, which runs the rule on a fork and
moves the real cursor only when the whole rule succeeded. A failed attempt
leaves the cursor exactly where it was, so alternatives can be tried in any
order.

The terminal rules at the bottom of this module are the only code that
advances a cursor.
"""

from typing import Callable, Optional, Sequence, TypeVar

from ..shared.errors import ParseError
from ..shared.source_location import SourceLocation
from ..shared.tokens import Delimiter, Group, Ident, Literal, Punct, TokenTree

T = TypeVar('T')

Rule = Callable[["Cursor"], T]


class Cursor:
    """Position in a token stream plus the location of its enclosing group."""

    __slots__ = ('tokens', 'pos', 'scope_location')

    def __init__(self, tokens: Sequence[TokenTree], scope_location: Optional[SourceLocation] = None, pos: int = 0):
        self.tokens = tokens
        self.pos = pos
        self.scope_location = scope_location

    def fork(self) -> "Cursor":
        return Cursor(self.tokens, self.scope_location, self.pos)

    def commit(self, fork: "Cursor") -> None:
        """Advance to where ``fork`` got to."""
        if fork.tokens is not self.tokens:
            raise ValueError("cannot commit a cursor over a different stream")
        self.pos = fork.pos

    def is_empty(self) -> bool:
        return self.pos >= len(self.tokens)

    def peek(self) -> Optional[TokenTree]:
        if self.is_empty():
            return None
        return self.tokens[self.pos]

    def location(self) -> Optional[SourceLocation]:
        """Location of the next token, or of the enclosing group at end of stream."""
        token = self.peek()
        if token is None:
            return self.scope_location
        return token.location

    def error(self, message: str) -> ParseError:
        return ParseError(message, self.location())

    def expected(self, what: str) -> ParseError:
        return self.error(f"expected {what}, found {describe(self.peek())}")

    def try_parse(self, rule: Rule[T]) -> T:
        """Run ``rule`` speculatively; commit on success, stay put on ParseError."""
        fork = self.fork()
        result = rule(fork)
        self.commit(fork)
        return result

    def _bump(self) -> TokenTree:
        token = self.tokens[self.pos]
        self.pos += 1
        return token

    def __repr__(self) -> str:
        return f"Cursor(pos={self.pos}, len={len(self.tokens)})"


def describe(token: Optional[TokenTree]) -> str:
    """Short human description of a token for error messages."""
    if token is None:
        return "end of input"
    if isinstance(token, Ident):
        return f"identifier `{token.name}`"
    if isinstance(token, Punct):
        return f"`{token.char}`"
    if isinstance(token, Literal):
        return f"literal `{token.text}`"
    if token.delimiter is Delimiter.NONE:
        return "invisible group"
    return f"`{token.delimiter.open}...{token.delimiter.close}` group"


def contents(group: Group) -> Cursor:
    """Cursor over the inside of ``group``; errors at its end point at the group."""
    return Cursor(group.stream, group.location)


# ---------------------------------------------------------------------------
# Terminal rules
# ---------------------------------------------------------------------------

def ident(cursor: Cursor) -> Ident:
    token = cursor.peek()
    if not isinstance(token, Ident):
        raise cursor.expected("identifier")
    cursor._bump()
    return token


def keyword(name: str) -> Rule[Ident]:
    """Rule matching the identifier ``name`` only."""
    def parse_keyword(cursor: Cursor) -> Ident:
        token = cursor.peek()
        if not (isinstance(token, Ident) and token.name == name):
            raise cursor.expected(f"`{name}`")
        cursor._bump()
        return token
    return parse_keyword


def punct(char: str) -> Rule[Punct]:
    """Rule matching the punctuation character ``char``."""
    def parse_punct(cursor: Cursor) -> Punct:
        token = cursor.peek()
        if not (isinstance(token, Punct) and token.char == char):
            raise cursor.expected(f"`{char}`")
        cursor._bump()
        return token
    return parse_punct


comma = punct(",")


def str_literal(cursor: Cursor) -> Literal:
    token = cursor.peek()
    if not (isinstance(token, Literal) and token.is_string):
        raise cursor.expected("string literal")
    cursor._bump()
    return token


def group(delimiter: Optional[Delimiter] = None) -> Rule[Group]:
    """Rule matching a group, of any delimiter when ``delimiter`` is None."""
    def parse_group(cursor: Cursor) -> Group:
        token = cursor.peek()
        if not isinstance(token, Group):
            what = "group" if delimiter is None else f"`{delimiter.open}...{delimiter.close}`"
            raise cursor.expected(what)
        if delimiter is not None and token.delimiter is not delimiter:
            raise cursor.expected(f"`{delimiter.open}...{delimiter.close}`")
        cursor._bump()
        return token
    return parse_group


parenthesized = group(Delimiter.PARENTHESIS)
braced = group(Delimiter.BRACE)


def end(cursor: Cursor) -> None:
    """Succeeds only at the end of the stream."""
    if not cursor.is_empty():
        raise cursor.error(f"unexpected {describe(cursor.peek())}")


def optional(cursor: Cursor, rule: Rule[T]) -> Optional[T]:
    """Try ``rule``; None when it does not match. Committed failures still propagate."""
    try:
        return cursor.try_parse(rule)
    except ParseError as error:
        if error.committed:
            raise
        return None
