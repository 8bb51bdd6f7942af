"""
Parser

Recursive-descent grammar for the body of an ``error_chain!`` invocation:

    root        := root_item+
    root_item   := block | opaque_group
    block       := "errors" { block_entry+ }
    block_entry := shorthand | canonical
    shorthand   := "quick" "!" ( Ident , Str [, ( Ident,* )] [,] )
    canonical   := Ident [( ... )] { ... }
    opaque      := Ident [group]

Alternatives are tried in order through Cursor.try_parse. A rule that fails
with a MISMATCH error lets the caller try the next alternative; a COMMITTED
error (raised once ``quick !`` or ``errors { ... }`` have matched) always
propagates to the top.
"""

import logging
from typing import List, Sequence, Tuple

from ..shared.errors import ErrorCode, ParseError, ParseErrorKind
from ..shared.nodes import (
    Block, BlockEntry, CanonicalEntry, OpaqueGroup, RootItem, RootItems, ShorthandEntry,
)
from ..shared.tokens import Delimiter, Ident, TokenTree
from ..utils.config import (
    ERRORS_BLOCK_KEYWORD, ERRORS_CONSTRUCT, QUICK_CONSTRUCT, QUICK_KEYWORD, QUICK_MARKER,
)
from .cursor import (
    Cursor, braced, comma, contents, end, group, ident, keyword, optional,
    parenthesized, punct, str_literal,
)

logger = logging.getLogger("quickchain.frontend.parser")


# ---------------------------------------------------------------------------
# Shorthand entry: quick!(Name, "description", (args...))
# ---------------------------------------------------------------------------

def parse_shorthand_entry(cursor: Cursor) -> ShorthandEntry:
    cursor.try_parse(keyword(QUICK_KEYWORD))
    cursor.try_parse(punct(QUICK_MARKER))
    # From here on the author clearly meant a shorthand entry
    try:
        return cursor.try_parse(_shorthand_body)
    except ParseError as error:
        raise error.commit(QUICK_CONSTRUCT)


def _shorthand_body(cursor: Cursor) -> ShorthandEntry:
    args = contents(cursor.try_parse(parenthesized))
    name = args.try_parse(ident)
    args.try_parse(comma)
    description = args.try_parse(str_literal)
    arguments = optional(args, _argument_group) or ()
    optional(args, comma)
    args.try_parse(end)
    return ShorthandEntry(name, description, arguments)


def _argument_group(cursor: Cursor) -> Tuple[Ident, ...]:
    cursor.try_parse(comma)
    inner = cursor.try_parse(parenthesized)
    try:
        return _identifier_list(contents(inner))
    except ParseError as error:
        raise error.commit(QUICK_CONSTRUCT)


def _identifier_list(cursor: Cursor) -> Tuple[Ident, ...]:
    """``a, b, c`` with an optional trailing comma; may be empty."""
    names: List[Ident] = []
    while not cursor.is_empty():
        names.append(cursor.try_parse(ident))
        if cursor.is_empty():
            break
        cursor.try_parse(comma)
    return tuple(names)


# ---------------------------------------------------------------------------
# Canonical entry: Name (params...) { body... }  |  Name { body... }
# ---------------------------------------------------------------------------

def parse_canonical_entry(cursor: Cursor) -> CanonicalEntry:
    name = cursor.try_parse(ident)
    first = cursor.try_parse(group())
    if first.delimiter is Delimiter.PARENTHESIS:
        body = cursor.try_parse(braced)
        return CanonicalEntry(name, first, body)
    if first.delimiter is Delimiter.BRACE:
        return CanonicalEntry(name, None, first)
    raise ParseError("unexpected delimiter here", first.location)


def parse_block_entry(cursor: Cursor) -> BlockEntry:
    try:
        return cursor.try_parse(parse_shorthand_entry)
    except ParseError as error:
        if error.committed:
            raise
    try:
        return cursor.try_parse(parse_canonical_entry)
    except ParseError as error:
        if error.committed:
            raise
        raise cursor.expected("an error entry (`Name { ... }` or `quick!(...)`)") from error


# ---------------------------------------------------------------------------
# Block and root
# ---------------------------------------------------------------------------

def parse_block(cursor: Cursor) -> Block:
    name = cursor.try_parse(keyword(ERRORS_BLOCK_KEYWORD))
    body = cursor.try_parse(braced)
    try:
        entries = _block_entries(contents(body))
    except ParseError as error:
        raise error.commit(ERRORS_CONSTRUCT)
    return Block(name, entries)


def _block_entries(cursor: Cursor) -> Tuple[BlockEntry, ...]:
    if cursor.is_empty():
        raise cursor.error(f"`{ERRORS_BLOCK_KEYWORD}` block must declare at least one error")
    entries: List[BlockEntry] = []
    while not cursor.is_empty():
        entries.append(cursor.try_parse(parse_block_entry))
    return tuple(entries)


def parse_opaque_group(cursor: Cursor) -> OpaqueGroup:
    name = cursor.try_parse(ident)
    body = optional(cursor, group())
    return OpaqueGroup(name, body)


def parse_root_item(cursor: Cursor) -> RootItem:
    try:
        return cursor.try_parse(parse_block)
    except ParseError as error:
        if error.committed:
            raise
    return cursor.try_parse(parse_opaque_group)


def parse_root_items(cursor: Cursor) -> RootItems:
    if cursor.is_empty():
        raise cursor.error("unexpected end of input")
    items: List[RootItem] = []
    while not cursor.is_empty():
        items.append(cursor.try_parse(parse_root_item))
    return RootItems(tuple(items))


_COMMITTED_MESSAGES = {
    QUICK_CONSTRUCT: (
        f"invalid `{QUICK_CONSTRUCT}` entry",
        ErrorCode.INVALID_QUICK,
        f'write it as {QUICK_CONSTRUCT}(Name, "description") or {QUICK_CONSTRUCT}(Name, "description", (arg, ...))',
    ),
    ERRORS_CONSTRUCT: (
        f"invalid `{ERRORS_CONSTRUCT}` block",
        ErrorCode.INVALID_ERRORS_BLOCK,
        f"each entry must be `Name {{ ... }}`, `Name (fields) {{ ... }}` or `{QUICK_CONSTRUCT}(...)`",
    ),
}


class Parser:
    """
    Parser over an already tokenized invocation body.

    Returns the root items; committed grammar failures are re-raised under a
    message naming the malformed construct, with the low-level error combined
    into it.
    """

    def parse(self, tokens: Sequence[TokenTree]) -> RootItems:
        cursor = Cursor(tuple(tokens))
        try:
            items = cursor.try_parse(parse_root_items)
        except ParseError as error:
            if not error.committed:
                raise
            raise self._wrap_committed(error) from error
        logger.debug(
            "Parsed %d root item(s), %d shorthand entr(ies)",
            len(items.items), items.shorthand_count(),
        )
        return items

    @staticmethod
    def _wrap_committed(error: ParseError) -> ParseError:
        message, code, help_text = _COMMITTED_MESSAGES[error.construct]
        wrapped = ParseError(
            message,
            error.location,
            kind=ParseErrorKind.COMMITTED,
            construct=error.construct,
            error_code=code.value,
            help=help_text,
        )
        wrapped.combine(error)
        return wrapped
