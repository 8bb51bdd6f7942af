#!/usr/bin/env python3
"""
Tests for the grammar: shorthand entries, canonical entries, the errors block
and opaque root items, including mismatch vs committed failures.
"""

import pytest
from quickchain.frontend.cursor import Cursor
from quickchain.frontend.parser import (
    Parser, parse_block, parse_block_entry, parse_canonical_entry, parse_shorthand_entry,
)
from quickchain.shared.errors import ErrorCode, ParseError
from quickchain.shared.nodes import Block, CanonicalEntry, OpaqueGroup, ShorthandEntry
from quickchain.shared.tokens import Ident, Literal, Punct
from tests.test_utils import brace, bracket, comma, ident, paren, quick, string


def _cursor(*tokens) -> Cursor:
    return Cursor(tuple(tokens))


class TestShorthandEntry:
    """quick!(Name, "description" [, (args...)] [,])"""

    def test_without_arguments(self):
        entry = _cursor(*quick(ident("Oops"), comma(), string("Oops happened"))).try_parse(parse_shorthand_entry)
        assert entry == ShorthandEntry(Ident("Oops"), string("Oops happened"), ())

    def test_with_arguments(self):
        cursor = _cursor(*quick(
            ident("NotFound"), comma(), string("Missing"), comma(),
            paren(ident("path"), comma(), ident("line")),
        ))
        entry = cursor.try_parse(parse_shorthand_entry)
        assert entry.name == Ident("NotFound")
        assert entry.arguments == (Ident("path"), Ident("line"))
        assert cursor.is_empty()

    @pytest.mark.parametrize("tail", [
        (comma(),),
        (comma(), paren(ident("a")), comma()),
        (comma(), paren(ident("a"), comma())),
    ])
    def test_trailing_commas(self, tail):
        tokens = quick(ident("N"), comma(), string("d"), *tail)
        entry = _cursor(*tokens).try_parse(parse_shorthand_entry)
        assert entry.name == Ident("N")

    def test_empty_argument_group(self):
        entry = _cursor(*quick(ident("N"), comma(), string("d"), comma(), paren())).try_parse(parse_shorthand_entry)
        assert entry.arguments == ()

    def test_not_quick_is_mismatch(self):
        for tokens in [
            (Ident("Other"), Punct("!"), paren()),
            (Ident("quick"), brace()),
            (Ident("quick"),),
        ]:
            with pytest.raises(ParseError) as exc_info:
                _cursor(*tokens).try_parse(parse_shorthand_entry)
            assert not exc_info.value.committed

    @pytest.mark.parametrize("args,message", [
        ((ident("N"),), "expected `,`, found end of input"),
        ((ident("N"), comma(), Literal("42")), "expected string literal, found literal `42`"),
        ((string("d"), comma(), ident("N")), 'expected identifier, found literal `"d"`'),
        ((ident("N"), comma(), string("d"), comma(), comma()), "unexpected `,`"),
        ((ident("N"), comma(), string("d"), comma(), paren(ident("a"), ident("b"))),
         "expected `,`, found identifier `b`"),
        ((ident("N"), comma(), string("d"), comma(), bracket(ident("a"))), "unexpected `[...]` group"),
    ])
    def test_malformed_is_committed(self, args, message):
        with pytest.raises(ParseError) as exc_info:
            _cursor(*quick(*args)).try_parse(parse_shorthand_entry)
        error = exc_info.value
        assert error.committed
        assert error.construct == "quick!"
        assert error.message == message

    def test_missing_parens_is_committed(self):
        with pytest.raises(ParseError) as exc_info:
            _cursor(Ident("quick"), Punct("!"), brace()).try_parse(parse_shorthand_entry)
        assert exc_info.value.committed


class TestCanonicalEntry:
    """Name [(params)] { body }"""

    def test_without_parameters(self):
        body = brace(ident("description"), paren(string("d")))
        entry = _cursor(ident("Foo"), body).try_parse(parse_canonical_entry)
        assert entry == CanonicalEntry(Ident("Foo"), None, body)

    def test_with_parameters(self):
        params = paren(ident("a"), Punct(":"), ident("u32"))
        entry = _cursor(ident("Foo"), params, brace()).try_parse(parse_canonical_entry)
        assert entry.parameters == params

    def test_bracket_rejected(self):
        with pytest.raises(ParseError) as exc_info:
            _cursor(ident("Foo"), bracket()).try_parse(parse_canonical_entry)
        assert exc_info.value.message == "unexpected delimiter here"
        assert not exc_info.value.committed

    def test_quick_without_marker_is_canonical(self):
        entry = _cursor(ident("quick"), brace()).try_parse(parse_block_entry)
        assert isinstance(entry, CanonicalEntry)
        assert entry.name == Ident("quick")


class TestBlock:
    """errors { entries... }"""

    def test_mixed_entries_keep_order(self):
        tokens = (
            ident("errors"),
            brace(
                *quick(ident("A"), comma(), string("a")),
                ident("B"), brace(),
                *quick(ident("C"), comma(), string("c"), comma(), paren(ident("x"))),
            ),
        )
        block = _cursor(*tokens).try_parse(parse_block)
        assert [entry.name.name for entry in block.entries] == ["A", "B", "C"]
        assert [type(entry) for entry in block.entries] == [ShorthandEntry, CanonicalEntry, ShorthandEntry]

    def test_empty_block_is_committed(self):
        with pytest.raises(ParseError) as exc_info:
            _cursor(ident("errors"), brace()).try_parse(parse_block)
        assert exc_info.value.committed
        assert exc_info.value.construct == "errors"

    def test_unreadable_entry_is_committed(self):
        with pytest.raises(ParseError) as exc_info:
            _cursor(ident("errors"), brace(Literal("42"))).try_parse(parse_block)
        assert exc_info.value.committed
        assert exc_info.value.construct == "errors"

    def test_bad_quick_keeps_its_construct(self):
        with pytest.raises(ParseError) as exc_info:
            _cursor(ident("errors"), brace(*quick(ident("N")))).try_parse(parse_block)
        assert exc_info.value.construct == "quick!"

    def test_errors_without_braces_is_mismatch(self):
        with pytest.raises(ParseError) as exc_info:
            _cursor(ident("errors"), paren()).try_parse(parse_block)
        assert not exc_info.value.committed


class TestParser:
    """Parser.parse over whole invocation bodies"""

    def test_root_items(self):
        types = brace(ident("Error"), comma(), ident("ErrorKind"), Punct(";"))
        items = Parser().parse((
            ident("types"), types,
            ident("errors"), brace(*quick(ident("A"), comma(), string("a"))),
            ident("skip_msg_variant"),
        ))
        assert items.items[0] == OpaqueGroup(Ident("types"), types)
        assert isinstance(items.items[1], Block)
        assert items.items[2] == OpaqueGroup(Ident("skip_msg_variant"), None)
        assert items.shorthand_count() == 1

    def test_errors_with_other_delimiter_is_opaque(self):
        items = Parser().parse((ident("errors"), paren(ident("x"))))
        assert items.items == (OpaqueGroup(Ident("errors"), paren(ident("x"))),)

    def test_empty_input(self):
        with pytest.raises(ParseError) as exc_info:
            Parser().parse(())
        assert exc_info.value.message == "unexpected end of input"

    def test_root_must_start_with_ident(self):
        with pytest.raises(ParseError) as exc_info:
            Parser().parse((Literal("42"),))
        assert not exc_info.value.committed
        assert exc_info.value.message == "expected identifier, found literal `42`"

    def test_committed_quick_is_wrapped(self):
        with pytest.raises(ParseError) as exc_info:
            Parser().parse((ident("errors"), brace(*quick(ident("N"), comma(), Literal("42")))))
        error = exc_info.value
        assert error.message == "invalid `quick!` entry"
        assert error.error_code == ErrorCode.INVALID_QUICK.value
        assert error.help_text is not None
        assert [r.message for r in error.related] == ["expected string literal, found literal `42`"]

    def test_committed_block_is_wrapped(self):
        with pytest.raises(ParseError) as exc_info:
            Parser().parse((ident("errors"), brace()))
        error = exc_info.value
        assert error.message == "invalid `errors` block"
        assert error.error_code == ErrorCode.INVALID_ERRORS_BLOCK.value
        assert error.related[0].message == "`errors` block must declare at least one error"
