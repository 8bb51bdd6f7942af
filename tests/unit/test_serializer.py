#!/usr/bin/env python3
"""
Tests for serializing root items back to an error_chain! invocation.
"""

import pytest
from quickchain.codegen.serializer import Serializer, serialize
from quickchain.shared.errors import QuickchainImplementationError
from quickchain.shared.nodes import Block, CanonicalEntry, OpaqueGroup, RootItems, ShorthandEntry
from quickchain.shared.tokens import Ident, Punct, path_tokens
from tests.test_utils import brace, colon, ident, paren, string


class TestSerializer:

    def test_wraps_in_target_invocation(self):
        items = RootItems((OpaqueGroup(Ident("skip_msg_variant")),))
        output = serialize(items)
        assert output == path_tokens("::error_chain::error_chain") + (
            Punct("!"), brace(ident("skip_msg_variant")),
        )

    def test_custom_target(self):
        output = Serializer("error_chain").serialize(RootItems((OpaqueGroup(Ident("x")),)))
        assert output == (Ident("error_chain"), Punct("!"), brace(ident("x")))

    def test_items_in_order(self):
        params = paren(ident("a"), colon(), ident("String"))
        items = RootItems((
            OpaqueGroup(Ident("types"), brace(ident("Error"))),
            Block(Ident("errors"), (
                CanonicalEntry(Ident("A"), None, brace()),
                CanonicalEntry(Ident("B"), params, brace(ident("x"))),
            )),
            OpaqueGroup(Ident("links"), brace()),
        ))
        body = serialize(items)[-1]
        assert body.stream == (
            ident("types"), brace(ident("Error")),
            ident("errors"), brace(
                ident("A"), brace(),
                ident("B"), params, brace(ident("x")),
            ),
            ident("links"), brace(),
        )

    def test_unexpanded_shorthand_is_internal_error(self):
        items = RootItems((
            Block(Ident("errors"), (ShorthandEntry(Ident("Oops"), string("d")),)),
        ))
        with pytest.raises(QuickchainImplementationError) as exc_info:
            serialize(items)
        assert "Not all quick! entries were converted" in str(exc_info.value)
        assert str(exc_info.value).startswith("[E9999]")
