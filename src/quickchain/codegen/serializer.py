"""
Serializer

Turns (rewritten) root items back into a token tree of the same shape the
input arrived in, wrapped as ``<target>! { ... }`` so it can be handed straight
to the downstream ``error_chain!`` macro.
"""

from typing import Iterable

from ..shared.errors import QuickchainImplementationError
from ..shared.nodes import (
    Block, CanonicalEntry, NodeVisitor, OpaqueGroup, RootItems, ShorthandEntry,
)
from ..shared.tokens import Delimiter, Group, Punct, TokenStream, path_tokens
from ..utils.config import DEFAULT_TARGET_PATH


class Serializer(NodeVisitor[TokenStream]):
    """Root items -> token stream"""

    def __init__(self, target_path: str = DEFAULT_TARGET_PATH):
        self.target_path = target_path

    def serialize(self, items: RootItems) -> TokenStream:
        """``<target>! { items... }``"""
        body = Group(Delimiter.BRACE, items.accept(self))
        return path_tokens(self.target_path) + (Punct("!"), body)

    def visit_root_items(self, node: RootItems) -> TokenStream:
        return _concat(item.accept(self) for item in node.items)

    def visit_block(self, node: Block) -> TokenStream:
        entries = _concat(entry.accept(self) for entry in node.entries)
        return (node.name, Group(Delimiter.BRACE, entries))

    def visit_opaque_group(self, node: OpaqueGroup) -> TokenStream:
        if node.body is None:
            return (node.name,)
        return (node.name, node.body)

    def visit_canonical_entry(self, node: CanonicalEntry) -> TokenStream:
        if node.parameters is None:
            return (node.name, node.body)
        return (node.name, node.parameters, node.body)

    def visit_shorthand_entry(self, node: ShorthandEntry) -> TokenStream:
        raise QuickchainImplementationError(
            f"Not all quick! entries were converted to canonical entries (`{node.name}`)"
        )


def _concat(streams: Iterable[TokenStream]) -> TokenStream:
    return tuple(token for stream in streams for token in stream)


def serialize(items: RootItems, target_path: str = DEFAULT_TARGET_PATH) -> TokenStream:
    return Serializer(target_path).serialize(items)
