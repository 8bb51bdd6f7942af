"""
Quick entry expansion

Rewrites every ``quick!(Name, "desc", (a, b))`` entry of the errors block
into its canonical form:

    Name (a: String, b: String) {
        description("desc")
        display("desc: {}, {}", a, b)
    }

Entries without arguments keep no parameter group and reuse the description
literal as the display message. Opaque groups and canonical entries pass
through untouched, and entry order is preserved.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple

from ..shared.errors import QuickchainImplementationError
from ..shared.nodes import (
    Block, CanonicalEntry, NodeVisitor, OpaqueGroup, RootItems, ShorthandEntry,
)
from ..shared.tokens import Delimiter, Group, Ident, Literal, Punct, TokenTree
from ..utils.config import (
    DEFAULT_FIELD_TYPE, DESCRIPTION_CALL, DISPLAY_CALL, DISPLAY_PLACEHOLDER, DISPLAY_SEPARATOR,
)
from .base import BasePass, ExpansionContext

logger = logging.getLogger("quickchain.passes.quick_expansion")


def display_template(description: str, argument_count: int) -> str:
    """``"desc"`` + ``":"`` + one ``" {}"`` per argument, comma separated."""
    template = description + DISPLAY_SEPARATOR + DISPLAY_PLACEHOLDER * argument_count
    return template[:-1] if argument_count else template


def _comma_separated(parts: List[Tuple[TokenTree, ...]]) -> Tuple[TokenTree, ...]:
    tokens: List[TokenTree] = []
    for i, part in enumerate(parts):
        if i:
            tokens.append(Punct(","))
        tokens.extend(part)
    return tuple(tokens)


def expand_shorthand(entry: ShorthandEntry, field_type: str = DEFAULT_FIELD_TYPE) -> CanonicalEntry:
    """Canonical entry equivalent to ``entry``. Total over parsed shorthand entries."""
    location = entry.description.location
    arguments = entry.arguments

    parameters: Optional[Group] = None
    if arguments:
        parameters = Group(
            Delimiter.PARENTHESIS,
            _comma_separated([(arg, Punct(":"), Ident(field_type)) for arg in arguments]),
        )

    if arguments:
        message = Literal.string(
            display_template(entry.description.string_value(), len(arguments)),
            location,
        )
    else:
        message = entry.description

    display_args = (message,) + tuple(tok for arg in arguments for tok in (Punct(","), arg))
    body = Group(Delimiter.BRACE, (
        Ident(DESCRIPTION_CALL),
        Group(Delimiter.PARENTHESIS, (entry.description,)),
        Ident(DISPLAY_CALL),
        Group(Delimiter.PARENTHESIS, display_args),
    ))
    return CanonicalEntry(entry.name, parameters, body)


class _ExpansionVisitor(NodeVisitor[object]):
    """Rebuilds the tree with shorthand entries replaced in place"""

    def __init__(self, field_type: str):
        self.field_type = field_type
        self.expanded = 0

    def visit_root_items(self, node: RootItems) -> RootItems:
        return RootItems(tuple(item.accept(self) for item in node.items))

    def visit_block(self, node: Block) -> Block:
        return Block(node.name, tuple(entry.accept(self) for entry in node.entries))

    def visit_opaque_group(self, node: OpaqueGroup) -> OpaqueGroup:
        return node

    def visit_canonical_entry(self, node: CanonicalEntry) -> CanonicalEntry:
        return node

    def visit_shorthand_entry(self, node: ShorthandEntry) -> CanonicalEntry:
        self.expanded += 1
        logger.debug("Expanding quick!(%s) with %d argument(s)", node.name, len(node.arguments))
        return expand_shorthand(node, self.field_type)


@dataclass
class ExpansionStats:
    expanded: int = 0
    canonical: int = 0


class QuickExpansionPass(BasePass):
    """Replaces every shorthand entry with its canonical expansion"""
    requires = []

    def run(self, items: RootItems, ctx: ExpansionContext) -> RootItems:
        visitor = _ExpansionVisitor(ctx.field_type)
        result = items.accept(visitor)
        ctx.set_analysis(QuickExpansionPass, ExpansionStats(expanded=visitor.expanded))
        logger.debug("Expanded %d shorthand entr(ies)", visitor.expanded)
        return result


class ExpansionValidationPass(BasePass):
    """
    Checks that no shorthand entry survived expansion.

    Errors from this pass indicate bugs in quickchain, not user errors.
    """
    requires = [QuickExpansionPass]

    def run(self, items: RootItems, ctx: ExpansionContext) -> RootItems:
        canonical = 0
        for block in items.blocks:
            for entry in block.entries:
                if isinstance(entry, ShorthandEntry):
                    raise QuickchainImplementationError(
                        f"shorthand entry `{entry.name}` was not expanded"
                    )
                canonical += 1
        ctx.get_analysis(QuickExpansionPass).canonical = canonical
        logger.debug("Expansion validation passed: %d canonical entr(ies)", canonical)
        return items
