"""
Tree dumps to S-Expressions
===========================

Converts token trees and parsed root items to S-expressions for debugging
and for readable test expectations.

Uses structured sexpr (nested lists + sexpdata.Symbol),
then pretty-prints for readable output.
"""

from typing import Any, Sequence

import sexpdata

from ..shared.nodes import (
    Block, CanonicalEntry, NodeVisitor, OpaqueGroup, RootItems, ShorthandEntry,
)
from ..shared.tokens import Ident, Literal, Punct, Spacing, TokenTree


def _sym(s: str) -> sexpdata.Symbol:
    """Keyword (unquoted in output)."""
    return sexpdata.Symbol(s)


def _pretty_dumps(sexpr: Any, indent: int = 0, indent_str: str = "  ", max_line: int = 100) -> str:
    """
    Pretty-print structured sexpr. Keeps short forms on one line; breaks only when needed.
    """
    if isinstance(sexpr, list):
        if not sexpr:
            return "()"
        parts = [_pretty_dumps(e, indent + 1, indent_str, max_line) for e in sexpr]
        one_line = "(" + " ".join(parts) + ")"
        if len(one_line) <= max_line and "\n" not in one_line:
            return one_line
        prefix = indent_str * indent
        next_prefix = indent_str * (indent + 1)
        # First element on same line as ( to avoid orphan (
        rest = "\n".join(next_prefix + p for p in parts[1:])
        inner = parts[0] + ("\n" + rest if rest else "")
        return f"({inner}\n{prefix})"
    return sexpdata.dumps(sexpr)


def token_to_sexpr(token: TokenTree) -> list:
    """(ident name) / (punct "c" [:joint]) / (literal "text") / (group kind children...)"""
    if isinstance(token, Ident):
        return [_sym("ident"), token.name]
    if isinstance(token, Punct):
        out = [_sym("punct"), token.char]
        if token.spacing is Spacing.JOINT:
            out.append(_sym(":joint"))
        return out
    if isinstance(token, Literal):
        return [_sym("literal"), token.text]
    return [_sym("group"), _sym(token.delimiter.name.lower())] + [token_to_sexpr(t) for t in token.stream]


class TreeDumper(NodeVisitor[list]):
    """Root items -> structured sexpr"""

    def visit_root_items(self, node: RootItems) -> list:
        return [_sym("root")] + [item.accept(self) for item in node.items]

    def visit_block(self, node: Block) -> list:
        return [_sym("block"), node.name.name] + [entry.accept(self) for entry in node.entries]

    def visit_opaque_group(self, node: OpaqueGroup) -> list:
        body = token_to_sexpr(node.body) if node.body is not None else _sym("nil")
        return [_sym("opaque"), node.name.name, body]

    def visit_canonical_entry(self, node: CanonicalEntry) -> list:
        params = token_to_sexpr(node.parameters) if node.parameters is not None else _sym("nil")
        return [_sym("entry"), node.name.name, params, token_to_sexpr(node.body)]

    def visit_shorthand_entry(self, node: ShorthandEntry) -> list:
        return [
            _sym("quick"),
            node.name.name,
            node.description.text,
            [arg.name for arg in node.arguments],
        ]


def dump_tokens(stream: Sequence[TokenTree], pretty: bool = True) -> str:
    sexpr = [_sym("tokens")] + [token_to_sexpr(t) for t in stream]
    return _pretty_dumps(sexpr) if pretty else sexpdata.dumps(sexpr)


def dump_items(items: RootItems, pretty: bool = True) -> str:
    sexpr = items.accept(TreeDumper())
    return _pretty_dumps(sexpr) if pretty else sexpdata.dumps(sexpr)
