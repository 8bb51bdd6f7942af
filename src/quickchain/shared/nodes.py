"""
quickchain tree definitions

Nodes produced by the parser, rewritten by the expansion pass and consumed
by the serializer. Contents of opaque groups and canonical entry bodies are
stored as raw token trees and never reinterpreted.

Visitor Pattern Support:
- All nodes have accept() methods for polymorphic dispatch
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Generic, Optional, Tuple, TypeVar, Union
from typing_extensions import TypeAlias

from .tokens import Group, Ident, Literal

T = TypeVar('T')


@dataclass(frozen=True)
class CanonicalEntry:
    """``Name (params...) { body... }`` - parameters, when present, are parenthesized"""
    name: Ident
    parameters: Optional[Group]
    body: Group

    def accept(self, visitor: NodeVisitor[T]) -> T:
        return visitor.visit_canonical_entry(self)


@dataclass(frozen=True)
class ShorthandEntry:
    """``quick!(Name, "description", (args...))`` awaiting expansion"""
    name: Ident
    description: Literal
    arguments: Tuple[Ident, ...] = ()

    def accept(self, visitor: NodeVisitor[T]) -> T:
        return visitor.visit_shorthand_entry(self)


BlockEntry: TypeAlias = Union[ShorthandEntry, CanonicalEntry]


@dataclass(frozen=True)
class Block:
    """The ``errors { ... }`` block; never empty"""
    name: Ident
    entries: Tuple[BlockEntry, ...]

    def accept(self, visitor: NodeVisitor[T]) -> T:
        return visitor.visit_block(self)


@dataclass(frozen=True)
class OpaqueGroup:
    """Any other top-level ``name { ... }`` item, replayed verbatim"""
    name: Ident
    body: Optional[Group] = None

    def accept(self, visitor: NodeVisitor[T]) -> T:
        return visitor.visit_opaque_group(self)


RootItem: TypeAlias = Union[Block, OpaqueGroup]


@dataclass(frozen=True)
class RootItems:
    """Ordered top-level items of one invocation; never empty"""
    items: Tuple[RootItem, ...]

    def accept(self, visitor: NodeVisitor[T]) -> T:
        return visitor.visit_root_items(self)

    @property
    def blocks(self) -> Tuple[Block, ...]:
        return tuple(item for item in self.items if isinstance(item, Block))

    def shorthand_count(self) -> int:
        return sum(
            1
            for block in self.blocks
            for entry in block.entries
            if isinstance(entry, ShorthandEntry)
        )


class NodeVisitor(ABC, Generic[T]):
    """
    Abstract visitor over the tree nodes.

    Standard compiler pattern: one visit_* method per node type, dispatch via
    node.accept(visitor).
    """

    @abstractmethod
    def visit_root_items(self, node: RootItems) -> T:
        pass

    @abstractmethod
    def visit_block(self, node: Block) -> T:
        pass

    @abstractmethod
    def visit_opaque_group(self, node: OpaqueGroup) -> T:
        pass

    @abstractmethod
    def visit_canonical_entry(self, node: CanonicalEntry) -> T:
        pass

    @abstractmethod
    def visit_shorthand_entry(self, node: ShorthandEntry) -> T:
        pass
