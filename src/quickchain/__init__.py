"""
quickchain: expands ``quick!(Name, "description", (args...))`` shorthand
entries inside the ``errors`` block of an ``error_chain!`` body into the
canonical entry form, and re-emits the body as ``::error_chain::error_chain! { ... }``.
"""

from .compiler.driver import ExpansionDriver, ExpansionResult
from .codegen.printer import render
from .shared.errors import (
    LexError, ParseError, ParseErrorKind, QuickchainError, QuickchainImplementationError,
    QuickchainSourceError,
)
from .shared.tokens import Delimiter, Group, Ident, Literal, Punct, Spacing, TokenStream
from .utils.config import DEFAULT_SOURCE_NAME

__version__ = "0.1.0"

_default_driver = None


def _driver() -> ExpansionDriver:
    global _default_driver
    if _default_driver is None:
        _default_driver = ExpansionDriver()
    return _default_driver


def expand(tokens: TokenStream) -> TokenStream:
    """Expand an already tokenized invocation body (raises ParseError)."""
    return _driver().expand(tokens)


def expand_source(source: str, source_file: str = DEFAULT_SOURCE_NAME) -> ExpansionResult:
    """Tokenize and expand source text; errors are collected in the result."""
    return _driver().expand_source(source, source_file)


__all__ = [
    "expand", "expand_source", "render", "ExpansionDriver", "ExpansionResult",
    "Delimiter", "Group", "Ident", "Literal", "Punct", "Spacing", "TokenStream",
    "QuickchainError", "QuickchainSourceError", "ParseError", "ParseErrorKind",
    "LexError", "QuickchainImplementationError",
]
