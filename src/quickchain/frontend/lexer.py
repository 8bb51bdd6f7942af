"""
Token tree lexer

Turns source text into the token tree the parser consumes. This stands in for
the host environment that normally hands quickchain an already tokenized
invocation body; the grammar lives in ``token_tree.lark``.
"""

import logging
from dataclasses import replace
from pathlib import Path
from typing import List, Optional, Union

from lark import Lark, Transformer, Token
from lark.exceptions import UnexpectedCharacters, UnexpectedInput, UnexpectedToken

from ..shared.errors import LexError
from ..shared.source_location import SourceLocation
from ..shared.tokens import (
    Delimiter, Group, Ident, Literal, Punct, Spacing, TokenStream, TokenTree,
)
from ..utils.config import DEFAULT_LEXER_CACHE_FILE, DEFAULT_SOURCE_NAME

logger = logging.getLogger("quickchain.frontend.lexer")


def _join_puncts(trees: List[TokenTree]) -> TokenStream:
    """
    Mark punctuation glued to the next token as JOINT: another punctuation
    character (``::``, ``=>``) or, for a lifetime quote, an identifier (``'static``).
    """
    out: List[TokenTree] = []
    for i, tree in enumerate(trees):
        nxt = trees[i + 1] if i + 1 < len(trees) else None
        if (
            isinstance(tree, Punct)
            and (isinstance(nxt, Punct) or (tree.char == "'" and isinstance(nxt, Ident)))
            and tree.location is not None
            and nxt.location is not None
            and nxt.location.start == tree.location.end
        ):
            tree = replace(tree, spacing=Spacing.JOINT)
        out.append(tree)
    return tuple(out)


class TokenTreeBuilder(Transformer):
    """Converts the lark parse tree into quickchain token trees"""

    def __init__(self, source_file: str = DEFAULT_SOURCE_NAME) -> None:
        super().__init__()
        self.source_file = source_file

    def _location(self, token: Token, close: Optional[Token] = None) -> SourceLocation:
        last = close if close is not None else token
        return SourceLocation(
            file=self.source_file,
            line=token.line,
            column=token.column,
            start=token.start_pos,
            end=last.end_pos,
            end_line=last.end_line,
            end_column=last.end_column,
        )

    # Terminals
    def IDENT(self, token: Token) -> Ident:
        return Ident(str(token), self._location(token))

    def PUNCT(self, token: Token) -> Punct:
        return Punct(str(token), Spacing.ALONE, self._location(token))

    def STRING(self, token: Token) -> Literal:
        return Literal(str(token), self._location(token))

    CHAR = STRING
    NUMBER = STRING

    # Groups
    def _group(self, delimiter: Delimiter, children: list) -> Group:
        open_token, *inner, close_token = children
        return Group(delimiter, _join_puncts(inner), self._location(open_token, close_token))

    def paren(self, children: list) -> Group:
        return self._group(Delimiter.PARENTHESIS, children)

    def brace(self, children: list) -> Group:
        return self._group(Delimiter.BRACE, children)

    def bracket(self, children: list) -> Group:
        return self._group(Delimiter.BRACKET, children)

    def start(self, children: list) -> TokenStream:
        return _join_puncts(children)


class TokenTreeLexer:
    """
    Source text -> token tree, using a cached Lark LALR parser.

    Reusable across calls and threads: each call builds its own transformer.
    """

    def __init__(self, cache_file: Union[str, bool] = DEFAULT_LEXER_CACHE_FILE):
        grammar_path = Path(__file__).parent / "token_tree.lark"
        self.parser = Lark.open(
            grammar_path,
            start='start',
            parser='lalr',              # Required for caching
            cache=cache_file,
            propagate_positions=True,
            maybe_placeholders=False,
        )

    def tokenize(self, source: str, source_file: str = DEFAULT_SOURCE_NAME) -> TokenStream:
        try:
            tree = self.parser.parse(source)
        except UnexpectedCharacters as e:
            raise LexError(
                f"unknown start of token: {e.char!r}",
                self._error_location(e, source_file),
                source_code=source,
                label="not a valid token",
            ) from e
        except UnexpectedToken as e:
            if e.token.type == '$END':
                message = "this file contains an unclosed delimiter"
                label = "input ends here"
            else:
                message = f"unexpected closing delimiter: `{e.token}`"
                label = "unexpected closing delimiter"
            raise LexError(message, self._error_location(e, source_file), source_code=source, label=label) from e
        except UnexpectedInput as e:
            raise LexError(f"could not tokenize input: {e}", self._error_location(e, source_file), source_code=source) from e

        tokens = TokenTreeBuilder(source_file).transform(tree)
        logger.debug("Tokenized %s into %d top-level token tree(s)", source_file, len(tokens))
        return tokens

    @staticmethod
    def _error_location(error: UnexpectedInput, source_file: str) -> Optional[SourceLocation]:
        line = getattr(error, "line", -1)
        column = getattr(error, "column", -1)
        if not isinstance(line, int) or line < 1:
            return None
        return SourceLocation(file=source_file, line=line, column=max(column, 1))
