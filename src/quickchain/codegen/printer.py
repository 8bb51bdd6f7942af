"""
Token printer

Renders a token tree back to source text. Rendering then re-tokenizing the
text yields an equal token tree; only whitespace is chosen here.
"""

from typing import List, Optional, Sequence

from ..shared.tokens import Delimiter, Group, Ident, Literal, Punct, Spacing, TokenTree
from ..utils.config import PRETTY_INDENT

# Punctuation written directly after a word (`a: String`, `x, y`, `foo!`)
_GLUE_LEFT = frozenset(",;:!.?")


class TokenPrinter:
    """
    Token tree -> text.

    Compact mode writes everything on one line. Pretty mode puts the contents
    of every non-empty brace group on indented lines, starting a new line
    after each nested brace group and after each `;`.
    """

    def __init__(self, pretty: bool = False, indent: str = PRETTY_INDENT):
        self.pretty = pretty
        self.indent = indent

    def render(self, stream: Sequence[TokenTree]) -> str:
        return self._render_inline(stream, 0)

    def _render_inline(self, stream: Sequence[TokenTree], depth: int) -> str:
        out: List[str] = []
        prev: Optional[TokenTree] = None
        before_prev: Optional[TokenTree] = None
        for token in stream:
            if prev is not None and _needs_space(before_prev, prev, token):
                out.append(" ")
            out.append(self._render_token(token, depth))
            before_prev, prev = prev, token
        return "".join(out)

    def _render_token(self, token: TokenTree, depth: int) -> str:
        if isinstance(token, Ident):
            return token.name
        if isinstance(token, Punct):
            return token.char
        if isinstance(token, Literal):
            return token.text
        return self._render_group(token, depth)

    def _render_group(self, group: Group, depth: int) -> str:
        delimiter = group.delimiter
        if delimiter is Delimiter.BRACE and group.stream and self.pretty:
            pad = self.indent * (depth + 1)
            lines = self._render_lines(group.stream, depth + 1)
            body = "\n".join(pad + line for line in lines)
            return "{\n" + body + "\n" + self.indent * depth + "}"
        inner = self._render_inline(group.stream, depth)
        if delimiter is Delimiter.BRACE and inner:
            return "{ " + inner + " }"
        return delimiter.open + inner + delimiter.close

    def _render_lines(self, stream: Sequence[TokenTree], depth: int) -> List[str]:
        lines: List[str] = []
        current: List[TokenTree] = []
        for token in stream:
            current.append(token)
            ends_line = (
                (isinstance(token, Group) and token.delimiter is Delimiter.BRACE)
                or (isinstance(token, Punct) and token.char == ";")
            )
            if ends_line:
                lines.append(self._render_inline(current, depth))
                current = []
        if current:
            lines.append(self._render_inline(current, depth))
        return lines


def _is_word(token: Optional[TokenTree]) -> bool:
    return isinstance(token, (Ident, Literal, Group))


def _needs_space(before_prev: Optional[TokenTree], prev: TokenTree, token: TokenTree) -> bool:
    if isinstance(prev, Punct):
        if prev.spacing is Spacing.JOINT:
            return False
        # Second colon of a `::` path separator
        if (
            prev.char == ":"
            and isinstance(before_prev, Punct)
            and before_prev.char == ":"
            and before_prev.spacing is Spacing.JOINT
        ):
            return False
        # `foo!(...)`
        if prev.char == "!" and isinstance(token, Group) and token.delimiter is not Delimiter.BRACE:
            return False
    if isinstance(token, Punct) and token.char in _GLUE_LEFT and _is_word(prev):
        return False
    # Call-like `name(...)` / `name[...]`
    if (
        isinstance(prev, Ident)
        and isinstance(token, Group)
        and token.delimiter in (Delimiter.PARENTHESIS, Delimiter.BRACKET)
    ):
        return False
    return True


def render(stream: Sequence[TokenTree], pretty: bool = False) -> str:
    return TokenPrinter(pretty=pretty).render(stream)
