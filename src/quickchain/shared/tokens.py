"""
Token Tree

The substrate every other component operates on: atomic tokens (identifiers,
punctuation characters, literals) and delimited groups of further tokens.
Locations never take part in equality, so two trees compare equal exactly when
they are token-for-token the same.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple, Union
from typing_extensions import TypeAlias

from .source_location import SourceLocation
from ..utils.config import PATH_SEPARATOR


class Delimiter(Enum):
    """Group delimiters (open, close)"""
    PARENTHESIS = ("(", ")")
    BRACE = ("{", "}")
    BRACKET = ("[", "]")
    NONE = ("", "")

    @property
    def open(self) -> str:
        return self.value[0]

    @property
    def close(self) -> str:
        return self.value[1]


class Spacing(Enum):
    """Whether a punctuation character is glued to the following one (``::``, ``=>``)"""
    ALONE = "alone"
    JOINT = "joint"


@dataclass(frozen=True)
class Ident:
    name: str
    location: Optional[SourceLocation] = field(default=None, compare=False, repr=False)

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class Punct:
    char: str
    spacing: Spacing = Spacing.ALONE
    location: Optional[SourceLocation] = field(default=None, compare=False, repr=False)

    def __str__(self) -> str:
        return self.char


_ESCAPES = {
    "\\": "\\\\",
    '"': '\\"',
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\0": "\\0",
}

_UNESCAPES = {
    "\\": "\\",
    '"': '"',
    "'": "'",
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "0": "\0",
}


@dataclass(frozen=True)
class Literal:
    """
    A literal token kept as its raw source text (quotes and escapes included).

    Only string literals are ever looked inside; every other literal is
    replayed verbatim.
    """
    text: str
    location: Optional[SourceLocation] = field(default=None, compare=False, repr=False)

    @classmethod
    def string(cls, value: str, location: Optional[SourceLocation] = None) -> "Literal":
        """Build a ``"..."`` literal whose value is ``value``."""
        escaped = "".join(_ESCAPES.get(ch, ch) for ch in value)
        return cls(f'"{escaped}"', location)

    @property
    def is_string(self) -> bool:
        """True for ``"..."`` and raw ``r"..."`` / ``r#"..."#`` literals (not byte strings)."""
        return self.text.startswith('"') or self.text.startswith('r"') or self.text.startswith('r#')

    def string_value(self) -> str:
        """The value of a string literal with escapes resolved."""
        text = self.text
        if text.startswith("r"):
            hashes = len(text) - len(text[1:].lstrip("#")) - 1
            return text[2 + hashes:len(text) - 1 - hashes]
        if not text.startswith('"'):
            raise ValueError(f"not a string literal: {text}")
        return _unescape(text[1:-1])

    def __str__(self) -> str:
        return self.text


def _unescape(body: str) -> str:
    out = []
    i = 0
    while i < len(body):
        ch = body[i]
        if ch != "\\":
            out.append(ch)
            i += 1
            continue
        nxt = body[i + 1]
        if nxt in _UNESCAPES:
            out.append(_UNESCAPES[nxt])
            i += 2
        elif nxt == "x":
            out.append(chr(int(body[i + 2:i + 4], 16)))
            i += 4
        elif nxt == "u":
            close = body.index("}", i)
            out.append(chr(int(body[i + 3:close], 16)))
            i = close + 1
        elif nxt == "\n":
            # Line continuation: skip the newline and the next line's indentation
            i += 2
            while i < len(body) and body[i] in " \t\r\n":
                i += 1
        else:
            out.append(ch)
            i += 1
    return "".join(out)


@dataclass(frozen=True)
class Group:
    delimiter: Delimiter
    stream: Tuple["TokenTree", ...] = ()
    location: Optional[SourceLocation] = field(default=None, compare=False, repr=False)

    def __post_init__(self):
        if not isinstance(self.stream, tuple):
            object.__setattr__(self, "stream", tuple(self.stream))


TokenTree: TypeAlias = Union[Ident, Punct, Literal, Group]
TokenStream: TypeAlias = Tuple[TokenTree, ...]


def punct_sequence(op: str, location: Optional[SourceLocation] = None) -> TokenStream:
    """Split a multi-character operator (``::``) into joint punctuation tokens."""
    chars = list(op)
    return tuple(
        Punct(ch, Spacing.JOINT if i < len(chars) - 1 else Spacing.ALONE, location)
        for i, ch in enumerate(chars)
    )


def path_tokens(path: str, location: Optional[SourceLocation] = None) -> TokenStream:
    """Token stream for a ``::``-separated path such as ``::error_chain::error_chain``."""
    tokens = []
    segments = path.split(PATH_SEPARATOR)
    for i, segment in enumerate(segments):
        if segment:
            tokens.append(Ident(segment, location))
        if i < len(segments) - 1:
            tokens.extend(punct_sequence(PATH_SEPARATOR, location))
    return tuple(tokens)
