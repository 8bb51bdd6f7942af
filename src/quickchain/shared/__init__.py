"""
Shared components: token tree, parse tree nodes, locations and errors.
"""

from .source_location import SourceLocation
from .errors import (
    Error, ErrorCode, ErrorReporter, QuickchainError, QuickchainSourceError,
    ParseError, ParseErrorKind, LexError, QuickchainImplementationError,
)
from .tokens import (
    Delimiter, Spacing, Ident, Punct, Literal, Group, TokenTree, TokenStream,
    punct_sequence, path_tokens,
)
from .nodes import (
    CanonicalEntry, ShorthandEntry, BlockEntry, Block, OpaqueGroup,
    RootItem, RootItems, NodeVisitor,
)
