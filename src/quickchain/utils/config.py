"""
Configuration constants to replace magic strings throughout quickchain
"""

import os
import tempfile

# Shorthand grammar vocabulary
QUICK_KEYWORD = "quick"
QUICK_MARKER = "!"
ERRORS_BLOCK_KEYWORD = "errors"

# Canonical entry vocabulary
DESCRIPTION_CALL = "description"
DISPLAY_CALL = "display"
DEFAULT_FIELD_TYPE = "String"  # Type annotation given to every shorthand argument

# Display template construction
DISPLAY_SEPARATOR = ":"
DISPLAY_PLACEHOLDER = " {},"

# Downstream collaborator invoked with the rewritten tree
DEFAULT_TARGET_PATH = "::error_chain::error_chain"
PATH_SEPARATOR = "::"

# Construct names used in committed parse errors
QUICK_CONSTRUCT = "quick!"
ERRORS_CONSTRUCT = "errors"

# Lexer configuration constants (cache under temp dir to avoid cluttering project root)
DEFAULT_LEXER_CACHE_FILE = os.path.join(tempfile.gettempdir(), "quickchain_token_tree.cache")
DEFAULT_SOURCE_NAME = "<input>"

# File encoding constants
DEFAULT_FILE_ENCODING = "utf-8"

# Printer constants
PRETTY_INDENT = "    "

# Environment switches for diagnostic colour
NO_COLOR_ENV = "NO_COLOR"
COLOR_ENV = "QUICKCHAIN_COLOR"
