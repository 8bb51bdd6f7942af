"""
Centralized file I/O utilities.

- Single place for encoding and stdin handling
- Use Path.read_text() consistently (no raw open/read)
"""

import sys
from pathlib import Path
from typing import Union

from .config import DEFAULT_FILE_ENCODING

STDIN_PATH = "-"


def read_source_file(path: Union[Path, str]) -> str:
    """Read source file with standard encoding ("-" reads stdin)."""
    if str(path) == STDIN_PATH:
        return sys.stdin.read()
    p = Path(path) if not isinstance(path, Path) else path
    return p.read_text(encoding=DEFAULT_FILE_ENCODING)

