"""
quickchain utilities package
"""

from .io_utils import STDIN_PATH, read_source_file

__all__ = ["STDIN_PATH", "read_source_file"]
