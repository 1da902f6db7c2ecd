"""
mimemap - Bidirectional lookup between file suffixes and MIME types.

Tables are read from mime.types style files, optionally gzip-compressed,
and can be replaced at runtime without readers seeing a partial table.
"""

from .exceptions import ArgumentError, MimeMapError, ParseError, ReadError
from .parser import RawTable, parse_bytes, parse_lines, parse_text
from .registry import MimeTypes, load_table
from .table import MimeTable

__version__ = "0.1.0"
__all__ = [
    # Registry
    "MimeTypes",
    "MimeTable",
    "load_table",
    # Parser
    "RawTable",
    "parse_bytes",
    "parse_lines",
    "parse_text",
    # Errors
    "MimeMapError",
    "ArgumentError",
    "ReadError",
    "ParseError",
]
