"""Parser for mime.types style text, optionally gzip-compressed."""

import gzip
import re
import zlib
from collections.abc import Iterable

from .constants import COMMENT_CHAR, DELIMITERS
from .exceptions import ParseError
from .naming import fold


class RawTable(dict[str, list[str]]):
    """
    Parser output: suffix -> MIME types in first-seen order.

    mime_types lists every MIME type that appeared with at least one suffix,
    in input order.
    """

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.mime_types: list[str] = []


_SPLIT_RE = re.compile(f"[{re.escape(DELIMITERS)}]+")

# Only CR, LF and CRLF end a line; str.splitlines also breaks on NEL, U+2028 and form feed
_LINE_END_RE = re.compile(r"\r\n|\r|\n")

# Raised by gzip for data that is not a complete, valid gzip stream
_GZIP_ERRORS = (gzip.BadGzipFile, EOFError, zlib.error)


def tokenize(line: str) -> list[str]:
    """
    Split one line into tokens.

    Everything from the first "#" on is a comment. Tokens are separated by
    runs of spaces, tabs, commas and semicolons.

    Args:
        line: A single physical line

    Returns:
        Tokens in order, without empty entries
    """
    line = line.split(COMMENT_CHAR, 1)[0].rstrip("\r\n")
    return [token for token in _SPLIT_RE.split(line) if token]


def parse_lines(lines: Iterable[str]) -> RawTable:
    """
    Build a raw table from mime.types lines.

    The first token of a line is the MIME type and every further token is a
    suffix for it. Lines with a MIME type but no suffix contribute nothing.
    Suffixes and MIME types are merged case-insensitively; the first spelling
    seen is kept.

    Args:
        lines: Lines of text, with or without line endings

    Returns:
        Mapping of suffix to its MIME types in first-seen order
    """
    raw = RawTable()
    # folded suffix -> key used in raw
    keys: dict[str, str] = {}
    # folded suffix -> folded MIME types already recorded for it
    seen: dict[str, set[str]] = {}
    known_types: set[str] = set()

    for line in lines:
        tokens = tokenize(line)
        if len(tokens) < 2:
            continue
        mime_type = tokens[0]
        folded_type = fold(mime_type)
        if folded_type not in known_types:
            known_types.add(folded_type)
            raw.mime_types.append(mime_type)
        for suffix in tokens[1:]:
            folded_suffix = fold(suffix)
            key = keys.setdefault(folded_suffix, suffix)
            types = seen.setdefault(folded_suffix, set())
            if folded_type in types:
                continue
            types.add(folded_type)
            raw.setdefault(key, []).append(mime_type)

    return raw


def parse_text(text: str) -> RawTable:
    """Build a raw table from the full text of a mime.types file."""
    return parse_lines(_LINE_END_RE.split(text))


def decompress(data: bytes, compressed: bool | None = None) -> bytes:
    """
    Decompress gzip data, falling back to the original bytes.

    Args:
        data: Source bytes
        compressed: None to detect, True if the data must be gzip,
            False to skip decompression

    Returns:
        The decompressed bytes, or data itself when it is not gzip

    Raises:
        ParseError: compressed is True and data is not valid gzip
    """
    if compressed is False:
        return data
    try:
        return gzip.decompress(data)
    except _GZIP_ERRORS as e:
        if compressed:
            raise ParseError(f"Source is not valid gzip data ({e})") from e
        return data


def parse_bytes(data: bytes, compressed: bool | None = None) -> RawTable:
    """
    Build a raw table from source bytes.

    Args:
        data: gzip-compressed or plain UTF-8 mime.types content
        compressed: See decompress()

    Returns:
        Mapping of suffix to its MIME types in first-seen order

    Raises:
        ParseError: The bytes are not gzip and not UTF-8 text
    """
    payload = decompress(data, compressed)
    try:
        text = payload.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise ParseError(f"Source is neither gzip data nor UTF-8 text ({e.reason})") from e
    return parse_text(text)
