"""Loading mime.types content from bytes, files, streams and URLs."""

import os
from importlib import resources
from pathlib import Path
from typing import IO

import httpx

from .exceptions import ArgumentError, ReadError

Source = bytes | bytearray | memoryview | str | os.PathLike | IO[bytes]

DEFAULT_DATASET = "mime.types.gz"
DEFAULT_TIMEOUT = 30.0


def describe(source: object) -> str:
    """Short description of a source for logs and error data."""
    if isinstance(source, (bytes, bytearray, memoryview)):
        return f"<{len(source)} bytes>"
    if isinstance(source, (str, os.PathLike)):
        return os.fspath(source)
    name = getattr(source, "name", None)
    if isinstance(name, str):
        return name
    return f"<{type(source).__name__}>"


def read_source_bytes(source: Source) -> bytes:
    """
    Read a whole source into memory.

    Strings and path-like objects are file paths. Streams are read from
    their current position to the end; buffering the whole stream lets the
    parser retry the same bytes as plain text after a failed gzip attempt.

    Args:
        source: Raw bytes, a file path or a readable binary stream

    Returns:
        The source content

    Raises:
        ArgumentError: source is None or of an unsupported type
        ReadError: The source could not be read
    """
    if source is None:
        raise ArgumentError("source")

    if isinstance(source, (bytes, bytearray, memoryview)):
        return bytes(source)

    if isinstance(source, (str, os.PathLike)):
        path = Path(source)
        try:
            return path.read_bytes()
        except OSError as e:
            raise ReadError(f"Cannot read {path}: {e.strerror or e}", str(path)) from e

    if not callable(getattr(source, "read", None)):
        raise ArgumentError(
            "source", f"Unsupported source type: {type(source).__name__}"
        )

    try:
        data = source.read()
    except (OSError, ValueError) as e:
        # ValueError: read on a closed file
        raise ReadError(f"Cannot read stream: {e}", describe(source)) from e

    if isinstance(data, str):
        return data.encode("utf-8")
    if data is None:
        raise ReadError("Stream returned no data", describe(source))
    return bytes(data)


async def fetch_source(
    url: str,
    timeout: float = DEFAULT_TIMEOUT,
    client: httpx.AsyncClient | None = None,
) -> bytes:
    """
    Download mime.types content over HTTP.

    Args:
        url: Location of a mime.types file (plain or gzip)
        timeout: Request timeout in seconds
        client: Optional client to reuse; one is created otherwise

    Returns:
        The response body

    Raises:
        ArgumentError: url is None
        ReadError: The request failed or returned an error status
    """
    if url is None:
        raise ArgumentError("url")

    own_client = client is None
    if own_client:
        client = httpx.AsyncClient(timeout=httpx.Timeout(timeout), follow_redirects=True)
    try:
        response = await client.get(url)
        response.raise_for_status()
        return response.content
    except httpx.HTTPStatusError as e:
        raise ReadError(f"HTTP {e.response.status_code} fetching {url}", url) from e
    except httpx.HTTPError as e:
        raise ReadError(f"Failed to fetch {url}: {e}", url) from e
    finally:
        if own_client:
            await client.aclose()


def default_dataset() -> bytes | None:
    """
    Return the bundled mime.types snapshot.

    Returns:
        The gzip-compressed dataset, or None when it is not installed
    """
    resource = resources.files(__package__) / "data" / DEFAULT_DATASET
    try:
        return resource.read_bytes()
    except FileNotFoundError:
        return None
