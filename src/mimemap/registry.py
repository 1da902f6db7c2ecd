"""Owner of the active MIME table and the public lookup API."""

import asyncio
from typing import TYPE_CHECKING

import httpx

from src.logging import get_logger

from .constants import (
    AUDIO_PREFIX,
    FALLBACK_MIME_TYPE,
    IMAGE_PREFIX,
    TEXT_PREFIX,
    VIDEO_PREFIX,
)
from .exceptions import ArgumentError, ReadError
from .naming import has_category, suffix_of
from .parser import parse_bytes
from .sources import (
    DEFAULT_TIMEOUT,
    Source,
    default_dataset,
    describe,
    fetch_source,
    read_source_bytes,
)
from .table import MimeTable

if TYPE_CHECKING:
    from src.config import Settings

logger = get_logger(__name__)


def load_table(source: Source, compressed: bool | None = None) -> MimeTable:
    """
    Read, parse and index a source.

    Args:
        source: Raw bytes, a file path or a readable binary stream
        compressed: None to detect gzip, True if it must be gzip,
            False for plain text

    Returns:
        A new, fully built table

    Raises:
        ReadError: The source could not be read or parsed
    """
    data = read_source_bytes(source)
    try:
        return MimeTable.build(parse_bytes(data, compressed))
    except ReadError as e:
        if e.source is None:
            e.source = describe(source)
            e.data["source"] = e.source
        raise


class MimeTypes:
    """
    Bidirectional lookup between file suffixes and MIME types.

    Holds one immutable MimeTable at a time. initialize() loads the bundled
    dataset and the reload methods replace the table wholesale. A new table
    is always built completely before it is published, so a concurrent
    reader sees either the old table or the new one.

    Example:
        mime_types = MimeTypes.from_default_dataset()
        mime_types.mime_types_for_file_name("clip.mp4")  # ["video/mp4"]
    """

    def __init__(
        self,
        table: MimeTable | None = None,
        fallback_mime_type: str | None = None,
    ):
        """
        Initialize the registry.

        Args:
            table: Initial table; empty when omitted
            fallback_mime_type: Type returned when a file name has no match
        """
        self._table = table if table is not None else MimeTable.empty()
        self._fallback_mime_type = fallback_mime_type

    @classmethod
    def from_default_dataset(cls, fallback_mime_type: str | None = None) -> "MimeTypes":
        """Create a registry populated from the bundled dataset."""
        mime_types = cls(fallback_mime_type=fallback_mime_type)
        mime_types.initialize()
        return mime_types

    @classmethod
    def from_settings(cls, settings: "Settings") -> "MimeTypes":
        """
        Create a registry from settings.

        The bundled dataset is loaded first; a configured types file then
        replaces it.

        Raises:
            ReadError: The configured types file could not be read
        """
        mime_types = cls.from_default_dataset(settings.fallback_mime_type)
        if settings.types_file:
            mime_types.reload_from(settings.types_file)
        return mime_types

    @property
    def table(self) -> MimeTable:
        """The currently published table."""
        return self._table

    @property
    def fallback_mime_type(self) -> str:
        """Type returned when nothing matches. Assign None to restore the default."""
        if self._fallback_mime_type is None:
            return FALLBACK_MIME_TYPE
        return self._fallback_mime_type

    @fallback_mime_type.setter
    def fallback_mime_type(self, value: str | None) -> None:
        self._fallback_mime_type = value

    # Lifecycle

    def initialize(self) -> None:
        """Load the bundled dataset, or publish an empty table if it is missing."""
        data = default_dataset()
        if data is None:
            logger.warning("Bundled mime.types dataset not found, starting with an empty table")
            self.replace(MimeTable.empty())
            return
        try:
            table = load_table(data, compressed=True)
        except ReadError as e:
            logger.error(f"Bundled mime.types dataset is unreadable, starting with an empty table: {e}")
            table = MimeTable.empty()
        self.replace(table)
        logger.debug(
            "Loaded bundled dataset: %d suffixes, %d types",
            self._table.suffix_count,
            self._table.type_count,
        )

    def replace(self, table: MimeTable) -> None:
        """Publish a fully built table in place of the current one."""
        if table is None:
            raise ArgumentError("table")
        self._table = table

    def reload_from(self, source: Source, compressed: bool | None = None) -> None:
        """
        Replace all associations with the content of a source.

        Args:
            source: Raw bytes, a file path or a readable binary stream.
                The content may be gzip-compressed and may contain
                "#" comments; each line is a MIME type followed by suffixes
                separated by spaces, tabs, commas or semicolons.
            compressed: None to detect gzip, True if it must be gzip,
                False for plain text

        Raises:
            ReadError: The source could not be read; the current table is kept
        """
        try:
            table = load_table(source, compressed)
        except ReadError as e:
            logger.error(f"Reload rejected, keeping current table: {e}")
            raise
        self.replace(table)
        logger.info(
            "Reloaded MIME types from %s: %d suffixes, %d types",
            describe(source),
            table.suffix_count,
            table.type_count,
        )

    async def areload_from(self, source: Source, compressed: bool | None = None) -> None:
        """
        Replace all associations, parsing in a worker thread.

        Same contract as reload_from().
        """
        try:
            table = await asyncio.to_thread(load_table, source, compressed)
        except ReadError as e:
            await logger.aerror(f"Reload rejected, keeping current table: {e}")
            raise
        self.replace(table)
        await logger.ainfo(
            "Reloaded MIME types from %s: %d suffixes, %d types",
            describe(source),
            table.suffix_count,
            table.type_count,
        )

    async def areload_from_url(
        self,
        url: str,
        compressed: bool | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """
        Download a mime.types file and replace all associations with it.

        Args:
            url: Location of the file
            compressed: See reload_from()
            timeout: Request timeout in seconds
            client: Optional HTTP client to reuse

        Raises:
            ReadError: The download failed or the content could not be parsed
        """
        try:
            data = await fetch_source(url, timeout=timeout, client=client)
        except ReadError as e:
            await logger.aerror(f"Reload rejected, keeping current table: {e}")
            raise
        await self.areload_from(data, compressed)

    # Queries

    def types_for_suffix(self, suffix: str) -> tuple[bool, list[str]]:
        """Look up the MIME types for a suffix given without its dot."""
        if suffix is None:
            raise ArgumentError("suffix")
        return self._table.types_for_suffix(suffix)

    def mime_type_extensions(self, mime_type: str) -> list[str]:
        """
        Get all suffixes registered for a MIME type.

        Args:
            mime_type: The MIME type, compared case-insensitively

        Returns:
            Suffixes without dots; empty if the type is unknown

        Raises:
            ArgumentError: mime_type is None
        """
        if mime_type is None:
            raise ArgumentError("mime_type")
        return self._table.suffixes_for_type(mime_type)

    def all_mime_types(self) -> list[str]:
        """Get every known MIME type once, in first-seen order."""
        return self._table.all_types()

    def try_mime_types_for_file_name(self, file_name: str | None) -> tuple[bool, list[str]]:
        """
        Try to get the MIME types for a file name.

        Args:
            file_name: File name or path; None is allowed

        Returns:
            (found, types); (False, []) when the name has no known suffix
        """
        if file_name is None:
            return False, []
        suffix = suffix_of(file_name)
        if suffix is None:
            return False, []
        return self._table.types_for_suffix(suffix)

    def mime_types_for_file_name(self, file_name: str) -> list[str]:
        """
        Get the MIME types for a file name.

        Args:
            file_name: File name or path

        Returns:
            The registered types, or [fallback_mime_type] if there are none

        Raises:
            ArgumentError: file_name is None
        """
        if file_name is None:
            raise ArgumentError("file_name")
        found, mime_types = self.try_mime_types_for_file_name(file_name)
        return mime_types if found else [self.fallback_mime_type]

    def _is_category(self, file_name: str, prefix: str) -> bool:
        return any(has_category(t, prefix) for t in self.mime_types_for_file_name(file_name))

    def is_video(self, file_name: str) -> bool:
        return self._is_category(file_name, VIDEO_PREFIX)

    def is_audio(self, file_name: str) -> bool:
        return self._is_category(file_name, AUDIO_PREFIX)

    def is_image(self, file_name: str) -> bool:
        return self._is_category(file_name, IMAGE_PREFIX)

    def is_text(self, file_name: str) -> bool:
        return self._is_category(file_name, TEXT_PREFIX)

    def is_media(self, file_name: str) -> bool:
        """True for video, audio and image files."""
        mime_types = self.mime_types_for_file_name(file_name)
        return any(
            has_category(t, prefix)
            for t in mime_types
            for prefix in (VIDEO_PREFIX, AUDIO_PREFIX, IMAGE_PREFIX)
        )

    def __repr__(self) -> str:
        return f"MimeTypes({self._table!r}, fallback={self.fallback_mime_type!r})"
