"""Immutable bidirectional index between suffixes and MIME types."""

from collections.abc import Mapping

from .exceptions import ArgumentError
from .naming import fold


class MimeTable:
    """
    Snapshot of suffix <-> MIME type associations.

    A table is never modified after build(). Replacing the data means
    building a new table and publishing it (see MimeTypes.replace).

    All keys are case-insensitive. Returned sequences are fresh lists in
    first-seen order.
    """

    __slots__ = ("_suffix_to_types", "_type_to_suffixes", "_all_types")

    def __init__(
        self,
        suffix_to_types: dict[str, tuple[str, ...]],
        type_to_suffixes: dict[str, tuple[str, ...]],
        all_types: tuple[str, ...],
    ):
        self._suffix_to_types = suffix_to_types
        self._type_to_suffixes = type_to_suffixes
        self._all_types = all_types

    @classmethod
    def build(cls, raw: Mapping[str, list[str]]) -> "MimeTable":
        """
        Build a table from a raw table.

        Pure and deterministic. Raw keys differing only in case are merged,
        and repeated MIME types for a suffix are dropped.

        Args:
            raw: Mapping of suffix to MIME types, as produced by the parser

        Returns:
            The new table
        """
        suffix_to_types: dict[str, list[str]] = {}
        type_to_suffixes: dict[str, list[str]] = {}
        all_types: dict[str, str] = {}
        suffix_names: dict[str, str] = {}

        # parser output remembers the input order of MIME types
        for mime_type in getattr(raw, "mime_types", ()):
            all_types.setdefault(fold(mime_type), mime_type)

        for suffix, mime_types in raw.items():
            folded_suffix = fold(suffix)
            suffix = suffix_names.setdefault(folded_suffix, suffix)
            types = suffix_to_types.get(folded_suffix)
            for mime_type in mime_types:
                folded_type = fold(mime_type)
                # first spelling of a type wins everywhere
                mime_type = all_types.setdefault(folded_type, mime_type)
                if types is None:
                    types = suffix_to_types[folded_suffix] = []
                elif any(fold(t) == folded_type for t in types):
                    continue
                types.append(mime_type)
                type_to_suffixes.setdefault(folded_type, []).append(suffix)

        return cls(
            {k: tuple(v) for k, v in suffix_to_types.items()},
            {k: tuple(v) for k, v in type_to_suffixes.items()},
            tuple(t for k, t in all_types.items() if k in type_to_suffixes),
        )

    @classmethod
    def empty(cls) -> "MimeTable":
        """Return a table without any associations."""
        return cls({}, {}, ())

    def types_for_suffix(self, suffix: str) -> tuple[bool, list[str]]:
        """
        Look up the MIME types registered for a suffix.

        Args:
            suffix: Suffix without the leading dot

        Returns:
            (found, types); types is empty when found is False
        """
        types = self._suffix_to_types.get(fold(suffix))
        if types is None:
            return False, []
        return True, list(types)

    def suffixes_for_type(self, mime_type: str) -> list[str]:
        """Return the suffixes registered for a MIME type, or [] if it is unknown."""
        if mime_type is None:
            raise ArgumentError("mime_type")
        return list(self._type_to_suffixes.get(fold(mime_type), ()))

    def all_types(self) -> list[str]:
        """Return every known MIME type once."""
        return list(self._all_types)

    @property
    def suffix_count(self) -> int:
        return len(self._suffix_to_types)

    @property
    def type_count(self) -> int:
        return len(self._all_types)

    def __len__(self) -> int:
        return len(self._suffix_to_types)

    def __contains__(self, suffix: object) -> bool:
        return isinstance(suffix, str) and fold(suffix) in self._suffix_to_types

    def __repr__(self) -> str:
        return f"MimeTable(suffixes={self.suffix_count}, types={self.type_count})"
