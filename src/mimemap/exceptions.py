"""Exception classes for mimemap."""

from typing import Any


class MimeMapError(Exception):
    """Base exception for mimemap errors."""

    def __init__(self, message: str, data: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.data = data or {}

    def __str__(self) -> str:
        if self.data:
            return f"{self.message}: {self.data}"
        return self.message


class ArgumentError(MimeMapError):
    """A required argument was missing or of an unsupported type."""

    def __init__(self, argument: str, message: str | None = None):
        super().__init__(message or f"{argument} must not be None", {"argument": argument})
        self.argument = argument


class ReadError(MimeMapError):
    """A mime.types source could not be read."""

    def __init__(self, message: str, source: str | None = None):
        super().__init__(message, {"source": source} if source else None)
        self.source = source


class ParseError(ReadError):
    """Source bytes were read but are neither gzip data nor UTF-8 text."""

    pass
