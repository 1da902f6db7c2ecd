"""Case folding and suffix extraction helpers."""


def fold(value: str) -> str:
    """Return the case-insensitive lookup key for a suffix or MIME type."""
    return value.lower()


def suffix_of(file_name: str) -> str | None:
    """
    Extract the suffix of a file name.

    The suffix is everything after the last ".". A name without a dot, or
    one ending in a dot, has no suffix.

    Args:
        file_name: File name or path

    Returns:
        The suffix without its leading dot, or None
    """
    dot = file_name.rfind(".")
    if dot == -1 or dot == len(file_name) - 1:
        return None
    return file_name[dot + 1 :]


def has_category(mime_type: str, prefix: str) -> bool:
    """Check whether a MIME type starts with a category prefix such as "video/"."""
    return fold(mime_type).startswith(fold(prefix))
