"""Environment-based configuration for mimemap."""

import os
from dataclasses import dataclass

from dotenv import find_dotenv, load_dotenv

from src.mimemap.constants import FALLBACK_MIME_TYPE

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8000


@dataclass(frozen=True)
class Settings:
    """Runtime settings.

    Attributes:
        fallback_mime_type: Type returned for file names without a match.
        types_file: Optional mime.types file replacing the bundled dataset.
        host: Bind address for the HTTP service.
        port: Port for the HTTP service.
        log_level: Log level name.
    """

    fallback_mime_type: str = FALLBACK_MIME_TYPE
    types_file: str | None = None
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, load_env_file: bool = True) -> "Settings":
        """
        Build settings from environment variables.

        Args:
            load_env_file: Load a .env file into the environment first

        Returns:
            Settings instance

        Raises:
            ValueError: MIMEMAP_PORT is not a valid port number
        """
        if load_env_file:
            load_dotenv(find_dotenv(usecwd=True))

        port_value = os.getenv("MIMEMAP_PORT", str(DEFAULT_PORT))
        try:
            port = int(port_value)
        except ValueError:
            raise ValueError(f"MIMEMAP_PORT must be an integer, got {port_value!r}") from None
        if not 0 < port < 65536:
            raise ValueError(f"MIMEMAP_PORT must be between 1 and 65535, got {port}")

        return cls(
            fallback_mime_type=os.getenv("MIMEMAP_FALLBACK_MIME_TYPE") or FALLBACK_MIME_TYPE,
            types_file=os.getenv("MIMEMAP_TYPES_FILE") or None,
            host=os.getenv("MIMEMAP_HOST", DEFAULT_HOST),
            port=port,
            log_level=os.getenv("LOG_LEVEL", "INFO"),
        )
