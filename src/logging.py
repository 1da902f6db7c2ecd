"""Logging for mimemap: a logger usable from both threads and event loops."""

import asyncio
import logging
import sys
from concurrent.futures import ThreadPoolExecutor
from functools import partial
from typing import Any

# Single worker keeps async log records in submission order
_log_executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="mimemap_logger")

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class AsyncLogger:
    """
    Logger for the lookup registry and the HTTP service.

    Table loading and synchronous reloads log through the plain methods.
    Async reloads and the server log through ainfo/aerror, which hand the
    record to a worker thread so the event loop does not block on handlers.
    """

    def __init__(self, name: str):
        self._logger = logging.getLogger(name)

    def _log_sync(self, level: int, msg: str, *args: Any, **kwargs: Any) -> None:
        self._logger.log(level, msg, *args, **kwargs)

    async def _alog(self, level: int, msg: str, *args: Any, **kwargs: Any) -> None:
        if not self._logger.isEnabledFor(level):
            return
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(
            _log_executor,
            partial(self._log_sync, level, msg, *args, **kwargs),
        )

    def debug(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._log_sync(logging.DEBUG, msg, *args, **kwargs)

    def info(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._log_sync(logging.INFO, msg, *args, **kwargs)

    def warning(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._log_sync(logging.WARNING, msg, *args, **kwargs)

    def error(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._log_sync(logging.ERROR, msg, *args, **kwargs)

    async def ainfo(self, msg: str, *args: Any, **kwargs: Any) -> None:
        """Log a reload or server message without blocking the event loop."""
        await self._alog(logging.INFO, msg, *args, **kwargs)

    async def aerror(self, msg: str, *args: Any, **kwargs: Any) -> None:
        """Log a rejected reload without blocking the event loop."""
        await self._alog(logging.ERROR, msg, *args, **kwargs)


def get_logger(name: str) -> AsyncLogger:
    """Get the logger for a mimemap module (typically __name__)."""
    return AsyncLogger(name)


def configure_logging(level: str = "INFO") -> None:
    """
    Configure logging for the command line and the HTTP service.

    Args:
        level: Log level name from LOG_LEVEL or --log-level; unknown
            names fall back to INFO.
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    logging.basicConfig(
        level=log_level,
        format=LOG_FORMAT,
        stream=sys.stdout,
    )

    # HTTP client and access logs drown out reload messages
    for lib in ["httpx", "httpcore", "uvicorn.access"]:
        logging.getLogger(lib).setLevel(logging.WARNING)
