"""FastAPI application exposing MIME type lookups."""

from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from src.logging import get_logger

from ..exceptions import ReadError
from ..registry import MimeTypes

logger = get_logger(__name__)

VERSION = "0.1.0"


class LookupResponse(BaseModel):
    """Result of a file name lookup."""

    file_name: str
    found: bool
    mime_types: list[str]


class ExtensionsResponse(BaseModel):
    """Suffixes registered for a MIME type."""

    mime_type: str
    extensions: list[str]


class TableInfo(BaseModel):
    """Size of the active table."""

    suffixes: int
    types: int


class MimeServer:
    """
    FastAPI server wrapper for a MimeTypes registry.

    Lookups are answered from the active table; POST /reload replaces it.
    """

    def __init__(self, mime_types: MimeTypes):
        """
        Initialize the server.

        Args:
            mime_types: Registry to serve
        """
        self.mime_types = mime_types

    def _table_info(self) -> TableInfo:
        table = self.mime_types.table
        return TableInfo(suffixes=table.suffix_count, types=table.type_count)

    def create_app(self) -> FastAPI:
        """
        Create the FastAPI application.

        Returns:
            FastAPI application instance
        """
        app = FastAPI(
            title="mimemap",
            description="Lookup between file suffixes and MIME types",
            version=VERSION,
        )

        @app.get("/")
        async def root():
            """Health check endpoint."""
            return {"status": "ok", "version": VERSION, **self._table_info().model_dump()}

        @app.get("/mime-types", response_model=LookupResponse)
        async def lookup(file_name: str):
            """Resolve the MIME types of a file name."""
            found, mime_types = self.mime_types.try_mime_types_for_file_name(file_name)
            if not found:
                mime_types = [self.mime_types.fallback_mime_type]
            return LookupResponse(file_name=file_name, found=found, mime_types=mime_types)

        @app.get("/extensions", response_model=ExtensionsResponse)
        async def extensions(mime_type: str):
            """List the suffixes of a MIME type."""
            return ExtensionsResponse(
                mime_type=mime_type,
                extensions=self.mime_types.mime_type_extensions(mime_type),
            )

        @app.get("/types")
        async def types() -> list[str]:
            """List every known MIME type."""
            return self.mime_types.all_mime_types()

        @app.post("/reload", response_model=TableInfo)
        async def reload(request: Request):
            """Replace the table with a mime.types file sent as the request body."""
            body = await request.body()
            if not body:
                return JSONResponse({"error": "Request body is empty"}, status_code=400)
            try:
                await self.mime_types.areload_from(body)
            except ReadError as e:
                return JSONResponse({"error": str(e)}, status_code=400)
            return self._table_info()

        return app

    async def serve(
        self,
        host: str = "127.0.0.1",
        port: int = 8000,
        **kwargs: Any,
    ) -> None:
        """
        Start the server using uvicorn.

        Args:
            host: Host to bind to
            port: Port to bind to
            **kwargs: Additional uvicorn config options
        """
        import uvicorn

        app = self.create_app()
        config = uvicorn.Config(app, host=host, port=port, **kwargs)
        server = uvicorn.Server(config)
        await logger.ainfo(f"Serving MIME lookups on http://{host}:{port}")
        await server.serve()


async def serve(
    mime_types: MimeTypes,
    host: str = "127.0.0.1",
    port: int = 8000,
    **kwargs: Any,
) -> None:
    """
    Start a lookup server.

    Args:
        mime_types: Registry to serve
        host: Host to bind to
        port: Port to bind to
        **kwargs: Additional uvicorn config options
    """
    server = MimeServer(mime_types)
    await server.serve(host, port, **kwargs)


def create_app(mime_types: MimeTypes) -> FastAPI:
    """
    Create a FastAPI application for a registry.

    Args:
        mime_types: Registry to serve

    Returns:
        FastAPI application
    """
    return MimeServer(mime_types).create_app()
