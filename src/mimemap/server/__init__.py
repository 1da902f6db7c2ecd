"""HTTP service for MIME type lookups."""

from .app import MimeServer, create_app, serve

__all__ = ["MimeServer", "create_app", "serve"]
