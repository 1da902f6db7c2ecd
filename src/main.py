"""Command line entry point for mimemap."""

import argparse
import asyncio
import sys
from collections.abc import Sequence
from dataclasses import replace

from rich.console import Console
from rich.table import Table

from src.config import Settings
from src.logging import configure_logging
from src.mimemap import MimeMapError, MimeTypes

console = Console()


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="mimemap",
        description="Look up MIME types by file name and file suffixes by MIME type.",
    )
    parser.add_argument("--types-file", help="mime.types file (plain or gzip) to use instead of the bundled one")
    parser.add_argument("--fallback", help="MIME type reported for unknown suffixes")
    parser.add_argument("--log-level", help="DEBUG, INFO, WARNING or ERROR")

    commands = parser.add_subparsers(dest="command", required=True)

    lookup = commands.add_parser("lookup", help="show the MIME types of file names")
    lookup.add_argument("file_names", nargs="+", metavar="FILE")

    extensions = commands.add_parser("extensions", help="show the suffixes of MIME types")
    extensions.add_argument("mime_types", nargs="+", metavar="TYPE")

    commands.add_parser("types", help="list every known MIME type")

    serve = commands.add_parser("serve", help="run the HTTP lookup service")
    serve.add_argument("--host", help="bind address")
    serve.add_argument("--port", type=int, help="port")

    return parser


def _lookup(mime_types: MimeTypes, file_names: Sequence[str]) -> None:
    table = Table(title="MIME types")
    table.add_column("File")
    table.add_column("MIME types")
    table.add_column("Category")
    for file_name in file_names:
        found, types = mime_types.try_mime_types_for_file_name(file_name)
        if not found:
            types = [f"[dim]{mime_types.fallback_mime_type}[/dim]"]
        categories = [
            name
            for name, check in (
                ("video", mime_types.is_video),
                ("audio", mime_types.is_audio),
                ("image", mime_types.is_image),
                ("text", mime_types.is_text),
            )
            if check(file_name)
        ]
        table.add_row(file_name, "\n".join(types), ", ".join(categories))
    console.print(table)


def _extensions(mime_types: MimeTypes, names: Sequence[str]) -> None:
    table = Table(title="Suffixes")
    table.add_column("MIME type")
    table.add_column("Suffixes")
    for name in names:
        suffixes = mime_types.mime_type_extensions(name)
        table.add_row(name, " ".join(suffixes) if suffixes else "[dim]none[/dim]")
    console.print(table)


def _types(mime_types: MimeTypes) -> None:
    for name in mime_types.all_mime_types():
        console.print(name, highlight=False)


def run(argv: Sequence[str] | None = None) -> int:
    """
    Run the command line interface.

    Args:
        argv: Arguments without the program name; sys.argv when None

    Returns:
        Process exit code
    """
    args = build_parser().parse_args(argv)

    settings = Settings.from_env()
    overrides = {
        "types_file": args.types_file,
        "fallback_mime_type": args.fallback,
        "log_level": args.log_level,
        "host": getattr(args, "host", None),
        "port": getattr(args, "port", None),
    }
    settings = replace(settings, **{k: v for k, v in overrides.items() if v is not None})
    configure_logging(settings.log_level)

    try:
        mime_types = MimeTypes.from_settings(settings)
    except MimeMapError as e:
        console.print(f"[red]Error:[/red] {e}")
        return 1

    if args.command == "lookup":
        _lookup(mime_types, args.file_names)
    elif args.command == "extensions":
        _extensions(mime_types, args.mime_types)
    elif args.command == "types":
        _types(mime_types)
    elif args.command == "serve":
        from src.mimemap.server import serve

        asyncio.run(serve(mime_types, host=settings.host, port=settings.port))
    return 0


def main() -> None:
    """Main entry point."""
    sys.exit(run())


if __name__ == "__main__":
    main()
