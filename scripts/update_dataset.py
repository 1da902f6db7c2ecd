#!/usr/bin/env python3
"""
Regenerate the bundled mime.types dataset.

Reads a mime.types file from a path or URL, appends optional extra lines,
checks that it parses, and writes it gzip-compressed to
src/mimemap/data/mime.types.gz.

Usage:
    python scripts/update_dataset.py /etc/mime.types --extra "video/ogg ogg"
    python scripts/update_dataset.py https://example.org/mime.types
"""

import argparse
import asyncio
import gzip
import os
import sys
from pathlib import Path

from rich.console import Console

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from src.mimemap.parser import decompress, parse_bytes  # noqa: E402
from src.mimemap.sources import DEFAULT_DATASET, fetch_source, read_source_bytes  # noqa: E402
from src.mimemap.table import MimeTable  # noqa: E402

console = Console()

OUTPUT = Path(__file__).resolve().parent.parent / "src" / "mimemap" / "data" / DEFAULT_DATASET


async def load(source: str) -> bytes:
    """Read the source file or download it."""
    if source.startswith(("http://", "https://")):
        return await fetch_source(source)
    return read_source_bytes(source)


async def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[1])
    parser.add_argument("source", help="path or URL of a mime.types file")
    parser.add_argument(
        "--extra",
        action="append",
        default=[],
        help='extra line to append, e.g. "video/ogg ogg" (repeatable)',
    )
    parser.add_argument("--output", type=Path, default=OUTPUT)
    args = parser.parse_args()

    data = decompress(await load(args.source))
    if args.extra:
        data = data.rstrip(b"\n") + b"\n" + "\n".join(args.extra).encode("utf-8") + b"\n"

    table = MimeTable.build(parse_bytes(data, compressed=False))
    args.output.write_bytes(gzip.compress(data, compresslevel=9, mtime=0))

    console.print(f"[green]Wrote[/green] {args.output}")
    console.print(f"{table.suffix_count} suffixes, {table.type_count} MIME types")


if __name__ == "__main__":
    asyncio.run(main())
