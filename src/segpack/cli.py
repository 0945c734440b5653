"""CLI entry point for SegPack."""

import argparse
import logging
import sys
from datetime import datetime
from pathlib import Path

from segpack.codec import DecodeError, encode
from segpack.codec.json_codec import dumps, loads
from segpack.ingesters import get_ingester
from segpack.storage import SegPackStore
from segpack.utils.formats import load_segments

logging.basicConfig(
    level=logging.INFO,
    format="%(message)s",
)
logger = logging.getLogger(__name__)


def decode_file(source: str) -> None:
    """Print a page file (wire or JSON form) as JSON.

    Args:
        source: Path to the page file
    """
    source_path = Path(source)
    if not source_path.exists():
        logger.error(f"File not found: {source}")
        sys.exit(1)

    try:
        doc = load_segments(source_path, source_path.read_bytes())
    except DecodeError as e:
        logger.error(f"Cannot decode {source}: {e}")
        sys.exit(1)
    except ValueError as e:
        logger.error(f"Invalid page JSON in {source}: {e}")
        sys.exit(1)

    print(dumps(doc))


def encode_file(source: str, output: str) -> None:
    """Encode a JSON page file to wire form.

    Args:
        source: Path to the JSON file
        output: Path for the wire-encoded output
    """
    source_path = Path(source)
    if not source_path.exists():
        logger.error(f"File not found: {source}")
        sys.exit(1)

    try:
        doc = loads(source_path.read_bytes())
    except ValueError as e:
        logger.error(f"Invalid page JSON in {source}: {e}")
        sys.exit(1)

    data = encode(doc)
    Path(output).write_bytes(data)
    logger.info(f"Encoded {len(doc)} segments -> {output} ({len(data)} bytes)")


def pack(source: str, output: str) -> None:
    """Pack a folder or zip of page files into a .segpack file.

    Args:
        source: Path to folder or zip file
        output: Path for output .segpack file
    """
    source_path = Path(source)
    output_path = Path(output)

    ingester = get_ingester(source_path)
    if ingester is None:
        logger.error(f"Cannot process: {source}")
        logger.error("Supported inputs: folders, .zip files")
        sys.exit(1)

    store = SegPackStore(output_path)
    store.initialize()

    store.set_metadata("source", str(source_path.absolute()))
    store.set_metadata("source_type", ingester.source_type)
    store.set_metadata("created_at", datetime.now().isoformat())

    logger.info(f"Packing {source} -> {output}")

    page_count = 0
    try:
        for page in ingester.ingest(source_path):
            store.store_page(page)
            page_count += 1
            logger.info(f"  page {page.number}: {len(page.segments)} segments")
    except ValueError as e:
        # DecodeError for wire pages, ValueError for JSON pages
        logger.error(f"Cannot decode page: {e}")
        sys.exit(1)

    logger.info(f"")
    logger.info(f"Packed {page_count} pages -> {output_path}")


def serve(segpack: str, transport: str = "stdio") -> None:
    """Start MCP server for a page pack.

    Args:
        segpack: Path to .segpack file
        transport: Transport protocol (stdio or sse)
    """
    segpack_path = Path(segpack)
    if not segpack_path.exists():
        logger.error(f"Pack not found: {segpack}")
        sys.exit(1)

    # Import here to avoid loading MCP unless needed
    from segpack.server import create_mcp_server

    from typing import cast, Literal

    logger.info(f"Serving {segpack} via {transport}")
    mcp = create_mcp_server(segpack_path)
    mcp.run(transport=cast(Literal["stdio", "sse", "streamable-http"], transport))


def info(segpack: str) -> None:
    """Show information about a page pack.

    Args:
        segpack: Path to .segpack file
    """
    segpack_path = Path(segpack)
    if not segpack_path.exists():
        logger.error(f"Pack not found: {segpack}")
        sys.exit(1)

    store = SegPackStore(segpack_path)

    metadata = {}
    for key in ["source", "source_type", "created_at"]:
        value = store.get_metadata(key)
        if value:
            metadata[key] = value

    pages = store.list_pages()
    encoded = sum(p["size_bytes"] for p in pages)
    words = sum(p["search_words"] for p in pages)

    print(f"SegPack: {segpack_path.name}")
    print(f"  Size: {segpack_path.stat().st_size / 1024:.1f} KB")
    print(f"")
    print(f"Metadata:")
    for key, value in metadata.items():
        print(f"  {key}: {value}")
    print(f"")
    print(f"Contents:")
    print(f"  Pages: {len(pages)}")
    print(f"  Encoded bytes: {encoded}")
    print(f"  Search words: {words}")


def main() -> None:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="segpack",
        description="SegPack - styled rich text pages and their wire codec",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    # decode command
    decode_parser = subparsers.add_parser(
        "decode",
        help="Print a page file as JSON",
    )
    decode_parser.add_argument("source", help="Page file (.seg, .bin or .json)")

    # encode command
    encode_parser = subparsers.add_parser(
        "encode",
        help="Encode a JSON page file to wire form",
    )
    encode_parser.add_argument("source", help="JSON page file")
    encode_parser.add_argument(
        "-o",
        "--output",
        default="page.seg",
        help="Output path (default: page.seg)",
    )

    # pack command
    pack_parser = subparsers.add_parser(
        "pack",
        help="Pack a folder or zip of page files into a .segpack file",
    )
    pack_parser.add_argument("source", help="Input folder or zip file path")
    pack_parser.add_argument(
        "-o",
        "--output",
        default="output.segpack",
        help="Output .segpack path (default: output.segpack)",
    )

    # serve command
    serve_parser = subparsers.add_parser(
        "serve",
        help="Start MCP server for a page pack",
    )
    serve_parser.add_argument("segpack", help="Path to .segpack file")
    serve_parser.add_argument(
        "--transport",
        choices=["stdio", "sse"],
        default="stdio",
        help="Transport protocol (default: stdio)",
    )

    # info command
    info_parser = subparsers.add_parser(
        "info",
        help="Show information about a page pack",
    )
    info_parser.add_argument("segpack", help="Path to .segpack file")

    args = parser.parse_args()

    if args.command == "decode":
        decode_file(args.source)
    elif args.command == "encode":
        encode_file(args.source, args.output)
    elif args.command == "pack":
        pack(args.source, args.output)
    elif args.command == "serve":
        serve(args.segpack, args.transport)
    elif args.command == "info":
        info(args.segpack)


if __name__ == "__main__":
    main()
