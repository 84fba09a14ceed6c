# src/main.py — v1
"""CLI entry point: read, search, stats and clear commands.

Usage:
    folio read <file> [--page N] [--words-per-page N] [--format html|text]
    folio search <file> <query> [--limit N]
    folio stats
    folio clear [<book_id> | --all]

The disk tier persists between invocations; each command starts a fresh
ReaderService against the configured cache directory.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from folio.version import __version__

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    _setup_logging(args.verbose)

    if not hasattr(args, "func"):
        parser.print_help()
        return 1

    try:
        return asyncio.run(args.func(args))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130
    except Exception as exc:
        logger.error("Fatal error: %s", exc, exc_info=args.verbose)
        return 1


def _build_parser() -> argparse.ArgumentParser:
    """Build CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="folio",
        description=f"folio v{__version__} - paginated book reader cache",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "--cache-dir", type=Path, default=None,
        help="Disk cache directory (default: CACHE_ROOT from settings)",
    )

    subparsers = parser.add_subparsers(dest="command")

    # --- read ---
    p_read = subparsers.add_parser("read", help="Print one page of a book")
    p_read.add_argument("file", type=Path, help="Path to book file")
    p_read.add_argument("--book-id", default=None, help="Book id (default: file stem)")
    p_read.add_argument("-p", "--page", type=int, default=1, help="Page number (default: 1)")
    p_read.add_argument(
        "-w", "--words-per-page", type=int, default=None,
        help="Words per page (default: DEFAULT_WORDS_PER_PAGE)",
    )
    p_read.add_argument(
        "-f", "--format", dest="fmt", choices=["html", "text"], default="html",
        help="Output format (default: html)",
    )
    p_read.set_defaults(func=_cmd_read)

    # --- search ---
    p_search = subparsers.add_parser("search", help="Search inside a book")
    p_search.add_argument("file", type=Path, help="Path to book file")
    p_search.add_argument("query", help="Search term")
    p_search.add_argument("--book-id", default=None, help="Book id (default: file stem)")
    p_search.add_argument("-l", "--limit", type=int, default=None, help="Maximum results")
    p_search.add_argument("-w", "--words-per-page", type=int, default=None)
    p_search.set_defaults(func=_cmd_search)

    # --- stats ---
    p_stats = subparsers.add_parser("stats", help="Show cache statistics")
    p_stats.set_defaults(func=_cmd_stats)

    # --- clear ---
    p_clear = subparsers.add_parser("clear", help="Clear cached content")
    p_clear.add_argument("book_id", nargs="?", default=None, help="Book id to clear")
    p_clear.add_argument("--all", dest="clear_all", action="store_true", help="Clear every tier")
    p_clear.set_defaults(func=_cmd_clear)

    return parser


async def _cmd_read(args: argparse.Namespace) -> int:
    """Print one page as JSON."""
    book = _book_from_args(args)
    if book is None:
        return 1

    from folio.cache.cache_factory import create_reader_service

    async with create_reader_service(_load_settings(args)) as service:
        page = await service.read_page(book, args.page, args.words_per_page, args.fmt)
    print(page.model_dump_json(indent=2))
    return 0


async def _cmd_search(args: argparse.Namespace) -> int:
    """Print search results as JSON, extracting the book first if needed."""
    book = _book_from_args(args)
    if book is None:
        return 1

    from folio.cache.cache_factory import create_reader_service

    async with create_reader_service(_load_settings(args)) as service:
        if not service.tiers.is_cached(book.book_id):
            await service.cache_book_content(book, "high")
        result = await service.search_in_book(
            book.book_id, args.query, args.limit, args.words_per_page
        )
    print(result.model_dump_json(indent=2))
    return 0


async def _cmd_stats(args: argparse.Namespace) -> int:
    """Display cache statistics for the disk cache directory."""
    from folio.cache.cache_factory import create_reader_service

    async with create_reader_service(_load_settings(args)) as service:
        stats = service.get_cache_stats()
    print(stats.model_dump_json(indent=2))
    return 0


async def _cmd_clear(args: argparse.Namespace) -> int:
    """Clear one book or everything."""
    if not args.clear_all and not args.book_id:
        logger.error("Give a book id or --all")
        return 1

    from folio.cache.cache_factory import create_reader_service

    async with create_reader_service(_load_settings(args)) as service:
        if args.clear_all:
            await service.clear_all_caches()
            print("All caches cleared")
        else:
            cleared = await service.clear_book_cache(args.book_id)
            print(f"{args.book_id}: {'cleared' if cleared else 'not cached'}")
    return 0


def _load_settings(args: argparse.Namespace):
    from folio.config.settings import load_settings

    if args.cache_dir is not None:
        return load_settings(cache_root=args.cache_dir)
    return load_settings()


def _detect_format(path: Path) -> str | None:
    """Return the registered extension for a path, or None."""
    from folio.extraction.extractor_factory import supported_extensions

    ext = path.suffix.lower()
    return ext if ext in supported_extensions() else None


def _book_from_args(args: argparse.Namespace):
    from folio.api.models import Book

    file_path: Path = args.file
    if not file_path.is_file():
        logger.error("File not found: %s", file_path)
        return None
    if _detect_format(file_path) is None:
        logger.error("Unsupported format: %s", file_path.suffix)
        return None
    return Book(
        book_id=args.book_id or file_path.stem,
        title=file_path.stem,
        file_path=file_path,
    )


def _setup_logging(verbose: bool) -> None:
    """Configure logging for CLI usage."""
    from folio.logging.logger import setup_logging

    setup_logging(level="DEBUG" if verbose else "WARNING", log_format="text")


if __name__ == "__main__":
    sys.exit(main())
