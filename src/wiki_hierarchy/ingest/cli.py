"""CLI for wiki dump hierarchy extraction.

Commands:
    wiki-hierarchy extract   Build pages, categories and biographical tables
    wiki-hierarchy infobox   Print the infobox of a single page

Examples:
    # Extract all three tables into ./tables
    wiki-hierarchy extract enwiki-latest-pages-articles.xml.bz2 -o tables/

    # Spill pending rows to disk for dumps too large for RAM
    wiki-hierarchy extract enwiki.xml --buffer disk

    # Look at one infobox
    wiki-hierarchy infobox enwiki.xml "Ada Lovelace"
"""

from __future__ import annotations

import argparse
import logging
import sys
import traceback
from datetime import datetime
from pathlib import Path

from wiki_hierarchy.config import load_config

# =============================================================================
# LOGGING SETUP
# =============================================================================

# Module-level logger
logger = logging.getLogger("wiki_hierarchy")


def _setup_logging(log_dir: Path | None = None, verbose: bool = False) -> Path:
    """Configure logging with file and console handlers.

    Args:
        log_dir: Directory for log files (default: ./logs/)
        verbose: If True, set console to DEBUG level

    Returns:
        Path to the log file
    """
    if log_dir is None:
        log_dir = Path("logs")
    log_dir.mkdir(parents=True, exist_ok=True)

    # Create timestamped log file
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    log_file = log_dir / f"wiki_hierarchy_{timestamp}.log"

    logger.setLevel(logging.DEBUG)

    # File handler - captures everything with full detail
    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)
    file_formatter = logging.Formatter(
        "%(asctime)s | %(levelname)-8s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    file_handler.setFormatter(file_formatter)

    # Console handler - less verbose unless --verbose flag
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(logging.DEBUG if verbose else logging.WARNING)
    console_formatter = logging.Formatter("%(levelname)s: %(message)s")
    console_handler.setFormatter(console_formatter)

    # Clear existing handlers and add new ones
    for handler in logger.handlers:
        handler.close()
    logger.handlers.clear()
    logger.addHandler(file_handler)
    logger.addHandler(console_handler)

    logger.info(f"Logging initialized - log file: {log_file}")
    return log_file


def _log_exception(msg: str, exc: Exception) -> None:
    """Log an exception with full traceback to file.

    Args:
        msg: Context message describing what failed
        exc: The exception that was raised
    """
    logger.error(f"{msg}: {type(exc).__name__}: {exc}")
    logger.debug(f"Traceback:\n{traceback.format_exc()}")


def _create_parser() -> argparse.ArgumentParser:
    """Create argument parser with subcommands."""
    parser = argparse.ArgumentParser(
        prog="wiki-hierarchy",
        description="Extract category hierarchy tables from a wiki XML dump",
    )
    parser.add_argument(
        "--log-dir",
        type=Path,
        default=Path("logs"),
        help="Directory for log files (default: logs/)",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Show debug messages on the console",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # =========================================================================
    # EXTRACT SUBCOMMAND
    # =========================================================================
    extract_parser = subparsers.add_parser(
        "extract",
        help="Build pages, categories and biographical tables",
        description=(
            "Stream a MediaWiki XML dump and write three tab-separated tables: "
            "articles with inbound link counts and parent categories, categories "
            "with their parents, and articles with birth/death years."
        ),
    )

    extract_parser.add_argument(
        "dump",
        type=Path,
        help="MediaWiki XML dump (.xml, .xml.bz2 or .xml.gz)",
    )
    extract_parser.add_argument(
        "-o",
        "--output",
        type=Path,
        default=Path("."),
        help="Output directory for the tables (default: current directory)",
    )
    extract_parser.add_argument(
        "--pages",
        default=None,
        help="File name of the pages table (default: from config)",
    )
    extract_parser.add_argument(
        "--categories",
        default=None,
        help="File name of the categories table (default: from config)",
    )
    extract_parser.add_argument(
        "--biographies",
        default=None,
        help="File name of the biographical table (default: from config)",
    )
    extract_parser.add_argument(
        "--buffer",
        choices=["memory", "disk"],
        default=None,
        help="Where pending rows wait for link counts (default: from config)",
    )
    extract_parser.add_argument(
        "--trailing-delimiter",
        action="store_true",
        help="Append '|' after the last parent category",
    )
    extract_parser.add_argument(
        "--no-progress",
        action="store_true",
        help="Disable progress output",
    )

    # =========================================================================
    # INFOBOX SUBCOMMAND
    # =========================================================================
    infobox_parser = subparsers.add_parser(
        "infobox",
        help="Print the infobox of a single page",
        description="Stream a dump until TITLE is found and print its infobox entries.",
    )

    infobox_parser.add_argument(
        "dump",
        type=Path,
        help="MediaWiki XML dump (.xml, .xml.bz2 or .xml.gz)",
    )
    infobox_parser.add_argument(
        "title",
        help="Exact page title",
    )

    return parser


def _run_extract_process(args: argparse.Namespace) -> int:
    """Run hierarchy extraction on a dump.

    Args:
        args: Parsed command line arguments

    Returns:
        Exit code (0 for success, 1 for error, 130 for interrupt)
    """
    from wiki_hierarchy.ingest.pipeline import extract_hierarchy
    from wiki_hierarchy.ingest.reader import DumpReadError

    dump: Path = args.dump
    output_dir: Path = args.output
    show_progress: bool = not args.no_progress

    overrides: dict[str, object] = {}
    if args.buffer is not None:
        overrides["buffer"] = args.buffer
    if args.trailing_delimiter:
        overrides["trailing_delimiter"] = True
    cfg = load_config().model_copy(update=overrides)

    pages_path = output_dir / (args.pages or cfg.pages_output)
    categories_path = output_dir / (args.categories or cfg.categories_output)
    biographies_path = output_dir / (args.biographies or cfg.biographies_output)

    # Validate input file
    if not dump.exists():
        print(f"Error: Dump file does not exist: {dump}")
        return 1

    output_dir.mkdir(parents=True, exist_ok=True)

    # Print header
    print("Hierarchy Extraction")
    print("=" * 40)
    print(f"Dump:        {dump}")
    print(f"Pages:       {pages_path}")
    print(f"Categories:  {categories_path}")
    print(f"Biographies: {biographies_path}")
    print(f"Buffer:      {cfg.buffer}")
    print()

    def report(count: int) -> None:
        print(f"\r{count:<10}", end="", flush=True)

    try:
        stats = extract_hierarchy(
            dump,
            pages_path,
            categories_path,
            biographies_path,
            config=cfg,
            progress=report if show_progress else None,
        )
    except DumpReadError as e:
        _log_exception("Reading dump failed", e)
        print(f"\nError: {e}")
        return 1
    except OSError as e:
        _log_exception("Writing tables failed", e)
        print(f"\nError: {e}")
        return 1
    except KeyboardInterrupt:
        print("\n\nInterrupted; no complete tables were written")
        return 130  # Standard exit code for SIGINT

    if show_progress:
        print()
    print(f"Complete:    {stats.pages_read} pages read in {stats.elapsed_seconds:.1f}s")
    print(f"Articles:    {stats.articles_written} written, {stats.articles_dropped} without categories")
    print(f"Categories:  {stats.categories_written}")
    print(f"Biographies: {stats.biographies_written}")
    print(f"Targets:     {stats.link_targets} titles with inbound links")
    return 0


def _run_infobox_process(args: argparse.Namespace) -> int:
    """Print the infobox of one page.

    Args:
        args: Parsed command line arguments

    Returns:
        Exit code (0 when an infobox was printed, 1 otherwise)
    """
    from wiki_hierarchy.ingest.parsers import detect_infobox_title
    from wiki_hierarchy.ingest.pipeline import find_page
    from wiki_hierarchy.ingest.reader import DumpReadError

    if not args.dump.exists():
        print(f"Error: Dump file does not exist: {args.dump}")
        return 1

    try:
        page = find_page(args.dump, args.title)
    except DumpReadError as e:
        _log_exception("Reading dump failed", e)
        print(f"Error: {e}")
        return 1

    if page is None:
        print(f"Page not found: {args.title}")
        return 1

    infobox = page.infobox()
    if not infobox.found:
        template_title = detect_infobox_title(page.text)
        if template_title is None:
            print(f"No infobox in: {args.title}")
        else:
            print(f"Infobox {template_title} in {args.title} has no readable fields")
        return 1

    print(f"Infobox {infobox.title}")
    # Template semantics: a repeated key overrides the earlier value
    for key, value in infobox.as_dict().items():
        print(f"{key}\t{value}")
    return 0


def main(argv: list[str] | None = None) -> None:
    """Run the extraction CLI."""
    parser = _create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    _setup_logging(args.log_dir, args.verbose)

    if args.command == "extract":
        exit_code = _run_extract_process(args)
        sys.exit(exit_code)
    elif args.command == "infobox":
        exit_code = _run_infobox_process(args)
        sys.exit(exit_code)
    else:
        # Unknown subcommand (shouldn't happen with argparse)
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
