"""End-to-end extraction of hierarchy tables from a dump.

The pipeline:
1. Streams pages from the dump (reader)
2. Writes the categories table while streaming (pass 1)
3. Buffers article and biographical rows and counts inbound links (pass 1)
4. Writes the pages and biographical tables with final counts (pass 2)

A failed run leaves no partial output: every table this run opened is
removed before the error propagates. Tables it never reached are kept.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Iterator
from contextlib import closing
from pathlib import Path
from typing import IO

from wiki_hierarchy.config import HierarchyConfig, load_config
from wiki_hierarchy.ingest.aggregation import HierarchyAggregator
from wiki_hierarchy.ingest.models import ExtractionStats, PageRecord
from wiki_hierarchy.ingest.reader import PageReader, iter_pages
from wiki_hierarchy.ingest.writer import TsvWriter

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int], None]


def _with_progress(
    pages: Iterator[PageRecord],
    progress: ProgressCallback | None,
    interval: int,
) -> Iterator[PageRecord]:
    """Pass pages through, reporting the running count every ``interval`` pages."""
    count = 0
    for page in pages:
        yield page
        count += 1
        if progress is not None and interval > 0 and count % interval == 0:
            progress(count)


def extract_hierarchy(
    dump: Path | str | IO[bytes],
    pages_path: Path,
    categories_path: Path,
    biographies_path: Path,
    config: HierarchyConfig | None = None,
    progress: ProgressCallback | None = None,
) -> ExtractionStats:
    """Read a dump and write the pages, categories and biographical tables.

    Args:
        dump: Path to the XML dump (plain, .bz2 or .gz) or a binary stream.
        pages_path: Output path for the pages table.
        categories_path: Output path for the categories table.
        biographies_path: Output path for the biographical table.
        config: Settings (default: project config).
        progress: Optional callback receiving the running page count.

    Returns:
        ExtractionStats for the run.

    Raises:
        DumpReadError: If the dump is unreadable or malformed.
        OSError: If an output file cannot be written.
    """
    cfg = config if config is not None else load_config()
    stats = ExtractionStats()
    start_time = time.perf_counter()
    trailing = cfg.trailing_delimiter

    # Tables opened (and so truncated) by this run; only these are removed on failure
    written: list[Path] = []

    with HierarchyAggregator(cfg) as aggregator:
        try:
            # Pass 1: categories go straight to disk
            with TsvWriter(categories_path, trailing) as categories_out:
                written.append(categories_path)
                with closing(iter_pages(dump)) as dump_pages:
                    pages = _with_progress(dump_pages, progress, cfg.progress_interval)
                    stats.pages_read = aggregator.consume(pages, categories_out.write_category)
            stats.categories_written = categories_out.rows_written

            # Pass 2: counts are final now
            with TsvWriter(pages_path, trailing) as pages_out:
                written.append(pages_path)
                for page_row in aggregator.page_rows():
                    pages_out.write_page(page_row)
            stats.articles_written = pages_out.rows_written

            with TsvWriter(biographies_path, trailing) as biographies_out:
                written.append(biographies_path)
                for bio_row in aggregator.biographical_rows():
                    biographies_out.write_biography(bio_row)
            stats.biographies_written = biographies_out.rows_written
        except BaseException:
            for path in written:
                path.unlink(missing_ok=True)
            raise

        stats.articles_dropped = aggregator.articles_dropped
        stats.link_targets = len(aggregator.link_counts)

    stats.elapsed_seconds = time.perf_counter() - start_time
    logger.info(
        f"Wrote {stats.articles_written} pages, {stats.categories_written} categories, "
        f"{stats.biographies_written} biographies in {stats.elapsed_seconds:.1f}s"
    )
    return stats


def find_page(dump: Path | str | IO[bytes], title: str) -> PageRecord | None:
    """Stream a dump until the page with ``title`` is found.

    Returns:
        The page, or None if the dump has no such (non-redirect) page.
    """
    with PageReader(dump) as reader:
        for page in reader:
            if page.title == title:
                return page
    return None
