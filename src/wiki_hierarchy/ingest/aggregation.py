"""Two-pass aggregation of pages into hierarchy tables.

Pass 1 walks the dump once:

- Articles (namespace 0) without parent categories are dropped. Every
  other article is buffered as a PendingPage (and, when its categories
  name a birth or death year, a PendingBiography), and each title it
  links to gains one inbound link.
- Category pages (namespace 14) are emitted straight away; they need no
  link counts.
- All other namespaces are ignored.

Pass 2 replays the buffers and injects the final inbound link counts,
which could not be known before the last page was read.
"""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Callable, Iterable, Iterator, Mapping
from types import TracebackType

from wiki_hierarchy.config import HierarchyConfig, load_config
from wiki_hierarchy.ingest.buffer import RowBuffer, make_buffer
from wiki_hierarchy.ingest.models import (
    BiographicalRow,
    CategoryRow,
    PageRecord,
    PageRow,
    PendingBiography,
    PendingPage,
)
from wiki_hierarchy.ingest.parsers import extract_lifespan

logger = logging.getLogger(__name__)

CategorySink = Callable[[CategoryRow], None]


def merge_link_counts(*shards: Mapping[str, int]) -> Counter[str]:
    """Sum inbound link counts built over separate parts of a dump.

    Merging is commutative and associative, so shards may be combined
    in any order.

    Examples:
        >>> merge_link_counts({"B": 1}, {"B": 1, "C": 2})
        Counter({'B': 2, 'C': 2})
    """
    merged: Counter[str] = Counter()
    for shard in shards:
        merged.update(shard)
    return merged


class HierarchyAggregator:
    """Collects pass-1 state and produces pass-2 rows.

    Args:
        config: Routing and buffering settings (default: project config).

    Attributes:
        articles_kept: Articles buffered for the pages table
        articles_dropped: Articles dropped for lacking parent categories
        categories_emitted: Category rows handed to the sink
    """

    def __init__(self, config: HierarchyConfig | None = None) -> None:
        self.config = config if config is not None else load_config()
        self._pages: RowBuffer[PendingPage] = make_buffer(self.config.buffer, PendingPage)
        self._biographies: RowBuffer[PendingBiography] = make_buffer(
            self.config.buffer, PendingBiography
        )
        self._link_counts: Counter[str] = Counter()
        self.articles_kept = 0
        self.articles_dropped = 0
        self.categories_emitted = 0

    @property
    def link_counts(self) -> Counter[str]:
        """Inbound link count per title; final once the dump is consumed."""
        return self._link_counts

    @property
    def biographies_pending(self) -> int:
        return len(self._biographies)

    # -------------------------------------------------------------------------
    # Pass 1
    # -------------------------------------------------------------------------

    def add_page(self, page: PageRecord, emit_category: CategorySink) -> None:
        """Route one page by namespace.

        Args:
            page: Page from the reader.
            emit_category: Called at once with each category row.
        """
        if page.namespace is None:
            return
        if page.namespace == self.config.article_namespace:
            self._add_article(page)
        elif page.namespace == self.config.category_namespace:
            self._add_category(page, emit_category)

    def _add_article(self, page: PageRecord) -> None:
        parents = page.parents

        # Disambiguation and unclassified pages: no row, no outbound links
        if not parents:
            self.articles_dropped += 1
            return

        lifespan = extract_lifespan(parents)
        if lifespan.is_known and not page.title.startswith(self.config.list_prefix):
            self._biographies.append(
                PendingBiography(
                    title=page.title,
                    birth_year=lifespan.birth_year,
                    death_year=lifespan.death_year,
                    age=lifespan.age,
                    parents=parents,
                )
            )

        self._pages.append(PendingPage(title=page.title, parents=parents))
        self.articles_kept += 1

        # Links are distinct per page, so each source counts once per target
        self._link_counts.update(page.links)

    def _add_category(self, page: PageRecord, emit_category: CategorySink) -> None:
        prefix = self.config.category_prefix
        if not page.title.startswith(prefix):
            logger.debug(f"Category page without {prefix!r} prefix: {page.title!r}")
            return
        emit_category(CategoryRow(title=page.title[len(prefix) :], parents=page.parents))
        self.categories_emitted += 1

    def consume(self, pages: Iterable[PageRecord], emit_category: CategorySink) -> int:
        """Run pass 1 over every page.

        Returns:
            Number of pages consumed.
        """
        count = 0
        for page in pages:
            self.add_page(page, emit_category)
            count += 1
        logger.info(
            f"Pass 1 done: {count} pages, {self.articles_kept} articles kept, "
            f"{self.articles_dropped} dropped, {len(self._link_counts)} link targets"
        )
        return count

    # -------------------------------------------------------------------------
    # Pass 2
    # -------------------------------------------------------------------------

    def page_rows(self) -> Iterator[PageRow]:
        """Buffered articles with their final inbound link counts."""
        counts = self._link_counts
        for pending in self._pages:
            yield PageRow(
                title=pending.title,
                inbound_links=counts.get(pending.title, 0),
                parents=pending.parents,
            )

    def biographical_rows(self) -> Iterator[BiographicalRow]:
        """Buffered biographies with their final inbound link counts."""
        counts = self._link_counts
        for pending in self._biographies:
            yield BiographicalRow(
                title=pending.title,
                birth_year=pending.birth_year,
                death_year=pending.death_year,
                age=pending.age,
                inbound_links=counts.get(pending.title, 0),
                parents=pending.parents,
            )

    def close(self) -> None:
        """Release both buffers (removes spilled files)."""
        self._pages.close()
        self._biographies.close()

    def __enter__(self) -> HierarchyAggregator:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()
