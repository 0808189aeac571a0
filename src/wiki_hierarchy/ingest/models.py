"""Core data models for the extraction pipeline.

This module contains the dataclasses passed between pipeline stages:
- PageRecord: One page read from the dump, with lazily mined references
- PendingPage / PendingBiography: Pass-1 rows still missing link counts
- PageRow / BiographicalRow / CategoryRow: Finished table rows
- ExtractionStats: Counters reported at the end of a run
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import cached_property

from wiki_hierarchy.ingest.parsers import (
    InfoboxResult,
    References,
    extract_references,
    parse_infobox,
)


@dataclass(frozen=True)
class PageRecord:
    """Single page of a wiki dump.

    Attributes:
        title: Page title as written in the dump.
        text: Raw MediaWiki markup of the page body.
        namespace: Integer namespace (0 articles, 14 categories), or None
            when the dump value was missing or not an integer.
    """

    title: str
    text: str
    namespace: int | None = None

    @cached_property
    def references(self) -> References:
        """Links and parents, mined in one scan on first access."""
        return extract_references(self.text)

    @property
    def links(self) -> tuple[str, ...]:
        """Distinct titles this page links to."""
        return self.references.links

    @property
    def parents(self) -> tuple[str, ...]:
        """Distinct parent categories of this page."""
        return self.references.parents

    def infobox(self) -> InfoboxResult:
        """Parse the page infobox. Not cached; most pages never ask."""
        return parse_infobox(self.text)


@dataclass(frozen=True)
class PendingPage:
    """Article row buffered until inbound link counts are final."""

    title: str
    parents: tuple[str, ...]


@dataclass(frozen=True)
class PendingBiography:
    """Biographical row buffered until inbound link counts are final."""

    title: str
    birth_year: int | None
    death_year: int | None
    age: int | None
    parents: tuple[str, ...]


@dataclass(frozen=True)
class PageRow:
    title: str
    inbound_links: int
    parents: tuple[str, ...]


@dataclass(frozen=True)
class BiographicalRow:
    title: str
    birth_year: int | None
    death_year: int | None
    age: int | None
    inbound_links: int
    parents: tuple[str, ...]


@dataclass(frozen=True)
class CategoryRow:
    """Category page with the "Category:" prefix stripped from its title."""

    title: str
    parents: tuple[str, ...]


@dataclass
class ExtractionStats:
    """Statistics from one extraction run.

    Attributes:
        pages_read: Pages yielded by the reader (redirects excluded)
        articles_written: Rows in the pages table
        articles_dropped: Articles without any parent category
        categories_written: Rows in the categories table
        biographies_written: Rows in the biographical table
        link_targets: Distinct titles with at least one inbound link
        elapsed_seconds: Wall time of the whole run
    """

    pages_read: int = 0
    articles_written: int = 0
    articles_dropped: int = 0
    categories_written: int = 0
    biographies_written: int = 0
    link_targets: int = 0
    elapsed_seconds: float = 0.0
