"""Parser modules for MediaWiki extraction.

This package provides parsers for extracting structured data from
the markup of wiki dump pages:

- **Links**: Internal [[links]] and [[Category:]] parent links
- **Infoboxes**: The first {{Infobox ...}} block of an article
- **Lifespans**: Birth/death years from "1815 births"-style categories

Example usage::

    from wiki_hierarchy.ingest.parsers import extract_references

    refs = extract_references("See [[Article]]. [[Category:Topics]]")
    refs.links    # ('Article',)
    refs.parents  # ('Topics',)

Public API:
    Types:
        - References: Distinct links and parent categories of a page
        - InfoboxResult: Parsed infobox title and entries
        - Lifespan: Birth/death years with derived age
        - LifespanKind: Literal type, "births" or "deaths"

    Functions:
        - extract_references: Mine links and parents from text
        - parse_infobox: Extract infobox data from text
        - detect_infobox_title: Infobox title without field parsing
        - extract_year: Birth or death year from one category
        - birth_year / death_year: Shortcuts for extract_year
        - extract_lifespan: First birth and death year over categories
"""

from wiki_hierarchy.ingest.parsers.infobox import (
    detect_infobox_title,
    parse_infobox,
)
from wiki_hierarchy.ingest.parsers.lifespan import (
    birth_year,
    death_year,
    extract_lifespan,
    extract_year,
)
from wiki_hierarchy.ingest.parsers.link import extract_references
from wiki_hierarchy.ingest.parsers.types import (
    InfoboxResult,
    Lifespan,
    LifespanKind,
    References,
)

__all__ = [
    "InfoboxResult",
    "Lifespan",
    "LifespanKind",
    "References",
    "birth_year",
    "death_year",
    "detect_infobox_title",
    "extract_lifespan",
    "extract_references",
    "extract_year",
    "parse_infobox",
]
