"""Birth and death years from category names.

Biographical articles carry categories such as "1815 births",
"1852 deaths" or "10 BC births". This module turns such
strings into signed years with a fixed lexical heuristic:

1. The category must contain "births" (or "deaths").
2. It must contain exactly one run of digits, which becomes the year.
3. Century, millennium and animal categories are rejected.
4. A standalone "BC" makes the year negative.

False negatives are acceptable (the page simply gets no year); the
exclusion list keeps false positives down.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from typing import Final

from wiki_hierarchy.ingest.parsers.types import Lifespan, LifespanKind

# Maximal runs of ASCII digits
DIGIT_RUN_PATTERN: Final[re.Pattern[str]] = re.compile(r"[0-9]+")

# "BC" as a whole word, case-sensitive
BC_PATTERN: Final[re.Pattern[str]] = re.compile(r"\bBC\b")

# Substrings marking categories that look like years but are not
EXCLUDED_WORDS: Final[tuple[str, ...]] = ("century", "millennium", "animal")


def extract_year(category: str, kind: LifespanKind) -> int | None:
    """Extract a birth or death year from a category name.

    Args:
        category: Category name without the "Category:" prefix.
        kind: "births" or "deaths".

    Returns:
        The year (negative for BC) or None if the category does not
        name a single year of that kind.

    Examples:
        >>> extract_year("1990 deaths", "deaths")
        1990
        >>> extract_year("10 BC births", "births")
        -10
        >>> extract_year("19th-century births", "births") is None
        True
    """
    if kind not in category:
        return None

    numbers = DIGIT_RUN_PATTERN.findall(category)
    if len(numbers) != 1:
        return None
    if any(word in category for word in EXCLUDED_WORDS):
        return None

    year = int(numbers[0])
    if BC_PATTERN.search(category):
        return -year
    return year


def birth_year(category: str) -> int | None:
    """Shortcut for ``extract_year(category, "births")``."""
    return extract_year(category, "births")


def death_year(category: str) -> int | None:
    """Shortcut for ``extract_year(category, "deaths")``."""
    return extract_year(category, "deaths")


def extract_lifespan(categories: Iterable[str]) -> Lifespan:
    """Derive a lifespan from an article's ordered parent categories.

    The first category yielding a birth year sets the birth year, and
    likewise for the death year; later matches never overwrite them.

    Examples:
        >>> extract_lifespan(["1815 births", "1852 deaths", "1900 births"])
        Lifespan(birth_year=1815, death_year=1852)
    """
    born: int | None = None
    died: int | None = None
    for category in categories:
        if born is None:
            born = birth_year(category)
        if died is None:
            died = death_year(category)
        if born is not None and died is not None:
            break
    return Lifespan(birth_year=born, death_year=died)
