"""Link parser for MediaWiki markup.

This module mines [[...]] references out of page text:
- [[Target]] - Internal link, counted towards Target's inbound links
- [[Target|Display]] - Piped link; only Target is kept
- [[Category:Name]] - Parent category of the page
- [[File:x.jpg|thumb]], [[de:Ziel]] - Any other prefixed reference, discarded
"""

from __future__ import annotations

import re

from wiki_hierarchy.ingest.parsers.types import References

# Compile patterns once at module level for performance
# Shortest match between "[[" and the next "]]"; "." never crosses a newline
REFERENCE_PATTERN: re.Pattern[str] = re.compile(r"\[\[(.+?)\]\]")

# Pseudo-namespace that marks a parent category
CATEGORY_NAMESPACE: str = "Category"


def _reference_target(raw: str) -> str:
    """Reduce the inside of a [[...]] match to its target.

    Args:
        raw: Text between the brackets, e.g. "[Ada Lovelace|Ada".

    Returns:
        Trimmed text before the first pipe.

    Examples:
        >>> _reference_target("Ada Lovelace|Ada")
        'Ada Lovelace'
        >>> _reference_target(" Category:Mathematicians ")
        'Category:Mathematicians'
    """
    return raw.lstrip("[").split("|", maxsplit=1)[0].strip()


def extract_references(text: str) -> References:
    """Extract distinct links and parent categories from MediaWiki markup.

    Args:
        text: MediaWiki markup text to parse.

    Returns:
        References with links and parents in order of first appearance.

    Examples:
        >>> refs = extract_references("[[Ada Lovelace|Ada]] [[Category:Mathematicians]]")
        >>> refs.links, refs.parents
        (('Ada Lovelace',), ('Mathematicians',))
        >>> extract_references("[[File:Cat.jpg|thumb]]")
        References(links=(), parents=())
    """
    # dicts keep insertion order, so output is stable across runs
    links: dict[str, None] = {}
    parents: dict[str, None] = {}

    for match in REFERENCE_PATTERN.finditer(text):
        target = _reference_target(match.group(1))

        if ":" in target:
            prefix, _, remainder = target.partition(":")
            if prefix == CATEGORY_NAMESPACE:
                name = remainder.strip()
                if name:
                    parents[name] = None
            continue

        if target:
            links[target] = None

    return References(links=tuple(links), parents=tuple(parents))
