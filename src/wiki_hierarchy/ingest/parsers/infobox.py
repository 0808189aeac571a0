"""Infobox parser for MediaWiki templates.

This module extracts the first infobox of an article. Infoboxes are
structured metadata templates that appear at the top of articles,
containing key facts about the subject::

    {{Infobox Person
    | name = Ada Lovelace
    | born = 1815
    }}

Only the plain layout is understood: the template must open with
"{{Infobox" and close with a line holding nothing but "}}". Values that
contain "=" or nested templates with "|" are lost; parse_infobox is a
lexical scan, not a template expander. detect_infobox_title walks the
mwparserfromhell template tree instead.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import mwparserfromhell

from wiki_hierarchy.ingest.parsers.types import InfoboxResult

if TYPE_CHECKING:
    from mwparserfromhell.nodes import Template

INFOBOX_MARKER: str = "{{Infobox"

# The infobox body ends at the first line holding only "}}"
INFOBOX_CLOSING: str = "\n}}\n"

NOT_FOUND = InfoboxResult(found=False)


def _parse_field(part: str) -> tuple[str, str] | None:
    """Split one "|key = value" field into a key/value pair.

    Args:
        part: Raw field text between two pipes.

    Returns:
        (key, value) or None when the field has no single "=" or the
        value is blank.

    Examples:
        >>> _parse_field("name = Ada\\n")
        ('name', 'Ada')
        >>> _parse_field("website = https://x.org/?a=b") is None
        True
        >>> _parse_field("spouse = ") is None
        True
    """
    kv = part.strip().split("=")
    if len(kv) != 2 or not kv[1].strip():
        return None
    return kv[0].lstrip("|").strip(), kv[1].strip()


def _find_infobox_template(text: str) -> Template | None:
    """Find the first Infobox template in parsed wikitext."""
    for template in mwparserfromhell.parse(text).filter_templates():
        if str(template.name).strip().startswith("Infobox"):
            return template
    return None


def detect_infobox_title(text: str) -> str | None:
    """Return the infobox title without parsing its fields.

    Unlike parse_infobox this reads the template tree, so it also sees
    infoboxes written on a single line.

    Examples:
        >>> detect_infobox_title("{{Infobox scientist\\n| name = X\\n}}\\n")
        'scientist'
        >>> detect_infobox_title("{{Infobox book|title=Capital}}")
        'book'
        >>> detect_infobox_title("No template here.") is None
        True
    """
    template = _find_infobox_template(text)
    if template is None:
        return None
    return str(template.name).strip()[len("Infobox") :].strip()


def parse_infobox(text: str) -> InfoboxResult:
    """Extract infobox title and non-empty fields from article text.

    Args:
        text: MediaWiki markup text of the article.

    Returns:
        InfoboxResult; ``found`` is False when there is no infobox, it is
        never closed, or none of its fields carries a value.

    Examples:
        >>> result = parse_infobox("{{Infobox Person\\n|name = Ada\\n|born = 1815\\n}}\\n")
        >>> result.title, result.entries
        ('Person', (('name', 'Ada'), ('born', '1815')))
    """
    start = text.find(INFOBOX_MARKER)
    if start < 0:
        return NOT_FOUND

    end = text.find(INFOBOX_CLOSING, start)
    if end < 0:
        return NOT_FOUND

    # The closing sequence starts with a newline, so one exists by now
    line_end = text.find("\n", start)
    title = text[start + len(INFOBOX_MARKER) : line_end].strip()

    entries: list[tuple[str, str]] = []
    for part in text[line_end:end].strip().split("|"):
        entry = _parse_field(part)
        if entry is not None:
            entries.append(entry)

    if not entries:
        return NOT_FOUND
    return InfoboxResult(found=True, title=title, entries=tuple(entries))
