"""Shared type definitions for parser modules.

This module contains dataclasses and type aliases used across
the link, infobox, and lifespan parsers.
"""

from dataclasses import dataclass, field
from typing import Literal

# Type aliases for literal string types
LifespanKind = Literal["births", "deaths"]
"""Which end of a lifespan a category string is checked for."""


@dataclass(frozen=True)
class References:
    """Outbound references mined from a page body.

    Both tuples hold distinct titles in order of first appearance.

    Attributes:
        links: Titles of pages referenced by [[Target]] links.
        parents: Names of categories from [[Category:Name]] links.
    """

    links: tuple[str, ...] = ()
    parents: tuple[str, ...] = ()


@dataclass(frozen=True)
class InfoboxResult:
    """Represents parsed infobox data.

    Attributes:
        found: True when at least one key/value entry was extracted.
        title: Text following "{{Infobox" on the opening line (e.g. "Person").
        entries: (key, value) pairs in template order; values are never blank.
    """

    found: bool
    title: str = ""
    entries: tuple[tuple[str, str], ...] = field(default_factory=tuple)

    def as_dict(self) -> dict[str, str]:
        """Return entries as a dict; later duplicate keys win."""
        return dict(self.entries)


@dataclass(frozen=True)
class Lifespan:
    """Birth and death years derived from category names.

    Attributes:
        birth_year: Signed year (negative for BC), or None.
        death_year: Signed year (negative for BC), or None.
    """

    birth_year: int | None = None
    death_year: int | None = None

    @property
    def age(self) -> int | None:
        """Years between birth and death when both are known."""
        if self.birth_year is None or self.death_year is None:
            return None
        return self.death_year - self.birth_year

    @property
    def is_known(self) -> bool:
        return self.birth_year is not None or self.death_year is not None
