"""Shared pytest fixtures for wiki-hierarchy tests."""

from collections.abc import Callable, Sequence
from pathlib import Path
from typing import Any
from xml.sax.saxutils import escape

import pytest

from wiki_hierarchy.config import HierarchyConfig

FIXTURES_DIR = Path(__file__).parent / "fixtures"
MEDIAWIKI_DIR = FIXTURES_DIR / "mediawiki"
DUMPS_DIR = FIXTURES_DIR / "dumps"

EXPORT_NAMESPACE = "http://www.mediawiki.org/xml/export-0.10/"

# (title, ns, text) or (title, ns, text, is_redirect)
PageSpec = tuple[Any, ...]


@pytest.fixture
def fixtures_dir() -> Path:
    """Return path to fixtures directory."""
    return FIXTURES_DIR


@pytest.fixture
def load_fixture() -> Callable[[str, str], str]:
    """Factory fixture to load MediaWiki fixture files.

    Usage:
        def test_something(load_fixture):
            content = load_fixture("infoboxes", "person.txt")
    """

    def _load(category: str, name: str) -> str:
        path = MEDIAWIKI_DIR / category / name
        return path.read_text(encoding="utf-8")

    return _load


@pytest.fixture
def person_infobox(load_fixture: Callable[[str, str], str]) -> str:
    """Minimal person infobox (Ada)."""
    return load_fixture("infoboxes", "person.txt")


@pytest.fixture
def scientist_infobox(load_fixture: Callable[[str, str], str]) -> str:
    """Scientist infobox with blank and multi-'=' fields (Charles Babbage)."""
    return load_fixture("infoboxes", "scientist.txt")


@pytest.fixture
def mixed_links(load_fixture: Callable[[str, str], str]) -> str:
    """Article body with piped, prefixed, duplicate and category links."""
    return load_fixture("links", "mixed_links.txt")


# =============================================================================
# DUMP FIXTURES
# =============================================================================


@pytest.fixture
def sample_dump() -> Path:
    """Small dump covering articles, categories, redirects and odd pages."""
    return DUMPS_DIR / "sample.xml"


@pytest.fixture
def truncated_dump() -> Path:
    """Dump cut off in the middle of a page."""
    return DUMPS_DIR / "truncated.xml"


def build_dump(pages: Sequence[PageSpec]) -> str:
    """Render page specs as a MediaWiki export document."""
    parts = [f'<mediawiki xmlns="{EXPORT_NAMESPACE}" version="0.10">']
    for spec in pages:
        title, ns, text = spec[0], spec[1], spec[2]
        is_redirect = len(spec) > 3 and spec[3]
        parts.append("  <page>")
        parts.append(f"    <title>{escape(title)}</title>")
        parts.append(f"    <ns>{ns}</ns>")
        if is_redirect:
            parts.append(f'    <redirect title="{escape(title)}" />')
        parts.append(f'    <revision><text xml:space="preserve">{escape(text)}</text></revision>')
        parts.append("  </page>")
    parts.append("</mediawiki>")
    return "\n".join(parts) + "\n"


@pytest.fixture
def write_dump(tmp_path: Path) -> Callable[..., Path]:
    """Factory fixture writing a dump built from page specs.

    Usage:
        def test_something(write_dump):
            path = write_dump([("Ada", 0, "[[Category:X]]")])
    """

    def _write(pages: Sequence[PageSpec], name: str = "dump.xml") -> Path:
        path = tmp_path / name
        path.write_text(build_dump(pages), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def memory_config() -> HierarchyConfig:
    """Default settings with pending rows kept in memory."""
    return HierarchyConfig(buffer="memory")


@pytest.fixture
def disk_config() -> HierarchyConfig:
    """Default settings with pending rows spilled to disk."""
    return HierarchyConfig(buffer="disk")
