"""Streaming reader for MediaWiki XML dumps.

Dumps are far larger than memory, so pages are pulled one at a time with
lxml's ``iterparse``. Each finished ``<page>`` element is turned into a
PageRecord and then cleared together with its already-processed siblings,
keeping memory use flat regardless of dump size.

Pages are skipped (not errors) when they:
- carry a ``<redirect>`` child
- have an empty or whitespace-only title or text

Plain ``.xml`` files and ``.bz2`` / ``.gz`` compressed dumps are accepted.
"""

from __future__ import annotations

import bz2
import gzip
import logging
from collections.abc import Iterator
from pathlib import Path
from types import TracebackType
from typing import IO, Final

from lxml import etree

from wiki_hierarchy.ingest.models import PageRecord

logger = logging.getLogger(__name__)

# =============================================================================
# EXCEPTIONS
# =============================================================================


class WikiHierarchyError(Exception):
    """Base exception for all wiki-hierarchy errors."""

    pass


class DumpReadError(WikiHierarchyError):
    """Raised when the dump cannot be read or is not well-formed XML."""

    pass


# =============================================================================
# CONSTANTS
# =============================================================================

# Namespace-agnostic tags; export schema versions differ between dumps
PAGE_TAG: Final[str] = "{*}page"
TITLE_TAG: Final[str] = "{*}title"
NS_TAG: Final[str] = "{*}ns"
REDIRECT_TAG: Final[str] = "{*}redirect"
TEXT_TAG: Final[str] = "{*}text"


def _open_dump(path: Path) -> IO[bytes]:
    """Open a dump file for binary reading, decompressing by suffix."""
    suffix = path.suffix.lower()
    if suffix == ".bz2":
        return bz2.open(path, "rb")
    if suffix == ".gz":
        return gzip.open(path, "rb")
    return path.open("rb")


def _parse_namespace(raw: str | None) -> int | None:
    """Parse the ``<ns>`` value, returning None when it is not an integer.

    Examples:
        >>> _parse_namespace(" 14 ")
        14
        >>> _parse_namespace("main") is None
        True
    """
    if raw is None:
        return None
    try:
        return int(raw.strip())
    except ValueError:
        return None


def _release(elem: etree._Element) -> None:
    """Free a processed page and every sibling before it."""
    elem.clear()
    parent = elem.getparent()
    if parent is None:
        return
    while elem.getprevious() is not None:
        del parent[0]


class PageReader:
    """Forward-only iterator over the usable pages of a dump.

    Args:
        source: Path to a dump file, or an open binary file object.

    Attributes:
        redirects_skipped: Redirect pages seen and skipped so far
        incomplete_skipped: Pages skipped for a blank title or text

    Example::

        with PageReader(Path("enwiki-pages-articles.xml.bz2")) as reader:
            for page in reader:
                print(page.title, page.namespace)
    """

    def __init__(self, source: Path | str | IO[bytes]) -> None:
        self._owned: IO[bytes] | None = None
        if isinstance(source, (str, Path)):
            path = Path(source)
            try:
                self._owned = _open_dump(path)
            except OSError as err:
                raise DumpReadError(f"Cannot open dump {path}: {err}") from err
            stream: IO[bytes] = self._owned
            self.name = str(path)
        else:
            stream = source
            self.name = getattr(source, "name", "<stream>")

        self.redirects_skipped = 0
        self.incomplete_skipped = 0
        self._pages = self._iter_pages(stream)

    def _iter_pages(self, stream: IO[bytes]) -> Iterator[PageRecord]:
        context = etree.iterparse(stream, events=("end",), tag=PAGE_TAG, huge_tree=True)
        try:
            for _event, elem in context:
                page = self._to_record(elem)
                _release(elem)
                if page is not None:
                    yield page
        except etree.XMLSyntaxError as err:
            raise DumpReadError(f"Malformed dump {self.name}: {err}") from err
        except (EOFError, OSError) as err:
            raise DumpReadError(f"Cannot read dump {self.name}: {err}") from err

    def _to_record(self, elem: etree._Element) -> PageRecord | None:
        if elem.find(REDIRECT_TAG) is not None:
            self.redirects_skipped += 1
            return None

        title = elem.findtext(TITLE_TAG) or ""
        namespace = _parse_namespace(elem.findtext(NS_TAG))

        # Full-history dumps hold several revisions; the last text wins
        text = ""
        for text_elem in elem.iter(TEXT_TAG):
            text = text_elem.text or ""

        if not title.strip() or not text.strip():
            self.incomplete_skipped += 1
            logger.debug(f"Skipping incomplete page: {title!r}")
            return None

        return PageRecord(title=title, text=text, namespace=namespace)

    def __iter__(self) -> Iterator[PageRecord]:
        return self

    def __next__(self) -> PageRecord:
        return next(self._pages)

    def close(self) -> None:
        """Close the underlying file if this reader opened it."""
        self._pages.close()
        if self._owned is not None:
            self._owned.close()
            self._owned = None

    def __enter__(self) -> PageReader:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()


def iter_pages(source: Path | str | IO[bytes]) -> Iterator[PageRecord]:
    """Yield usable pages of a dump, closing the file when exhausted.

    Args:
        source: Path to a dump file, or an open binary file object.

    Yields:
        PageRecord for every non-redirect page with a title and text.

    Raises:
        DumpReadError: If the dump is unreadable or malformed.
    """
    with PageReader(source) as reader:
        yield from reader
        logger.debug(
            f"Finished {reader.name}: {reader.redirects_skipped} redirects, "
            f"{reader.incomplete_skipped} incomplete pages skipped"
        )
