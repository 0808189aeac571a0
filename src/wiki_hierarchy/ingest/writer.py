"""Tab-separated output for hierarchy tables.

Column layouts:
- pages:        title, inbound links, parents
- categories:   title, parents
- biographical: title, birth year, death year, age, inbound links, parents

Parents are joined with "|". Unknown years and ages are empty strings.
"""

from __future__ import annotations

from pathlib import Path
from types import TracebackType
from typing import TextIO

from wiki_hierarchy.ingest.models import BiographicalRow, CategoryRow, PageRow

FIELD_SEPARATOR = "\t"
PARENT_SEPARATOR = "|"


def join_parents(parents: tuple[str, ...], trailing_delimiter: bool = False) -> str:
    """Join parent categories for a single table cell.

    Examples:
        >>> join_parents(("A", "B"))
        'A|B'
        >>> join_parents(("A", "B"), trailing_delimiter=True)
        'A|B|'
    """
    joined = PARENT_SEPARATOR.join(parents)
    if trailing_delimiter and parents:
        joined += PARENT_SEPARATOR
    return joined


def _optional(value: int | None) -> str:
    return "" if value is None else str(value)


def format_page_row(row: PageRow, trailing_delimiter: bool = False) -> str:
    return FIELD_SEPARATOR.join(
        [row.title, str(row.inbound_links), join_parents(row.parents, trailing_delimiter)]
    )


def format_category_row(row: CategoryRow, trailing_delimiter: bool = False) -> str:
    return FIELD_SEPARATOR.join([row.title, join_parents(row.parents, trailing_delimiter)])


def format_biographical_row(row: BiographicalRow, trailing_delimiter: bool = False) -> str:
    return FIELD_SEPARATOR.join(
        [
            row.title,
            _optional(row.birth_year),
            _optional(row.death_year),
            _optional(row.age),
            str(row.inbound_links),
            join_parents(row.parents, trailing_delimiter),
        ]
    )


class TsvWriter:
    """UTF-8 tab-separated table file.

    Args:
        path: Output file, created or truncated.
        trailing_delimiter: Append "|" after the last parent.

    Example::

        with TsvWriter(Path("pages.tsv")) as out:
            out.write_page(PageRow("Ada Lovelace", 3, ("Mathematicians",)))
    """

    def __init__(self, path: Path, trailing_delimiter: bool = False) -> None:
        self.path = path
        self.trailing_delimiter = trailing_delimiter
        self.rows_written = 0
        self._file: TextIO = path.open("w", encoding="utf-8", newline="\n")

    def _write_line(self, line: str) -> None:
        self._file.write(line + "\n")
        self.rows_written += 1

    def write_page(self, row: PageRow) -> None:
        self._write_line(format_page_row(row, self.trailing_delimiter))

    def write_category(self, row: CategoryRow) -> None:
        self._write_line(format_category_row(row, self.trailing_delimiter))

    def write_biography(self, row: BiographicalRow) -> None:
        self._write_line(format_biographical_row(row, self.trailing_delimiter))

    def close(self) -> None:
        self._file.close()

    def __enter__(self) -> TsvWriter:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()
