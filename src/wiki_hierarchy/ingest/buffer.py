"""Buffers for rows waiting on the second pass.

Inbound link counts are only final once the whole dump has been read, so
article and biographical rows are held back until then. Two stores are
available:

- MemoryRowBuffer keeps rows in a list (fast, sized by RAM)
- SpillRowBuffer writes rows as JSON Lines into a temporary directory,
  which is removed on close whether the run succeeded or not
"""

from __future__ import annotations

import json
import logging
import tempfile
from collections.abc import Callable, Iterator
from dataclasses import asdict
from pathlib import Path
from types import TracebackType
from typing import Any, Generic, Protocol, TypeVar

from wiki_hierarchy.config import BufferKind

logger = logging.getLogger(__name__)

RowT = TypeVar("RowT")


class RowBuffer(Protocol[RowT]):
    """Append-then-replay store for pending rows."""

    def append(self, row: RowT) -> None: ...

    def __iter__(self) -> Iterator[RowT]: ...

    def __len__(self) -> int: ...

    def close(self) -> None: ...


class MemoryRowBuffer(Generic[RowT]):
    """Rows kept in a plain list."""

    def __init__(self) -> None:
        self._rows: list[RowT] = []

    def append(self, row: RowT) -> None:
        self._rows.append(row)

    def __iter__(self) -> Iterator[RowT]:
        return iter(self._rows)

    def __len__(self) -> int:
        return len(self._rows)

    def close(self) -> None:
        self._rows = []


class SpillRowBuffer(Generic[RowT]):
    """Rows spilled to a JSON Lines file in a private temporary directory.

    Args:
        row_type: Dataclass of the rows; tuple fields are restored from
            JSON arrays when replaying.
        prefix: Prefix for the temporary directory name.
    """

    def __init__(self, row_type: Callable[..., RowT], prefix: str = "wiki_hierarchy_") -> None:
        self._row_type = row_type
        self._tmpdir: tempfile.TemporaryDirectory[str] | None = tempfile.TemporaryDirectory(
            prefix=prefix
        )
        self.path = Path(self._tmpdir.name) / "rows.jsonl"
        self._writer = self.path.open("w", encoding="utf-8")
        self._count = 0
        logger.debug(f"Spilling pending rows to {self.path}")

    def append(self, row: RowT) -> None:
        if self._writer.closed:
            raise ValueError("Cannot append to a buffer that is being replayed or closed")
        self._writer.write(json.dumps(asdict(row), ensure_ascii=False) + "\n")
        self._count += 1

    def _restore(self, data: dict[str, Any]) -> RowT:
        for key, value in data.items():
            if isinstance(value, list):
                data[key] = tuple(value)
        return self._row_type(**data)

    def __iter__(self) -> Iterator[RowT]:
        if self._tmpdir is None:
            raise ValueError("Buffer is closed")
        if not self._writer.closed:
            self._writer.close()
        with self.path.open(encoding="utf-8") as reader:
            for line in reader:
                yield self._restore(json.loads(line))

    def __len__(self) -> int:
        return self._count

    def close(self) -> None:
        if not self._writer.closed:
            self._writer.close()
        if self._tmpdir is not None:
            self._tmpdir.cleanup()
            self._tmpdir = None

    def __enter__(self) -> SpillRowBuffer[RowT]:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()


def make_buffer(kind: BufferKind, row_type: Callable[..., RowT]) -> RowBuffer[RowT]:
    """Create a row buffer of the configured kind.

    Args:
        kind: "memory" or "disk".
        row_type: Row dataclass, needed to rebuild rows spilled to disk.

    Returns:
        An empty buffer.
    """
    if kind == "disk":
        return SpillRowBuffer(row_type)
    if kind == "memory":
        return MemoryRowBuffer()
    raise ValueError(f"Unknown buffer kind: {kind}")
