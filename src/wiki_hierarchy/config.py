"""Project configuration loaded from pyproject.toml."""

from __future__ import annotations

import tomllib
from functools import lru_cache
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel

BufferKind = Literal["memory", "disk"]


class HierarchyConfig(BaseModel):
    """Configuration for wiki-hierarchy project."""

    # Output file names (relative to the output directory)
    pages_output: str = "pages_and_parents.tsv"
    categories_output: str = "categories_and_parents.tsv"
    biographies_output: str = "biographical_pages.tsv"

    # Where pending rows live between the two passes
    buffer: BufferKind = "memory"

    # Append "|" after the last parent, as the legacy tables did
    trailing_delimiter: bool = False

    # Pages between progress lines on the console
    progress_interval: int = 10_000

    # Dump routing
    article_namespace: int = 0
    category_namespace: int = 14
    category_prefix: str = "Category:"
    list_prefix: str = "List of"


@lru_cache(maxsize=1)
def load_config() -> HierarchyConfig:
    """Load configuration from pyproject.toml.

    Returns:
        HierarchyConfig with settings from [tool.wiki-hierarchy] section,
        falling back to defaults if not found.
    """
    pyproject_path = _find_pyproject()
    if pyproject_path is None:
        return HierarchyConfig()

    with pyproject_path.open("rb") as f:
        data = tomllib.load(f)

    tool_config: dict[str, Any] = data.get("tool", {}).get("wiki-hierarchy", {})
    return HierarchyConfig(**tool_config)


def _find_pyproject() -> Path | None:
    """Find pyproject.toml by walking up from current file."""
    current = Path(__file__).resolve().parent
    for _ in range(10):  # Max 10 levels up
        candidate = current / "pyproject.toml"
        if candidate.exists():
            return candidate
        if current.parent == current:
            break
        current = current.parent
    return None


# Convenience accessor
config = load_config()
