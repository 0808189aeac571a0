"""Unit tests for project configuration."""

import pytest
from pydantic import ValidationError

from wiki_hierarchy.config import HierarchyConfig, load_config


class TestHierarchyConfig:
    @pytest.mark.unit
    def test_defaults(self) -> None:
        cfg = HierarchyConfig()
        assert cfg.buffer == "memory"
        assert cfg.trailing_delimiter is False
        assert cfg.article_namespace == 0
        assert cfg.category_namespace == 14
        assert cfg.category_prefix == "Category:"
        assert cfg.list_prefix == "List of"
        assert cfg.pages_output == "pages_and_parents.tsv"

    @pytest.mark.unit
    def test_invalid_buffer_kind(self) -> None:
        with pytest.raises(ValidationError):
            HierarchyConfig(buffer="cloud")  # type: ignore[arg-type]

    @pytest.mark.unit
    def test_load_config_is_cached(self) -> None:
        assert load_config() is load_config()

    @pytest.mark.unit
    def test_load_config_returns_model(self) -> None:
        assert isinstance(load_config(), HierarchyConfig)
