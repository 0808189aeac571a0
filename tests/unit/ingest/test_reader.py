"""Unit tests for the streaming dump reader."""

import bz2
import gzip
import io
from collections.abc import Callable
from pathlib import Path

import pytest

from wiki_hierarchy.ingest.reader import DumpReadError, PageReader, WikiHierarchyError, iter_pages


class TestPageFiltering:
    """Tests for which pages are yielded."""

    @pytest.mark.unit
    def test_sample_dump_titles(self, sample_dump: Path) -> None:
        """Redirects and blank pages are skipped; everything else is kept in order."""
        titles = [page.title for page in iter_pages(sample_dump)]
        assert titles == [
            "Ada Lovelace",
            "Charles Babbage",
            "Analytical Engine",
            "Mercury (disambiguation)",
            "List of mathematicians",
            "Category:English mathematicians",
            "Category:Empty",
            "Talk:Ada Lovelace",
            "Broken namespace",
            "Socrates",
        ]

    @pytest.mark.unit
    def test_skip_counters(self, sample_dump: Path) -> None:
        with PageReader(sample_dump) as reader:
            pages = list(reader)
        assert len(pages) == 10
        assert reader.redirects_skipped == 1
        assert reader.incomplete_skipped == 1

    @pytest.mark.unit
    def test_redirect_is_skipped(self, write_dump: Callable[..., Path]) -> None:
        path = write_dump(
            [
                ("Lovelace", 0, "#REDIRECT [[Ada Lovelace]]", True),
                ("Ada Lovelace", 0, "[[Category:Mathematicians]]"),
            ]
        )
        assert [page.title for page in iter_pages(path)] == ["Ada Lovelace"]

    @pytest.mark.unit
    def test_blank_title_is_skipped(self, write_dump: Callable[..., Path]) -> None:
        path = write_dump([("  ", 0, "[[Category:X]]"), ("Kept", 0, "text")])
        assert [page.title for page in iter_pages(path)] == ["Kept"]

    @pytest.mark.unit
    def test_page_without_text_element_is_skipped(self, tmp_path: Path) -> None:
        path = tmp_path / "no_text.xml"
        path.write_text(
            "<mediawiki><page><title>Empty</title><ns>0</ns></page></mediawiki>",
            encoding="utf-8",
        )
        assert list(iter_pages(path)) == []


class TestPageFields:
    """Tests for the fields of yielded records."""

    @pytest.mark.unit
    def test_fields(self, sample_dump: Path) -> None:
        with PageReader(sample_dump) as reader:
            first = next(reader)
        assert first.title == "Ada Lovelace"
        assert first.namespace == 0
        assert first.text.startswith("{{Infobox person\n")
        assert first.text.endswith("[[Category:English mathematicians]]")

    @pytest.mark.unit
    def test_category_namespace(self, sample_dump: Path) -> None:
        pages = {page.title: page for page in iter_pages(sample_dump)}
        assert pages["Category:English mathematicians"].namespace == 14
        assert pages["Talk:Ada Lovelace"].namespace == 1

    @pytest.mark.unit
    def test_unparsable_namespace_is_none(self, sample_dump: Path) -> None:
        """A non-integer <ns> is reported as None, never as 0."""
        pages = {page.title: page for page in iter_pages(sample_dump)}
        assert pages["Broken namespace"].namespace is None

    @pytest.mark.unit
    def test_missing_namespace_is_none(self, tmp_path: Path) -> None:
        path = tmp_path / "no_ns.xml"
        path.write_text(
            "<mediawiki><page><title>A</title><revision><text>body</text></revision></page></mediawiki>",
            encoding="utf-8",
        )
        [page] = list(iter_pages(path))
        assert page.namespace is None

    @pytest.mark.unit
    def test_last_revision_text_wins(self, tmp_path: Path) -> None:
        path = tmp_path / "history.xml"
        path.write_text(
            "<mediawiki><page><title>A</title><ns>0</ns>"
            "<revision><text>old</text></revision>"
            "<revision><text>new</text></revision>"
            "</page></mediawiki>",
            encoding="utf-8",
        )
        [page] = list(iter_pages(path))
        assert page.text == "new"

    @pytest.mark.unit
    def test_dump_without_export_namespace(self, tmp_path: Path) -> None:
        path = tmp_path / "plain.xml"
        path.write_text(
            "<mediawiki><page><title>A</title><ns>14</ns>"
            "<revision><text>[[Category:B]]</text></revision></page></mediawiki>",
            encoding="utf-8",
        )
        [page] = list(iter_pages(path))
        assert page.namespace == 14


class TestSources:
    """Tests for the accepted input sources."""

    @pytest.mark.unit
    def test_binary_stream(self, sample_dump: Path) -> None:
        stream = io.BytesIO(sample_dump.read_bytes())
        assert len(list(iter_pages(stream))) == 10

    @pytest.mark.unit
    def test_string_path(self, sample_dump: Path) -> None:
        assert len(list(iter_pages(str(sample_dump)))) == 10

    @pytest.mark.unit
    def test_bz2_dump(self, sample_dump: Path, tmp_path: Path) -> None:
        path = tmp_path / "sample.xml.bz2"
        path.write_bytes(bz2.compress(sample_dump.read_bytes()))
        assert len(list(iter_pages(path))) == 10

    @pytest.mark.unit
    def test_gz_dump(self, sample_dump: Path, tmp_path: Path) -> None:
        path = tmp_path / "sample.xml.gz"
        path.write_bytes(gzip.compress(sample_dump.read_bytes()))
        assert len(list(iter_pages(path))) == 10


class TestErrors:
    """Tests for document-level failures."""

    @pytest.mark.unit
    def test_truncated_dump_raises(self, truncated_dump: Path) -> None:
        with pytest.raises(DumpReadError):
            list(iter_pages(truncated_dump))

    @pytest.mark.unit
    def test_missing_file_raises(self, tmp_path: Path) -> None:
        with pytest.raises(DumpReadError):
            PageReader(tmp_path / "missing.xml")

    @pytest.mark.unit
    def test_corrupt_bz2_raises(self, tmp_path: Path) -> None:
        path = tmp_path / "corrupt.xml.bz2"
        path.write_bytes(b"this is not bzip2 data")
        with pytest.raises(DumpReadError):
            list(iter_pages(path))

    @pytest.mark.unit
    def test_error_hierarchy(self) -> None:
        assert issubclass(DumpReadError, WikiHierarchyError)
