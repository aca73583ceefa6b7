"""
Tests for report output and the CLI entry point.

Run with: pytest nebula/facet_index/tests/test_report_cli.py -v
"""

import csv
import io
from pathlib import Path

import pytest

from nebula.facet_index.__main__ import main
from nebula.facet_index.cache import CacheStats
from nebula.facet_index.models import Redirect
from nebula.facet_index.report import (
    export_csv,
    export_redirects,
    format_console,
    summarize_pages,
)

FIXTURES_DIR = Path(__file__).parent / "fixtures"
SAMPLE_JSON = FIXTURES_DIR / "sample_items.json"


@pytest.fixture
def pages(engine, snapshot):
    return engine.build_pages(snapshot)


class TestSummarizePages:
    """Test page statistics."""

    def test_counts(self, pages):
        summary = summarize_pages(pages)
        assert summary["total"] == 49
        assert summary["filtered"] == 45
        assert summary["sort_only"] == 4
        assert summary["empty"] == 0
        assert summary["max_filters"] == 2
        assert summary["by_sort"]["default"] == 9
        assert summary["by_sort"]["price-asc"] == 10

    def test_empty(self):
        summary = summarize_pages([])
        assert summary["total"] == 0
        assert summary["max_filters"] == 0


class TestFormatConsole:
    """Test console formatting."""

    def test_no_pages(self):
        assert format_console([]) == "No pages generated.\n"

    def test_lists_paths_and_summary(self, pages):
        output = format_console(pages, snapshot_id="products", stats=CacheStats(hits=36, misses=9))
        assert "SNAPSHOT: products" in output
        assert "colour/blue" in output
        assert "Total pages:     49" in output
        assert "Cache hits:      36 (80%)" in output

    def test_limit(self, pages):
        output = format_console(pages, limit=5)
        assert "... 44 more" in output


class TestExportCsv:
    """Test CSV export."""

    def test_rows(self, pages):
        content = export_csv(pages, base_url="/products/search")
        rows = list(csv.DictReader(io.StringIO(content)))
        assert len(rows) == 49
        first = rows[0]
        assert first["path"] == "colour/blue"
        assert first["url"] == "/products/search/colour/blue/"
        assert first["sort"] == "default"
        assert first["count"] == "1"
        assert first["description"] == "Colour: Blue"
        assert first["items"] == "Travel Mug"

    def test_writes_to_output(self, pages):
        buffer = io.StringIO()
        content = export_csv(pages, output=buffer)
        assert buffer.getvalue() == content


class TestExportRedirects:
    """Test redirect file output."""

    def test_lines(self):
        redirects = [Redirect("/s/size/", "/s/#content")]
        assert export_redirects(redirects) == "/s/size/ /s/#content\n"


class TestCli:
    """Test the command line entry point."""

    def test_generates_csv_and_redirects(self, tmp_path, capsys):
        csv_path = tmp_path / "pages.csv"
        redirects_path = tmp_path / "_redirects"
        main([
            "--items", str(SAMPLE_JSON),
            "--output-csv", str(csv_path),
            "--redirects", str(redirects_path),
        ])

        rows = list(csv.DictReader(io.StringIO(csv_path.read_text())))
        assert len(rows) == 49
        assert "/products/search/size/ /products/search/#content" in redirects_path.read_text()
        assert "SNAPSHOT: all" in capsys.readouterr().out

    def test_per_category(self, tmp_path):
        csv_path = tmp_path / "pages.csv"
        main(["--items", str(SAMPLE_JSON), "--per-category", "--quiet", "--output-csv", str(csv_path)])

        content = csv_path.read_text()
        assert "/categories/mugs/search/colour/red/" in content
        assert "/categories/pets/search/pet-friendly/yes/" in content

    def test_missing_items_file(self, tmp_path):
        with pytest.raises(SystemExit) as excinfo:
            main(["--items", str(tmp_path / "missing.json")])
        assert excinfo.value.code == 1

    def test_invalid_items_exit(self, capsys):
        with pytest.raises(SystemExit) as excinfo:
            main(["--items", str(FIXTURES_DIR / "bad_items.json"), "--quiet"])
        assert excinfo.value.code == 1
        assert "Invalid item record" in capsys.readouterr().err
