"""Tests for onenote_md_export.exporter.notebook_exporter module."""

import tempfile
from datetime import datetime
from pathlib import Path

import pytest
from conftest import outline, page_xml

from onenote_md_export.exporter.markdown import MarkdownWriter
from onenote_md_export.exporter.notebook_exporter import (
    NB_TREE_ERROR_CODE,
    NotebookExporter,
)
from onenote_md_export.model.notebook import Notebook
from onenote_md_export.model.page import Page
from onenote_md_export.model.section import Section
from onenote_md_export.service.errors import RPC_SERVER_UNAVAILABLE, ServiceUnavailableError

NOW = datetime(2024, 5, 6, 7, 8)


@pytest.fixture(autouse=True)
def temp_dir(tmp_path, monkeypatch):
    monkeypatch.setattr(tempfile, "tempdir", str(tmp_path / "tmp"))
    return tmp_path / "tmp"


@pytest.fixture
def exporter(onenote, converter, settings):
    return NotebookExporter(
        onenote, converter, MarkdownWriter(settings), settings, now=lambda: NOW
    )


def build_tree(onenote, layout: dict[str, list[str]]) -> None:
    """Give the fake OneNote a hierarchy of sections and page titles."""
    for section_title, titles in layout.items():
        section = Section(title=section_title, onenote_id=f"s-{section_title}")
        for title in titles:
            page_id = f"{section_title}/{title}"
            section.add_page(Page(title=title, onenote_id=page_id))
            onenote.pages[page_id] = page_xml(outline(title), author="")
        onenote.notebook_tree.append(section)


class TestNotebookExporter:
    """Tests for NotebookExporter."""

    def test_export_folder_name(self, exporter, settings):
        folder = exporter.notebook_export_folder(Notebook(title="Work: 2024"))
        assert folder == str(Path(settings.export_folder) / "md" / "Work 2024-20240506 07-08")

    def test_temp_folder(self, exporter, temp_dir):
        assert exporter.temp_folder(Notebook(title="Work")) == temp_dir / "Work"

    def test_exports_all_pages(self, exporter, onenote, settings):
        build_tree(onenote, {"Projects": ["Alpha", "Beta"], "Archive": ["Old"]})
        notebook = Notebook(title="Work", onenote_id="nb")

        result = exporter.export_notebook(notebook)

        assert result.succeeded
        assert [o.page.title for o in result.exported_pages] == ["Alpha", "Beta", "Old"]
        root = Path(notebook.export_folder)
        assert root == Path(settings.export_folder) / "md" / "Work-20240506 07-08"
        assert (root / "Projects" / "Alpha.md").exists()
        assert (root / "Archive" / "Old.md").exists()
        assert onenote.discarded == 1

    def test_previous_export_cleared(self, exporter, onenote):
        notebook = Notebook(title="Work", onenote_id="nb")
        stale = Path(exporter.notebook_export_folder(notebook)) / "stale.md"
        stale.parent.mkdir(parents=True)
        stale.write_text("old", encoding="utf-8")

        exporter.export_notebook(notebook)

        assert not stale.exists()

    def test_tree_failure(self, exporter, onenote):
        onenote.fill_error = RuntimeError("hierarchy unavailable")
        notebook = Notebook(title="Work", onenote_id="nb")

        result = exporter.export_notebook(notebook)

        assert not result.succeeded
        assert result.error_code == NB_TREE_ERROR_CODE
        assert result.error_message == (
            "Error while loading the content of notebook 'Work' (id nb): "
            "hierarchy unavailable"
        )
        assert result.pages == []

    def test_failed_page_does_not_stop_export(self, exporter, onenote):
        build_tree(onenote, {"Projects": ["Alpha", "Beta"]})
        onenote.fail("get_page_content", RuntimeError("corrupted page"))

        result = exporter.export_notebook(Notebook(title="Work", onenote_id="nb"))

        assert result.succeeded
        assert [o.page.title for o in result.failed_pages] == ["Alpha"]
        assert [o.page.title for o in result.exported_pages] == ["Beta"]
        assert result.failed_pages[0].message == "corrupted page"
        assert onenote.discarded == 1

    def test_section_filter(self, exporter, onenote):
        build_tree(onenote, {"Projects": ["Alpha"], "Archive": ["Old"]})

        result = exporter.export_notebook(
            Notebook(title="Work", onenote_id="nb"), section_filter="ARCH"
        )

        assert [o.page.title for o in result.pages] == ["Old"]

    def test_page_filter(self, exporter, onenote):
        build_tree(onenote, {"Projects": ["Alpha", "Beta"]})

        result = exporter.export_notebook(
            Notebook(title="Work", onenote_id="nb"), page_filter="bet"
        )

        assert [o.page.title for o in result.pages] == ["Beta"]

    def test_failed_reconnect_does_not_stop_export(self, exporter, onenote):
        build_tree(onenote, {"Projects": ["Alpha", "Beta"]})
        onenote.fail(
            "get_page_content",
            ServiceUnavailableError("RPC server unavailable", hresult=RPC_SERVER_UNAVAILABLE),
        )
        onenote.reset_error = ServiceUnavailableError(
            "still down", hresult=RPC_SERVER_UNAVAILABLE
        )

        result = exporter.export_notebook(Notebook(title="Work", onenote_id="nb"))

        assert [o.page.title for o in result.failed_pages] == ["Alpha"]
        assert [o.page.title for o in result.exported_pages] == ["Beta"]
        assert onenote.discarded == 1
