"""Tests for onenote_md_export.exporter.markdown module."""

import os

import pytest

from onenote_md_export.exporter.markdown import RESOURCES_FOLDER, MarkdownWriter
from onenote_md_export.model.attachment import Attachment
from onenote_md_export.model.notebook import Notebook
from onenote_md_export.model.page import Page
from onenote_md_export.model.section import Section
from onenote_md_export.settings import ExportSettings


@pytest.fixture
def page(tmp_path):
    nb = Notebook(title="NB", export_folder=str(tmp_path / "export"))
    group = nb.add_section(Section(title="Group", is_section_group=True))
    section = group.add_section(Section(title="Meetings"))
    return section.add_page(Page(title="Weekly: sync", author="Alice"))


class TestMarkdownWriter:
    """Tests for MarkdownWriter."""

    def test_page_path_follows_sections(self, page, tmp_path):
        writer = MarkdownWriter(ExportSettings())
        assert writer.page_md_file_path(page) == os.path.join(
            str(tmp_path / "export"), "Group", "Meetings", "Weekly sync.md"
        )

    def test_page_file_name_truncated(self, page):
        page.title = "x" * 80
        writer = MarkdownWriter(ExportSettings(md_max_file_length=10))
        assert os.path.basename(writer.page_md_file_path(page)) == "x" * 10 + ".md"

    def test_override_wins(self, page):
        writer = MarkdownWriter(ExportSettings())
        page.override_page_file_path = "/elsewhere/page-1.md"
        assert writer.page_md_file_path(page) == "/elsewhere/page-1.md"

    def test_attachment_in_resources_folder(self, page, tmp_path):
        writer = MarkdownWriter(ExportSettings())
        att = Attachment(page=page, onenote_preferred_file_name="plan.pdf")
        assert writer.attachment_file_path(att) == os.path.join(
            str(tmp_path / "export"), RESOURCES_FOLDER, "plan.pdf"
        )

    def test_attachment_reference_is_relative_and_quoted(self, page):
        writer = MarkdownWriter(ExportSettings())
        att = Attachment(page=page, onenote_preferred_file_name="my plan.pdf")
        assert writer.attachment_md_reference(att) == "../../_resources/my%20plan.pdf"

    def test_finalize_adds_title_and_author(self, page):
        writer = MarkdownWriter(ExportSettings())
        md = writer.finalize_page_md(page, "Body\n")
        assert md == "# Weekly: sync\n\nBody\n\n---\n*Author: Alice*\n"

    def test_finalize_without_author(self, page):
        page.author = "unknown"
        md = MarkdownWriter(ExportSettings()).finalize_page_md(page, "Body")
        assert "Author" not in md

    def test_write_page_file(self, page):
        writer = MarkdownWriter(ExportSettings())
        writer.prepare_folders(page)
        writer.write_page_file(page, "content")
        with open(writer.page_md_file_path(page), encoding="utf-8") as f:
            assert f.read() == "content"

    def test_page_outside_notebook_rejected(self):
        with pytest.raises(ValueError):
            MarkdownWriter(ExportSettings()).page_md_file_path(Page(title="Lonely"))
