"""Plain Markdown output layout.

Pages are written to ``{export}/{section groups}/{section}/{page}.md``.
Attachments of the whole notebook share a ``_resources`` folder at the
root of the export and are linked with page-relative paths.
"""

import logging
import os
from pathlib import Path
from urllib.parse import quote

from onenote_md_export.exporter.writer import FormatWriter
from onenote_md_export.model.attachment import Attachment
from onenote_md_export.model.page import Page
from onenote_md_export.utils import sanitize_filename

logger = logging.getLogger(__name__)

RESOURCES_FOLDER = "_resources"


class MarkdownWriter(FormatWriter):
    """Writes pages as standalone Markdown files."""

    format_code = "md"

    def _export_folder(self, page: Page) -> str:
        notebook = page.notebook
        if notebook is None or not notebook.export_folder:
            raise ValueError(f"Page '{page.title}' is not part of an exported notebook")
        return notebook.export_folder

    def resource_folder_path(self, page: Page) -> str:
        return os.path.join(self._export_folder(page), RESOURCES_FOLDER)

    def default_page_md_file_path(self, page: Page) -> str:
        folders = [sanitize_filename(part) for part in page.section_path]
        name = sanitize_filename(
            page.title or "Untitled", max_length=self.settings.md_max_file_length
        )
        return os.path.join(self._export_folder(page), *folders, f"{name}.md")

    def default_attachment_file_path(self, attachment: Attachment) -> str:
        name = sanitize_filename(attachment.friendly_file_name)
        return os.path.join(self.resource_folder_path(attachment.page), name)

    def attachment_md_reference(self, attachment: Attachment) -> str:
        page_folder = os.path.dirname(self.page_md_file_path(attachment.page))
        relative = os.path.relpath(self.attachment_file_path(attachment), page_folder)
        return quote(Path(relative).as_posix())

    def prepare_folders(self, page: Page) -> None:
        Path(self.page_md_file_path(page)).parent.mkdir(parents=True, exist_ok=True)
        Path(self.resource_folder_path(page)).mkdir(parents=True, exist_ok=True)

    def finalize_page_md(self, page: Page, md: str) -> str:
        """Add the page title as H1 and an author footer."""
        lines: list[str] = []
        if page.title:
            lines.append(f"# {page.title}")
            lines.append("")
        lines.append(md.strip("\n"))
        lines.append("")
        if page.author and page.author != "unknown":
            lines.append("---")
            lines.append(f"*Author: {page.author}*")
            lines.append("")
        return "\n".join(lines)

    def write_page_file(self, page: Page, md: str) -> None:
        file_path = Path(self.page_md_file_path(page))
        file_path.parent.mkdir(parents=True, exist_ok=True)
        file_path.write_text(md, encoding="utf-8")
        logger.info("Wrote %s", file_path)
