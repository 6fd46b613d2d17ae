"""Export of a whole notebook, one page after the other."""

import logging
import os
import tempfile
from collections.abc import Callable
from datetime import datetime
from pathlib import Path

from onenote_md_export.exporter.page_exporter import PageExporter, page_label
from onenote_md_export.exporter.result import NotebookExportResult
from onenote_md_export.exporter.writer import FormatWriter
from onenote_md_export.model.notebook import Notebook
from onenote_md_export.model.page import Page
from onenote_md_export.service.base import DocumentConverter, NoteService
from onenote_md_export.settings import ExportSettings
from onenote_md_export.utils import clear_folder

logger = logging.getLogger(__name__)

NB_TREE_ERROR_CODE = "ErrorDuringNotebookProcessingNbTree"


def _matches(value: str, name_filter: str) -> bool:
    return not name_filter or name_filter.lower() in value.lower()


class NotebookExporter:
    """Owns the OneNote handle for an export run and drives page exports."""

    def __init__(
        self,
        service: NoteService,
        converter: DocumentConverter,
        writer: FormatWriter,
        settings: ExportSettings,
        now: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.service = service
        self.converter = converter
        self.writer = writer
        self.settings = settings
        self._now = now

    def notebook_export_folder(self, notebook: Notebook) -> str:
        return os.path.join(
            self.settings.export_folder,
            self.writer.format_code,
            f"{notebook.notebook_path}-{self._now():%Y%m%d %H-%M}",
        )

    def temp_folder(self, notebook: Notebook) -> Path:
        return Path(tempfile.gettempdir()) / notebook.notebook_path

    def select_pages(
        self, notebook: Notebook, section_filter: str = "", page_filter: str = ""
    ) -> list[Page]:
        return [
            page
            for page in notebook.iter_pages()
            if _matches("/".join(page.section_path), section_filter)
            and _matches(page.title, page_filter)
        ]

    def export_notebook(
        self, notebook: Notebook, section_filter: str = "", page_filter: str = ""
    ) -> NotebookExportResult:
        """Export every page of ``notebook`` matching the filters.

        A failed page does not stop the export; its outcome is recorded in
        the returned result.
        """
        notebook.export_folder = self.notebook_export_folder(notebook)
        clear_folder(notebook.export_folder)
        temp_folder = clear_folder(self.temp_folder(notebook))

        try:
            self.service.fill_notebook_tree(notebook)
        except Exception as exc:
            logger.debug(str(exc), exc_info=exc)
            return NotebookExportResult(
                notebook=notebook,
                error_code=NB_TREE_ERROR_CODE,
                error_message=(
                    f"Error while loading the content of notebook '{notebook.title}' "
                    f"(id {notebook.onenote_id}): {exc}"
                ),
            )

        result = NotebookExportResult(notebook=notebook)
        pages = self.select_pages(notebook, section_filter, page_filter)
        page_exporter = PageExporter(
            self.service, self.converter, self.writer, self.settings, temp_folder
        )

        try:
            for index, page in enumerate(pages, start=1):
                logger.info("Page %d/%d: %s", index, len(pages), page_label(page))
                result.pages.append(page_exporter.export_page(page))
        finally:
            self.service.discard_temporary_pages()

        logger.info(
            "Notebook '%s': %d page(s) exported, %d failed",
            notebook.title,
            len(result.exported_pages),
            len(result.failed_pages),
        )
        return result
