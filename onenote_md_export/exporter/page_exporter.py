"""Export of a single OneNote page to Markdown.

Pipeline: fetch the page XML, pre-process it, publish it to Word through
OneNote, convert it with pandoc, relink images and attachments, then hand
the Markdown to the format writer.

Any failure ends the page export, except one: when OneNote lost its RPC
server (it usually just crashed), the COM handle is recreated and the
whole page is exported a second time.
"""

import logging
import shutil
from pathlib import Path

from onenote_md_export.converter.images import extract_images
from onenote_md_export.converter.markdown import (
    insert_attachment_reference,
    page_md_post_conversion,
)
from onenote_md_export.exporter.naming import (
    ensure_unique_attachment_path,
    ensure_unique_page_path,
)
from onenote_md_export.exporter.result import PageExportOutcome, PageExportState
from onenote_md_export.exporter.writer import FormatWriter
from onenote_md_export.model.attachment import Attachment, AttachmentType
from onenote_md_export.model.content import ContentTree
from onenote_md_export.model.page import Page
from onenote_md_export.parser.attachments import extract_attachments
from onenote_md_export.parser.preprocessor import preprocess_page
from onenote_md_export.service.base import DocumentConverter, NoteService
from onenote_md_export.service.errors import ErrorKind, classify_error
from onenote_md_export.settings import ExportSettings

logger = logging.getLogger(__name__)

# Extra attempts allowed after OneNote lost its RPC server
MAX_RETRIES = 1


def page_label(page: Page) -> str:
    """Human readable location of a page, used in log messages."""
    return "/".join([*page.section_path, page.title])


class PageExporter:
    """Runs the page pipeline and its retry policy."""

    def __init__(
        self,
        service: NoteService,
        converter: DocumentConverter,
        writer: FormatWriter,
        settings: ExportSettings,
        temp_folder: str | Path,
    ) -> None:
        self.service = service
        self.converter = converter
        self.writer = writer
        self.settings = settings
        self.temp_folder = Path(temp_folder)
        self.state = PageExportState.DONE

    def export_page(self, page: Page) -> PageExportOutcome:
        """Export ``page``. Never raises: failures are reported in the outcome."""
        attempt = 0
        while True:
            attempt += 1
            try:
                self._export_attempt(page)
            except Exception as exc:
                failed_at = self.state
                kind = classify_error(exc)

                if kind is ErrorKind.RPC_UNAVAILABLE and attempt <= MAX_RETRIES:
                    delay = self.settings.retry_delay_seconds
                    self._log_error(
                        page,
                        exc,
                        f"OneNote RPC server unavailable ({exc}), "
                        f"retrying in {delay} second(s)",
                    )
                    try:
                        self.service.reset(delay)
                    except Exception as reset_exc:
                        # OneNote did not come back, the page fails
                        exc, kind = reset_exc, classify_error(reset_exc)
                    else:
                        continue

                if kind is ErrorKind.APP_NOT_RUNNING:
                    summary = f"Error during page processing, is OneNote running? ({exc})"
                else:
                    summary = f"Error during page processing (page id {page.onenote_id}): {exc}"
                self._log_error(page, exc, summary)
                self.state = PageExportState.FAILED
                return PageExportOutcome(
                    page=page,
                    state=PageExportState.FAILED,
                    attempts=attempt,
                    error_kind=kind,
                    failed_at=failed_at,
                    message=str(exc),
                )

            if attempt > 1:
                logger.info("Page '%s': export succeeded after retry", page_label(page))
            return PageExportOutcome(page=page, state=PageExportState.DONE, attempts=attempt)

    def _export_attempt(self, page: Page) -> None:
        self.state = PageExportState.FETCHING
        page.attachments.clear()
        page.override_onenote_id = None

        tree = ContentTree.from_xml(self.service.get_page_content(page.onenote_id))
        title_element = tree.find("Title/OE")
        page.author = (
            title_element.get("author", "unknown") if title_element is not None else "unknown"
        )
        extract_attachments(tree, page)
        ensure_unique_page_path(page, self.writer.page_md_file_path)

        self.state = PageExportState.PREPROCESSING
        page.override_onenote_id = preprocess_page(tree, self.settings, self.service.clone_page)

        self.state = PageExportState.CONVERTING
        md = self._convert(page)

        self.state = PageExportState.EXTRACTING_IMAGES
        md = self._extract_images(page, md)

        self.state = PageExportState.EXPORTING_ATTACHMENTS
        md = self._export_attachments(page, md)

        self.state = PageExportState.POST_PROCESSING
        md = page_md_post_conversion(md, self.settings)
        md = self.writer.finalize_page_md(page, md)

        self.state = PageExportState.WRITING
        self.writer.write_page_file(page, md)
        self.state = PageExportState.DONE

    def _convert(self, page: Page) -> str:
        self.temp_folder.mkdir(parents=True, exist_ok=True)
        docx_file = self.temp_folder / f"{page.id}.docx"
        docx_file.unlink(missing_ok=True)
        self.writer.prepare_folders(page)

        try:
            logger.debug("%s: start OneNote docx publish", page.onenote_id)
            if page.override_onenote_id is not None:
                logger.debug("Actually using temporary page %s", page.override_onenote_id)
            self.service.publish(page.override_onenote_id or page.onenote_id, str(docx_file))
            logger.debug("%s: success", page.onenote_id)

            page_md_file = Path(self.writer.page_md_file_path(page))
            if self.settings.debug or self.settings.keep_onenote_temp_files:
                shutil.copyfile(docx_file, page_md_file.with_suffix(".docx"))

            md = self.converter.convert_docx_to_md(docx_file, self._media_folder(page))

            if self.settings.debug:
                page_md_file.with_suffix(".pandoc.md").write_text(md, encoding="utf-8")
        finally:
            docx_file.unlink(missing_ok=True)
        return md

    def _media_folder(self, page: Page) -> Path:
        return self.temp_folder / page.id

    def _ensure_unique_attachment(self, attachment: Attachment) -> str:
        return ensure_unique_attachment_path(attachment, self.writer.attachment_file_path)

    def _extract_images(self, page: Page, md: str) -> str:
        """Relink images; a failure here only costs the image links."""
        try:
            return extract_images(
                page,
                md,
                attachment_file_path=self.writer.attachment_file_path,
                reference_for=self.writer.attachment_md_reference,
                ensure_unique=self._ensure_unique_attachment,
                adopt_rewritten_text=self.settings.post_processing_md_img_ref,
                base_dir=str(self._media_folder(page)),
            )
        except Exception as exc:
            if classify_error(exc) is ErrorKind.APP_NOT_RUNNING:
                self._log_error(page, exc, f"Error while starting OneNote ({exc})")
            else:
                self._log_error(page, exc, f"Error while extracting images: {exc}")
            return md

    def _export_attachments(self, page: Page, md: str) -> str:
        """Copy file attachments to the export folder and link them."""
        for attachment in list(page.attachments):
            if attachment.type is AttachmentType.FILE:
                self._ensure_unique_attachment(attachment)
                export_path = Path(self.writer.attachment_file_path(attachment))
                export_path.parent.mkdir(parents=True, exist_ok=True)
                shutil.copyfile(attachment.actual_source_file_path, export_path)
                md = insert_attachment_reference(
                    md, attachment, self.writer.attachment_md_reference
                )
            self.writer.finalize_attachment_export(page, attachment)
        return md

    def _log_error(self, page: Page, exc: BaseException, message: str) -> None:
        logger.warning("Page '%s': %s", page_label(page), message)
        logger.debug(str(exc), exc_info=exc)
