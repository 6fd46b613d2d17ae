"""Format writer interface used by the page exporter.

A format writer decides where pages and attachments land on disk and how
the Markdown references them. Paths chosen to avoid a naming collision are
stored on the page/attachment and always win over the default location.
"""

from abc import ABC, abstractmethod

from onenote_md_export.model.attachment import Attachment
from onenote_md_export.model.page import Page
from onenote_md_export.settings import ExportSettings


class FormatWriter(ABC):
    """Output layout of one Markdown flavour."""

    format_code = ""

    def __init__(self, settings: ExportSettings) -> None:
        self.settings = settings

    def attachment_file_path(self, attachment: Attachment) -> str:
        return attachment.override_export_file_path or self.default_attachment_file_path(attachment)

    def page_md_file_path(self, page: Page) -> str:
        return page.override_page_file_path or self.default_page_md_file_path(page)

    @abstractmethod
    def default_attachment_file_path(self, attachment: Attachment) -> str:
        ...

    @abstractmethod
    def default_page_md_file_path(self, page: Page) -> str:
        ...

    @abstractmethod
    def attachment_md_reference(self, attachment: Attachment) -> str:
        """Link target to use in the page Markdown for ``attachment``."""

    @abstractmethod
    def prepare_folders(self, page: Page) -> None:
        ...

    def finalize_page_md(self, page: Page, md: str) -> str:
        return md

    @abstractmethod
    def write_page_file(self, page: Page, md: str) -> None:
        ...

    def finalize_attachment_export(self, page: Page, attachment: Attachment) -> None:
        """Hook called once per attachment after the page attachments were exported."""
