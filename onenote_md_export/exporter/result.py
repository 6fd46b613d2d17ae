"""Outcome of exporting pages and notebooks."""

from dataclasses import dataclass, field
from enum import Enum

from onenote_md_export.model.notebook import Notebook
from onenote_md_export.model.page import Page
from onenote_md_export.service.errors import ErrorKind


class PageExportState(Enum):
    """Steps of the page export pipeline."""

    FETCHING = "fetching"
    PREPROCESSING = "preprocessing"
    CONVERTING = "converting"
    EXTRACTING_IMAGES = "extracting_images"
    EXPORTING_ATTACHMENTS = "exporting_attachments"
    POST_PROCESSING = "post_processing"
    WRITING = "writing"
    DONE = "done"
    FAILED = "failed"


@dataclass
class PageExportOutcome:
    """Result of one page export, including a retry if one happened."""

    page: Page
    state: PageExportState
    attempts: int = 1
    error_kind: ErrorKind | None = None
    failed_at: PageExportState | None = None
    message: str = ""

    @property
    def succeeded(self) -> bool:
        return self.state is PageExportState.DONE


@dataclass
class NotebookExportResult:
    """Result of a notebook export.

    ``error_code`` is set when the notebook could not be exported at all;
    otherwise ``pages`` holds one outcome per page, in export order.
    """

    notebook: Notebook
    error_code: str = ""
    error_message: str = ""
    pages: list[PageExportOutcome] = field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return not self.error_code

    @property
    def exported_pages(self) -> list[PageExportOutcome]:
        return [p for p in self.pages if p.succeeded]

    @property
    def failed_pages(self) -> list[PageExportOutcome]:
        return [p for p in self.pages if not p.succeeded]
