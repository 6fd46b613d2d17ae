"""Page model representing a single OneNote page."""

import uuid
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from onenote_md_export.model.attachment import Attachment, AttachmentType

if TYPE_CHECKING:
    from onenote_md_export.model.notebook import Notebook
    from onenote_md_export.model.section import Section


@dataclass(eq=False)
class Page:
    """A single page in a OneNote section."""

    title: str = ""
    onenote_id: str = ""
    id: str = field(default_factory=lambda: uuid.uuid4().hex)
    level: int = 1
    author: str = "unknown"
    # Temporary page id used when the page XML was rewritten and cloned
    override_onenote_id: str | None = None
    # Export path chosen to avoid a collision with a sibling page
    override_page_file_path: str | None = None
    attachments: list[Attachment] = field(default_factory=list)
    parent: "Section | None" = field(default=None, repr=False)

    @property
    def image_attachments(self) -> list[Attachment]:
        return [a for a in self.attachments if a.type is AttachmentType.IMAGE]

    @property
    def file_attachments(self) -> list[Attachment]:
        return [a for a in self.attachments if a.type is AttachmentType.FILE]

    @property
    def notebook(self) -> "Notebook | None":
        return self.parent.notebook if self.parent is not None else None

    @property
    def section_path(self) -> list[str]:
        """Titles of the enclosing section groups and section, outermost first."""
        return self.parent.path_parts if self.parent is not None else []

    @property
    def siblings(self) -> list["Page"]:
        """Other pages of the same section."""
        if self.parent is None:
            return []
        return [p for p in self.parent.pages if p is not self]
