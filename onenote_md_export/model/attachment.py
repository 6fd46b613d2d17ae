"""Attachment model: a file or image owned by a page."""

import os
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from onenote_md_export.model.page import Page


class AttachmentType(Enum):
    """Kind of resource attached to a page."""

    FILE = "file"
    IMAGE = "image"


@dataclass(eq=False)
class Attachment:
    """A file or image resource exported alongside a page.

    Attachments compare by identity: two attachments pointing at the same
    source file are still distinct entities for collision resolution.
    """

    page: "Page" = field(repr=False)
    type: AttachmentType = AttachmentType.FILE
    actual_source_file_path: str = ""
    original_user_file_path: str = ""
    onenote_preferred_file_name: str = ""
    override_export_file_path: str | None = None
    id: str = field(default_factory=lambda: uuid.uuid4().hex)

    @property
    def friendly_file_name(self) -> str:
        """File name the attachment should be exported under."""
        if self.onenote_preferred_file_name:
            return self.onenote_preferred_file_name
        for path in (self.original_user_file_path, self.actual_source_file_path):
            if path:
                return os.path.basename(path)
        return "attachment"
