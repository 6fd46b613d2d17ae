"""Discover files embedded in a OneNote page."""

import logging

from onenote_md_export.model.attachment import Attachment, AttachmentType
from onenote_md_export.model.content import ContentTree
from onenote_md_export.model.page import Page

logger = logging.getLogger(__name__)

_FILE_NODES = ("InsertedFile", "MediaFile")


def extract_attachments(tree: ContentTree, page: Page) -> list[Attachment]:
    """Register every inserted file and media file of the page, in document order.

    Files OneNote has no local cached copy of cannot be exported and are
    skipped.
    """
    names = {tree.qname(name) for name in _FILE_NODES}
    found: list[Attachment] = []

    for element in tree.walk():
        if element.tag not in names:
            continue
        path_cache = element.get("pathCache")
        if path_cache is None:
            logger.debug(
                "Page '%s': skipping file '%s' without cached copy",
                page.title,
                element.get("preferredName", ""),
            )
            continue

        attachment = Attachment(
            page=page,
            type=AttachmentType.FILE,
            actual_source_file_path=path_cache,
            original_user_file_path=element.get("pathSource", ""),
            onenote_preferred_file_name=element.get("preferredName", ""),
        )
        page.attachments.append(attachment)
        found.append(attachment)

    return found
