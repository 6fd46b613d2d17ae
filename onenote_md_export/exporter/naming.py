"""Deterministic file name allocation for pages and attachments."""

import logging
import os
from collections.abc import Callable

from onenote_md_export.model.attachment import Attachment
from onenote_md_export.model.page import Page
from onenote_md_export.utils import path_equals

logger = logging.getLogger(__name__)


def suffixed_path(path: str, counter: int) -> str:
    """Insert ``-{counter}`` before the extension of ``path``."""
    if counter == 0:
        return path
    stem, ext = os.path.splitext(path)
    return f"{stem}-{counter}{ext}"


def resolve_unique_path(
    candidate: str, is_claimed: Callable[[str], bool]
) -> tuple[str, int]:
    """Return the first non-claimed path derived from ``candidate``.

    The candidate is tried as-is, then with suffixes ``-1``, ``-2`` ...
    Returns the path and the counter that produced it (0 means unchanged).
    """
    counter = 0
    path = candidate
    while is_claimed(path):
        counter += 1
        path = suffixed_path(candidate, counter)
    return path, counter


def ensure_unique_page_path(page: Page, page_file_path: Callable[[Page], str]) -> str:
    """Suffix the page file if another page of its section uses the same path."""
    siblings = page.siblings

    def is_claimed(candidate: str) -> bool:
        return any(path_equals(page_file_path(p), candidate) for p in siblings)

    path, counter = resolve_unique_path(page_file_path(page), is_claimed)
    if counter > 0:
        logger.debug("Page '%s' exported as %s", page.title, path)
        page.override_page_file_path = path
    return path


def ensure_unique_attachment_path(
    attachment: Attachment, attachment_file_path: Callable[[Attachment], str]
) -> str:
    """Suffix the attachment file if another attachment of the notebook uses it."""
    notebook = attachment.page.notebook
    if notebook is not None:
        others = [a for a in notebook.all_attachments() if a is not attachment]
    else:
        others = [a for a in attachment.page.attachments if a is not attachment]

    def is_claimed(candidate: str) -> bool:
        return any(path_equals(attachment_file_path(a), candidate) for a in others)

    path, counter = resolve_unique_path(attachment_file_path(attachment), is_claimed)
    if counter > 0:
        logger.debug(
            "Attachment '%s' exported as %s", attachment.friendly_file_name, path
        )
        attachment.override_export_file_path = path
    return path
