"""Relink the images pandoc extracted from a page.

pandoc writes images as HTML ``<img src=... />`` tags pointing into its
media folder. They are registered as image attachments of the page,
moved into the export folder and referenced with Markdown image syntax.

Discovery and rewriting are separate passes: :func:`scan_image_references`
only reads the text, :func:`rewrite_image_references` only builds the new
text from what the scan found.
"""

import html
import logging
import os
import re
from collections.abc import Callable
from dataclasses import dataclass

from onenote_md_export.model.attachment import Attachment, AttachmentType
from onenote_md_export.model.page import Page
from onenote_md_export.utils import move_file, normalize_path, path_equals

logger = logging.getLogger(__name__)

_IMG_TAG_RE = re.compile(r"<img [^>]+/>")
_IMG_SRC_RE = re.compile(r'<img\s+src="(?P<src>[^"]+)"', re.IGNORECASE)


@dataclass(frozen=True)
class ImageReference:
    """An ``<img>`` tag found in the Markdown and the file it points to."""

    start: int
    end: int
    source_path: str

    @property
    def label(self) -> str:
        return os.path.splitext(os.path.basename(self.source_path))[0]


def scan_image_references(md: str, base_dir: str | None = None) -> list[ImageReference]:
    """Find pandoc image tags and resolve their absolute source paths."""
    references: list[ImageReference] = []
    for match in _IMG_TAG_RE.finditer(md):
        src_match = _IMG_SRC_RE.match(match.group(0))
        if src_match is None:
            logger.debug("Image tag without src left as is: %s", match.group(0))
            continue
        src = html.unescape(src_match.group("src"))
        if base_dir is not None and not os.path.isabs(src):
            src = os.path.join(base_dir, src)
        references.append(
            ImageReference(match.start(), match.end(), os.path.abspath(src))
        )
    return references


def register_image_attachments(
    page: Page,
    references: list[ImageReference],
    ensure_unique: Callable[[Attachment], str],
) -> dict[str, Attachment]:
    """Make sure every referenced image has exactly one attachment on the page.

    Returns the attachments keyed by normalized source path.
    """
    by_path: dict[str, Attachment] = {}
    for ref in references:
        key = normalize_path(ref.source_path)
        if key in by_path:
            continue
        attachment = next(
            (
                a
                for a in page.image_attachments
                if path_equals(a.actual_source_file_path, ref.source_path)
            ),
            None,
        )
        if attachment is None:
            attachment = Attachment(
                page=page,
                type=AttachmentType.IMAGE,
                actual_source_file_path=ref.source_path,
                # pandoc temporary file, the user never saw this path
                original_user_file_path=ref.source_path,
            )
            page.attachments.append(attachment)
            ensure_unique(attachment)
        by_path[key] = attachment
    return by_path


def rewrite_image_references(
    md: str,
    references: list[ImageReference],
    attachments: dict[str, Attachment],
    reference_for: Callable[[Attachment], str],
) -> str:
    """Replace each scanned tag by ``![label](reference)``."""
    parts: list[str] = []
    position = 0
    for ref in references:
        attachment = attachments[normalize_path(ref.source_path)]
        parts.append(md[position : ref.start])
        parts.append(f"![{ref.label}]({reference_for(attachment)})")
        position = ref.end
    parts.append(md[position:])
    return "".join(parts)


def extract_images(
    page: Page,
    md: str,
    *,
    attachment_file_path: Callable[[Attachment], str],
    reference_for: Callable[[Attachment], str],
    ensure_unique: Callable[[Attachment], str],
    adopt_rewritten_text: bool = True,
    base_dir: str | None = None,
) -> str:
    """Register, relocate and relink the images of a converted page.

    Image files are always moved to their export location. The rewritten
    Markdown is returned only when ``adopt_rewritten_text`` is set,
    otherwise the original text comes back unchanged.
    """
    references = scan_image_references(md, base_dir)
    attachments = register_image_attachments(page, references, ensure_unique)
    rewritten = rewrite_image_references(md, references, attachments, reference_for)

    for attachment in page.image_attachments:
        destination = attachment_file_path(attachment)
        logger.debug("Moving image %s to %s", attachment.actual_source_file_path, destination)
        move_file(attachment.actual_source_file_path, destination)

    return rewritten if adopt_rewritten_text else md
