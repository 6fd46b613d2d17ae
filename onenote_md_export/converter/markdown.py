"""Generic post-processing of the Markdown produced by pandoc."""

import re
from collections.abc import Callable

from onenote_md_export.model.attachment import Attachment
from onenote_md_export.settings import ExportSettings

# OneNote writes file attachments as <<name>> in Word, escaped by pandoc
_ATTACHMENT_PLACEHOLDER_RE = re.compile(r"(\\<){2}(?P<file_name>.*?)(\\>){2}")
_QUOTATION_RE = re.compile(r"^(?:[ \t]*>[ \t]?)+", re.MULTILINE)
_BLANK_LINES_RE = re.compile(r"\n{3,}")
# Title, date and time paragraphs OneNote adds at the top of a published page
_ONENOTE_HEADER_PARAGRAPHS = 3


def insert_attachment_reference(
    md: str, attachment: Attachment, reference_for: Callable[[Attachment], str]
) -> str:
    """Replace the placeholder of ``attachment`` by a Markdown link to it."""
    name = attachment.onenote_preferred_file_name

    def replace(match: re.Match) -> str:
        if match.group("file_name") != name:
            return match.group(0)
        return f"[{name}]({reference_for(attachment)})"

    return _ATTACHMENT_PLACEHOLDER_RE.sub(replace, md)


def remove_onenote_header(md: str) -> str:
    paragraphs = re.split(r"\n[ \t]*\n", md.lstrip("\n"))
    return "\n\n".join(paragraphs[_ONENOTE_HEADER_PARAGRAPHS:])


def remove_quotation_blocks(md: str) -> str:
    """Drop the ``>`` markers pandoc emits for indented paragraphs."""
    return _QUOTATION_RE.sub("", md)


def page_md_post_conversion(md: str, settings: ExportSettings) -> str:
    md = md.replace("\r\n", "\n")
    if settings.post_processing_remove_onenote_header:
        md = remove_onenote_header(md)
    if settings.post_processing_remove_quotation_blocks:
        md = remove_quotation_blocks(md)
    md = _BLANK_LINES_RE.sub("\n\n", md)
    return md.strip("\n") + "\n"
