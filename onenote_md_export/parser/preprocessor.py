"""Rewrites applied to a page's OneNote XML before it is published.

The passes run in a fixed order: unfold collapsed paragraphs, convert tags,
add a horizontal bar between outlines, then the optional highlight fixes.
When any pass changed the XML, OneNote has to publish a modified copy of
the page, so the page is cloned into a temporary section first.
"""

import logging
import re
from collections.abc import Callable

from onenote_md_export.model.content import ContentTree, literal_text
from onenote_md_export.parser.tags import rewrite_tags
from onenote_md_export.settings import ExportSettings

logger = logging.getLogger(__name__)

HORIZONTAL_BAR = "---\n\n"

_HTML_HIGHLIGHT_RE = re.compile(
    r"<span\s+style='background\s*:(\s*[a-zA-Z0-9;:-]*)'>(.*?)</span>"
)
_HEX_HIGHLIGHT_RE = re.compile(r"(<span\s+style='[^']*?background)\s*:\s*#\w+")


def unfold(tree: ContentTree) -> None:
    """Drop the ``collapsed`` flag of every outline element."""
    for element in tree.iter("OE"):
        tree.remove_attribute(element, "collapsed")


def add_horizontal_bars(tree: ContentTree) -> None:
    """Separate outlines with a horizontal bar, skipping the first one.

    Word output does not keep outlines apart, so the first text of each
    following outline is preceded by an empty line and ``---``.
    """
    for outline in tree.iter("Outline")[1:]:
        text_element = next(
            (t for t in tree.iter("T", within=outline) if literal_text(tree, t) is not None),
            None,
        )
        if text_element is None:
            continue

        block = tree.parent_of(text_element)
        if block is not None and tree.parent_of(block) is not None:
            empty_line = tree.new_element("OE", alignment="left")
            empty_line.append(tree.new_element("T", ""))
            tree.insert_before(block, empty_line)

        tree.set_text(text_element, f"{HORIZONTAL_BAR}{literal_text(tree, text_element)}")


def keep_html_highlighting(tree: ContentTree) -> None:
    """Turn highlight spans into ``[span ...]`` markers that survive Word."""
    for element in tree.iter("T"):
        if element.text:
            tree.set_text(
                element,
                _HTML_HIGHLIGHT_RE.sub(r"[span style='background:\1']\2[/span]", element.text),
            )


def convert_hex_highlighting_to_yellow(tree: ContentTree) -> None:
    """Replace ``background:#RRGGBB`` in highlight spans with ``yellow``."""
    for element in tree.iter("T"):
        if element.text:
            tree.set_text(element, _HEX_HIGHLIGHT_RE.sub(r"\1:yellow", element.text))


def preprocess_page(
    tree: ContentTree,
    settings: ExportSettings,
    clone_page: Callable[[ContentTree], str],
) -> str | None:
    """Apply all rewrites to ``tree``.

    Returns the id of the temporary clone holding the rewritten page, or
    None when nothing changed and the original page can be published.
    """
    tree.checkpoint()

    unfold(tree)
    rewrite_tags(tree)
    add_horizontal_bars(tree)
    if settings.keep_html_highlighting:
        keep_html_highlighting(tree)
    if settings.convert_hex_highlighting_to_yellow:
        convert_hex_highlighting_to_yellow(tree)

    if not tree.changed_since_checkpoint:
        return None

    logger.debug("Page XML changed by pre-processing (%d change(s))", tree.changes)
    return clone_page(tree)
