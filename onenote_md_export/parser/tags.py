"""Rewrite OneNote tags into inline text markers.

OneNote tags (to-do boxes, flags, highlight tags) are lost when a page is
published to Word. Before publishing, the text a tag is attached to gets
an emoji or a highlight span so the information reaches the Markdown.
"""

import logging
import xml.etree.ElementTree as ET

from onenote_md_export.model.content import ContentTree, literal_text

logger = logging.getLogger(__name__)

TAG_UNCHECKED = "🔲 "
TAG_CHECKED = "✅ "
TAG_STAR = "⭐ "
TAG_QUESTION = "❓ "
TAG_REMEMBER = "<span style='background:yellow;mso-highlight:yellow'>"
TAG_DEFINITION = "<span style='background:green;mso-highlight:green'>"
HIGHLIGHT_END = "</span>"

TASK_LABEL = "To Do"
IMPORTANT_LABEL = "Important"
QUESTION_LABEL = "Question"
REMEMBER_LABEL = "Remember for later"
DEFINITION_LABEL = "Definition"

_NO_TAG = "-1"


def tag_index(tree: ContentTree, label: str) -> str:
    """Index of the tag definition named ``label`` on this page, or ``"-1"``."""
    for tag_def in tree.iter("TagDef"):
        if tag_def.get("name") == label:
            return tag_def.get("index", _NO_TAG)
    return _NO_TAG


def tag_target(tree: ContentTree, tag: ET.Element) -> ET.Element | None:
    """Element holding the text a tag applies to.

    Usually the ``T`` right after the tag. For list items the tag is
    followed by other markup and the text is the last child of the ``OE``.
    """
    parent = tree.parent_of(tag)
    if parent is None:
        return None
    children = list(parent)
    position = children.index(tag)
    target = children[position + 1] if position + 1 < len(children) else None
    if not tree.is_a(target, "T"):
        target = children[-1]
    return target


def rewrite_tags(tree: ContentTree) -> int:
    """Prefix or wrap tagged text with markers. Returns the number of rewrites."""
    task = tag_index(tree, TASK_LABEL)
    important = tag_index(tree, IMPORTANT_LABEL)
    question = tag_index(tree, QUESTION_LABEL)
    remember = tag_index(tree, REMEMBER_LABEL)
    definition = tag_index(tree, DEFINITION_LABEL)

    rewritten = 0
    for tag in tree.iter("Tag"):
        index = tag.get("index")
        target = tag_target(tree, tag)
        text = literal_text(tree, target)
        if text is None:
            if index in (task, important, question):
                logger.warning(
                    "Found a tag but couldn't add its marker: no text found "
                    "for element with content '%s'",
                    "".join(target.itertext()) if target is not None else "",
                )
            continue

        suffix = ""
        if index == task:
            prefix = TAG_UNCHECKED if tag.get("completed") == "false" else TAG_CHECKED
        elif index == important:
            prefix = TAG_STAR
        elif index == question:
            prefix = TAG_QUESTION
        elif index == remember:
            prefix, suffix = TAG_REMEMBER, HIGHLIGHT_END
        elif index == definition:
            prefix, suffix = TAG_DEFINITION, HIGHLIGHT_END
        else:
            continue

        tree.set_text(target, f"{prefix}{text}{suffix}")
        rewritten += 1

    return rewritten
