"""Build the notebook model from OneNote hierarchy XML."""

import logging
import xml.etree.ElementTree as ET

from onenote_md_export.model.notebook import Notebook
from onenote_md_export.model.page import Page
from onenote_md_export.model.section import Section

logger = logging.getLogger(__name__)


def _local_name(element: ET.Element) -> str:
    return element.tag.rsplit("}", 1)[-1]


def _is_recycled(element: ET.Element) -> bool:
    return (
        element.get("isRecycleBin") == "true"
        or element.get("isInRecycleBin") == "true"
    )


def _page_level(element: ET.Element) -> int:
    try:
        return int(element.get("pageLevel", "1"))
    except ValueError:
        return 1


def parse_notebooks(xml: str) -> list[Notebook]:
    """Parse the list of open notebooks (hierarchy scope ``hsNotebooks``)."""
    root = ET.fromstring(xml)
    elements = [root] if _local_name(root) == "Notebook" else list(root)
    return [
        Notebook(
            title=el.get("nickname") or el.get("name", ""),
            onenote_id=el.get("ID", ""),
        )
        for el in elements
        if _local_name(el) == "Notebook"
    ]


def _fill_children(parent: Notebook | Section, element: ET.Element) -> None:
    for child in element:
        name = _local_name(child)
        if name not in ("Section", "SectionGroup", "Page") or _is_recycled(child):
            continue

        if name == "Page":
            if isinstance(parent, Section):
                parent.add_page(
                    Page(
                        title=child.get("name", ""),
                        onenote_id=child.get("ID", ""),
                        level=_page_level(child),
                    )
                )
            continue

        section = Section(
            title=child.get("name", ""),
            onenote_id=child.get("ID", ""),
            is_section_group=name == "SectionGroup",
        )
        parent.add_section(section)
        _fill_children(section, child)


def fill_notebook_tree(notebook: Notebook, xml: str) -> Notebook:
    """Populate ``notebook`` with sections and pages (scope ``hsPages``).

    Recycle bins and deleted pages are left out.
    """
    root = ET.fromstring(xml)
    if _local_name(root) != "Notebook":
        root = next(
            (
                el
                for el in root
                if _local_name(el) == "Notebook"
                and el.get("ID", "") == notebook.onenote_id
            ),
            None,
        )
        if root is None:
            raise ValueError(f"Notebook {notebook.onenote_id} not found in hierarchy")

    notebook.sections.clear()
    _fill_children(notebook, root)
    logger.debug(
        "Notebook '%s': %d page(s) found",
        notebook.title,
        sum(1 for _ in notebook.iter_pages()),
    )
    return notebook
