"""Notebook model: root of the exported hierarchy."""

from collections.abc import Iterator
from dataclasses import dataclass, field

from onenote_md_export.model.attachment import Attachment
from onenote_md_export.model.page import Page
from onenote_md_export.model.section import Section
from onenote_md_export.utils import sanitize_filename


@dataclass(eq=False)
class Notebook:
    """A notebook containing sections and section groups."""

    title: str = ""
    onenote_id: str = ""
    # Root folder of the current export run, set by the exporter
    export_folder: str = ""
    sections: list[Section] = field(default_factory=list)

    def add_section(self, section: Section) -> Section:
        section.parent = self
        self.sections.append(section)
        return section

    def iter_pages(self) -> Iterator[Page]:
        for section in self.sections:
            yield from section.iter_pages()

    def all_attachments(self) -> list[Attachment]:
        """Every attachment registered so far on any page of the notebook."""
        return [a for page in self.iter_pages() for a in page.attachments]

    @property
    def notebook_path(self) -> str:
        return sanitize_filename(self.title or "Untitled")
