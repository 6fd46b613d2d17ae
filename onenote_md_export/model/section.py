"""Section model: a OneNote section or section group."""

from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from onenote_md_export.model.page import Page

if TYPE_CHECKING:
    from onenote_md_export.model.notebook import Notebook


@dataclass(eq=False)
class Section:
    """A section (holds pages) or a section group (holds sections)."""

    title: str = ""
    onenote_id: str = ""
    is_section_group: bool = False
    parent: "Notebook | Section | None" = field(default=None, repr=False)
    sections: list["Section"] = field(default_factory=list)
    pages: list[Page] = field(default_factory=list)

    def add_section(self, section: "Section") -> "Section":
        section.parent = self
        self.sections.append(section)
        return section

    def add_page(self, page: Page) -> Page:
        page.parent = self
        self.pages.append(page)
        return page

    def iter_pages(self) -> Iterator[Page]:
        """Yield pages of this section, then of nested sections, in order."""
        yield from self.pages
        for section in self.sections:
            yield from section.iter_pages()

    @property
    def notebook(self) -> "Notebook | None":
        parent = self.parent
        while isinstance(parent, Section):
            parent = parent.parent
        return parent

    @property
    def path_parts(self) -> list[str]:
        parts = [self.title]
        parent = self.parent
        while isinstance(parent, Section):
            parts.insert(0, parent.title)
            parent = parent.parent
        return parts
