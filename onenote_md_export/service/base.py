"""Interfaces of the external tools the exporter relies on."""

from pathlib import Path
from typing import Protocol

from onenote_md_export.model.content import ContentTree
from onenote_md_export.model.notebook import Notebook


class NoteService(Protocol):
    """Single shared handle to the note-taking application."""

    def fill_notebook_tree(self, notebook: Notebook) -> Notebook: ...

    def get_page_content(self, page_id: str) -> str: ...

    def publish(self, page_id: str, target_path: str) -> None: ...

    def clone_page(self, tree: ContentTree) -> str: ...

    def discard_temporary_pages(self) -> None: ...

    def reset(self, delay_seconds: float) -> None: ...


class DocumentConverter(Protocol):
    """Turns the published intermediate document into Markdown."""

    def convert_docx_to_md(self, docx_path: str | Path, work_dir: str | Path) -> str: ...
