"""Shared fakes for the exporter tests."""

from pathlib import Path

import pytest

from onenote_md_export.model.content import ONENOTE_NS, ContentTree
from onenote_md_export.model.notebook import Notebook
from onenote_md_export.model.page import Page
from onenote_md_export.model.section import Section
from onenote_md_export.settings import ExportSettings


def page_xml(body: str = "", author: str = "Alice", title: str = "Title") -> str:
    """OneNote page XML with a title and the given outline content."""
    author_attr = f' author="{author}"' if author else ""
    return (
        f'<one:Page xmlns:one="{ONENOTE_NS}" ID="page">'
        f"<one:Title><one:OE{author_attr}><one:T><![CDATA[{title}]]></one:T></one:OE></one:Title>"
        f"{body}"
        "</one:Page>"
    )


def outline(*texts: str, collapsed: bool = False) -> str:
    flag = ' collapsed="1"' if collapsed else ""
    items = "".join(f"<one:OE{flag}><one:T><![CDATA[{t}]]></one:T></one:OE>" for t in texts)
    return f"<one:Outline><one:OEChildren>{items}</one:OEChildren></one:Outline>"


class FakeOneNote:
    """In-memory stand-in for the OneNote application."""

    def __init__(self):
        self.pages: dict[str, str] = {}
        self.failures: dict[str, list[BaseException]] = {}
        self.published: list[str] = []
        self.clones: list[str] = []
        self.resets: list[float] = []
        self.discarded = 0
        self.notebook_tree: list[Section] = []
        self.fill_error: BaseException | None = None
        self.reset_error: BaseException | None = None

    def fail(self, operation: str, *errors: BaseException) -> None:
        self.failures.setdefault(operation, []).extend(errors)

    def _maybe_fail(self, operation: str) -> None:
        pending = self.failures.get(operation)
        if pending:
            raise pending.pop(0)

    def fill_notebook_tree(self, notebook: Notebook) -> Notebook:
        if self.fill_error is not None:
            raise self.fill_error
        notebook.sections.clear()
        for section in self.notebook_tree:
            notebook.add_section(section)
        return notebook

    def get_page_content(self, page_id: str) -> str:
        self._maybe_fail("get_page_content")
        return self.pages[page_id]

    def publish(self, page_id: str, target_path: str) -> None:
        self._maybe_fail("publish")
        self.published.append(page_id)
        Path(target_path).write_bytes(f"docx:{page_id}".encode())

    def clone_page(self, tree: ContentTree) -> str:
        self.clones.append(tree.to_xml())
        return f"clone-{len(self.clones)}"

    def discard_temporary_pages(self) -> None:
        self.discarded += 1

    def reset(self, delay_seconds: float) -> None:
        self.resets.append(delay_seconds)
        if self.reset_error is not None:
            raise self.reset_error


class FakeConverter:
    """Returns canned Markdown and writes the images pandoc would extract."""

    def __init__(
        self,
        md: str = "Hello world\n",
        images: tuple[str, ...] = (),
        error: BaseException | None = None,
    ):
        self.md = md
        self.images = images
        self.error = error
        self.converted: list[Path] = []

    def convert_docx_to_md(self, docx_path, work_dir) -> str:
        self.converted.append(Path(docx_path))
        if self.error is not None:
            raise self.error
        for name in self.images:
            image = Path(work_dir) / "media" / name
            image.parent.mkdir(parents=True, exist_ok=True)
            image.write_bytes(b"\x89PNG")
        return self.md


@pytest.fixture
def onenote():
    return FakeOneNote()


@pytest.fixture
def converter():
    return FakeConverter()


@pytest.fixture
def settings(tmp_path):
    return ExportSettings(
        export_folder=str(tmp_path / "Exports"),
        post_processing_remove_onenote_header=False,
        retry_delay_seconds=0,
    )


@pytest.fixture
def notebook(tmp_path):
    nb = Notebook(title="Work", onenote_id="nb", export_folder=str(tmp_path / "out"))
    nb.add_section(Section(title="Projects", onenote_id="s1"))
    return nb


def add_page(notebook: Notebook, onenote: FakeOneNote, title: str, xml: str) -> Page:
    page = notebook.sections[0].add_page(Page(title=title, onenote_id=f"id-{title}"))
    onenote.pages[page.onenote_id] = xml
    return page
