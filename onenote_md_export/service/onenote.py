"""Connection to the OneNote desktop application through COM.

A single :class:`OneNoteApp` is shared by a whole export run. OneNote is
not reentrant, so the exporter calls it strictly one request at a time,
and recovers from a crashed OneNote process with :meth:`OneNoteApp.reset`.
"""

import logging
import os
import tempfile
import time
import xml.etree.ElementTree as ET
from collections.abc import Callable
from typing import Any

from onenote_md_export.model.content import ContentTree
from onenote_md_export.model.notebook import Notebook
from onenote_md_export.parser.hierarchy import fill_notebook_tree, parse_notebooks
from onenote_md_export.service.errors import (
    RPC_CALL_FAILED,
    RPC_SERVER_UNAVAILABLE,
    NoteServiceError,
    PageMissingError,
    ServiceUnavailableError,
    error_hresult,
)

logger = logging.getLogger(__name__)

_PROG_ID = "OneNote.Application"

# OneNote interop enumerations
HS_NOTEBOOKS = 2
HS_PAGES = 4
PI_BINARY_DATA_FILE_TYPE = 5
PF_WORD = 5
CFT_SECTION = 3
XS_2013 = 2

# hrObjectDoesNotExist
_OBJECT_DOES_NOT_EXIST = 0x80042014

_TEMP_SECTION_FILE = "onenote-md-export-temp.one"


def _dispatch_onenote() -> Any:
    import win32com.client

    return win32com.client.gencache.EnsureDispatch(_PROG_ID)


class OneNoteApp:
    """Owner of the COM handle to OneNote."""

    def __init__(
        self,
        dispatch: Callable[[], Any] = _dispatch_onenote,
        temp_folder: str | None = None,
    ) -> None:
        self._dispatch = dispatch
        self._temp_folder = temp_folder or os.path.join(
            tempfile.gettempdir(), "onenote-md-export"
        )
        self._temp_section_id: str | None = None
        self._temporary_pages: list[str] = []
        self._app: Any = None
        self.open()

    def open(self) -> None:
        self._app = self._call(self._dispatch)

    def close(self) -> None:
        """Release the COM handle."""
        self._app = None
        self._temp_section_id = None

    def reset(self, delay_seconds: float) -> None:
        """Recreate the COM handle after OneNote crashed.

        Waits ``delay_seconds`` between tear down and reconnection so the
        OneNote process has time to restart.
        """
        logger.info("Reconnecting to OneNote in %s second(s)", delay_seconds)
        self.close()
        time.sleep(delay_seconds)
        self.open()

    @property
    def _com(self) -> Any:
        if self._app is None:
            raise ServiceUnavailableError("Not connected to OneNote")
        return self._app

    def _call(self, func: Callable[..., Any], *args: Any) -> Any:
        try:
            return func(*args)
        except NoteServiceError:
            raise
        except Exception as exc:
            hresult = error_hresult(exc)
            if hresult in (RPC_CALL_FAILED, RPC_SERVER_UNAVAILABLE):
                raise ServiceUnavailableError(str(exc), hresult) from exc
            if hresult == _OBJECT_DOES_NOT_EXIST:
                raise PageMissingError(str(exc), hresult) from exc
            raise NoteServiceError(str(exc), hresult) from exc

    # Hierarchy

    def get_notebooks(self) -> list[Notebook]:
        xml = self._call(self._com.GetHierarchy, "", HS_NOTEBOOKS)
        return parse_notebooks(xml)

    def fill_notebook_tree(self, notebook: Notebook) -> Notebook:
        xml = self._call(self._com.GetHierarchy, notebook.onenote_id, HS_PAGES)
        return fill_notebook_tree(notebook, xml)

    # Pages

    def get_page_content(self, page_id: str) -> str:
        """Page XML including the paths of cached binary files."""
        return self._call(self._com.GetPageContent, page_id, PI_BINARY_DATA_FILE_TYPE)

    def publish(self, page_id: str, target_path: str) -> None:
        """Export a page into a Word document at ``target_path``."""
        self._call(self._com.Publish, page_id, os.path.abspath(target_path), PF_WORD)

    def clone_page(self, tree: ContentTree) -> str:
        """Create a temporary page holding the content of ``tree``.

        The original page is left untouched. Returns the new page id.
        """
        section_id = self._temporary_section()
        page_id = self._call(self._com.CreateNewPage, section_id)

        root = ET.fromstring(tree.to_xml())
        root.set("ID", page_id)
        # Object ids belong to the original page and would be rejected
        for element in root.iter():
            element.attrib.pop("objectID", None)

        self._call(self._com.UpdatePageContent, ET.tostring(root, encoding="unicode"))
        self._temporary_pages.append(page_id)
        logger.debug("Page cloned into temporary page %s", page_id)
        return page_id

    def discard_temporary_pages(self) -> None:
        while self._temporary_pages:
            page_id = self._temporary_pages.pop()
            try:
                self._call(self._com.DeleteHierarchy, page_id)
            except NoteServiceError as exc:
                logger.warning("Could not delete temporary page %s: %s", page_id, exc)

    def _temporary_section(self) -> str:
        if self._temp_section_id is None:
            os.makedirs(self._temp_folder, exist_ok=True)
            path = os.path.join(self._temp_folder, _TEMP_SECTION_FILE)
            self._temp_section_id = self._call(
                self._com.OpenHierarchy, path, "", CFT_SECTION
            )
        return self._temp_section_id
