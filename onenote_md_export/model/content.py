"""Mutable OneNote page content tree with change tracking.

Wraps the XML document returned by OneNote for a page. All structural
rewrites must go through the mutating methods of :class:`ContentTree`
so that the exporter can tell whether the page still matches what
OneNote holds, or whether a modified copy has to be published instead.
"""

import xml.etree.ElementTree as ET
from collections.abc import Iterator

ONENOTE_NS = "http://schemas.microsoft.com/office/onenote/2013/onenote"

ET.register_namespace("one", ONENOTE_NS)


class ContentTree:
    """A OneNote page XML document and a counter of mutations applied to it."""

    def __init__(self, root: ET.Element) -> None:
        self.root = root
        self.changes = 0
        self._checkpoint = 0
        self._parents: dict[ET.Element, ET.Element] | None = None

    @classmethod
    def from_xml(cls, xml: str) -> "ContentTree":
        return cls(ET.fromstring(xml))

    def to_xml(self) -> str:
        return ET.tostring(self.root, encoding="unicode")

    @property
    def namespace(self) -> str:
        tag = self.root.tag
        if tag.startswith("{"):
            return tag[1 : tag.index("}")]
        return ""

    def qname(self, local_name: str) -> str:
        """Qualified tag name for an element of the page namespace."""
        ns = self.namespace
        return f"{{{ns}}}{local_name}" if ns else local_name

    def is_a(self, element: ET.Element | None, local_name: str) -> bool:
        return element is not None and element.tag == self.qname(local_name)

    def iter(self, local_name: str, within: ET.Element | None = None) -> list[ET.Element]:
        """All descendants with the given name, in document order.

        Returns a list so callers may mutate the tree while looping.
        """
        start = self.root if within is None else within
        return list(start.iter(self.qname(local_name)))

    def find(self, path: str) -> ET.Element | None:
        """Find a direct path like ``Title/OE`` from the root."""
        current: ET.Element | None = self.root
        for part in path.split("/"):
            if current is None:
                return None
            current = current.find(self.qname(part))
        return current

    def parent_of(self, element: ET.Element) -> ET.Element | None:
        if self._parents is None:
            self._parents = {
                child: parent for parent in self.root.iter() for child in parent
            }
        return self._parents.get(element)

    def walk(self) -> Iterator[ET.Element]:
        return self.root.iter()

    # Change tracking

    def checkpoint(self) -> None:
        self._checkpoint = self.changes

    @property
    def changed_since_checkpoint(self) -> bool:
        return self.changes != self._checkpoint

    # Mutations

    def remove_attribute(self, element: ET.Element, name: str) -> bool:
        if name not in element.attrib:
            return False
        del element.attrib[name]
        self.changes += 1
        return True

    def set_attribute(self, element: ET.Element, name: str, value: str) -> bool:
        if element.get(name) == value:
            return False
        element.set(name, value)
        self.changes += 1
        return True

    def set_text(self, element: ET.Element, text: str) -> bool:
        if element.text == text:
            return False
        element.text = text
        self.changes += 1
        return True

    def insert_child(self, parent: ET.Element, index: int, child: ET.Element) -> None:
        parent.insert(index, child)
        self._parents = None
        self.changes += 1

    def insert_before(self, reference: ET.Element, new_element: ET.Element) -> None:
        """Insert ``new_element`` as the sibling immediately before ``reference``."""
        parent = self.parent_of(reference)
        if parent is None:
            raise ValueError("Cannot insert a sibling before the root element")
        self.insert_child(parent, list(parent).index(reference), new_element)

    def new_element(self, local_name: str, text: str | None = None, **attrib: str) -> ET.Element:
        """Create a detached element in the page namespace."""
        element = ET.Element(self.qname(local_name), attrib)
        element.text = text
        return element


def literal_text(tree: ContentTree, element: ET.Element | None) -> str | None:
    """Literal text carried by a ``T`` element, or None.

    OneNote stores text runs as CDATA inside ``one:T``. ElementTree reads an
    empty CDATA section as no text at all, so a ``T`` without child elements
    is an empty run. Anything else holds nothing that can be rewritten.
    """
    if not tree.is_a(element, "T"):
        return None
    if len(element) == 0:
        return element.text or ""
    return element.text
