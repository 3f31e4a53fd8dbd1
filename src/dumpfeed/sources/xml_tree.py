"""Small lxml helpers shared by the streaming and tree-based sources."""

from __future__ import annotations

from lxml import etree

XML_LANG_ATTRIBUTE = "{http://www.w3.org/XML/1998/namespace}lang"


def parse_xml(payload: bytes) -> etree._Element:
    """Parse an in-memory export or harvested batch into an element tree."""
    parser = etree.XMLParser(resolve_entities=False, no_network=True, load_dtd=False, huge_tree=True)
    return etree.fromstring(payload, parser=parser)


def local_name(node: object) -> str | None:
    """Return the namespace-free tag of an element, None for comments and PIs."""
    tag = getattr(node, "tag", None)
    if not isinstance(tag, str):
        return None
    return etree.QName(tag).localname


def children(element: etree._Element, name: str) -> list[etree._Element]:
    return [child for child in element if local_name(child) == name]


def first_child(element: etree._Element | None, name: str) -> etree._Element | None:
    if element is None:
        return None
    for child in element:
        if local_name(child) == name:
            return child
    return None


def child_text(element: etree._Element | None, name: str) -> str | None:
    """Text of the first ``name`` child; ``""`` for an empty one, None when absent."""
    child = first_child(element, name)
    if child is None:
        return None
    return child.text or ""


def descendants(element: etree._Element, name: str) -> list[etree._Element]:
    """All elements named ``name`` in document order, ``element`` itself included."""
    return [node for node in element.iter() if local_name(node) == name]
