"""lxml helpers shared by the TEI parsers."""

from __future__ import annotations

from collections.abc import Iterator

from lxml import etree

XML_NS = "{http://www.w3.org/XML/1998/namespace}"


class TEIParseError(ValueError):
    """Raised when a document is not well-formed XML."""


def parse_xml(content: str | bytes) -> etree._Element:
    """Parse a whole document and return its root element.

    Text input is encoded to UTF-8 and the parser is told so, which lets
    documents keep an `encoding` declaration in their prolog.
    """

    if isinstance(content, str):
        data = content.encode("utf-8")
        parser = etree.XMLParser(
            encoding="utf-8", resolve_entities=False, no_network=True, collect_ids=False
        )
    else:
        data = content
        parser = etree.XMLParser(resolve_entities=False, no_network=True, collect_ids=False)

    if not data.strip():
        raise TEIParseError("Document is empty")
    try:
        return etree.fromstring(data, parser)
    except (etree.XMLSyntaxError, ValueError) as exc:
        raise TEIParseError(f"Malformed XML: {exc}") from exc


def local_name(element: etree._Element) -> str | None:
    """Tag name without namespace; None for comments and processing instructions."""
    if not isinstance(element.tag, str):
        return None
    return etree.QName(element).localname


def iter_elements(
    root: etree._Element, name: str, *, ignore_case: bool = False
) -> Iterator[etree._Element]:
    """Depth-first walk over every element called `name`, in any namespace."""

    wanted = name.lower() if ignore_case else name
    for element in root.iter():
        tag = local_name(element)
        if tag is None:
            continue
        if (tag.lower() if ignore_case else tag) == wanted:
            yield element


def get_attribute(element: etree._Element, name: str) -> str:
    """Attribute value by qualified name (`xml:id` works); missing gives ""."""
    if name.startswith("xml:"):
        name = XML_NS + name[len("xml:") :]
    return element.get(name) or ""


def text_content(element: etree._Element) -> str:
    # XPath string-value: descendant text only, comments and PIs excluded.
    return str(element.xpath("string()"))
