"""
XML Loader
==========

File loading and tree parsing for documents and schemas.
Only handles turning paths and text into lxml trees.
"""

import os
from typing import Iterator, Optional

from lxml import etree

from .errors import ResourceNotFoundError, XmlParsingError


def load_text(path: str) -> str:
    """
    Read a document or schema file as UTF-8 text.

    Args:
        path: File path

    Returns:
        File content

    Raises:
        ResourceNotFoundError: If the file is missing or unreadable
    """
    if not os.path.isfile(path):
        raise ResourceNotFoundError(f"File not found: {path}", path=str(path))
    try:
        with open(path, "r", encoding="utf-8") as f:
            return f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise ResourceNotFoundError(f"Could not read {path}: {e}", path=str(path)) from e


def _make_parser() -> etree.XMLParser:
    # Text is already decoded; the encoding declaration is ignored
    return etree.XMLParser(
        encoding="utf-8",
        resolve_entities=False,
        no_network=True,
    )


def parse_xml(text: str, source: Optional[str] = None) -> etree._Element:
    """
    Parse markup into an element tree and return its root.

    Args:
        text: XML text
        source: Path the text came from (used for error reporting)

    Returns:
        Root element

    Raises:
        XmlParsingError: If the markup is malformed
    """
    if not isinstance(text, (str, bytes)):
        raise XmlParsingError(f"Expected XML text, got {type(text).__name__}", path=source or "")
    data = text.encode("utf-8") if isinstance(text, str) else text
    try:
        root = etree.fromstring(data, _make_parser(), base_url=source)
    except etree.XMLSyntaxError as e:
        line, column = getattr(e, "position", (None, None))
        raise XmlParsingError(
            f"XML parse error: {e.msg}", line=line, column=column, path=source or ""
        ) from e
    if root is None:
        raise XmlParsingError("Empty document", path=source or "")
    return root


def load_xml(path: str) -> etree._Element:
    """Load and parse a file in one step."""
    return parse_xml(load_text(path), source=str(path))


def local_name(node) -> str:
    """Element name without namespace."""
    return etree.QName(node).localname


def strip_prefix(value: Optional[str]) -> Optional[str]:
    """'xs:string' -> 'string'."""
    if value is None:
        return None
    return value.split(":", 1)[-1]


def iter_children(node) -> Iterator[etree._Element]:
    """Element children only (comments and PIs skipped)."""
    for child in node:
        if isinstance(child.tag, str):
            yield child


def element_text(node) -> str:
    """Concatenated text content of the element and its descendants."""
    return "".join(node.itertext())


def is_element(node) -> bool:
    return isinstance(node, etree._Element) and isinstance(node.tag, str)
