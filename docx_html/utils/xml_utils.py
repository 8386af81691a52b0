"""Helper functions to work with XML namespaces and parsing."""
from __future__ import annotations

from typing import Dict, List, Optional
from xml.etree import ElementTree as ET


class Namespaces:
    """Common OpenXML namespace prefixes used across parsers."""

    WORD: Dict[str, str] = {
        "w": "http://schemas.openxmlformats.org/wordprocessingml/2006/main",
    }
    RELS: Dict[str, str] = {
        "rel": "http://schemas.openxmlformats.org/package/2006/relationships",
    }
    CONTENT_TYPES: Dict[str, str] = {
        "ct": "http://schemas.openxmlformats.org/package/2006/content-types",
    }
    DRAWING: Dict[str, str] = {
        "a": "http://schemas.openxmlformats.org/drawingml/2006/main",
        "wp": "http://schemas.openxmlformats.org/drawingml/2006/wordprocessingDrawing",
        "pic": "http://schemas.openxmlformats.org/drawingml/2006/picture",
    }
    BODY: Dict[str, str] = {
        **WORD,
        **DRAWING,
        "r": "http://schemas.openxmlformats.org/officeDocument/2006/relationships",
        "v": "urn:schemas-microsoft-com:vml",
        "o": "urn:schemas-microsoft-com:office:office",
        "office-word": "urn:schemas-microsoft-com:office:word",
        "mc": "http://schemas.openxmlformats.org/markup-compatibility/2006",
    }


# Strict OOXML documents use different URIs for the same vocabularies.
_STRICT_ALIASES: Dict[str, str] = {
    "http://purl.oclc.org/ooxml/wordprocessingml/main": "w",
    "http://purl.oclc.org/ooxml/drawingml/main": "a",
    "http://purl.oclc.org/ooxml/drawingml/wordprocessingDrawing": "wp",
    "http://purl.oclc.org/ooxml/drawingml/picture": "pic",
    "http://purl.oclc.org/ooxml/officeDocument/relationships": "r",
}

_PREFIX_BY_URI: Dict[str, str] = {uri: prefix for prefix, uri in Namespaces.BODY.items()}
_PREFIX_BY_URI.update(_STRICT_ALIASES)


def parse_xml(data: bytes) -> ET.ElementTree:
    """Parse XML from raw bytes with sane defaults."""
    return ET.ElementTree(ET.fromstring(data))


def prefixed_name(tag: str) -> str:
    """Map a Clark-notation tag such as ``{uri}p`` onto ``w:p``.

    Tags in namespaces we do not know about are returned unchanged.
    """
    if not tag.startswith("{"):
        return tag
    uri, local = tag[1:].split("}", 1)
    prefix = _PREFIX_BY_URI.get(uri)
    if prefix is None:
        return tag
    return f"{prefix}:{local}"


def qualify(name: str) -> str:
    """Expand ``w:val`` into the Clark notation ElementTree uses."""
    if ":" not in name:
        return name
    prefix, local = name.split(":", 1)
    return f"{{{Namespaces.BODY[prefix]}}}{local}"


def get_attr(element: Optional[ET.Element], name: str) -> Optional[str]:
    if element is None:
        return None
    value = element.attrib.get(qualify(name))
    if value is None and ":" in name:
        # Strict documents qualify attributes with the strict namespace.
        prefix, local = name.split(":", 1)
        for uri, alias in _STRICT_ALIASES.items():
            if alias == prefix:
                value = element.attrib.get(f"{{{uri}}}{local}")
                if value is not None:
                    break
    return value


def find_child(element: Optional[ET.Element], name: str) -> Optional[ET.Element]:
    """Return the first direct child whose prefixed name is ``name``."""
    if element is None:
        return None
    for child in element:
        if prefixed_name(child.tag) == name:
            return child
    return None


def find_children(element: Optional[ET.Element], path: str) -> List[ET.Element]:
    """Follow a ``/``-separated path of prefixed names, collecting every match."""
    if element is None:
        return []
    current = [element]
    for name in path.split("/"):
        current = [child for parent in current for child in parent if prefixed_name(child.tag) == name]
    return current


def child_elements(element: ET.Element) -> List[ET.Element]:
    return [child for child in element if isinstance(child.tag, str)]


def inner_text(element: ET.Element) -> str:
    return "".join(element.itertext())
