"""Resolve package part names to MIME types using [Content_Types].xml."""
from __future__ import annotations

from pathlib import PurePosixPath
from typing import Dict, Mapping, Optional
from xml.etree import ElementTree as ET

from docx_html.utils.xml_utils import Namespaces

CONTENT_TYPES_PATH = "[Content_Types].xml"

# Images are sometimes stored without a matching Default entry.
_FALLBACK_IMAGE_TYPES: Dict[str, str] = {
    "png": "image/png",
    "gif": "image/gif",
    "jpeg": "image/jpeg",
    "jpg": "image/jpeg",
    "tif": "image/tiff",
    "tiff": "image/tiff",
    "bmp": "image/bmp",
    "svg": "image/svg+xml",
}


class ContentTypes:
    """Lookup of content types by part name, with extension defaults."""

    def __init__(self, extension_defaults: Mapping[str, str], overrides: Mapping[str, str]) -> None:
        self._extension_defaults = {key.lower(): value for key, value in extension_defaults.items()}
        self._overrides = dict(overrides)

    @classmethod
    def empty(cls) -> "ContentTypes":
        return cls({}, {})

    @classmethod
    def from_xml(cls, tree: Optional[ET.ElementTree]) -> "ContentTypes":
        if tree is None:
            return cls.empty()
        root = tree.getroot()
        defaults = {
            el.attrib["Extension"]: el.attrib["ContentType"]
            for el in root.findall("ct:Default", Namespaces.CONTENT_TYPES)
            if "Extension" in el.attrib and "ContentType" in el.attrib
        }
        overrides = {
            el.attrib["PartName"]: el.attrib["ContentType"]
            for el in root.findall("ct:Override", Namespaces.CONTENT_TYPES)
            if "PartName" in el.attrib and "ContentType" in el.attrib
        }
        return cls(defaults, overrides)

    def find_content_type(self, path: str) -> Optional[str]:
        override = self._overrides.get("/" + path.lstrip("/"))
        if override is not None:
            return override
        extension = PurePosixPath(path).suffix.lstrip(".").lower()
        if not extension:
            return None
        default = self._extension_defaults.get(extension)
        if default is not None:
            return default
        return _FALLBACK_IMAGE_TYPES.get(extension)
