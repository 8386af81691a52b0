"""DOCX package loader responsible for unpacking XML parts and media."""
from __future__ import annotations

import io
import os
import zipfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import BinaryIO, Dict, Mapping, Optional, Union
from urllib.parse import unquote, urlparse
from xml.etree import ElementTree as ET

from docx_html.parser.content_types import CONTENT_TYPES_PATH, ContentTypes
from docx_html.parser.rels_parser import MAIN_DOCUMENT_PART, Relationships
from docx_html.utils.logger import get_logger
from docx_html.utils.xml_utils import parse_xml

LOGGER = get_logger(__name__)

STYLES_XML_PATH = "word/styles.xml"
NUMBERING_XML_PATH = "word/numbering.xml"
FOOTNOTES_XML_PATH = "word/footnotes.xml"
ENDNOTES_XML_PATH = "word/endnotes.xml"
COMMENTS_XML_PATH = "word/comments.xml"


@dataclass(slots=True)
class DocxPackage:
    """Container for the parts extracted from a DOCX archive."""

    raw_parts: Mapping[str, bytes]
    path: Optional[Path] = None
    xml_cache: Dict[str, ET.ElementTree] = field(default_factory=dict)
    relationships: Relationships = field(init=False)
    content_types: ContentTypes = field(init=False)

    def __post_init__(self) -> None:
        self.relationships = Relationships.from_package(self.raw_parts)
        self.content_types = ContentTypes.from_xml(self.get_xml_part(CONTENT_TYPES_PATH))

    @classmethod
    def load(cls, source: Union[str, Path, BinaryIO]) -> "DocxPackage":
        """Open a DOCX archive from a path or binary file object."""
        path = Path(source) if isinstance(source, (str, Path)) else None
        if path is None and isinstance(getattr(source, "name", None), str):
            path = Path(source.name)
        with zipfile.ZipFile(source) as docx_zip:
            parts = {name: docx_zip.read(name) for name in docx_zip.namelist()}

        LOGGER.debug("Loaded %d parts from %s", len(parts), path.name if path else "file object")
        return cls(raw_parts=parts, path=path)

    # ------------------------------------------------------------------
    # Public helpers
    @property
    def main_document_path(self) -> str:
        return self.relationships.main_document_part() or MAIN_DOCUMENT_PART

    def require_document_xml(self) -> ET.ElementTree:
        tree = self.get_xml_part(self.main_document_path)
        if tree is None:
            raise ValueError("Could not find main document part. Are you sure this is a valid .docx file?")
        return tree

    def get_xml_part(self, name: str) -> Optional[ET.ElementTree]:
        if name in self.xml_cache:
            return self.xml_cache[name]
        data = self.raw_parts.get(name)
        if data is None:
            return None
        tree = parse_xml(data)
        self.xml_cache[name] = tree
        return tree

    def get_input_stream(self, name: str) -> BinaryIO:
        data = self.raw_parts.get(name)
        if data is None:
            raise OSError(f"Could not find file in docx: {name}")
        return io.BytesIO(data)

    def external_file_reader(self) -> "ExternalFileReader":
        return ExternalFileReader(self.path.parent if self.path is not None else None)


class ExternalFileReader:
    """Opens images that the document links to rather than embeds."""

    def __init__(self, base_dir: Optional[Path]) -> None:
        self._base_dir = base_dir

    def get_input_stream(self, uri: str) -> BinaryIO:
        try:
            return open(self._resolve(uri), "rb")
        except OSError as error:
            raise OSError(
                f"could not open external image: '{uri}' (document directory: '{self._base_dir}')\n{error}"
            ) from error

    def _resolve(self, uri: str) -> Path:
        parsed = urlparse(uri)
        if parsed.scheme == "file":
            return Path(unquote(parsed.path))
        if parsed.scheme and len(parsed.scheme) > 1:
            raise OSError(f"unsupported URI scheme: {parsed.scheme}")
        path = Path(uri)
        if path.is_absolute():
            return path
        if self._base_dir is None:
            raise OSError("could not find external image: the document has no directory")
        return Path(os.path.join(self._base_dir, uri))
