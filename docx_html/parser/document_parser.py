"""Parse document.xml and its companion parts into a document tree."""
from __future__ import annotations

from typing import Optional

from docx_html.model.elements import Document, NoteType, Notes
from docx_html.model.numbering_model import NumberingCatalog
from docx_html.model.style_model import StylesCatalog
from docx_html.parser.body_reader import BodyXmlReader
from docx_html.parser.docx_loader import (
    COMMENTS_XML_PATH,
    ENDNOTES_XML_PATH,
    FOOTNOTES_XML_PATH,
    NUMBERING_XML_PATH,
    STYLES_XML_PATH,
    DocxPackage,
)
from docx_html.parser.notes_parser import CommentsParser, NotesParser
from docx_html.parser.numbering_parser import NumberingParser
from docx_html.parser.read_result import Result
from docx_html.parser.styles_parser import StylesParser
from docx_html.utils.logger import get_logger
from docx_html.utils.xml_utils import find_child

LOGGER = get_logger(__name__)


class DocumentParser:
    """Transforms the parts of a DOCX package into a :class:`Document`."""

    def __init__(
        self,
        package: DocxPackage,
        styles: Optional[StylesCatalog] = None,
        numbering: Optional[NumberingCatalog] = None,
    ) -> None:
        self._package = package
        self._styles = styles if styles is not None else StylesParser(package.get_xml_part(STYLES_XML_PATH)).parse()
        if numbering is None:
            numbering = NumberingParser(package.get_xml_part(NUMBERING_XML_PATH), self._styles).parse()
        self._numbering = numbering

    def parse(self) -> Result[Document]:
        """Read the body, notes and comments, collecting warnings from every part."""
        document_path = self._package.main_document_path
        root = self._package.require_document_xml().getroot()
        body = find_child(root, "w:body")
        if body is None:
            LOGGER.warning("%s missing body element", document_path)
            children_result = Result([], frozenset())
        else:
            read = self._body_reader(document_path).read_elements(body).append_extra()
            children_result = Result(list(read.elements), read.warnings)

        footnotes = NotesParser(NoteType.FOOTNOTE, self._body_reader(FOOTNOTES_XML_PATH)).parse(
            self._package.get_xml_part(FOOTNOTES_XML_PATH)
        )
        endnotes = NotesParser(NoteType.ENDNOTE, self._body_reader(ENDNOTES_XML_PATH)).parse(
            self._package.get_xml_part(ENDNOTES_XML_PATH)
        )
        comments = CommentsParser(self._body_reader(COMMENTS_XML_PATH)).parse(
            self._package.get_xml_part(COMMENTS_XML_PATH)
        )
        LOGGER.debug(
            "Read %d footnotes, %d endnotes and %d comments",
            len(footnotes.value),
            len(endnotes.value),
            len(comments.value),
        )

        document = Document(
            children=children_result.value,
            notes=Notes(footnotes.value + endnotes.value),
            comments=comments.value,
        )
        return Result(
            document,
            children_result.warnings | footnotes.warnings | endnotes.warnings | comments.warnings,
        )

    def _body_reader(self, part_name: str) -> BodyXmlReader:
        return BodyXmlReader(
            styles=self._styles,
            numbering=self._numbering,
            relationships=self._package.relationships.for_part(part_name),
            content_types=self._package.content_types,
            docx_file=self._package,
            external_files=self._package.external_file_reader(),
        )
