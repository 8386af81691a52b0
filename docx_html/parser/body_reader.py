"""Read WordprocessingML body elements into document elements."""
from __future__ import annotations

import functools
import re
from dataclasses import dataclass
from typing import BinaryIO, Callable, Dict, Iterable, List, Optional, Protocol
from xml.etree import ElementTree as ET

from docx_html.model.elements import (
    Bookmark,
    Break,
    BreakType,
    CommentReference,
    DocumentElement,
    Hyperlink,
    Image,
    NoteReference,
    NoteType,
    NumberingLevel,
    Paragraph,
    ParagraphIndent,
    Run,
    Style,
    Tab,
    Table,
    TableOfContents,
    TableRow,
    Text,
    VerticalAlignment,
)
from docx_html.model.numbering_model import NumberingCatalog
from docx_html.model.style_model import StylesCatalog
from docx_html.parser.content_types import ContentTypes
from docx_html.parser.read_result import EMPTY, ReadResult, Result
from docx_html.parser.rels_parser import PartRelationships, replace_fragment, uri_to_zip_entry_name
from docx_html.parser.table_merge import UnmergedTableCell, calculate_rowspans
from docx_html.utils.logger import get_logger
from docx_html.utils.xml_utils import child_elements, find_child, find_children, get_attr, inner_text, prefixed_name

LOGGER = get_logger(__name__)

IMAGE_TYPES_SUPPORTED_BY_BROWSERS = frozenset(
    ["image/png", "image/gif", "image/jpeg", "image/svg+xml", "image/tiff"]
)

# Elements whose children are read in place of the element itself.
TRANSPARENT_ELEMENTS = frozenset(
    [
        "w:ins",
        "w:object",
        "w:smartTag",
        "w:drawing",
        "w:customXml",
        "w:fldSimple",
        "v:group",
        "v:rect",
        "v:roundrect",
        "v:shape",
        "v:textbox",
        "w:txbxContent",
    ]
)

# Elements that are understood but carry nothing to convert. No warning is raised for these.
IGNORED_ELEMENTS = frozenset(
    [
        "office-word:wrap",
        "v:shadow",
        "v:shapetype",
        "w:bookmarkEnd",
        "w:sectPr",
        "w:proofErr",
        "w:lastRenderedPageBreak",
        "w:commentRangeStart",
        "w:commentRangeEnd",
        "w:del",
        "w:footnoteRef",
        "w:endnoteRef",
        "w:annotationRef",
        "w:pPr",
        "w:rPr",
        "w:tblPr",
        "w:tblGrid",
        "w:trPr",
        "w:tcPr",
    ]
)

_HYPERLINK_FIELD_CODE = re.compile(r'\s*HYPERLINK "(.*)"')
_INTERNAL_HYPERLINK_FIELD_CODE = re.compile(r'\s*HYPERLINK\s+\\l\s+"(.*)"')


class FileOpener(Protocol):
    def get_input_stream(self, path: str) -> BinaryIO:
        ...


@dataclass(frozen=True, slots=True)
class _UnknownField:
    pass


@dataclass(frozen=True, slots=True)
class _HyperlinkField:
    href: Optional[str] = None
    anchor: Optional[str] = None


_UNKNOWN_FIELD = _UnknownField()


class BodyXmlReader:
    """Transforms Word body XML into document elements.

    One reader is used per document part. It keeps the stack of open complex
    fields across sibling elements, so field codes spread over several runs
    (``begin``, instruction text, ``separate``, ``end``) can turn the runs
    between ``separate`` and ``end`` into hyperlinks.
    """

    def __init__(
        self,
        styles: StylesCatalog,
        numbering: NumberingCatalog,
        relationships: PartRelationships,
        content_types: ContentTypes,
        docx_file: FileOpener,
        external_files: FileOpener,
    ) -> None:
        self._styles = styles
        self._numbering = numbering
        self._relationships = relationships
        self._content_types = content_types
        self._docx_file = docx_file
        self._external_files = external_files
        self._complex_field_stack: List[object] = []
        self._current_instr_text: List[str] = []

        self._readers: Dict[str, Callable[[ET.Element], ReadResult]] = {
            "w:t": self._read_text,
            "w:r": self._read_run,
            "w:p": self._read_paragraph,
            "w:fldChar": self._read_field_char,
            "w:instrText": self._read_instr_text,
            "w:tab": lambda element: ReadResult.success(Tab()),
            "w:noBreakHyphen": lambda element: ReadResult.success(Text("‑")),
            "w:br": self._read_break,
            "w:tbl": self._read_table,
            "w:tr": self._read_table_row,
            "w:tc": self._read_table_cell,
            "w:hyperlink": self._read_hyperlink,
            "w:bookmarkStart": self._read_bookmark,
            "w:footnoteReference": functools.partial(self._read_note_reference, NoteType.FOOTNOTE),
            "w:endnoteReference": functools.partial(self._read_note_reference, NoteType.ENDNOTE),
            "w:commentReference": self._read_comment_reference,
            "w:pict": self._read_pict,
            "v:imagedata": self._read_imagedata,
            "wp:inline": self._read_inline,
            "wp:anchor": self._read_inline,
            "w:sdt": self._read_sdt,
            "mc:AlternateContent": self._read_alternate_content,
        }

    def read_element(self, element: ET.Element) -> ReadResult:
        name = prefixed_name(element.tag)
        reader = self._readers.get(name)
        if reader is not None:
            return reader(element)
        if name in TRANSPARENT_ELEMENTS:
            return self.read_elements(element)
        if name in IGNORED_ELEMENTS:
            return EMPTY
        LOGGER.debug("Ignoring unrecognised element %s", name)
        return ReadResult.empty_with_warning(f"An unrecognised element was ignored: {name}")

    def read_elements(self, elements: Iterable[ET.Element]) -> ReadResult:
        return ReadResult.flat_map_all(child_elements(elements), self.read_element)

    # ------------------------------------------------------------------
    # Text and runs
    def _read_text(self, element: ET.Element) -> ReadResult:
        return ReadResult.success(Text(inner_text(element)))

    def _read_run(self, element: ET.Element) -> ReadResult:
        properties = find_child(element, "w:rPr")
        style_result = self._read_style(properties, "w:rStyle", "Run", self._styles.find_character_style_by_id)
        children_result = self.read_elements(element)

        def build(style: Optional[Style], children: List[DocumentElement]) -> Run:
            hyperlink = self._current_hyperlink()
            if hyperlink is not None:
                children = [Hyperlink(children=children, href=hyperlink.href, anchor=hyperlink.anchor)]
            return Run(
                children=children,
                style=style,
                is_bold=self._read_boolean_element(properties, "w:b"),
                is_italic=self._read_boolean_element(properties, "w:i"),
                is_underline=self._read_boolean_element(properties, "w:u"),
                is_strikethrough=self._read_boolean_element(properties, "w:strike"),
                is_small_caps=self._read_boolean_element(properties, "w:smallCaps"),
                vertical_alignment=self._read_vertical_alignment(properties),
            )

        return children_result.combine(style_result, build)

    def _read_boolean_element(self, properties: Optional[ET.Element], name: str) -> bool:
        child = find_child(properties, name)
        if child is None:
            return False
        value = get_attr(child, "w:val")
        return value not in ("false", "0")

    def _read_vertical_alignment(self, properties: Optional[ET.Element]) -> VerticalAlignment:
        value = self._read_val(properties, "w:vertAlign")
        if value == "superscript":
            return VerticalAlignment.SUPERSCRIPT
        if value == "subscript":
            return VerticalAlignment.SUBSCRIPT
        return VerticalAlignment.BASELINE

    def _read_break(self, element: ET.Element) -> ReadResult:
        break_type = get_attr(element, "w:type") or "textWrapping"
        if break_type == "textWrapping":
            return ReadResult.success(Break(BreakType.LINE))
        if break_type == "page":
            return ReadResult.success(Break(BreakType.PAGE))
        if break_type == "column":
            return ReadResult.success(Break(BreakType.COLUMN))
        return ReadResult.empty_with_warning(f"Unsupported break type: {break_type}")

    # ------------------------------------------------------------------
    # Complex fields
    def _read_field_char(self, element: ET.Element) -> ReadResult:
        field_type = get_attr(element, "w:fldCharType") or ""
        if field_type == "begin":
            self._complex_field_stack.append(_UNKNOWN_FIELD)
            self._current_instr_text.clear()
        elif field_type == "end":
            if self._complex_field_stack:
                self._complex_field_stack.pop()
        elif field_type == "separate":
            instr_text = "".join(self._current_instr_text)
            if self._complex_field_stack:
                self._complex_field_stack.pop()
            self._complex_field_stack.append(self._parse_field_code(instr_text))
        return EMPTY

    def _read_instr_text(self, element: ET.Element) -> ReadResult:
        self._current_instr_text.append(inner_text(element))
        return EMPTY

    def _parse_field_code(self, instr_text: str) -> object:
        external = _HYPERLINK_FIELD_CODE.match(instr_text)
        if external is not None:
            return _HyperlinkField(href=external.group(1))
        internal = _INTERNAL_HYPERLINK_FIELD_CODE.match(instr_text)
        if internal is not None:
            return _HyperlinkField(anchor=internal.group(1))
        return _UNKNOWN_FIELD

    def _current_hyperlink(self) -> Optional[_HyperlinkField]:
        for complex_field in reversed(self._complex_field_stack):
            if isinstance(complex_field, _HyperlinkField):
                return complex_field
        return None

    # ------------------------------------------------------------------
    # Paragraphs and styles
    def _read_paragraph(self, element: ET.Element) -> ReadResult:
        properties = find_child(element, "w:pPr")
        numbering = self._read_numbering(properties)
        indent = self._read_paragraph_indent(properties)
        style_result = self._read_style(properties, "w:pStyle", "Paragraph", self._styles.find_paragraph_style_by_id)
        return (
            self.read_elements(element)
            .combine(
                style_result,
                lambda style, children: Paragraph(children=children, style=style, numbering=numbering, indent=indent),
            )
            .append_extra()
        )

    def _read_style(
        self,
        properties: Optional[ET.Element],
        style_tag_name: str,
        style_type: str,
        find_style_by_id: Callable[[str], Optional[Style]],
    ) -> Result[Optional[Style]]:
        style_id = self._read_val(properties, style_tag_name)
        if style_id is None:
            return Result(None)
        style = find_style_by_id(style_id)
        if style is not None:
            return Result(style)
        return Result.with_warning(
            Style(style_id=style_id),
            f"{style_type} style with ID {style_id} was referenced but not defined in the document",
        )

    def _read_numbering(self, properties: Optional[ET.Element]) -> Optional[NumberingLevel]:
        numbering_properties = find_child(properties, "w:numPr")
        num_id = self._read_val(numbering_properties, "w:numId")
        level_index = self._read_val(numbering_properties, "w:ilvl")
        if num_id is None or level_index is None:
            return None
        return self._numbering.find_level(num_id, level_index)

    def _read_paragraph_indent(self, properties: Optional[ET.Element]) -> ParagraphIndent:
        indent = find_child(properties, "w:ind")
        return ParagraphIndent(
            start=_first_present(get_attr(indent, "w:start"), get_attr(indent, "w:left")),
            end=_first_present(get_attr(indent, "w:end"), get_attr(indent, "w:right")),
            first_line=get_attr(indent, "w:firstLine"),
            hanging=get_attr(indent, "w:hanging"),
        )

    # ------------------------------------------------------------------
    # Tables
    def _read_table(self, element: ET.Element) -> ReadResult:
        properties = find_child(element, "w:tblPr")
        style_result = self._read_style(properties, "w:tblStyle", "Table", self._styles.find_table_style_by_id)
        return (
            self.read_elements(element)
            .flat_map(calculate_rowspans)
            .combine(style_result, lambda style, rows: Table(rows=rows, style=style))
        )

    def _read_table_row(self, element: ET.Element) -> ReadResult:
        properties = find_child(element, "w:trPr")
        is_header = find_child(properties, "w:tblHeader") is not None
        return self.read_elements(element).map(lambda cells: TableRow(cells=cells, is_header=is_header))

    def _read_table_cell(self, element: ET.Element) -> ReadResult:
        properties = find_child(element, "w:tcPr")
        grid_span = self._read_val(properties, "w:gridSpan")
        colspan = max(1, int(grid_span)) if grid_span is not None and grid_span.isdigit() else 1
        vmerge = self._read_vmerge(properties)
        return self.read_elements(element).map(
            lambda children: UnmergedTableCell(vmerge=vmerge, colspan=colspan, children=children)
        )

    def _read_vmerge(self, properties: Optional[ET.Element]) -> bool:
        vmerge = find_child(properties, "w:vMerge")
        if vmerge is None:
            return False
        value = get_attr(vmerge, "w:val")
        return value is None or value == "continue"

    # ------------------------------------------------------------------
    # Links, bookmarks and references
    def _read_hyperlink(self, element: ET.Element) -> ReadResult:
        relationship_id = get_attr(element, "r:id")
        anchor = get_attr(element, "w:anchor")
        target_frame = get_attr(element, "w:tgtFrame") or None
        children_result = self.read_elements(element)

        if relationship_id is not None:
            href = self._relationships.find_target_by_relationship_id(relationship_id)
            if anchor is not None:
                href = replace_fragment(href, anchor)
            return children_result.map(
                lambda children: Hyperlink(children=children, href=href, target_frame=target_frame)
            )
        if anchor is not None:
            return children_result.map(
                lambda children: Hyperlink(children=children, anchor=anchor, target_frame=target_frame)
            )
        return children_result

    def _read_bookmark(self, element: ET.Element) -> ReadResult:
        name = get_attr(element, "w:name")
        if name is None:
            return ReadResult.empty_with_warning("A w:bookmarkStart element without a name was ignored")
        if name == "_GoBack":
            return EMPTY
        return ReadResult.success(Bookmark(name))

    def _read_note_reference(self, note_type: NoteType, element: ET.Element) -> ReadResult:
        note_id = get_attr(element, "w:id") or ""
        return ReadResult.success(NoteReference(note_type=note_type, note_id=note_id))

    def _read_comment_reference(self, element: ET.Element) -> ReadResult:
        return ReadResult.success(CommentReference(comment_id=get_attr(element, "w:id") or ""))

    # ------------------------------------------------------------------
    # Pictures and images
    def _read_pict(self, element: ET.Element) -> ReadResult:
        return self.read_elements(element).to_extra()

    def _read_imagedata(self, element: ET.Element) -> ReadResult:
        relationship_id = get_attr(element, "r:id")
        if relationship_id is None:
            return ReadResult.empty_with_warning("A v:imagedata element without a relationship ID was ignored")
        title = get_attr(element, "o:title")
        image_path = self._relationship_id_to_docx_path(relationship_id)
        return self._read_image(image_path, title, functools.partial(self._docx_file.get_input_stream, image_path))

    def _read_inline(self, element: ET.Element) -> ReadResult:
        properties = find_child(element, "wp:docPr")
        description = get_attr(properties, "descr")
        if description is not None and description.strip():
            alt_text: Optional[str] = description
        else:
            alt_text = get_attr(properties, "title")
        blips = find_children(element, "a:graphic/a:graphicData/pic:pic/pic:blipFill/a:blip")
        return ReadResult.flat_map_all(blips, lambda blip: self._read_blip(blip, alt_text))

    def _read_blip(self, blip: ET.Element, alt_text: Optional[str]) -> ReadResult:
        embed_relationship_id = get_attr(blip, "r:embed")
        link_relationship_id = get_attr(blip, "r:link")
        if embed_relationship_id is not None:
            image_path = self._relationship_id_to_docx_path(embed_relationship_id)
            opener = functools.partial(self._docx_file.get_input_stream, image_path)
        elif link_relationship_id is not None:
            image_path = self._relationships.find_target_by_relationship_id(link_relationship_id)
            opener = functools.partial(self._external_files.get_input_stream, image_path)
        else:
            return ReadResult.empty_with_warning("An a:blip element without a relationship ID was ignored")
        return self._read_image(image_path, alt_text, opener)

    def _read_image(self, image_path: str, alt_text: Optional[str], open_image: Callable[[], BinaryIO]) -> ReadResult:
        content_type = self._content_types.find_content_type(image_path)
        image = Image(open=open_image, alt_text=alt_text, content_type=content_type)
        if content_type in IMAGE_TYPES_SUPPORTED_BY_BROWSERS:
            return ReadResult.success(image)
        return ReadResult.with_warning(
            image,
            f"Image of type {content_type or '(unknown)'} is unlikely to display in web browsers",
        )

    def _relationship_id_to_docx_path(self, relationship_id: str) -> str:
        target = self._relationships.find_target_by_relationship_id(relationship_id)
        return uri_to_zip_entry_name("word", target)

    # ------------------------------------------------------------------
    # Structured content
    def _read_sdt(self, element: ET.Element) -> ReadResult:
        content = find_child(element, "w:sdtContent")
        children_result = self.read_elements(content) if content is not None else EMPTY
        if self._is_table_of_contents(element):
            return children_result.map(lambda children: TableOfContents(children=children))
        return children_result

    def _is_table_of_contents(self, element: ET.Element) -> bool:
        doc_part = find_child(find_child(element, "w:sdtPr"), "w:docPartObj")
        for marker in ("w:docPartGallery", "w:docPartType"):
            if get_attr(find_child(doc_part, marker), "w:val") == "Table of Contents":
                return True
        return False

    def _read_alternate_content(self, element: ET.Element) -> ReadResult:
        fallback = find_child(element, "mc:Fallback")
        if fallback is None:
            return EMPTY
        return self.read_elements(fallback)

    def _read_val(self, element: Optional[ET.Element], name: str) -> Optional[str]:
        return get_attr(find_child(element, name), "w:val")


def _first_present(*values: Optional[str]) -> Optional[str]:
    for value in values:
        if value is not None:
            return value
    return None
