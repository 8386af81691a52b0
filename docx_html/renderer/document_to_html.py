"""Convert a document tree into HTML nodes.

A :class:`DocumentToHtml` instance performs exactly one conversion. While it
walks the tree it records note and comment references; once the body is
done those are rendered as trailers (footnotes and endnotes first, then
comments) after the main content.
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Callable, Dict, List, Optional, Sequence, Set, Tuple

from docx_html.model.elements import (
    Bookmark,
    Break,
    BreakType,
    Comment,
    CommentReference,
    Document,
    DocumentElement,
    Hyperlink,
    Image,
    Note,
    NoteReference,
    Notes,
    Paragraph,
    Run,
    Tab,
    Table,
    TableCell,
    TableOfContents,
    TableRow,
    Text,
    VerticalAlignment,
)
from docx_html.parser.read_result import Result
from docx_html.renderer import html_path
from docx_html.renderer.html_nodes import HtmlNode, collapsible_element, element, text
from docx_html.renderer.html_path import HtmlPath
from docx_html.renderer.options import DocumentToHtmlOptions
from docx_html.utils.logger import get_logger

LOGGER = get_logger(__name__)


class MissingCommentError(LookupError):
    """Raised when a comment reference points at a comment that does not exist."""

    def __init__(self, comment_id: str) -> None:
        super().__init__(comment_id)
        self.comment_id = comment_id

    def __str__(self) -> str:
        return f"Referenced comment could not be found, id: {self.comment_id}"


@dataclass(frozen=True)
class _Context:
    is_header: bool = False


class DocumentToHtml:
    """Stateful, single-use converter from document elements to HTML nodes."""

    def __init__(self, options: DocumentToHtmlOptions, comments: Sequence[Comment] = ()) -> None:
        self._options = options
        self._style_map = options.style_map
        self._comments: Dict[str, Comment] = {comment.comment_id: comment for comment in comments}
        self._note_references: List[NoteReference] = []
        self._referenced_comments: List[Tuple[str, Comment]] = []
        self._warnings: Set[str] = set()
        self._converters: Dict[type, Callable[[DocumentElement, _Context], List[HtmlNode]]] = {
            Paragraph: self._convert_paragraph,
            Run: self._convert_run,
            Text: self._convert_text,
            Tab: self._convert_tab,
            Break: self._convert_break,
            Table: self._convert_table,
            TableRow: self._convert_table_row,
            TableCell: self._convert_table_cell,
            Hyperlink: self._convert_hyperlink,
            Bookmark: self._convert_bookmark,
            NoteReference: self._convert_note_reference,
            CommentReference: self._convert_comment_reference,
            Image: self._convert_image,
            TableOfContents: self._convert_table_of_contents,
        }

    @classmethod
    def convert_document(cls, document: Document, options: DocumentToHtmlOptions) -> Result[List[HtmlNode]]:
        converter = cls(options, document.comments)
        return converter._convert_document(document)

    @classmethod
    def convert_element(
        cls, document_element: DocumentElement, options: DocumentToHtmlOptions
    ) -> Result[List[HtmlNode]]:
        """Convert a single element on its own; comment references cannot be resolved."""
        converter = cls(options)
        nodes = converter._convert_elements([document_element], _Context())
        return Result(nodes, frozenset(converter._warnings))

    def _convert_document(self, document: Document) -> Result[List[HtmlNode]]:
        nodes = self._convert_elements(document.children, _Context())
        if self._note_references:
            nodes.append(self._notes_trailer(document.notes))
        if self._referenced_comments:
            nodes.append(self._comments_trailer())
        return Result(nodes, frozenset(self._warnings))

    def _convert_elements(self, elements: Sequence[DocumentElement], context: _Context) -> List[HtmlNode]:
        nodes: List[HtmlNode] = []
        for document_element in elements:
            nodes.extend(self._convert_element(document_element, context))
        return nodes

    def _convert_element(self, document_element: DocumentElement, context: _Context) -> List[HtmlNode]:
        converter = self._converters.get(type(document_element))
        if converter is None:
            raise TypeError(f"Cannot convert {type(document_element).__name__} to HTML")
        return converter(document_element, context)

    def _convert_paragraph(self, paragraph: Paragraph, context: _Context) -> List[HtmlNode]:
        paragraph_path = self._style_map.get_paragraph_html_path(paragraph)
        if paragraph_path is None:
            if paragraph.style is not None:
                self._warnings.add("Unrecognised paragraph style: " + paragraph.style.describe())
            paragraph_path = html_path.element("p")
        return paragraph_path.wrap(
            lambda: self._convert_elements(paragraph.children, context),
            force_write=self._options.preserve_empty_paragraphs,
        )

    def _convert_run(self, run: Run, context: _Context) -> List[HtmlNode]:
        def generate_nodes() -> List[HtmlNode]:
            return self._convert_elements(run.children, context)

        style_map = self._style_map
        if run.is_small_caps:
            generate_nodes = _wrapped(generate_nodes, style_map.small_caps or html_path.EMPTY)
        if run.is_strikethrough:
            generate_nodes = _wrapped(generate_nodes, style_map.strikethrough or html_path.collapsible_element("s"))
        if run.is_underline:
            generate_nodes = _wrapped(generate_nodes, style_map.underline or html_path.EMPTY)
        if run.vertical_alignment == VerticalAlignment.SUBSCRIPT:
            generate_nodes = _wrapped(generate_nodes, html_path.collapsible_element("sub"))
        if run.vertical_alignment == VerticalAlignment.SUPERSCRIPT:
            generate_nodes = _wrapped(generate_nodes, html_path.collapsible_element("sup"))
        if run.is_italic:
            generate_nodes = _wrapped(generate_nodes, style_map.italic or html_path.collapsible_element("em"))
        if run.is_bold:
            generate_nodes = _wrapped(generate_nodes, style_map.bold or html_path.collapsible_element("strong"))

        run_path = style_map.get_run_html_path(run)
        if run_path is None:
            if run.style is not None:
                self._warnings.add("Unrecognised run style: " + run.style.describe())
            run_path = html_path.EMPTY
        return run_path.wrap(generate_nodes)

    def _convert_text(self, text_element: Text, context: _Context) -> List[HtmlNode]:
        if not text_element.value:
            return []
        return [text(text_element.value)]

    def _convert_tab(self, tab: Tab, context: _Context) -> List[HtmlNode]:
        return [text("\t")]

    def _convert_break(self, break_element: Break, context: _Context) -> List[HtmlNode]:
        break_path = self._style_map.get_break_html_path(break_element)
        if break_path is None:
            if break_element.break_type == BreakType.LINE:
                break_path = html_path.element("br")
            else:
                break_path = html_path.EMPTY
        return break_path.wrap(lambda: [])

    def _convert_table(self, table: Table, context: _Context) -> List[HtmlNode]:
        table_path = self._style_map.get_table_html_path(table) or html_path.element("table")
        return table_path.wrap(lambda: self._generate_table_children(table, context))

    def _generate_table_children(self, table: Table, context: _Context) -> List[HtmlNode]:
        body_index = next(
            (index for index, row in enumerate(table.rows) if not getattr(row, "is_header", False)),
            len(table.rows),
        )
        if body_index == 0:
            return self._convert_elements(table.rows, replace(context, is_header=False))
        head_rows = self._convert_elements(table.rows[:body_index], replace(context, is_header=True))
        body_rows = self._convert_elements(table.rows[body_index:], replace(context, is_header=False))
        return [element("thead", children=head_rows), element("tbody", children=body_rows)]

    def _convert_table_row(self, row: TableRow, context: _Context) -> List[HtmlNode]:
        return [element("tr", children=self._convert_elements(row.cells, context), force_write=True)]

    def _convert_table_cell(self, cell: TableCell, context: _Context) -> List[HtmlNode]:
        attributes: Dict[str, str] = {}
        if cell.colspan != 1:
            attributes["colspan"] = str(cell.colspan)
        if cell.rowspan != 1:
            attributes["rowspan"] = str(cell.rowspan)
        tag_name = "th" if context.is_header else "td"
        children = self._convert_elements(cell.children, context)
        return [element(tag_name, attributes, children, force_write=True)]

    def _convert_hyperlink(self, hyperlink: Hyperlink, context: _Context) -> List[HtmlNode]:
        if hyperlink.href is not None:
            href = hyperlink.href
        elif hyperlink.anchor is not None:
            href = "#" + self._html_id(hyperlink.anchor)
        else:
            href = ""
        attributes = {"href": href}
        if hyperlink.target_frame is not None:
            attributes["target"] = hyperlink.target_frame
        return [collapsible_element("a", attributes, self._convert_elements(hyperlink.children, context))]

    def _convert_bookmark(self, bookmark: Bookmark, context: _Context) -> List[HtmlNode]:
        return [element("a", {"id": self._html_id(bookmark.name)}, force_write=True)]

    def _convert_note_reference(self, reference: NoteReference, context: _Context) -> List[HtmlNode]:
        self._note_references.append(reference)
        note_number = len(self._note_references)
        anchor = element(
            "a",
            {
                "href": "#" + self._note_html_id(reference.note_type.value, reference.note_id),
                "id": self._note_ref_html_id(reference.note_type.value, reference.note_id),
            },
            [text(f"[{note_number}]")],
        )
        return [element("sup", children=[anchor])]

    def _convert_comment_reference(self, reference: CommentReference, context: _Context) -> List[HtmlNode]:
        comment = self._comments.get(reference.comment_id)
        if comment is None:
            raise MissingCommentError(reference.comment_id)
        label = f"[{comment.author_initials or ''}{len(self._referenced_comments) + 1}]"
        self._referenced_comments.append((label, comment))
        reference_path = self._style_map.comment_reference or html_path.IGNORE
        return reference_path.wrap(
            lambda: [
                element(
                    "a",
                    {
                        "href": "#" + self._note_html_id("comment", comment.comment_id),
                        "id": self._note_ref_html_id("comment", comment.comment_id),
                    },
                    [text(label)],
                )
            ]
        )

    def _convert_image(self, image: Image, context: _Context) -> List[HtmlNode]:
        if image.content_type is None:
            return []
        try:
            attributes = dict(self._options.image_converter(image))
        except OSError as error:
            self._warnings.add(str(error))
            return []
        if image.alt_text is not None:
            attributes["alt"] = image.alt_text
        return [element("img", attributes)]

    def _convert_table_of_contents(self, toc: TableOfContents, context: _Context) -> List[HtmlNode]:
        toc_path = html_path.element("div", {"class": self._options.toc_class})
        return toc_path.wrap(
            lambda: self._convert_elements(toc.children, context),
            force_write=self._options.preserve_empty_paragraphs,
        )

    def _notes_trailer(self, notes: Notes) -> HtmlNode:
        LOGGER.debug("Writing %d note references to the trailer", len(self._note_references))
        items: List[HtmlNode] = []
        for reference in self._note_references:
            note = notes.find_note(reference.note_type, reference.note_id)
            if note is None:
                self._warnings.add(
                    f"Referenced {reference.note_type.value} could not be found, id: {reference.note_id}"
                )
                continue
            items.append(self._convert_note(note))
        return element("ol", children=items)

    def _convert_note(self, note: Note) -> HtmlNode:
        note_type = note.note_type.value
        back_link = self._back_link(self._note_ref_html_id(note_type, note.note_id))
        body = self._convert_elements(note.body, _Context()) + [back_link]
        return element("li", {"id": self._note_html_id(note_type, note.note_id)}, body)

    def _comments_trailer(self) -> HtmlNode:
        LOGGER.debug("Writing %d comments to the trailer", len(self._referenced_comments))
        children: List[HtmlNode] = []
        for label, comment in self._referenced_comments:
            back_link = self._back_link(self._note_ref_html_id("comment", comment.comment_id))
            children.append(
                element("dt", {"id": self._note_html_id("comment", comment.comment_id)}, [text("Comment " + label)])
            )
            children.append(element("dd", children=self._convert_elements(comment.body, _Context()) + [back_link]))
        return element("dl", children=children)

    def _back_link(self, reference_id: str) -> HtmlNode:
        return collapsible_element(
            "p",
            children=[text(" "), element("a", {"href": "#" + reference_id}, [text("↑")])],
        )

    def _note_html_id(self, note_type: str, note_id: str) -> str:
        return self._html_id(f"{note_type}-{note_id}")

    def _note_ref_html_id(self, note_type: str, note_id: str) -> str:
        return self._html_id(f"{note_type}-ref-{note_id}")

    def _html_id(self, suffix: str) -> str:
        return self._options.id_prefix + suffix


def _wrapped(generate_nodes: Callable[[], List[HtmlNode]], wrapper: HtmlPath) -> Callable[[], List[HtmlNode]]:
    return lambda: wrapper.wrap(generate_nodes)


def convert_document(document: Document, options: Optional[DocumentToHtmlOptions] = None) -> Result[List[HtmlNode]]:
    return DocumentToHtml.convert_document(document, options or DocumentToHtmlOptions())


def convert_element(
    document_element: DocumentElement, options: Optional[DocumentToHtmlOptions] = None
) -> Result[List[HtmlNode]]:
    return DocumentToHtml.convert_element(document_element, options or DocumentToHtmlOptions())
