"""Tests for converting document trees into HTML."""
import io
import unittest
from typing import List

from docx_html.model.elements import (
    Bookmark,
    Break,
    BreakType,
    Comment,
    CommentReference,
    Document,
    Hyperlink,
    Image,
    Note,
    NoteReference,
    Notes,
    NoteType,
    NumberingLevel,
    Paragraph,
    Run,
    Style,
    Tab,
    Table,
    TableCell,
    TableOfContents,
    TableRow,
    Text,
    VerticalAlignment,
)
from docx_html.renderer import html_path
from docx_html.renderer.document_to_html import DocumentToHtml, MissingCommentError
from docx_html.renderer.html_nodes import collapse, strip_empty
from docx_html.renderer.html_renderer import write_html
from docx_html.renderer.images import data_uri
from docx_html.renderer.options import DocumentToHtmlOptions
from docx_html.renderer.style_map import DEFAULT_STYLE_MAP, BreakMatcher, Rule, StyleMap


def paragraph(*children, **kwargs) -> Paragraph:
    return Paragraph(children=list(children), **kwargs)


def run(*children, **kwargs) -> Run:
    return Run(children=list(children), **kwargs)


def convert(elements: List, **options):
    document = Document(
        children=elements,
        notes=options.pop("notes", Notes()),
        comments=options.pop("comments", []),
    )
    result = DocumentToHtml.convert_document(document, DocumentToHtmlOptions(**options))
    return write_html(collapse(strip_empty(result.value))), result.warnings


def convert_html(elements: List, **options) -> str:
    return convert(elements, **options)[0]


class ParagraphTest(unittest.TestCase):
    def test_bold_run_with_default_style_map(self) -> None:
        html = convert_html([paragraph(run(Text("Hi"), is_bold=True))])

        self.assertEqual(html, "<p><strong>Hi</strong></p>")

    def test_mapped_paragraph_style(self) -> None:
        html = convert_html([paragraph(run(Text("Title")), style=Style("Heading1", "heading 1"))])

        self.assertEqual(html, "<h1>Title</h1>")

    def test_unrecognised_paragraph_style_falls_back_to_p(self) -> None:
        html, warnings = convert([paragraph(run(Text("x")), style=Style("Fancy", "Fancy"))])

        self.assertEqual(html, "<p>x</p>")
        self.assertEqual(warnings, frozenset(["Unrecognised paragraph style: 'Fancy' (Style ID: Fancy)"]))

    def test_paragraph_without_style_is_not_warned(self) -> None:
        html, warnings = convert([paragraph(run(Text("x")))])

        self.assertEqual(html, "<p>x</p>")
        self.assertEqual(warnings, frozenset())

    def test_empty_paragraphs(self) -> None:
        self.assertEqual(convert_html([paragraph(), paragraph(run(Text("")))]), "")
        self.assertEqual(convert_html([paragraph()], preserve_empty_paragraphs=True), "<p></p>")
        self.assertEqual(convert_html([paragraph(), paragraph()], preserve_empty_paragraphs=True), "<p></p><p></p>")

    def test_consecutive_list_items_share_a_list(self) -> None:
        bullet = NumberingLevel("0", is_ordered=False)
        html = convert_html(
            [
                paragraph(run(Text("one")), numbering=bullet),
                paragraph(run(Text("two")), numbering=bullet),
            ]
        )

        self.assertEqual(html, "<ul><li>one</li><li>two</li></ul>")


class RunTest(unittest.TestCase):
    def test_decoration_order(self) -> None:
        html = convert_html(
            [paragraph(run(Text("x"), is_bold=True, is_italic=True, is_underline=True, is_strikethrough=True))]
        )

        self.assertEqual(html, "<p><strong><em><s>x</s></em></strong></p>")

    def test_style_map_decorations_compose_in_order(self) -> None:
        style_map = StyleMap(
            underline=html_path.collapsible_element("u"),
            small_caps=html_path.collapsible_element("span", {"class": "small-caps"}),
        ).then(DEFAULT_STYLE_MAP)

        html = convert_html(
            [paragraph(run(Text("x"), is_underline=True, is_small_caps=True, is_italic=True))],
            style_map=style_map,
        )

        self.assertEqual(html, '<p><em><u><span class="small-caps">x</span></u></em></p>')

    def test_vertical_alignment(self) -> None:
        html = convert_html(
            [
                paragraph(
                    run(Text("2"), vertical_alignment=VerticalAlignment.SUPERSCRIPT, is_bold=True),
                    run(Text("n"), vertical_alignment=VerticalAlignment.SUBSCRIPT),
                )
            ]
        )

        self.assertEqual(html, "<p><strong><sup>2</sup></strong><sub>n</sub></p>")

    def test_adjacent_bold_runs_are_merged(self) -> None:
        html = convert_html([paragraph(run(Text("a"), is_bold=True), run(Text("b"), is_bold=True))])

        self.assertEqual(html, "<p><strong>ab</strong></p>")

    def test_unrecognised_run_style_is_warned(self) -> None:
        html, warnings = convert([paragraph(run(Text("x"), style=Style("Code", "Code")))])

        self.assertEqual(html, "<p>x</p>")
        self.assertEqual(warnings, frozenset(["Unrecognised run style: 'Code' (Style ID: Code)"]))

    def test_tabs_and_breaks(self) -> None:
        html = convert_html(
            [paragraph(run(Text("a"), Tab(), Text("b"), Break(BreakType.LINE), Text("c"), Break(BreakType.PAGE)))]
        )

        self.assertEqual(html, "<p>a\tb<br />c</p>")

    def test_break_mapped_by_style_map(self) -> None:
        style_map = StyleMap(
            break_rules=(
                Rule(BreakMatcher(BreakType.PAGE), html_path.element("hr")),
            )
        )

        html = convert_html([paragraph(run(Text("a"), Break(BreakType.PAGE)))], style_map=style_map)

        self.assertEqual(html, "<p>a<hr /></p>")


class TableTest(unittest.TestCase):
    def cell(self, value: str, **kwargs) -> TableCell:
        return TableCell(children=[paragraph(run(Text(value)))], **kwargs)

    def test_header_rows_go_into_thead(self) -> None:
        table = Table(
            rows=[
                TableRow(cells=[self.cell("H")], is_header=True),
                TableRow(cells=[self.cell("B", colspan=2, rowspan=3)]),
            ]
        )

        self.assertEqual(
            convert_html([table]),
            "<table><thead><tr><th><p>H</p></th></tr></thead>"
            '<tbody><tr><td colspan="2" rowspan="3"><p>B</p></td></tr></tbody></table>',
        )

    def test_table_without_header_rows(self) -> None:
        table = Table(rows=[TableRow(cells=[self.cell("A"), TableCell()])])

        self.assertEqual(convert_html([table]), "<table><tr><td><p>A</p></td><td></td></tr></table>")

    def test_header_rows_after_body_rows_are_body_rows(self) -> None:
        table = Table(rows=[TableRow(cells=[self.cell("A")]), TableRow(cells=[self.cell("H")], is_header=True)])

        self.assertEqual(
            convert_html([table]),
            "<table><tr><td><p>A</p></td></tr><tr><td><p>H</p></td></tr></table>",
        )


class LinkTest(unittest.TestCase):
    def test_hyperlinks(self) -> None:
        html = convert_html(
            [
                paragraph(
                    Hyperlink(children=[run(Text("ext"))], href="http://example.com", target_frame="_blank"),
                    Hyperlink(children=[run(Text("int"))], anchor="intro"),
                )
            ],
            id_prefix="doc-",
        )

        self.assertEqual(
            html,
            '<p><a href="http://example.com" target="_blank">ext</a><a href="#doc-intro">int</a></p>',
        )

    def test_adjacent_runs_in_same_link_are_merged(self) -> None:
        html = convert_html(
            [
                paragraph(
                    run(Hyperlink(children=[Text("a")], href="http://x")),
                    run(Hyperlink(children=[Text("b")], href="http://x")),
                )
            ]
        )

        self.assertEqual(html, '<p><a href="http://x">ab</a></p>')

    def test_bookmark(self) -> None:
        self.assertEqual(
            convert_html([paragraph(Bookmark("intro"), run(Text("x")))], id_prefix="doc-"),
            '<p><a id="doc-intro"></a>x</p>',
        )


class NotesAndCommentsTest(unittest.TestCase):
    def test_note_references_are_numbered_in_encounter_order(self) -> None:
        notes = Notes(
            [
                Note(NoteType.FOOTNOTE, "1", [paragraph(run(Text("First")))]),
                Note(NoteType.ENDNOTE, "2", [paragraph(run(Text("Second")))]),
            ]
        )

        html = convert_html(
            [
                paragraph(
                    run(Text("a"), NoteReference(NoteType.ENDNOTE, "2")),
                    run(Text("b"), NoteReference(NoteType.FOOTNOTE, "1")),
                )
            ],
            notes=notes,
        )

        self.assertEqual(
            html,
            '<p>a<sup><a href="#endnote-2" id="endnote-ref-2">[1]</a></sup>'
            'b<sup><a href="#footnote-1" id="footnote-ref-1">[2]</a></sup></p>'
            '<ol><li id="endnote-2"><p>Second <a href="#endnote-ref-2">↑</a></p></li>'
            '<li id="footnote-1"><p>First <a href="#footnote-ref-1">↑</a></p></li></ol>',
        )

    def test_missing_note_is_skipped_with_warning(self) -> None:
        html, warnings = convert([paragraph(run(NoteReference(NoteType.FOOTNOTE, "9")))])

        self.assertEqual(html, '<p><sup><a href="#footnote-9" id="footnote-ref-9">[1]</a></sup></p>')
        self.assertEqual(warnings, frozenset(["Referenced footnote could not be found, id: 9"]))

    def test_comment_references_are_hidden_by_default(self) -> None:
        comment = Comment("0", [paragraph(run(Text("Note this")))], author_name="Ann", author_initials="AB")

        html = convert_html([paragraph(run(Text("x"), CommentReference("0")))], comments=[comment])

        self.assertEqual(
            html,
            '<p>x</p><dl><dt id="comment-0">Comment [AB1]</dt>'
            '<dd><p>Note this <a href="#comment-ref-0">↑</a></p></dd></dl>',
        )

    def test_mapped_comment_references(self) -> None:
        comments = [Comment("0", [paragraph(run(Text("c0")))]), Comment("1", [], author_initials="JD")]
        style_map = StyleMap(comment_reference=html_path.collapsible_element("sup"))

        html = convert_html(
            [paragraph(run(CommentReference("0")), run(CommentReference("1")))],
            comments=comments,
            style_map=style_map,
        )

        self.assertTrue(
            html.startswith(
                '<p><sup><a href="#comment-0" id="comment-ref-0">[1]</a>'
                '<a href="#comment-1" id="comment-ref-1">[JD2]</a></sup></p>'
            )
        )
        self.assertIn('<dt id="comment-1">Comment [JD2]</dt>', html)

    def test_missing_comment_is_fatal(self) -> None:
        with self.assertRaises(MissingCommentError):
            convert([paragraph(run(CommentReference("7")))])

    def test_convert_element_has_no_comments(self) -> None:
        with self.assertRaises(LookupError):
            DocumentToHtml.convert_element(CommentReference("0"), DocumentToHtmlOptions())


class TrackedStream(io.BytesIO):
    def __init__(self, payload: bytes = b"", fail_on_read: bool = False) -> None:
        super().__init__(payload)
        self.fail_on_read = fail_on_read

    def read(self, *args):
        if self.fail_on_read:
            raise OSError("Could not read image: word/media/broken.png")
        return super().read(*args)


class ImageTest(unittest.TestCase):
    def test_image_uses_data_uri_and_alt_text(self) -> None:
        image = Image(open=lambda: io.BytesIO(b"abc"), alt_text="Dots", content_type="image/png")

        self.assertEqual(
            convert_html([paragraph(run(image))]),
            '<p><img src="data:image/png;base64,YWJj" alt="Dots" /></p>',
        )

    def test_empty_alt_text_is_kept(self) -> None:
        image = Image(open=lambda: io.BytesIO(b"abc"), alt_text="", content_type="image/png")

        self.assertEqual(
            convert_html([paragraph(run(image))]),
            '<p><img src="data:image/png;base64,YWJj" alt="" /></p>',
        )

    def test_image_stream_is_closed_after_reading(self) -> None:
        stream = TrackedStream(b"abc")

        attributes = data_uri(Image(open=lambda: stream, content_type="image/png"))

        self.assertEqual(attributes, {"src": "data:image/png;base64,YWJj"})
        self.assertTrue(stream.closed)

    def test_image_stream_is_closed_when_reading_fails(self) -> None:
        stream = TrackedStream(fail_on_read=True)
        image = Image(open=lambda: stream, content_type="image/png")

        html, warnings = convert([paragraph(run(Text("x"), image))])

        self.assertEqual(html, "<p>x</p>")
        self.assertEqual(warnings, frozenset(["Could not read image: word/media/broken.png"]))
        self.assertTrue(stream.closed)

    def test_custom_image_converter(self) -> None:
        image = Image(open=lambda: io.BytesIO(b""), content_type="image/png")

        html = convert_html([paragraph(run(image))], image_converter=lambda img: {"src": "images/1.png"})

        self.assertEqual(html, '<p><img src="images/1.png" /></p>')

    def test_unreadable_image_becomes_warning(self) -> None:
        def open_image():
            raise OSError("Could not find file in docx: word/media/missing.png")

        html, warnings = convert([paragraph(run(Text("x"), Image(open=open_image, content_type="image/png")))])

        self.assertEqual(html, "<p>x</p>")
        self.assertEqual(warnings, frozenset(["Could not find file in docx: word/media/missing.png"]))

    def test_image_without_content_type_is_dropped(self) -> None:
        self.assertEqual(convert_html([paragraph(run(Text("x"), Image(open=lambda: io.BytesIO(b""))))]), "<p>x</p>")


class TableOfContentsTest(unittest.TestCase):
    def test_toc_container_uses_configured_class(self) -> None:
        toc = TableOfContents(children=[paragraph(run(Text("Intro")))])

        self.assertEqual(convert_html([toc], toc_class="contents"), '<div class="contents"><p>Intro</p></div>')

    def test_empty_toc_is_kept_with_empty_paragraphs(self) -> None:
        self.assertEqual(convert_html([TableOfContents()]), "")
        self.assertEqual(convert_html([TableOfContents()], preserve_empty_paragraphs=True), '<div class="toc"></div>')


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
