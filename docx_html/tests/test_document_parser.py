"""Tests for document parser functionality."""
import unittest
from typing import Dict, Optional

from docx_html.model.elements import Comment, Note, NoteType, Paragraph, Run, Style, Text
from docx_html.parser.document_parser import DocumentParser
from docx_html.parser.docx_loader import DocxPackage

W_NS = 'xmlns:w="http://schemas.openxmlformats.org/wordprocessingml/2006/main"'
R_NS = 'xmlns:r="http://schemas.openxmlformats.org/officeDocument/2006/relationships"'

PACKAGE_RELS = b"""<?xml version="1.0" encoding="UTF-8"?>
<Relationships xmlns="http://schemas.openxmlformats.org/package/2006/relationships">
  <Relationship Id="rId1" Type="http://schemas.openxmlformats.org/officeDocument/2006/relationships/officeDocument" Target="word/document.xml"/>
</Relationships>
"""


def document_xml(body: str) -> bytes:
    return f"<w:document {W_NS} {R_NS}><w:body>{body}</w:body></w:document>".encode("utf-8")


def make_package(body: str, parts: Optional[Dict[str, bytes]] = None) -> DocxPackage:
    raw_parts = {"_rels/.rels": PACKAGE_RELS, "word/document.xml": document_xml(body)}
    raw_parts.update(parts or {})
    return DocxPackage(raw_parts=raw_parts)


class DocumentParserTest(unittest.TestCase):
    """Test document parsing functionality."""

    def test_parse_basic_paragraph(self) -> None:
        package = make_package("<w:p><w:r><w:t>Hello World</w:t></w:r></w:p>")

        result = DocumentParser(package).parse()

        self.assertEqual(result.value.children, [Paragraph(children=[Run(children=[Text("Hello World")])])])
        self.assertEqual(result.warnings, frozenset())

    def test_styles_part_is_used(self) -> None:
        styles = f"""
        <w:styles {W_NS}>
          <w:style w:type="paragraph" w:styleId="Heading1"><w:name w:val="heading 1"/></w:style>
        </w:styles>
        """.encode("utf-8")
        package = make_package(
            '<w:p><w:pPr><w:pStyle w:val="Heading1"/></w:pPr></w:p>',
            {"word/styles.xml": styles},
        )

        result = DocumentParser(package).parse()

        self.assertEqual(result.value.children[0].style, Style("Heading1", "heading 1"))
        self.assertEqual(result.value.children[0].style.name, "heading 1")

    def test_notes_and_comments_are_read(self) -> None:
        footnotes = f"""
        <w:footnotes {W_NS}>
          <w:footnote w:type="separator" w:id="-1"><w:p/></w:footnote>
          <w:footnote w:id="1"><w:p><w:r><w:t>Footnote text</w:t></w:r></w:p></w:footnote>
        </w:footnotes>
        """.encode("utf-8")
        endnotes = f"""
        <w:endnotes {W_NS}>
          <w:endnote w:id="2"><w:p><w:r><w:t>Endnote text</w:t></w:r></w:p></w:endnote>
        </w:endnotes>
        """.encode("utf-8")
        comments = f"""
        <w:comments {W_NS}>
          <w:comment w:id="0" w:author="Ann Smith" w:initials=""><w:p><w:r><w:t>Hmm</w:t></w:r></w:p></w:comment>
        </w:comments>
        """.encode("utf-8")
        package = make_package(
            "<w:p/>",
            {
                "word/footnotes.xml": footnotes,
                "word/endnotes.xml": endnotes,
                "word/comments.xml": comments,
            },
        )

        document = DocumentParser(package).parse().value

        self.assertEqual(len(document.notes), 2)
        self.assertEqual(
            document.notes.find_note(NoteType.FOOTNOTE, "1"),
            Note(NoteType.FOOTNOTE, "1", [Paragraph(children=[Run(children=[Text("Footnote text")])])]),
        )
        self.assertIsNotNone(document.notes.find_note(NoteType.ENDNOTE, "2"))
        self.assertIsNone(document.notes.find_note(NoteType.FOOTNOTE, "-1"))
        self.assertEqual(
            document.comments,
            [Comment("0", [Paragraph(children=[Run(children=[Text("Hmm")])])], author_name="Ann Smith")],
        )

    def test_relationships_are_scoped_to_each_part(self) -> None:
        footnotes = f"""
        <w:footnotes {W_NS} {R_NS}>
          <w:footnote w:id="1"><w:p><w:hyperlink r:id="rId1"><w:r><w:t>link</w:t></w:r></w:hyperlink></w:p></w:footnote>
        </w:footnotes>
        """.encode("utf-8")
        footnote_rels = b"""
        <Relationships xmlns="http://schemas.openxmlformats.org/package/2006/relationships">
          <Relationship Id="rId1" Type="http://schemas.openxmlformats.org/officeDocument/2006/relationships/hyperlink" Target="http://footnote.example" TargetMode="External"/>
        </Relationships>
        """
        package = make_package(
            "<w:p/>",
            {"word/footnotes.xml": footnotes, "word/_rels/footnotes.xml.rels": footnote_rels},
        )

        note = DocumentParser(package).parse().value.notes.find_note(NoteType.FOOTNOTE, "1")

        self.assertEqual(note.body[0].children[0].href, "http://footnote.example")

    def test_warnings_from_every_part_are_collected(self) -> None:
        comments = f"""
        <w:comments {W_NS}>
          <w:comment w:id="0"><w:p><w:unknownThing/></w:p></w:comment>
        </w:comments>
        """.encode("utf-8")
        package = make_package("<w:p><w:madeUp/></w:p>", {"word/comments.xml": comments})

        result = DocumentParser(package).parse()

        self.assertEqual(
            result.warnings,
            frozenset(
                [
                    "An unrecognised element was ignored: w:madeUp",
                    "An unrecognised element was ignored: w:unknownThing",
                ]
            ),
        )

    def test_missing_main_document_is_an_error(self) -> None:
        package = DocxPackage(raw_parts={"_rels/.rels": PACKAGE_RELS})

        with self.assertRaises(ValueError):
            DocumentParser(package).parse()


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
