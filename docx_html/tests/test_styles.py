"""Unit tests for style parsing edge cases."""
import unittest
from xml.etree import ElementTree as ET

from docx_html.model.elements import Style
from docx_html.parser.styles_parser import StylesParser


STYLES_XML = """
<w:styles xmlns:w="http://schemas.openxmlformats.org/wordprocessingml/2006/main">
  <w:style w:type="paragraph" w:styleId="Heading1">
    <w:name w:val="heading 1"/>
  </w:style>
  <w:style w:type="character" w:styleId="Heading1">
    <w:name w:val="Heading 1 Char"/>
  </w:style>
  <w:style w:type="table" w:styleId="TableGrid">
    <w:name w:val="Table Grid"/>
  </w:style>
  <w:style w:type="numbering" w:styleId="BulletList">
    <w:name w:val="Bullet List"/>
    <w:pPr><w:numPr><w:numId w:val="7"/></w:numPr></w:pPr>
  </w:style>
  <w:style w:type="paragraph" w:styleId="Unnamed"/>
</w:styles>
"""


class StylesParserTest(unittest.TestCase):
    """Ensure styles land in the lookup table for their type."""

    def setUp(self) -> None:
        self.catalog = StylesParser(ET.ElementTree(ET.fromstring(STYLES_XML))).parse()

    def test_styles_are_looked_up_per_type(self) -> None:
        paragraph_style = self.catalog.find_paragraph_style_by_id("Heading1")
        character_style = self.catalog.find_character_style_by_id("Heading1")

        assert paragraph_style is not None and character_style is not None
        self.assertEqual(paragraph_style.name, "heading 1")
        self.assertEqual(character_style.name, "Heading 1 Char")
        self.assertEqual(self.catalog.find_table_style_by_id("TableGrid").name, "Table Grid")
        self.assertIsNone(self.catalog.find_table_style_by_id("Heading1"))

    def test_numbering_styles_map_to_num_id(self) -> None:
        self.assertEqual(self.catalog.find_numbering_style_by_id("BulletList"), "7")
        self.assertIsNone(self.catalog.find_paragraph_style_by_id("BulletList"))

    def test_style_without_name(self) -> None:
        style = self.catalog.find_paragraph_style_by_id("Unnamed")
        assert style is not None
        self.assertIsNone(style.name)
        self.assertEqual(style.describe(), "Style ID: Unnamed")

    def test_missing_styles_part_gives_empty_catalog(self) -> None:
        catalog = StylesParser(None).parse()
        self.assertIsNone(catalog.find_paragraph_style_by_id("Heading1"))

    def test_styles_compare_by_id(self) -> None:
        self.assertEqual(Style("Heading1", "heading 1"), Style("Heading1"))
        self.assertEqual(Style("Heading1", "heading 1").describe(), "'heading 1' (Style ID: Heading1)")


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
