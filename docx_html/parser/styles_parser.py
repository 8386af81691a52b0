"""Extract style definitions from styles.xml and produce a catalog."""
from __future__ import annotations

from typing import Dict, Optional
from xml.etree import ElementTree as ET

from docx_html.model.elements import Style
from docx_html.model.style_model import StylesCatalog
from docx_html.utils.logger import get_logger
from docx_html.utils.xml_utils import find_child, get_attr, prefixed_name

LOGGER = get_logger(__name__)


class StylesParser:
    """Parse Word styles into per-type lookup tables."""

    def __init__(self, styles_xml: Optional[ET.ElementTree]) -> None:
        self._styles_xml = styles_xml

    def parse(self) -> StylesCatalog:
        """Parse the XML tree and return a catalog."""
        if self._styles_xml is None:
            return StylesCatalog.empty()

        paragraph_styles: Dict[str, Style] = {}
        character_styles: Dict[str, Style] = {}
        table_styles: Dict[str, Style] = {}
        numbering_styles: Dict[str, str] = {}
        buckets = {
            "paragraph": paragraph_styles,
            "character": character_styles,
            "table": table_styles,
        }

        root = self._styles_xml.getroot()
        for style_el in root:
            if prefixed_name(style_el.tag) != "w:style":
                continue
            style_id = get_attr(style_el, "w:styleId")
            if not style_id:
                continue
            style_type = get_attr(style_el, "w:type") or "paragraph"
            if style_type == "numbering":
                num_id = self._get_val(find_child(style_el, "w:pPr"), "w:numPr", "w:numId")
                if num_id is not None:
                    numbering_styles[style_id] = num_id
                continue
            bucket = buckets.get(style_type)
            if bucket is None:
                LOGGER.debug("Skipping style %s of unsupported type %s", style_id, style_type)
                continue
            name = get_attr(find_child(style_el, "w:name"), "w:val")
            bucket[style_id] = Style(style_id=style_id, name=name)

        return StylesCatalog(
            paragraph_styles=paragraph_styles,
            character_styles=character_styles,
            table_styles=table_styles,
            numbering_styles=numbering_styles,
        )

    def _get_val(self, element: Optional[ET.Element], *path: str) -> Optional[str]:
        for name in path:
            element = find_child(element, name)
        return get_attr(element, "w:val")
