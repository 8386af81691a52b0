"""Parse numbering.xml into numbering model definitions."""
from __future__ import annotations

from typing import Dict, Optional
from xml.etree import ElementTree as ET

from docx_html.model.elements import NumberingLevel
from docx_html.model.numbering_model import (
    AbstractNumberingDefinition,
    NumberingCatalog,
    NumberingInstance,
)
from docx_html.model.style_model import StylesCatalog
from docx_html.utils.xml_utils import find_child, get_attr, prefixed_name


class NumberingParser:
    """Parser for numbering definitions defined in numbering.xml."""

    def __init__(self, numbering_xml: Optional[ET.ElementTree], styles: Optional[StylesCatalog] = None) -> None:
        self._numbering_xml = numbering_xml
        self._styles = styles or StylesCatalog.empty()

    def parse(self) -> NumberingCatalog:
        if self._numbering_xml is None:
            return NumberingCatalog.empty()

        root = self._numbering_xml.getroot()
        abstracts = self._parse_abstract_nums(root)
        instances = self._parse_nums(root)
        numbering_styles: Dict[str, str] = {}
        for abstract in abstracts.values():
            if abstract.style_link is None:
                continue
            num_id = self._styles.find_numbering_style_by_id(abstract.style_link)
            if num_id is not None:
                numbering_styles[abstract.style_link] = num_id
        return NumberingCatalog(abstracts=abstracts, instances=instances, numbering_styles=numbering_styles)

    # ------------------------------------------------------------------
    def _parse_abstract_nums(self, root: ET.Element) -> Dict[str, AbstractNumberingDefinition]:
        abstracts: Dict[str, AbstractNumberingDefinition] = {}
        for abstract_el in self._children(root, "w:abstractNum"):
            abstract_id = get_attr(abstract_el, "w:abstractNumId")
            if abstract_id is None:
                continue
            abstracts[abstract_id] = AbstractNumberingDefinition(
                abstract_num_id=abstract_id,
                levels=self._parse_levels(abstract_el),
                style_link=self._get_val(abstract_el, "w:numStyleLink"),
            )
        return abstracts

    def _parse_levels(self, abstract_el: ET.Element) -> Dict[str, NumberingLevel]:
        levels: Dict[str, NumberingLevel] = {}
        for lvl_el in self._children(abstract_el, "w:lvl"):
            level_index = get_attr(lvl_el, "w:ilvl")
            if level_index is None:
                continue
            num_format = self._get_val(lvl_el, "w:numFmt")
            levels[level_index] = NumberingLevel(
                level_index=level_index,
                is_ordered=num_format != "bullet",
                num_format=num_format,
                start=self._to_int(self._get_val(lvl_el, "w:start")),
            )
        return levels

    def _parse_nums(self, root: ET.Element) -> Dict[str, NumberingInstance]:
        instances: Dict[str, NumberingInstance] = {}
        for num_el in self._children(root, "w:num"):
            num_id = get_attr(num_el, "w:numId")
            abstract_num_id = self._get_val(num_el, "w:abstractNumId")
            if num_id is None or abstract_num_id is None:
                continue
            start_overrides: Dict[str, int] = {}
            for override_el in self._children(num_el, "w:lvlOverride"):
                level_index = get_attr(override_el, "w:ilvl")
                start_override = self._to_int(self._get_val(override_el, "w:startOverride"))
                if level_index is not None and start_override is not None:
                    start_overrides[level_index] = start_override
            instances[num_id] = NumberingInstance(
                num_id=num_id,
                abstract_num_id=abstract_num_id,
                start_overrides=start_overrides,
            )
        return instances

    # ------------------------------------------------------------------
    def _children(self, element: ET.Element, name: str):
        return [child for child in element if prefixed_name(child.tag) == name]

    def _get_val(self, element: ET.Element, child_name: str) -> Optional[str]:
        return get_attr(find_child(element, child_name), "w:val")

    def _to_int(self, value: Optional[str]) -> Optional[int]:
        if value is None:
            return None
        try:
            return int(value)
        except ValueError:
            return None
