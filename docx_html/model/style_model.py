"""Style model captures Word style definitions keyed by type and identifier."""
from __future__ import annotations

from typing import Dict, Mapping, Optional

from docx_html.model.elements import Style


class StylesCatalog:
    """Collection of styles read from styles.xml.

    Word keeps separate identifier spaces per style type, so a paragraph
    style and a character style may share an id.
    """

    def __init__(
        self,
        paragraph_styles: Optional[Mapping[str, Style]] = None,
        character_styles: Optional[Mapping[str, Style]] = None,
        table_styles: Optional[Mapping[str, Style]] = None,
        numbering_styles: Optional[Mapping[str, str]] = None,
    ) -> None:
        self._paragraph_styles: Dict[str, Style] = dict(paragraph_styles or {})
        self._character_styles: Dict[str, Style] = dict(character_styles or {})
        self._table_styles: Dict[str, Style] = dict(table_styles or {})
        # Numbering styles only matter for the numId they point at.
        self._numbering_styles: Dict[str, str] = dict(numbering_styles or {})

    @classmethod
    def empty(cls) -> "StylesCatalog":
        return cls()

    def find_paragraph_style_by_id(self, style_id: str) -> Optional[Style]:
        return self._paragraph_styles.get(style_id)

    def find_character_style_by_id(self, style_id: str) -> Optional[Style]:
        return self._character_styles.get(style_id)

    def find_table_style_by_id(self, style_id: str) -> Optional[Style]:
        return self._table_styles.get(style_id)

    def find_numbering_style_by_id(self, style_id: str) -> Optional[str]:
        """Return the numId a numbering style refers to."""
        return self._numbering_styles.get(style_id)
