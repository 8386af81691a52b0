"""Rules mapping document styles onto HTML paths."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, List, Optional, Sequence, Tuple, TypeVar

from docx_html.model.elements import Break, BreakType, Paragraph, Run, Style, Table
from docx_html.renderer.html_path import HtmlPath, path, path_element

E = TypeVar("E")


def _style_matches(style: Optional[Style], style_id: Optional[str], style_name: Optional[str]) -> bool:
    if style_id is not None and (style is None or style.style_id != style_id):
        return False
    if style_name is not None:
        if style is None or style.name is None or style.name.upper() != style_name.upper():
            return False
    return True


@dataclass(frozen=True)
class ParagraphMatcher:
    style_id: Optional[str] = None
    style_name: Optional[str] = None
    numbering_level: Optional[str] = None
    is_ordered: Optional[bool] = None

    def matches(self, paragraph: Paragraph) -> bool:
        if not _style_matches(paragraph.style, self.style_id, self.style_name):
            return False
        if self.numbering_level is not None:
            numbering = paragraph.numbering
            if numbering is None or numbering.level_index != self.numbering_level:
                return False
            if self.is_ordered is not None and numbering.is_ordered != self.is_ordered:
                return False
        return True


@dataclass(frozen=True)
class RunMatcher:
    style_id: Optional[str] = None
    style_name: Optional[str] = None

    def matches(self, run: Run) -> bool:
        return _style_matches(run.style, self.style_id, self.style_name)


@dataclass(frozen=True)
class TableMatcher:
    style_id: Optional[str] = None
    style_name: Optional[str] = None

    def matches(self, table: Table) -> bool:
        return _style_matches(table.style, self.style_id, self.style_name)


@dataclass(frozen=True)
class BreakMatcher:
    break_type: BreakType

    def matches(self, break_element: Break) -> bool:
        return break_element.break_type == self.break_type


@dataclass(frozen=True)
class Rule(Generic[E]):
    matcher: E
    html_path: HtmlPath


def _find(rules: Sequence[Rule], element: object) -> Optional[HtmlPath]:
    for rule in rules:
        if rule.matcher.matches(element):
            return rule.html_path
    return None


@dataclass(frozen=True)
class StyleMap:
    """Ordered rules; the first rule whose matcher accepts an element wins."""

    paragraph_rules: Tuple[Rule, ...] = ()
    run_rules: Tuple[Rule, ...] = ()
    table_rules: Tuple[Rule, ...] = ()
    break_rules: Tuple[Rule, ...] = ()
    bold: Optional[HtmlPath] = None
    italic: Optional[HtmlPath] = None
    underline: Optional[HtmlPath] = None
    strikethrough: Optional[HtmlPath] = None
    small_caps: Optional[HtmlPath] = None
    comment_reference: Optional[HtmlPath] = None

    def get_paragraph_html_path(self, paragraph: Paragraph) -> Optional[HtmlPath]:
        return _find(self.paragraph_rules, paragraph)

    def get_run_html_path(self, run: Run) -> Optional[HtmlPath]:
        return _find(self.run_rules, run)

    def get_table_html_path(self, table: Table) -> Optional[HtmlPath]:
        return _find(self.table_rules, table)

    def get_break_html_path(self, break_element: Break) -> Optional[HtmlPath]:
        return _find(self.break_rules, break_element)

    def then(self, fallback: "StyleMap") -> "StyleMap":
        """Combine with a lower-priority map: rules from ``self`` are tried first."""
        return StyleMap(
            paragraph_rules=self.paragraph_rules + fallback.paragraph_rules,
            run_rules=self.run_rules + fallback.run_rules,
            table_rules=self.table_rules + fallback.table_rules,
            break_rules=self.break_rules + fallback.break_rules,
            bold=_first(self.bold, fallback.bold),
            italic=_first(self.italic, fallback.italic),
            underline=_first(self.underline, fallback.underline),
            strikethrough=_first(self.strikethrough, fallback.strikethrough),
            small_caps=_first(self.small_caps, fallback.small_caps),
            comment_reference=_first(self.comment_reference, fallback.comment_reference),
        )


def _first(*paths: Optional[HtmlPath]) -> Optional[HtmlPath]:
    for html_path in paths:
        if html_path is not None:
            return html_path
    return None


def _list_rules() -> List[Rule]:
    rules: List[Rule] = []
    for is_ordered, tag_name in ((False, "ul"), (True, "ol")):
        for level in range(5):
            elements = []
            for _ in range(level):
                elements.extend([path_element("ul", "ol"), path_element("li")])
            elements.extend([path_element(tag_name), path_element("li", fresh=True)])
            rules.append(
                Rule(ParagraphMatcher(numbering_level=str(level), is_ordered=is_ordered), path(*elements))
            )
    return rules


def _default_style_map() -> StyleMap:
    fresh_p = path(path_element("p", fresh=True))
    paragraph_rules: List[Rule] = []
    for level in range(1, 7):
        heading = path(path_element(f"h{level}", fresh=True))
        paragraph_rules.append(Rule(ParagraphMatcher(style_name=f"heading {level}"), heading))
        paragraph_rules.append(Rule(ParagraphMatcher(style_id=f"Heading{level}"), heading))
    for style_name in ("footnote text", "endnote text", "annotation text"):
        paragraph_rules.append(Rule(ParagraphMatcher(style_name=style_name), fresh_p))
    paragraph_rules.extend(_list_rules())
    paragraph_rules.append(Rule(ParagraphMatcher(style_name="Normal"), fresh_p))

    run_rules = [
        Rule(RunMatcher(style_name="footnote reference"), path()),
        Rule(RunMatcher(style_name="endnote reference"), path()),
        Rule(RunMatcher(style_name="annotation reference"), path()),
        Rule(RunMatcher(style_name="Strong"), path(path_element("strong"))),
    ]
    return StyleMap(paragraph_rules=tuple(paragraph_rules), run_rules=tuple(run_rules))


DEFAULT_STYLE_MAP = _default_style_map()
