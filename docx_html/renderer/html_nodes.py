"""HTML node tree produced by the converter, with the clean-up passes run before writing."""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Dict, List, Optional, Sequence, Tuple, Union

VOID_ELEMENTS = frozenset(["img", "br", "hr"])


@dataclass(slots=True)
class HtmlText:
    value: str


@dataclass(slots=True)
class HtmlElement:
    """An HTML element.

    ``tag_names`` lists every tag this element may be merged with; the first
    one is written out. A ``collapsible`` element is merged into a matching
    element immediately before it. An element with ``force_write`` set is
    kept even when it ends up with no children.
    """

    tag_names: Tuple[str, ...]
    attributes: Dict[str, str] = field(default_factory=dict)
    children: List["HtmlNode"] = field(default_factory=list)
    collapsible: bool = False
    force_write: bool = False
    separator: str = ""

    @property
    def tag_name(self) -> str:
        return self.tag_names[0]


HtmlNode = Union[HtmlText, HtmlElement]


def text(value: str) -> HtmlText:
    return HtmlText(value)


def element(
    tag_name: str,
    attributes: Optional[Dict[str, str]] = None,
    children: Sequence[HtmlNode] = (),
    *,
    force_write: bool = False,
) -> HtmlElement:
    return HtmlElement((tag_name,), dict(attributes or {}), list(children), force_write=force_write)


def collapsible_element(
    tag_name: str,
    attributes: Optional[Dict[str, str]] = None,
    children: Sequence[HtmlNode] = (),
) -> HtmlElement:
    return HtmlElement((tag_name,), dict(attributes or {}), list(children), collapsible=True)


def strip_empty(nodes: Sequence[HtmlNode]) -> List[HtmlNode]:
    """Drop empty text and any element left without content."""
    stripped: List[HtmlNode] = []
    for node in nodes:
        if isinstance(node, HtmlText):
            if node.value:
                stripped.append(node)
            continue
        children = strip_empty(node.children)
        if children or node.force_write or node.tag_name in VOID_ELEMENTS:
            stripped.append(replace(node, children=children))
    return stripped


def collapse(nodes: Sequence[HtmlNode]) -> List[HtmlNode]:
    """Merge collapsible elements into matching elements that directly precede them."""
    collapsed: List[HtmlNode] = []
    for node in nodes:
        _collapsing_add(collapsed, node)
    return collapsed


def _collapsing_add(collapsed: List[HtmlNode], node: HtmlNode) -> None:
    if isinstance(node, HtmlElement):
        node = replace(node, children=collapse(node.children))
    if not _try_collapse(collapsed, node):
        collapsed.append(node)


def _try_collapse(collapsed: List[HtmlNode], node: HtmlNode) -> bool:
    if not collapsed:
        return False
    last = collapsed[-1]
    if not isinstance(last, HtmlElement) or not isinstance(node, HtmlElement):
        return False
    if not node.collapsible or last.tag_name not in node.tag_names or last.attributes != node.attributes:
        return False
    if node.separator:
        last.children.append(HtmlText(node.separator))
    for child in node.children:
        _collapsing_add(last.children, child)
    return True
