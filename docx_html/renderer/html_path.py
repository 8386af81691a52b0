"""Paths of HTML elements that style map rules wrap converted content in."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from docx_html.renderer.html_nodes import HtmlElement, HtmlNode

NodeGenerator = Callable[[], List[HtmlNode]]


@dataclass(frozen=True)
class HtmlPathElement:
    tag_names: Tuple[str, ...]
    attributes: Dict[str, str] = field(default_factory=dict)
    fresh: bool = False
    separator: str = ""

    def wrap_nodes(self, nodes: List[HtmlNode], force_write: bool = False) -> HtmlElement:
        return HtmlElement(
            tag_names=self.tag_names,
            attributes=dict(self.attributes),
            children=nodes,
            collapsible=not self.fresh,
            force_write=force_write,
            separator=self.separator,
        )


class HtmlPath:
    """Wraps generated nodes in zero or more nested elements, outermost first."""

    def __init__(self, elements: Sequence[HtmlPathElement]) -> None:
        self.elements = tuple(elements)

    def wrap(self, generate_nodes: NodeGenerator, force_write: bool = False) -> List[HtmlNode]:
        nodes = generate_nodes()
        for index, path_element in enumerate(reversed(self.elements)):
            nodes = [path_element.wrap_nodes(nodes, force_write=force_write and index == 0)]
        return nodes

    def __eq__(self, other: object) -> bool:
        return isinstance(other, HtmlPath) and type(other) is type(self) and other.elements == self.elements

    def __repr__(self) -> str:
        return f"HtmlPath({list(self.elements)!r})"


class _Ignore(HtmlPath):
    """Drops the content entirely without generating it."""

    def __init__(self) -> None:
        super().__init__(())

    def wrap(self, generate_nodes: NodeGenerator, force_write: bool = False) -> List[HtmlNode]:
        return []

    def __repr__(self) -> str:
        return "IGNORE"


EMPTY = HtmlPath(())
IGNORE = _Ignore()


def path_element(
    *tag_names: str,
    attributes: Optional[Dict[str, str]] = None,
    fresh: bool = False,
    separator: str = "",
) -> HtmlPathElement:
    return HtmlPathElement(tuple(tag_names), dict(attributes or {}), fresh=fresh, separator=separator)


def path(*elements: HtmlPathElement) -> HtmlPath:
    return HtmlPath(elements)


def element(tag_name: str, attributes: Optional[Dict[str, str]] = None, fresh: bool = True) -> HtmlPath:
    """A single element path; fresh unless stated otherwise, so it is never merged."""
    return HtmlPath([path_element(tag_name, attributes=attributes, fresh=fresh)])


def collapsible_element(tag_name: str, attributes: Optional[Dict[str, str]] = None) -> HtmlPath:
    return element(tag_name, attributes, fresh=False)
