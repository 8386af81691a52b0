"""Serialise HTML nodes and write the result to disk."""
from __future__ import annotations

import html
from pathlib import Path
from typing import List, Sequence

from docx_html.renderer.html_nodes import VOID_ELEMENTS, HtmlElement, HtmlNode, HtmlText


def write_html(nodes: Sequence[HtmlNode]) -> str:
    parts: List[str] = []
    for node in nodes:
        _write_node(node, parts)
    return "".join(parts)


def _write_node(node: HtmlNode, parts: List[str]) -> None:
    if isinstance(node, HtmlText):
        parts.append(html.escape(node.value, quote=False))
        return
    parts.append(_open_tag(node))
    if node.tag_name in VOID_ELEMENTS and not node.children:
        return
    for child in node.children:
        _write_node(child, parts)
    parts.append(f"</{node.tag_name}>")


def _open_tag(node: HtmlElement) -> str:
    attributes = "".join(f' {name}="{html.escape(value, quote=True)}"' for name, value in node.attributes.items())
    if node.tag_name in VOID_ELEMENTS and not node.children:
        return f"<{node.tag_name}{attributes} />"
    return f"<{node.tag_name}{attributes}>"


class HtmlRenderer:
    """Write converted HTML to ``output_path``, optionally as a complete page."""

    def __init__(self, output_path: Path) -> None:
        self._output_path = output_path

    def render(self, body: str, standalone: bool = False, title: str = "DOCX Preview") -> None:
        content = self._build_html(body, title) if standalone else body
        self._output_path.write_text(content, encoding="utf-8")

    def _build_html(self, body: str, title: str) -> str:
        return f"""<!DOCTYPE html>
<html lang=\"en\">
<head>
  <meta charset=\"utf-8\" />
  <title>{html.escape(title, quote=False)}</title>
</head>
<body>
{body}
</body>
</html>
"""
