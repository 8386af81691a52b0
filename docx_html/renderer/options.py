"""Configuration consumed by the HTML converter."""
from __future__ import annotations

from dataclasses import dataclass

from docx_html.renderer.images import ImageConverter, data_uri
from docx_html.renderer.style_map import DEFAULT_STYLE_MAP, StyleMap


@dataclass(frozen=True)
class DocumentToHtmlOptions:
    """Options for a single conversion.

    ``id_prefix`` is prepended to every generated anchor id so that several
    converted documents can share one page.
    """

    style_map: StyleMap = DEFAULT_STYLE_MAP
    id_prefix: str = ""
    preserve_empty_paragraphs: bool = False
    toc_class: str = "toc"
    image_converter: ImageConverter = data_uri
