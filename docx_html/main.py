"""Entry-point for the DOCX to HTML pipeline."""
from __future__ import annotations

import argparse
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Generic, List, Optional, Sequence, TypeVar, Union

from docx_html.model.elements import Document, DocumentElement, Paragraph, Tab, Text
from docx_html.parser.document_parser import DocumentParser
from docx_html.parser.docx_loader import DocxPackage
from docx_html.parser.read_result import Result
from docx_html.renderer.document_to_html import DocumentToHtml
from docx_html.renderer.html_nodes import collapse, strip_empty
from docx_html.renderer.html_renderer import HtmlRenderer, write_html
from docx_html.renderer.images import ImageConverter, data_uri
from docx_html.renderer.options import DocumentToHtmlOptions
from docx_html.renderer.style_map import DEFAULT_STYLE_MAP, StyleMap
from docx_html.utils.debug import DebugDumper
from docx_html.utils.logger import configure_logging, get_logger

LOGGER = get_logger(__name__)

T = TypeVar("T")
Source = Union[str, Path, BinaryIO]


@dataclass(frozen=True)
class ConversionResult(Generic[T]):
    """The converted value and the warnings raised along the way, sorted."""

    value: T
    messages: List[str]

    @classmethod
    def from_result(cls, result: Result[T]) -> "ConversionResult[T]":
        return cls(result.value, sorted(result.warnings))


def read_document(source: Source) -> Result[Document]:
    """Load a DOCX package and read it into a document tree."""
    package = DocxPackage.load(source)
    return DocumentParser(package).parse()


def convert_to_html(
    source: Source,
    *,
    style_map: Optional[StyleMap] = None,
    include_default_style_map: bool = True,
    id_prefix: str = "",
    preserve_empty_paragraphs: bool = False,
    toc_class: str = "toc",
    image_converter: ImageConverter = data_uri,
) -> ConversionResult[str]:
    """Convert a DOCX file into an HTML fragment."""
    return convert_document_to_html(
        read_document(source),
        style_map=style_map,
        include_default_style_map=include_default_style_map,
        id_prefix=id_prefix,
        preserve_empty_paragraphs=preserve_empty_paragraphs,
        toc_class=toc_class,
        image_converter=image_converter,
    )


def convert_document_to_html(
    document: Result[Document],
    *,
    style_map: Optional[StyleMap] = None,
    include_default_style_map: bool = True,
    id_prefix: str = "",
    preserve_empty_paragraphs: bool = False,
    toc_class: str = "toc",
    image_converter: ImageConverter = data_uri,
) -> ConversionResult[str]:
    """Convert an already read document, keeping the warnings raised while reading it."""
    options = DocumentToHtmlOptions(
        style_map=_effective_style_map(style_map, include_default_style_map),
        id_prefix=id_prefix,
        preserve_empty_paragraphs=preserve_empty_paragraphs,
        toc_class=toc_class,
        image_converter=image_converter,
    )
    nodes = DocumentToHtml.convert_document(document.value, options)
    html = write_html(collapse(strip_empty(nodes.value)))
    return ConversionResult.from_result(Result(html, document.warnings | nodes.warnings))


def _effective_style_map(style_map: Optional[StyleMap], include_default_style_map: bool) -> StyleMap:
    user_style_map = style_map or StyleMap()
    if include_default_style_map:
        return user_style_map.then(DEFAULT_STYLE_MAP)
    return user_style_map


def extract_raw_text(source: Source) -> ConversionResult[str]:
    """Return the document's text with a blank line after every paragraph."""
    document = read_document(source)
    return ConversionResult.from_result(document.map(lambda doc: _raw_text(doc.children)))


def _raw_text(elements: Sequence[DocumentElement]) -> str:
    parts: List[str] = []
    for document_element in elements:
        if isinstance(document_element, Text):
            parts.append(document_element.value)
        elif isinstance(document_element, Tab):
            parts.append("\t")
        elif isinstance(document_element, Paragraph):
            parts.append(_raw_text(document_element.children) + "\n\n")
        else:
            parts.append(_raw_text(getattr(document_element, "children", ())))
    return "".join(parts)


def main(
    docx_file: str,
    output_dir: Optional[str] = None,
    *,
    standalone: bool = False,
    debug_dir: Optional[str] = None,
    **options,
) -> Path:
    """Run the DOCX -> document tree -> HTML pipeline and write ``<stem>.html``."""
    docx_path = Path(docx_file).resolve()
    if not docx_path.exists():
        raise FileNotFoundError(f"DOCX file not found: {docx_path}")

    LOGGER.info("Converting %s", docx_path.name)
    document = read_document(docx_path)
    if debug_dir is not None:
        DebugDumper(Path(debug_dir)).dump(document.value)

    result = convert_document_to_html(document, **options)
    for message in result.messages:
        LOGGER.warning(message)

    output_path = Path(output_dir).resolve() if output_dir is not None else docx_path.parent
    output_path.mkdir(parents=True, exist_ok=True)
    html_path = output_path / f"{docx_path.stem}.html"
    LOGGER.info("Writing HTML to %s", html_path)
    HtmlRenderer(html_path).render(result.value, standalone=standalone, title=docx_path.stem)
    return html_path


def cli(argv: Optional[Sequence[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Convert DOCX files into clean semantic HTML")
    parser.add_argument("docx_file", help="Path to the input .docx file")
    parser.add_argument("--output", help="Directory to write the generated HTML")
    parser.add_argument("--id-prefix", default="", help="Prefix for every generated anchor id")
    parser.add_argument(
        "--preserve-empty-paragraphs", action="store_true", help="Keep paragraphs that have no content"
    )
    parser.add_argument("--toc-class", default="toc", help="CSS class for table of contents containers")
    parser.add_argument(
        "--no-default-style-map", action="store_true", help="Do not apply the built-in style mapping rules"
    )
    parser.add_argument("--standalone", action="store_true", help="Wrap the output in a complete HTML page")
    parser.add_argument("--debug-dir", help="Directory to dump the document tree as JSON")
    parser.add_argument("--verbose", action="store_true", help="Log debugging details")

    args = parser.parse_args(argv)
    configure_logging(logging.DEBUG if args.verbose else logging.INFO)
    main(
        args.docx_file,
        args.output,
        standalone=args.standalone,
        debug_dir=args.debug_dir,
        id_prefix=args.id_prefix,
        preserve_empty_paragraphs=args.preserve_empty_paragraphs,
        toc_class=args.toc_class,
        include_default_style_map=not args.no_default_style_map,
    )


if __name__ == "__main__":  # pragma: no cover
    cli()
