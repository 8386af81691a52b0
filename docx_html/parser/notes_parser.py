"""Parse footnotes.xml, endnotes.xml and comments.xml."""
from __future__ import annotations

from typing import List, Optional
from xml.etree import ElementTree as ET

from docx_html.model.elements import Comment, Note, NoteType
from docx_html.parser.body_reader import BodyXmlReader
from docx_html.parser.read_result import Result
from docx_html.utils.xml_utils import get_attr, prefixed_name

# Separator notes are layout furniture rather than content.
_IGNORED_NOTE_TYPES = frozenset(["separator", "continuationSeparator", "continuationNotice"])


class NotesParser:
    """Read the notes of one type, using a body reader bound to the notes part."""

    def __init__(self, note_type: NoteType, body_reader: BodyXmlReader) -> None:
        self._note_type = note_type
        self._body_reader = body_reader

    def parse(self, notes_xml: Optional[ET.ElementTree]) -> Result[List[Note]]:
        if notes_xml is None:
            return Result([])
        tag_name = f"w:{self._note_type.value}"
        notes: List[Note] = []
        warnings: set = set()
        for note_el in notes_xml.getroot():
            if prefixed_name(note_el.tag) != tag_name:
                continue
            if get_attr(note_el, "w:type") in _IGNORED_NOTE_TYPES:
                continue
            body = self._body_reader.read_elements(note_el).append_extra()
            warnings.update(body.warnings)
            notes.append(Note(note_type=self._note_type, note_id=get_attr(note_el, "w:id") or "", body=list(body.elements)))
        return Result(notes, frozenset(warnings))


class CommentsParser:
    """Read comments together with their authors."""

    def __init__(self, body_reader: BodyXmlReader) -> None:
        self._body_reader = body_reader

    def parse(self, comments_xml: Optional[ET.ElementTree]) -> Result[List[Comment]]:
        if comments_xml is None:
            return Result([])
        comments: List[Comment] = []
        warnings: set = set()
        for comment_el in comments_xml.getroot():
            if prefixed_name(comment_el.tag) != "w:comment":
                continue
            body = self._body_reader.read_elements(comment_el).append_extra()
            warnings.update(body.warnings)
            comments.append(
                Comment(
                    comment_id=get_attr(comment_el, "w:id") or "",
                    body=list(body.elements),
                    author_name=_blank_to_none(get_attr(comment_el, "w:author")),
                    author_initials=_blank_to_none(get_attr(comment_el, "w:initials")),
                )
            )
        return Result(comments, frozenset(warnings))


def _blank_to_none(value: Optional[str]) -> Optional[str]:
    if value is None or not value.strip():
        return None
    return value
