"""In-memory representation of a document body read from WordprocessingML."""
from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import BinaryIO, Callable, ContextManager, Dict, List, Optional, Sequence, Union


class BreakType(enum.Enum):
    LINE = "line"
    PAGE = "page"
    COLUMN = "column"


class NoteType(enum.Enum):
    FOOTNOTE = "footnote"
    ENDNOTE = "endnote"


class VerticalAlignment(enum.Enum):
    BASELINE = "baseline"
    SUPERSCRIPT = "superscript"
    SUBSCRIPT = "subscript"


@dataclass(frozen=True, slots=True, eq=False)
class Style:
    """A style referenced from the body. Two styles are the same style if their ids match."""

    style_id: str
    name: Optional[str] = None

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Style):
            return NotImplemented
        return self.style_id == other.style_id

    def __hash__(self) -> int:
        return hash(self.style_id)

    def describe(self) -> str:
        style_id_description = f"Style ID: {self.style_id}"
        if self.name is None:
            return style_id_description
        return f"'{self.name}' ({style_id_description})"


@dataclass(frozen=True, slots=True)
class NumberingLevel:
    """Resolved numbering reference applied to a paragraph."""

    level_index: str
    is_ordered: bool
    num_format: Optional[str] = None
    start: Optional[int] = None


@dataclass(frozen=True, slots=True)
class ParagraphIndent:
    start: Optional[str] = None
    end: Optional[str] = None
    first_line: Optional[str] = None
    hanging: Optional[str] = None


@dataclass(slots=True)
class Text:
    value: str


@dataclass(slots=True)
class Tab:
    pass


@dataclass(slots=True)
class Break:
    break_type: BreakType


@dataclass(slots=True)
class Run:
    """Represents a contiguous run of content with associated inline formatting."""

    children: List["DocumentElement"] = field(default_factory=list)
    style: Optional[Style] = None
    is_bold: bool = False
    is_italic: bool = False
    is_underline: bool = False
    is_strikethrough: bool = False
    is_small_caps: bool = False
    vertical_alignment: VerticalAlignment = VerticalAlignment.BASELINE


@dataclass(slots=True)
class Paragraph:
    """High-level block element for paragraphs in the document body."""

    children: List["DocumentElement"] = field(default_factory=list)
    style: Optional[Style] = None
    numbering: Optional[NumberingLevel] = None
    indent: ParagraphIndent = field(default_factory=ParagraphIndent)


@dataclass(slots=True)
class Hyperlink:
    """A link to either an external ``href`` or an in-document bookmark ``anchor``."""

    children: List["DocumentElement"] = field(default_factory=list)
    href: Optional[str] = None
    anchor: Optional[str] = None
    target_frame: Optional[str] = None


@dataclass(slots=True)
class Bookmark:
    name: str


@dataclass(slots=True)
class NoteReference:
    note_type: NoteType
    note_id: str


@dataclass(slots=True)
class CommentReference:
    comment_id: str


ImageOpener = Callable[[], ContextManager[BinaryIO]]


@dataclass(slots=True)
class Image:
    """An inline or anchored image.

    ``open`` is called only when the image is rendered. It returns a binary
    stream to be used as a context manager and raises ``OSError`` if the
    image data cannot be found.
    """

    open: ImageOpener
    alt_text: Optional[str] = None
    content_type: Optional[str] = None


@dataclass(slots=True)
class TableCell:
    children: List["DocumentElement"] = field(default_factory=list)
    rowspan: int = 1
    colspan: int = 1


@dataclass(slots=True)
class TableRow:
    cells: List["DocumentElement"] = field(default_factory=list)
    is_header: bool = False

    @property
    def children(self) -> List["DocumentElement"]:
        return self.cells


@dataclass(slots=True)
class Table:
    """Tabular structure extracted from Word tables."""

    rows: List["DocumentElement"] = field(default_factory=list)
    style: Optional[Style] = None

    @property
    def children(self) -> List["DocumentElement"]:
        return self.rows


@dataclass(slots=True)
class TableOfContents:
    children: List["DocumentElement"] = field(default_factory=list)


@dataclass(slots=True)
class Note:
    note_type: NoteType
    note_id: str
    body: List["DocumentElement"] = field(default_factory=list)


@dataclass(slots=True)
class Comment:
    comment_id: str
    body: List["DocumentElement"] = field(default_factory=list)
    author_name: Optional[str] = None
    author_initials: Optional[str] = None


DocumentElement = Union[
    Text,
    Tab,
    Break,
    Run,
    Paragraph,
    Hyperlink,
    Bookmark,
    NoteReference,
    CommentReference,
    Image,
    Table,
    TableRow,
    TableCell,
    TableOfContents,
    Note,
    Comment,
]


class Notes:
    """Footnotes and endnotes keyed by type and identifier."""

    def __init__(self, notes: Sequence[Note] = ()) -> None:
        self._notes: Dict[tuple, Note] = {(note.note_type, note.note_id): note for note in notes}

    def find_note(self, note_type: NoteType, note_id: str) -> Optional[Note]:
        return self._notes.get((note_type, note_id))

    def __iter__(self):
        return iter(self._notes.values())

    def __len__(self) -> int:
        return len(self._notes)


@dataclass(slots=True)
class Document:
    """Structured representation of the whole document prior to conversion."""

    children: List[DocumentElement] = field(default_factory=list)
    notes: Notes = field(default_factory=Notes)
    comments: List[Comment] = field(default_factory=list)
