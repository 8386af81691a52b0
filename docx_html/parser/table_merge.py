"""Turn vertically merged table cells into rowspans."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set, Tuple

from docx_html.model.elements import DocumentElement, TableCell, TableRow
from docx_html.parser.read_result import ReadResult


@dataclass(slots=True)
class UnmergedTableCell:
    """A ``w:tc`` as read, before vertical merges are resolved.

    ``vmerge`` is true when the cell continues the cell above it.
    """

    vmerge: bool
    colspan: int = 1
    children: List[DocumentElement] = field(default_factory=list)

    def to_table_cell(self, rowspan: int = 1) -> TableCell:
        return TableCell(children=self.children, rowspan=rowspan, colspan=self.colspan)


Position = Tuple[int, int]


def calculate_rowspans(rows: List[DocumentElement]) -> ReadResult:
    """Resolve the rows of one table into rows of final cells.

    Columns are tracked by accumulated colspan, not by cell index, so a
    continuation cell is attached to whichever cell last started in the same
    grid column. A continuation with nothing above it is kept as a fresh cell.
    """
    error = _check_table_rows(rows)
    if error is not None:
        return ReadResult.with_warning(_materialise_cells(rows), error)

    rowspans: Dict[Position, int] = {}
    merged: Set[Position] = set()
    last_cell_for_column: Dict[int, Position] = {}

    for row_index, row in enumerate(rows):
        column_index = 0
        for cell_index, cell in enumerate(row.cells):
            spanning_cell = last_cell_for_column.get(column_index)
            position = (row_index, cell_index)
            if cell.vmerge and spanning_cell is not None:
                rowspans[spanning_cell] += 1
                merged.add(position)
            else:
                last_cell_for_column[column_index] = position
                rowspans[position] = 1
            column_index += cell.colspan

    result: List[DocumentElement] = []
    for row_index, row in enumerate(rows):
        cells = [
            cell.to_table_cell(rowspans[(row_index, cell_index)])
            for cell_index, cell in enumerate(row.cells)
            if (row_index, cell_index) not in merged
        ]
        result.append(TableRow(cells=cells, is_header=row.is_header))
    return ReadResult.success(result)


def _check_table_rows(rows: List[DocumentElement]) -> Optional[str]:
    for row in rows:
        if not isinstance(row, TableRow):
            return "unexpected non-row element in table, cell merging may be incorrect"
        for cell in row.cells:
            if not isinstance(cell, UnmergedTableCell):
                return "unexpected non-cell element in table row, cell merging may be incorrect"
    return None


def _materialise_cells(rows: List[DocumentElement]) -> List[DocumentElement]:
    """Leave the rows as they are, apart from giving unmerged cells their final form."""
    result: List[DocumentElement] = []
    for row in rows:
        if isinstance(row, TableRow) and any(isinstance(cell, UnmergedTableCell) for cell in row.cells):
            cells = [cell.to_table_cell() if isinstance(cell, UnmergedTableCell) else cell for cell in row.cells]
            row = TableRow(cells=cells, is_header=row.is_header)
        result.append(row)
    return result
