"""GridTable: the pasted key-by-row chord grid and its theory-row addressing."""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass, field

from chordkey.chord_token import root_token
from chordkey.config import FIRST_THEORY_ROW

_LINE_RE = re.compile(r"\r?\n")
_CELL_RE = re.compile(r"[\t,;]")


def find_column(headers: Sequence[str], key_name: str) -> int | None:
    """Index of the first header equal to ``key_name`` (trimmed, any case)."""
    wanted = str(key_name).strip().upper()
    for idx, header in enumerate(headers):
        if str(header).strip().upper() == wanted:
            return idx
    return None


@dataclass(frozen=True)
class GridTable:
    """
    Header row of key names plus the data rows beneath it.

    Rows are addressed by *theory row*: the first data row is theory row
    ``first_row`` (5 by default), matching the spreadsheet the grid is
    pasted from. ``parse`` pads short rows to the header width; a table
    built directly may hold ragged rows, which read as empty cells.
    """

    headers: tuple[str, ...] = ()
    rows: tuple[tuple[str, ...], ...] = ()
    first_row: int = field(default=FIRST_THEORY_ROW, compare=False)

    @property
    def is_empty(self) -> bool:
        return not self.headers

    @property
    def header_roots(self) -> list[str]:
        """Root token of each header, "" where a header is not a note."""
        return [root_token(header) for header in self.headers]

    def find_column(self, key_name: str) -> int | None:
        return find_column(self.headers, key_name)

    def cell_at(self, theory_row: int, column: int) -> str:
        """
        Read one cell, or "" when the row or column is outside the grid.

        Args:
            theory_row: 1-based spreadsheet row (``first_row`` = first data row).
            column:     0-based column within the header row.
        """
        row = theory_row - self.first_row
        if row < 0 or row >= len(self.rows):
            return ""
        cells = self.rows[row]
        if column < 0 or column >= len(self.headers) or column >= len(cells):
            return ""
        return cells[column]


def parse(raw_text: str | None, first_row: int = FIRST_THEORY_ROW) -> GridTable:
    """
    Parse comma, semicolon or tab separated text into a :class:`GridTable`.

    Blank lines are skipped and every cell is trimmed. A line holding only
    delimiters (``"\\t\\t"``, ``",,"``) is a row of empty cells, not a blank
    line, so placeholder rows keep the theory-row numbering intact. The
    first remaining line is the header row. Empty input yields an empty
    table rather than an error; check :attr:`GridTable.is_empty`.
    """
    lines = [line for line in _LINE_RE.split(raw_text or "") if line.strip(" ")]
    if not lines:
        return GridTable(first_row=first_row)

    split = [tuple(cell.strip() for cell in _CELL_RE.split(line)) for line in lines]
    headers = split[0]
    width = len(headers)
    rows = tuple(cells + ("",) * (width - len(cells)) for cells in split[1:])
    return GridTable(headers=headers, rows=rows, first_row=first_row)
