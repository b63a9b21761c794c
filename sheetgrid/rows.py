"""Rows, their cells, and the in-memory store that keeps rows of a sheet."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterator, Optional

from .richtext import RichTextRun

CM_TO_PS = 28.3464567


class RowNotFoundError(LookupError):
    """Raised when a cell store holds no row under the requested key."""

    def __init__(self, key: str, reason: str = "No such row") -> None:
        super().__init__(f"row {key!r} not found: {reason}")
        self.key = key
        self.reason = reason


@dataclass
class SheetState:
    """The parts of a sheet that its rows read and update."""

    name: str = ""
    max_row: int = 0
    max_col: int = 0
    outline_level_row: int = 0
    current_row: Optional["Row"] = None


class Cell:
    """A single cell; assigning a value marks it as modified."""

    def __init__(self, row: Optional["Row"], num: int) -> None:
        self.row = row
        self.num = num
        self._value = ""
        self.rich_text: Optional[list[RichTextRun]] = None
        self.formula = ""
        self.num_fmt = ""
        self.hidden = False
        self.h_merge = 0
        self.v_merge = 0
        self.modified = False

    @property
    def value(self) -> str:
        return self._value

    @value.setter
    def value(self, value: str) -> None:
        self._value = value
        self.modified = True

    def __repr__(self) -> str:
        return f"Cell(num={self.num}, value={self._value!r})"


class Row:
    """A row of a sheet holding its cells by zero based column index."""

    def __init__(self, sheet: Optional[SheetState] = None, num: int = 0) -> None:
        self.sheet = sheet
        self.num = num
        self.hidden = False
        self.is_custom = False
        self.custom_height = False
        self._height = 0.0
        self._outline_level = 0
        self._cells: list[Optional[Cell]] = []
        self.max_col = -1

    @property
    def key(self) -> str:
        """The key under which a cell store keeps this row."""
        name = self.sheet.name if self.sheet is not None else ""
        return f"{name}:{self.num:06d}"

    @property
    def height(self) -> float:
        """Height in PostScript points."""
        return self._height

    @property
    def outline_level(self) -> int:
        return self._outline_level

    def _grow(self, new_size: int) -> None:
        if new_size > self.max_col + 1:
            self.max_col = new_size - 1
        kept = self._cells[:new_size]
        self._cells = kept + [None] * (new_size - len(kept))

    def add_cell(self) -> Cell:
        """Append a new cell after the rightmost one and return it."""
        self.is_custom = True
        cell = Cell(self, self.max_col + 1)
        self._grow(cell.num + 1)
        self._cells[cell.num] = cell
        if self.sheet is not None and cell.num > self.sheet.max_col - 1:
            self.sheet.max_col = cell.num + 1
        return cell

    def push_cell(self, cell: Cell) -> None:
        """Place an existing cell at its own column index."""
        self.is_custom = True
        self._grow(cell.num + 1)
        self._cells[cell.num] = cell

    def get_cell(self, col_idx: int) -> Cell:
        """Return the cell at a column, creating it if it does not exist."""
        if col_idx >= len(self._cells):
            cell = Cell(self, col_idx)
            self._grow(col_idx + 1)
            self._cells[col_idx] = cell
            return cell
        cell = self._cells[col_idx]
        if cell is None:
            cell = Cell(self, col_idx)
            self._cells[col_idx] = cell
        return cell

    def iter_cells(self, skip_empty: bool = False) -> Iterator[Cell]:
        """Yield the row's cells, padding up to the sheet width unless skipping empties."""
        for col_idx, cell in enumerate(list(self._cells)):
            if cell is None:
                if skip_empty:
                    continue
                cell = self.get_cell(col_idx)
            if skip_empty and not cell.modified:
                continue
            cell.row = self
            yield cell
        if not skip_empty and self.sheet is not None:
            for col_idx in range(len(self._cells), self.sheet.max_col):
                yield self.get_cell(col_idx)

    def for_each_cell(
        self, visitor: Callable[[Cell], None], skip_empty: bool = False
    ) -> None:
        """Call ``visitor`` on each cell; an exception from it stops the walk."""
        for cell in self.iter_cells(skip_empty):
            visitor(cell)

    def set_height(self, height: float) -> None:
        """Set the height in PostScript points."""
        self._height = height
        self.custom_height = True
        self.is_custom = True

    def set_height_cm(self, height: float) -> None:
        """Set the height in centimetres."""
        self.set_height(height * CM_TO_PS)

    def set_outline_level(self, level: int) -> None:
        """Set the outline level, raising the sheet's row outline level if needed."""
        self._outline_level = level
        if self.sheet is not None and level > self.sheet.outline_level_row:
            self.sheet.outline_level_row = level
        self.is_custom = True

    def cell_count(self) -> int:
        """Number of cells up to and including the rightmost one."""
        return self.max_col + 1


class MemoryCellStore:
    """Keeps every row of a sheet in memory, keyed by row key."""

    def __init__(self) -> None:
        self._rows: dict[str, Row] = {}

    def __enter__(self) -> "MemoryCellStore":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def __len__(self) -> int:
        return len(self._rows)

    def close(self) -> None:
        """Release the store's references to its rows."""
        self._rows.clear()

    def read_row(self, key: str) -> Row:
        """Return the row stored under ``key``."""
        try:
            return self._rows[key]
        except KeyError:
            raise RowNotFoundError(key, "No such row") from None

    def write_row(self, row: Optional[Row]) -> None:
        """Store a row under its key."""
        if row is not None:
            self._rows[row.key] = row

    def move_row(self, row: Row, index: int) -> None:
        """Give a stored row a new position in the sheet."""
        old_key = row.key
        row.num = index
        new_key = row.key
        if new_key in self._rows:
            raise ValueError(
                f"Target index for row ({index}) would overwrite a row already exists"
            )
        self._rows[new_key] = row
        self._rows.pop(old_key, None)

    def remove_row(self, key: str) -> None:
        """Drop a row; following rows are left where they are."""
        row = self._rows.pop(key, None)
        if row is not None and row.sheet is not None:
            row.sheet.current_row = None

    def make_row(self, sheet: SheetState) -> Row:
        """Return a new empty row of ``sheet`` and make it the current row."""
        row = Row(sheet)
        sheet.current_row = row
        return row

    def make_row_with_len(self, sheet: SheetState, length: int) -> Row:
        """Return a new row already sized to ``length`` cells."""
        row = self.make_row(sheet)
        row.max_col = length - 1
        row._grow(length)
        return row