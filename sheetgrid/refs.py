"""Cell references, ranges and shared formula expansion."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, MutableMapping

FIXED_REF_CHAR = "$"
RANGE_CHAR = ":"


class CellRefError(ValueError):
    """Raised when a cell reference or range cannot be parsed."""


@dataclass(frozen=True)
class SharedFormula:
    """The anchor cell and text of a shared formula."""

    x: int
    y: int
    formula: str


@dataclass
class Formula:
    """A formula as stored in a worksheet cell."""

    content: str = ""
    type: str = ""
    ref: str = ""
    si: int = 0


def col_letters_to_index(letters: str) -> int:
    """Convert column letters such as "AB" to a zero based index."""
    total = 0
    multiplier = 1
    for position, char in enumerate(reversed(letters)):
        value = 0 if position == 0 else 1
        if "A" <= char <= "Z":
            value += ord(char) - ord("A")
        elif "a" <= char <= "z":
            value += ord(char) - ord("a")
        total += value * multiplier
        multiplier *= 26
    return total


def col_index_to_letters(n: int) -> str:
    """Convert a zero based column index to its letters."""
    letters = []
    n += 1
    while n > 0:
        n -= 1
        letters.append(chr(ord("A") + n % 26))
        n //= 26
    return "".join(reversed(letters))


def row_index_to_string(row_ref: int) -> str:
    """Convert a zero based row index to its one based text form."""
    return str(row_ref + 1)


def letters_only(text: str) -> str:
    """Keep only ASCII letters, upper-cased."""
    return "".join(
        char.upper() for char in text if "A" <= char <= "Z" or "a" <= char <= "z"
    )


def digits_only(text: str) -> str:
    """Keep only ASCII digits."""
    return "".join(char for char in text if "0" <= char <= "9")


def get_coords_from_cell_id(cell_id: str) -> tuple[int, int]:
    """Return zero based (x, y) for a cell name such as "B3"."""
    digits = digits_only(cell_id)
    if not digits:
        raise CellRefError(f"invalid cell reference {cell_id!r}: no row number")
    y = int(digits) - 1
    x = col_letters_to_index(letters_only(cell_id))
    return x, y


def get_cell_id_from_coords_with_fixed(
    x: int, y: int, x_fixed: bool = False, y_fixed: bool = False
) -> str:
    """Return the cell name for zero based coordinates, optionally with "$" markers."""
    x_str = col_index_to_letters(x)
    if x_fixed:
        x_str = FIXED_REF_CHAR + x_str
    y_str = row_index_to_string(y)
    if y_fixed:
        y_str = FIXED_REF_CHAR + y_str
    return x_str + y_str


def get_cell_id_from_coords(x: int, y: int) -> str:
    """Return the cell name for zero based coordinates."""
    return get_cell_id_from_coords_with_fixed(x, y, False, False)


def get_range_from_string(range_string: str) -> tuple[int, int]:
    """Split a range such as "1:3" into its integer bounds."""
    lower_text, sep, upper_text = range_string.partition(RANGE_CHAR)
    if not sep or not lower_text or not upper_text:
        raise CellRefError(f"Invalid range '{range_string}'")
    try:
        lower = int(lower_text)
    except ValueError:
        raise CellRefError(
            f"Invalid range (not integer in lower bound) {range_string}"
        ) from None
    try:
        upper = int(upper_text)
    except ValueError:
        raise CellRefError(
            f"Invalid range (not integer in upper bound) {range_string}"
        ) from None
    return lower, upper


def get_bounds_from_dimension_ref(ref: str) -> tuple[int, int, int, int]:
    """Return (minx, miny, maxx, maxy) for a dimension such as "A1:B2"."""
    parts = ref.split(RANGE_CHAR)
    if len(parts) < 2:
        raise CellRefError(f"invalid dimension reference {ref!r}")
    minx, miny = get_coords_from_cell_id(parts[0])
    maxx, maxy = get_coords_from_cell_id(parts[1])
    return minx, miny, maxx, maxy


def calculate_bounds(cell_refs: Iterable[str]) -> tuple[int, int, int, int]:
    """Work out (minx, miny, maxx, maxy) from the cell names actually present."""
    minx = miny = None
    maxx = maxy = 0
    for ref in cell_refs:
        x, y = get_coords_from_cell_id(ref)
        minx = x if minx is None else min(minx, x)
        miny = y if miny is None else min(miny, y)
        maxx = max(maxx, x)
        maxy = max(maxy, y)
    return (minx or 0), (miny or 0), maxx, maxy


def shift_cell(cell_id: str, dx: int, dy: int) -> str:
    """Shift a cell name by (dx, dy), leaving "$"-fixed parts in place."""
    try:
        fx, fy = get_coords_from_cell_id(cell_id)
    except CellRefError:
        fx, fy = -1, -1
    fixed_col = cell_id.startswith(FIXED_REF_CHAR)
    fixed_row = cell_id.rfind(FIXED_REF_CHAR) > 0
    if not fixed_col:
        fx += dx
    if not fixed_row:
        fy += dy
    shifted = get_cell_id_from_coords(fx, fy)
    if not fixed_col and not fixed_row:
        return shifted
    parts = []
    if fixed_col:
        parts.append(FIXED_REF_CHAR)
    parts.append(letters_only(shifted))
    if fixed_row:
        parts.append(FIXED_REF_CHAR)
    parts.append(digits_only(shifted))
    return "".join(parts)


def _shift_formula(original: str, dx: int, dy: int) -> str:
    out: list[str] = []
    start = 0
    end = 0
    length = len(original)
    in_string = False
    while end < length:
        char = original[end]
        if char == '"':
            in_string = not in_string
        if not in_string and ("A" <= char <= "Z" or char == FIXED_REF_CHAR):
            out.append(original[start:end])
            start = end
            end += 1
            found_num = False
            while end < length:
                ch = original[end]
                if "0" <= ch <= "9" or ch == FIXED_REF_CHAR:
                    found_num = True
                elif "A" <= ch <= "Z":
                    if found_num:
                        break
                else:
                    break
                end += 1
            if found_num:
                out.append(shift_cell(original[start:end], dx, dy))
                start = end
        end += 1
    if start < length:
        out.append(original[start:])
    return "".join(out)


def formula_for_cell(
    cell_ref: str,
    formula: Formula | None,
    shared_formulas: MutableMapping[int, SharedFormula],
) -> str:
    """Return the formula text of a cell, expanding shared formulas.

    A shared formula carrying a ``ref`` is recorded in ``shared_formulas``;
    later cells in the same group get it shifted to their own position.
    """
    if formula is None:
        return ""
    if formula.type != "shared":
        return formula.content.strip(" \t\n\r")
    try:
        x, y = get_coords_from_cell_id(cell_ref)
    except CellRefError:
        return formula.content.strip(" \t\n\r")
    if formula.ref:
        result = formula.content
        shared_formulas[formula.si] = SharedFormula(x, y, result)
    else:
        anchor = shared_formulas.get(formula.si, SharedFormula(0, 0, ""))
        result = _shift_formula(anchor.formula, x - anchor.x, y - anchor.y)
    return result.strip(" \t\n\r")