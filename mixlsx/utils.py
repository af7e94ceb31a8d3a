from __future__ import annotations

from openpyxl.utils.cell import (
    column_index_from_string,
    coordinate_from_string,
    get_column_letter,
)
from openpyxl.utils.exceptions import CellCoordinatesException
from openpyxl.utils.units import pixels_to_EMU

from .errors import CoordinateError


EMU_PER_INCH = 914400
EMU_PER_PT = 12700
# 914400 / 96: one pixel at 96 DPI
EMU = 9525

MAX_COLUMNS = 16384
MAX_ROWS = 1048576


def pt_to_emu(pt: float | int | None) -> int | None:
    if pt is None:
        return None
    return int(round(float(pt) * EMU_PER_PT))


def px_to_emu(px: float | int) -> int:
    return pixels_to_EMU(px)


def cell_name_to_coordinates(cell: str) -> tuple[int, int]:
    """Split a cell name such as ``"B12"`` or ``"$B$12"`` into 1-based (col, row)."""
    if not isinstance(cell, str) or not cell.strip():
        raise CoordinateError(str(cell), "empty cell name")
    try:
        letters, row = coordinate_from_string(cell.strip())
        col = column_index_from_string(letters)
    except (CellCoordinatesException, ValueError) as exc:
        raise CoordinateError(cell, str(exc)) from exc
    if col > MAX_COLUMNS:
        raise CoordinateError(cell, f"column number exceeds maximum limit {MAX_COLUMNS}")
    if row < 1 or row > MAX_ROWS:
        raise CoordinateError(cell, f"row number exceeds maximum limit {MAX_ROWS}")
    return col, row


def coordinates_to_cell_name(col: int, row: int) -> str:
    if not 1 <= col <= MAX_COLUMNS or not 1 <= row <= MAX_ROWS:
        raise CoordinateError(f"({col}, {row})", "coordinates out of range")
    return f"{get_column_letter(col)}{row}"
