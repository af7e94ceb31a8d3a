"""Pixel geometry of a worksheet grid, used to place two-cell anchors."""

from __future__ import annotations

from typing import Dict, NamedTuple

from openpyxl.utils.units import points_to_pixels
from pydantic import ConfigDict, Field

from .base import JsonModel
from .oxml import qn
from .settings import Settings


class AnchorGeometry(NamedTuple):
    col_start: int
    row_start: int
    x1: int
    y1: int
    col_end: int
    row_end: int
    x2: int
    y2: int


def col_width_to_pixels(width: float) -> int:
    # Excel column widths are in characters of the default font (7px + 5px padding)
    if width < 1:
        return int(width * 12 + 0.5)
    return int(width * 7 + 0.5 + 5)


class SheetGeometry(JsonModel):
    """Column widths and row heights in pixels, keyed by 0-based index."""

    model_config = ConfigDict(extra="forbid")

    default_col_width_px: int = Field(64, gt=0)
    default_row_height_px: int = Field(20, gt=0)
    col_widths: Dict[int, int] = Field(default_factory=dict)
    row_heights: Dict[int, int] = Field(default_factory=dict)

    def col_width(self, col: int) -> int:
        return self.col_widths.get(col, self.default_col_width_px)

    def row_height(self, row: int) -> int:
        return self.row_heights.get(row, self.default_row_height_px)

    @classmethod
    def from_worksheet(cls, root, settings: Settings | None = None) -> "SheetGeometry":
        """Read ``<cols>``, row heights and ``sheetFormatPr`` from a parsed worksheet."""
        settings = settings or Settings()
        geometry = cls(
            default_col_width_px=settings.default_col_width_px,
            default_row_height_px=settings.default_row_height_px,
        )
        if root is None:
            return geometry
        fmt = root.find(qn("x:sheetFormatPr"))
        if fmt is not None and fmt.get("defaultRowHeight"):
            height = points_to_pixels(float(fmt.get("defaultRowHeight")))
            if height > 0:
                geometry.default_row_height_px = height
        for col in root.iterfind("%s/%s" % (qn("x:cols"), qn("x:col"))):
            if col.get("hidden") in ("1", "true"):
                px = 0
            elif col.get("width") is not None:
                px = col_width_to_pixels(float(col.get("width")))
            else:
                continue
            for idx in range(int(col.get("min")) - 1, int(col.get("max"))):
                geometry.col_widths[idx] = px
        for row in root.iterfind("%s/%s" % (qn("x:sheetData"), qn("x:row"))):
            if row.get("r") is None:
                continue
            if row.get("hidden") in ("1", "true"):
                geometry.row_heights[int(row.get("r")) - 1] = 0
            elif row.get("ht") is not None:
                geometry.row_heights[int(row.get("r")) - 1] = points_to_pixels(float(row.get("ht")))
        return geometry


def position_object_pixels(
    geometry: SheetGeometry, col: int, row: int, x1: int, y1: int, width: int, height: int
) -> AnchorGeometry:
    """Locate the from/to cells of an object placed at 0-based (col, row).

    Offsets larger than the starting cell move the start cell; the end cell
    is wherever the remaining width and height run out.
    """
    while x1 >= geometry.col_width(col):
        x1 -= geometry.col_width(col)
        col += 1
    while y1 >= geometry.row_height(row):
        y1 -= geometry.row_height(row)
        row += 1

    col_end, row_end = col, row
    width += x1
    height += y1
    while width >= geometry.col_width(col_end):
        width -= geometry.col_width(col_end)
        col_end += 1
    while height >= geometry.row_height(row_end):
        height -= geometry.row_height(row_end)
        row_end += 1
    return AnchorGeometry(col, row, x1, y1, col_end, row_end, width, height)
