"""Chart and drawing compiler for SpreadsheetML packages."""

import logging

from .charts import AxisSpec, ChartSpec, Dimension, LegendSpec, PictureFormat, SeriesSpec
from .chartspace import build_chart_space, render_chart_space
from .drawing import DrawingDocument, DrawingStore, decode_drawing, encode_drawing, project_drawing
from .enums import ChartKind, DrawingObjectKind, LegendPosition, Positioning
from .errors import (
    ComboCollisionError,
    CoordinateError,
    CorruptPartError,
    MixlsxError,
    SheetNotFoundError,
    UnsupportedChartKindError,
)
from .settings import Settings
from .workbook import Workbook

__all__ = [
    "AxisSpec",
    "ChartKind",
    "ChartSpec",
    "ComboCollisionError",
    "CoordinateError",
    "CorruptPartError",
    "Dimension",
    "DrawingDocument",
    "DrawingObjectKind",
    "DrawingStore",
    "LegendPosition",
    "LegendSpec",
    "MixlsxError",
    "PictureFormat",
    "Positioning",
    "SeriesSpec",
    "Settings",
    "SheetNotFoundError",
    "UnsupportedChartKindError",
    "Workbook",
    "build_chart_space",
    "decode_drawing",
    "encode_drawing",
    "project_drawing",
    "render_chart_space",
]

logging.getLogger(__name__).addHandler(logging.NullHandler())
