from __future__ import annotations

from enum import Enum

from pptx.enum.chart import XL_CHART_TYPE as XL
from pptx.enum.chart import XL_LEGEND_POSITION as XLP


class ChartKind(str, Enum):
    # Values are the chart type identifiers accepted in chart format JSON
    area = "area"
    area_stacked = "areaStacked"
    area_percent_stacked = "areaPercentStacked"
    area_3d = "area3D"
    area_3d_stacked = "area3DStacked"
    area_3d_percent_stacked = "area3DPercentStacked"
    bar = "bar"
    bar_stacked = "barStacked"
    bar_percent_stacked = "barPercentStacked"
    bar_3d_clustered = "bar3DClustered"
    bar_3d_stacked = "bar3DStacked"
    bar_3d_percent_stacked = "bar3DPercentStacked"
    bar_3d_cone_clustered = "bar3DConeClustered"
    bar_3d_cone_stacked = "bar3DConeStacked"
    bar_3d_cone_percent_stacked = "bar3DConePercentStacked"
    bar_3d_pyramid_clustered = "bar3DPyramidClustered"
    bar_3d_pyramid_stacked = "bar3DPyramidStacked"
    bar_3d_pyramid_percent_stacked = "bar3DPyramidPercentStacked"
    bar_3d_cylinder_clustered = "bar3DCylinderClustered"
    bar_3d_cylinder_stacked = "bar3DCylinderStacked"
    bar_3d_cylinder_percent_stacked = "bar3DCylinderPercentStacked"
    col = "col"
    col_stacked = "colStacked"
    col_percent_stacked = "colPercentStacked"
    col_3d = "col3D"
    col_3d_clustered = "col3DClustered"
    col_3d_stacked = "col3DStacked"
    col_3d_percent_stacked = "col3DPercentStacked"
    col_3d_cone = "col3DCone"
    col_3d_cone_clustered = "col3DConeClustered"
    col_3d_cone_stacked = "col3DConeStacked"
    col_3d_cone_percent_stacked = "col3DConePercentStacked"
    col_3d_pyramid = "col3DPyramid"
    col_3d_pyramid_clustered = "col3DPyramidClustered"
    col_3d_pyramid_stacked = "col3DPyramidStacked"
    col_3d_pyramid_percent_stacked = "col3DPyramidPercentStacked"
    col_3d_cylinder = "col3DCylinder"
    col_3d_cylinder_clustered = "col3DCylinderClustered"
    col_3d_cylinder_stacked = "col3DCylinderStacked"
    col_3d_cylinder_percent_stacked = "col3DCylinderPercentStacked"
    doughnut = "doughnut"
    line = "line"
    pie = "pie"
    pie_3d = "pie3D"
    pie_of_pie = "pieOfPie"
    bar_of_pie = "barOfPie"
    radar = "radar"
    scatter = "scatter"
    surface_3d = "surface3D"
    wireframe_surface_3d = "wireframeSurface3D"
    contour = "contour"
    wireframe_contour = "wireframeContour"
    bubble = "bubble"
    bubble_3d = "bubble3D"

    @property
    def is_percent_stacked(self) -> bool:
        return self.value.endswith("PercentStacked")

    @property
    def is_wireframe(self) -> bool:
        return self.value.startswith("wireframe")


# Kinds whose series carry X/Y channels instead of category/value references
XY_KINDS = frozenset({ChartKind.scatter, ChartKind.bubble, ChartKind.bubble_3d})
BUBBLE_KINDS = frozenset({ChartKind.bubble, ChartKind.bubble_3d})
SURFACE_KINDS = frozenset(
    {
        ChartKind.surface_3d,
        ChartKind.wireframe_surface_3d,
        ChartKind.contour,
        ChartKind.wireframe_contour,
    }
)
CONTOUR_KINDS = frozenset({ChartKind.contour, ChartKind.wireframe_contour})


class LegendPosition(str, Enum):
    none = "none"
    bottom = "bottom"
    left = "left"
    right = "right"
    top = "top"
    top_right = "top_right"


class Positioning(str, Enum):
    one_cell = "oneCell"
    two_cell = "twoCell"
    absolute = "absolute"


class AnchorKind(str, Enum):
    two_cell = "twoCellAnchor"
    one_cell = "oneCellAnchor"
    absolute = "absoluteAnchor"


class DrawingObjectKind(str, Enum):
    chart = "Chart"
    picture = "Pic"


# -- helpers to map to/from python-pptx enums (best-effort, names vary by version)
def _xl_pairs() -> list[tuple[object, ChartKind]]:
    pairs = [
        ("AREA", ChartKind.area),
        ("AREA_STACKED", ChartKind.area_stacked),
        ("AREA_STACKED_100", ChartKind.area_percent_stacked),
        ("THREE_D_AREA", ChartKind.area_3d),
        ("THREE_D_AREA_STACKED", ChartKind.area_3d_stacked),
        ("THREE_D_AREA_STACKED_100", ChartKind.area_3d_percent_stacked),
        ("BAR_CLUSTERED", ChartKind.bar),
        ("BAR_STACKED", ChartKind.bar_stacked),
        ("BAR_STACKED_100", ChartKind.bar_percent_stacked),
        ("THREE_D_BAR_CLUSTERED", ChartKind.bar_3d_clustered),
        ("THREE_D_BAR_STACKED", ChartKind.bar_3d_stacked),
        ("THREE_D_BAR_STACKED_100", ChartKind.bar_3d_percent_stacked),
        ("CONE_BAR_CLUSTERED", ChartKind.bar_3d_cone_clustered),
        ("CONE_BAR_STACKED", ChartKind.bar_3d_cone_stacked),
        ("CONE_BAR_STACKED_100", ChartKind.bar_3d_cone_percent_stacked),
        ("PYRAMID_BAR_CLUSTERED", ChartKind.bar_3d_pyramid_clustered),
        ("PYRAMID_BAR_STACKED", ChartKind.bar_3d_pyramid_stacked),
        ("PYRAMID_BAR_STACKED_100", ChartKind.bar_3d_pyramid_percent_stacked),
        ("CYLINDER_BAR_CLUSTERED", ChartKind.bar_3d_cylinder_clustered),
        ("CYLINDER_BAR_STACKED", ChartKind.bar_3d_cylinder_stacked),
        ("CYLINDER_BAR_STACKED_100", ChartKind.bar_3d_cylinder_percent_stacked),
        ("COLUMN_CLUSTERED", ChartKind.col),
        ("COLUMN_STACKED", ChartKind.col_stacked),
        ("COLUMN_STACKED_100", ChartKind.col_percent_stacked),
        ("THREE_D_COLUMN", ChartKind.col_3d),
        ("THREE_D_COLUMN_CLUSTERED", ChartKind.col_3d_clustered),
        ("THREE_D_COLUMN_STACKED", ChartKind.col_3d_stacked),
        ("THREE_D_COLUMN_STACKED_100", ChartKind.col_3d_percent_stacked),
        ("CONE_COL", ChartKind.col_3d_cone),
        ("CONE_COL_CLUSTERED", ChartKind.col_3d_cone_clustered),
        ("CONE_COL_STACKED", ChartKind.col_3d_cone_stacked),
        ("CONE_COL_STACKED_100", ChartKind.col_3d_cone_percent_stacked),
        ("PYRAMID_COL", ChartKind.col_3d_pyramid),
        ("PYRAMID_COL_CLUSTERED", ChartKind.col_3d_pyramid_clustered),
        ("PYRAMID_COL_STACKED", ChartKind.col_3d_pyramid_stacked),
        ("PYRAMID_COL_STACKED_100", ChartKind.col_3d_pyramid_percent_stacked),
        ("CYLINDER_COL", ChartKind.col_3d_cylinder),
        ("CYLINDER_COL_CLUSTERED", ChartKind.col_3d_cylinder_clustered),
        ("CYLINDER_COL_STACKED", ChartKind.col_3d_cylinder_stacked),
        ("CYLINDER_COL_STACKED_100", ChartKind.col_3d_cylinder_percent_stacked),
        ("DOUGHNUT", ChartKind.doughnut),
        ("LINE", ChartKind.line),
        ("PIE", ChartKind.pie),
        ("THREE_D_PIE", ChartKind.pie_3d),
        ("PIE_OF_PIE", ChartKind.pie_of_pie),
        ("BAR_OF_PIE", ChartKind.bar_of_pie),
        ("RADAR", ChartKind.radar),
        ("XY_SCATTER", ChartKind.scatter),
        ("SURFACE", ChartKind.surface_3d),
        ("SURFACE_WIREFRAME", ChartKind.wireframe_surface_3d),
        ("SURFACE_TOP_VIEW", ChartKind.contour),
        ("SURFACE_TOP_VIEW_WIREFRAME", ChartKind.wireframe_contour),
        ("BUBBLE", ChartKind.bubble),
        ("BUBBLE_THREE_D_EFFECT", ChartKind.bubble_3d),
    ]
    return [(getattr(XL, name, None), kind) for name, kind in pairs]


def to_chart_kind(xl_type) -> ChartKind | None:
    mapping = {k: v for k, v in _xl_pairs() if k is not None}
    # line/scatter variants collapse onto the base kind
    for alias, kind in (
        ("LINE_MARKERS", ChartKind.line),
        ("LINE_STACKED", ChartKind.line),
        ("XY_SCATTER_LINES", ChartKind.scatter),
        ("XY_SCATTER_LINES_NO_MARKERS", ChartKind.scatter),
        ("XY_SCATTER_SMOOTH", ChartKind.scatter),
        ("XY_SCATTER_SMOOTH_NO_MARKERS", ChartKind.scatter),
        ("RADAR_MARKERS", ChartKind.radar),
    ):
        member = getattr(XL, alias, None)
        if member is not None:
            mapping.setdefault(member, kind)
    return mapping.get(xl_type)


def from_chart_kind(kind: ChartKind | None):
    if kind is None:
        return None
    reverse = {v: k for k, v in _xl_pairs() if k is not None}
    return reverse.get(ChartKind(kind))


def to_legend_position(xl_position) -> LegendPosition | None:
    mapping = {
        XLP.BOTTOM: LegendPosition.bottom,
        XLP.LEFT: LegendPosition.left,
        XLP.RIGHT: LegendPosition.right,
        XLP.TOP: LegendPosition.top,
        XLP.CORNER: LegendPosition.top_right,
    }
    return mapping.get(xl_position)


def from_legend_position(position: LegendPosition | None):
    if position is None or position is LegendPosition.none:
        return None
    reverse = {
        LegendPosition.bottom: XLP.BOTTOM,
        LegendPosition.left: XLP.LEFT,
        LegendPosition.right: XLP.RIGHT,
        LegendPosition.top: XLP.TOP,
        LegendPosition.top_right: XLP.CORNER,
    }
    return reverse[position]
