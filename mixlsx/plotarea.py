"""Plot-area builder table.

Each chart kind maps to a builder producing a `PlotAreaFragment`: a sparse
set of named slots holding at most one chart-kind element plus the axes it
plots against. Fragments of combo charts are merged by `mixlsx.combo`.
"""

from __future__ import annotations

import copy
import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional

from lxml import etree

from .axes import CAT_AX_ID, SER_AX_ID, VAL_AX_ID, build_cat_ax, build_ser_ax, build_val_ax
from .charts import ChartSpec, resolve_kind
from .enums import ChartKind
from .oxml import new_element, qn, sub, sub_val
from .series import append_dlbls, append_series

logger = logging.getLogger(__name__)

DOUGHNUT_HOLE_SIZE = 75

# Slot order is the element order inside c:plotArea
CHART_SLOTS = (
    "area_chart",
    "area3d_chart",
    "bar_chart",
    "bar3d_chart",
    "bubble_chart",
    "doughnut_chart",
    "line_chart",
    "pie_chart",
    "pie3d_chart",
    "of_pie_chart",
    "radar_chart",
    "scatter_chart",
    "surface3d_chart",
    "surface_chart",
)
AXIS_SLOTS = ("cat_ax", "val_ax", "ser_ax")
SLOTS = CHART_SLOTS + AXIS_SLOTS


@dataclass
class PlotAreaFragment:
    area_chart: Optional[etree._Element] = None
    area3d_chart: Optional[etree._Element] = None
    bar_chart: Optional[etree._Element] = None
    bar3d_chart: Optional[etree._Element] = None
    bubble_chart: Optional[etree._Element] = None
    doughnut_chart: Optional[etree._Element] = None
    line_chart: Optional[etree._Element] = None
    pie_chart: Optional[etree._Element] = None
    pie3d_chart: Optional[etree._Element] = None
    of_pie_chart: Optional[etree._Element] = None
    radar_chart: Optional[etree._Element] = None
    scatter_chart: Optional[etree._Element] = None
    surface3d_chart: Optional[etree._Element] = None
    surface_chart: Optional[etree._Element] = None
    cat_ax: Optional[etree._Element] = None
    val_ax: Optional[etree._Element] = None
    ser_ax: Optional[etree._Element] = None
    series_count: int = field(default=0, compare=False)

    def get(self, slot: str):
        if slot not in SLOTS:
            raise KeyError(slot)
        return getattr(self, slot)

    def set(self, slot: str, element) -> None:
        if slot not in SLOTS:
            raise KeyError(slot)
        setattr(self, slot, element)

    def populated(self) -> List[str]:
        return [slot for slot in SLOTS if self.get(slot) is not None]

    def chart_slots(self) -> List[str]:
        return [slot for slot in CHART_SLOTS if self.get(slot) is not None]

    def axis_ids(self) -> List[int]:
        ids = []
        for slot in AXIS_SLOTS:
            ax = self.get(slot)
            if ax is not None:
                ids.append(int(ax.find(qn("c:axId")).get("val")))
        return ids

    def to_element(self):
        """Assemble ``c:plotArea``; slot elements are copied, so the fragment stays intact."""
        plot_area = new_element("c:plotArea")
        sub(plot_area, "c:layout")
        for slot in SLOTS:
            el = self.get(slot)
            if el is not None:
                plot_area.append(copy.deepcopy(el))
        return plot_area


_CARTESIAN_SLOT = {
    ChartKind.area: "area_chart",
    ChartKind.area_stacked: "area_chart",
    ChartKind.area_percent_stacked: "area_chart",
    ChartKind.area_3d: "area3d_chart",
    ChartKind.area_3d_stacked: "area3d_chart",
    ChartKind.area_3d_percent_stacked: "area3d_chart",
    ChartKind.bar: "bar_chart",
    ChartKind.bar_stacked: "bar_chart",
    ChartKind.bar_percent_stacked: "bar_chart",
    ChartKind.col: "bar_chart",
    ChartKind.col_stacked: "bar_chart",
    ChartKind.col_percent_stacked: "bar_chart",
    ChartKind.bubble: "bubble_chart",
    ChartKind.bubble_3d: "bubble_chart",
}
for _kind in ChartKind:
    if _kind.value.startswith(("bar3D", "col3D")):
        _CARTESIAN_SLOT[_kind] = "bar3d_chart"

_SLOT_TAG = {
    "area_chart": "c:areaChart",
    "area3d_chart": "c:area3DChart",
    "bar_chart": "c:barChart",
    "bar3d_chart": "c:bar3DChart",
    "bubble_chart": "c:bubbleChart",
}

BAR_DIR = {
    kind: ("bar" if kind.value.startswith("bar") else "col")
    for kind, slot in _CARTESIAN_SLOT.items()
    if slot in ("bar_chart", "bar3d_chart")
}


def _grouping(kind: ChartKind) -> Optional[str]:
    if kind in (ChartKind.bubble, ChartKind.bubble_3d):
        return None
    name = kind.value
    if name.endswith("PercentStacked"):
        return "percentStacked"
    if name.endswith("Stacked"):
        return "stacked"
    if name.startswith("area"):
        return "standard"
    if name in ("col3D", "col3DCone", "col3DPyramid", "col3DCylinder"):
        return "standard"
    return "clustered"


GROUPING = {kind: _grouping(kind) for kind in _CARTESIAN_SLOT}
GROUPING[ChartKind.line] = "standard"
OVERLAP = {
    ChartKind.bar_stacked: 100,
    ChartKind.bar_percent_stacked: 100,
    ChartKind.col_stacked: 100,
    ChartKind.col_percent_stacked: 100,
}
SHAPE = {}
for _kind in _CARTESIAN_SLOT:
    for _token, _shape in (("Cone", "cone"), ("Pyramid", "pyramid"), ("Cylinder", "cylinder")):
        if _token in _kind.value:
            SHAPE[_kind] = _shape


def _append_ax_ids(chart, *ids: int) -> None:
    for ax_id in ids:
        sub_val(chart, "c:axId", ax_id)


def _fragment(slot: str, chart, spec: ChartSpec, **axes) -> PlotAreaFragment:
    fragment = PlotAreaFragment(**axes)
    fragment.set(slot, chart)
    fragment.series_count = len(spec.series)
    return fragment


def _build_cartesian(kind: ChartKind, spec: ChartSpec, order: int) -> PlotAreaFragment:
    slot = _CARTESIAN_SLOT[kind]
    chart = new_element(_SLOT_TAG[slot])
    if kind in BAR_DIR:
        sub_val(chart, "c:barDir", BAR_DIR[kind])
    if GROUPING.get(kind) is not None:
        sub_val(chart, "c:grouping", GROUPING[kind])
    sub_val(chart, "c:varyColors", True)
    append_series(chart, kind, spec, order)
    append_dlbls(chart, spec)
    if kind in OVERLAP:
        sub_val(chart, "c:overlap", OVERLAP[kind])
    if kind in SHAPE:
        sub_val(chart, "c:shape", SHAPE[kind])
    _append_ax_ids(chart, CAT_AX_ID, VAL_AX_ID)
    return _fragment(
        slot, chart, spec, cat_ax=build_cat_ax(spec), val_ax=build_val_ax(spec, kind)
    )


def _build_doughnut(kind: ChartKind, spec: ChartSpec, order: int) -> PlotAreaFragment:
    chart = new_element("c:doughnutChart")
    sub_val(chart, "c:varyColors", True)
    append_series(chart, kind, spec, order)
    sub_val(chart, "c:holeSize", DOUGHNUT_HOLE_SIZE)
    return _fragment("doughnut_chart", chart, spec)


def _build_line(kind: ChartKind, spec: ChartSpec, order: int) -> PlotAreaFragment:
    chart = new_element("c:lineChart")
    sub_val(chart, "c:grouping", GROUPING[kind])
    sub_val(chart, "c:varyColors", False)
    append_series(chart, kind, spec, order)
    append_dlbls(chart, spec)
    sub_val(chart, "c:smooth", False)
    _append_ax_ids(chart, CAT_AX_ID, VAL_AX_ID)
    return _fragment(
        "line_chart", chart, spec, cat_ax=build_cat_ax(spec), val_ax=build_val_ax(spec, kind)
    )


def _build_pie(kind: ChartKind, spec: ChartSpec, order: int) -> PlotAreaFragment:
    chart = new_element("c:pieChart")
    sub_val(chart, "c:varyColors", True)
    append_series(chart, kind, spec, order)
    return _fragment("pie_chart", chart, spec)


def _build_pie3d(kind: ChartKind, spec: ChartSpec, order: int) -> PlotAreaFragment:
    chart = new_element("c:pie3DChart")
    sub_val(chart, "c:varyColors", True)
    append_series(chart, kind, spec, order)
    return _fragment("pie3d_chart", chart, spec)


def _build_of_pie(kind: ChartKind, spec: ChartSpec, order: int) -> PlotAreaFragment:
    chart = new_element("c:ofPieChart")
    sub_val(chart, "c:ofPieType", "bar" if kind is ChartKind.bar_of_pie else "pie")
    sub_val(chart, "c:varyColors", True)
    append_series(chart, kind, spec, order)
    sub(chart, "c:serLines")
    return _fragment("of_pie_chart", chart, spec)


def _build_radar(kind: ChartKind, spec: ChartSpec, order: int) -> PlotAreaFragment:
    chart = new_element("c:radarChart")
    sub_val(chart, "c:radarStyle", "marker")
    sub_val(chart, "c:varyColors", False)
    append_series(chart, kind, spec, order)
    append_dlbls(chart, spec)
    _append_ax_ids(chart, CAT_AX_ID, VAL_AX_ID)
    return _fragment(
        "radar_chart", chart, spec, cat_ax=build_cat_ax(spec), val_ax=build_val_ax(spec, kind)
    )


def _build_scatter(kind: ChartKind, spec: ChartSpec, order: int) -> PlotAreaFragment:
    chart = new_element("c:scatterChart")
    sub_val(chart, "c:scatterStyle", "smoothMarker")
    sub_val(chart, "c:varyColors", False)
    append_series(chart, kind, spec, order)
    append_dlbls(chart, spec)
    _append_ax_ids(chart, CAT_AX_ID, VAL_AX_ID)
    return _fragment(
        "scatter_chart", chart, spec, cat_ax=build_cat_ax(spec), val_ax=build_val_ax(spec, kind)
    )


def _build_surface(kind: ChartKind, spec: ChartSpec, order: int) -> PlotAreaFragment:
    three_d = kind in (ChartKind.surface_3d, ChartKind.wireframe_surface_3d)
    slot = "surface3d_chart" if three_d else "surface_chart"
    chart = new_element("c:surface3DChart" if three_d else "c:surfaceChart")
    if kind.is_wireframe:
        sub_val(chart, "c:wireframe", True)
    append_series(chart, kind, spec, order)
    _append_ax_ids(chart, CAT_AX_ID, VAL_AX_ID, SER_AX_ID)
    return _fragment(
        slot,
        chart,
        spec,
        cat_ax=build_cat_ax(spec),
        val_ax=build_val_ax(spec, kind),
        ser_ax=build_ser_ax(spec),
    )


Builder = Callable[[ChartKind, ChartSpec, int], PlotAreaFragment]

BUILDERS: Dict[ChartKind, Builder] = {kind: _build_cartesian for kind in _CARTESIAN_SLOT}
BUILDERS.update(
    {
        ChartKind.doughnut: _build_doughnut,
        ChartKind.line: _build_line,
        ChartKind.pie: _build_pie,
        ChartKind.pie_3d: _build_pie3d,
        ChartKind.pie_of_pie: _build_of_pie,
        ChartKind.bar_of_pie: _build_of_pie,
        ChartKind.radar: _build_radar,
        ChartKind.scatter: _build_scatter,
        ChartKind.surface_3d: _build_surface,
        ChartKind.wireframe_surface_3d: _build_surface,
        ChartKind.contour: _build_surface,
        ChartKind.wireframe_contour: _build_surface,
    }
)

_unmapped = [kind.value for kind in ChartKind if kind not in BUILDERS]
if _unmapped:
    raise RuntimeError(f"chart kinds without a plot-area builder: {_unmapped}")


def build_plot_area(kind: ChartKind | str, spec: ChartSpec, order: int = 0) -> PlotAreaFragment:
    """Compile the plot-area fragment for one chart kind.

    `order` is the index of this chart's first series within the whole plot
    area, non-zero for combo overlays.
    """
    kind = resolve_kind(kind)
    fragment = BUILDERS[kind](kind, spec, order)
    logger.debug(
        "built %s fragment: slots=%s order=%d series=%d",
        kind.value,
        fragment.populated(),
        order,
        fragment.series_count,
    )
    return fragment
