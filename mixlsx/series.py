"""Series and data-label encoders.

Every element here is conditioned on the chart kind: scatter and bubble
series carry ``c:xVal``/``c:yVal`` instead of ``c:cat``/``c:val``, bubble
series add ``c:bubbleSize``, pie series get a vary-colour data point, and
only line and scatter series carry explicit shape properties.
"""

from __future__ import annotations

from .charts import ChartSpec, SeriesSpec
from .enums import BUBBLE_KINDS, SURFACE_KINDS, XY_KINDS, ChartKind
from .oxml import new_element, sub, sub_val
from .utils import pt_to_emu

_NO_SERIES_DLBLS = frozenset({ChartKind.scatter}) | SURFACE_KINDS | BUBBLE_KINDS
_DPT_KINDS = frozenset({ChartKind.pie, ChartKind.pie_3d})


def accent(index: int) -> str:
    return "accent%d" % (index % 6 + 1)


def _solid_fill(parent, scheme: str):
    fill = sub(parent, "a:solidFill")
    sub(fill, "a:schemeClr", val=scheme)
    return fill


def _append_sp_pr(ser, kind: ChartKind, series: SeriesSpec, index: int) -> None:
    if kind is ChartKind.line:
        sp_pr = sub(ser, "c:spPr")
        width = pt_to_emu(series.line.width) if series.line.width else None
        ln = sub(sp_pr, "a:ln", cap="rnd")
        if width:
            ln.set("w", str(width))
        _solid_fill(ln, accent(index))
        sub(ln, "a:round")
    elif kind is ChartKind.scatter:
        sp_pr = sub(ser, "c:spPr")
        ln = sub(sp_pr, "a:ln", w=25400, cap="rnd")
        sub(ln, "a:noFill")
        sub(ln, "a:round")


def _append_marker(ser, kind: ChartKind, index: int) -> None:
    if kind is not ChartKind.scatter:
        return
    marker = sub(ser, "c:marker")
    sub_val(marker, "c:symbol", "circle")
    sub_val(marker, "c:size", 5)
    sp_pr = sub(marker, "c:spPr")
    _solid_fill(sp_pr, accent(index))
    ln = sub(sp_pr, "a:ln", w=9252)
    _solid_fill(ln, accent(index))


def _append_dpt(ser, kind: ChartKind, index: int) -> None:
    if kind not in _DPT_KINDS:
        return
    dpt = sub(ser, "c:dPt")
    sub_val(dpt, "c:idx", index)
    sub_val(dpt, "c:bubble3D", False)
    sp_pr = sub(dpt, "c:spPr")
    _solid_fill(sp_pr, accent(index))
    ln = sub(sp_pr, "a:ln", w=25400, cap="rnd")
    _solid_fill(ln, "lt%d" % (index % 2 + 1))
    sp3d = sub(sp_pr, "a:sp3d", contourW=25400)
    contour = sub(sp3d, "a:contourClr")
    sub(contour, "a:schemeClr", val="lt%d" % (index % 2 + 1))


def append_dlbls(parent, spec: ChartSpec):
    """Append ``c:dLbls`` with the legend-key and plot-area label flags."""
    labels = spec.plotarea
    dlbls = sub(parent, "c:dLbls")
    sub_val(dlbls, "c:showLegendKey", spec.legend.show_legend_key)
    sub_val(dlbls, "c:showVal", labels.show_val)
    sub_val(dlbls, "c:showCatName", labels.show_cat_name)
    sub_val(dlbls, "c:showSerName", labels.show_ser_name)
    sub_val(dlbls, "c:showPercent", labels.show_percent)
    sub_val(dlbls, "c:showBubbleSize", labels.show_bubble_size)
    sub_val(dlbls, "c:showLeaderLines", labels.show_leader_lines)
    return dlbls


def _str_ref(parent, tag: str, formula: str):
    el = sub(parent, tag)
    ref = sub(el, "c:strRef")
    sub(ref, "c:f", formula)
    return el


def _num_ref(parent, tag: str, formula: str):
    el = sub(parent, tag)
    ref = sub(el, "c:numRef")
    sub(ref, "c:f", formula)
    return el


def _append_data(ser, kind: ChartKind, series: SeriesSpec) -> None:
    if kind not in XY_KINDS:
        if series.categories:
            _str_ref(ser, "c:cat", series.categories)
        _num_ref(ser, "c:val", series.values)
        return
    if series.x_values:
        _num_ref(ser, "c:xVal", series.x_values)
    elif series.categories:
        _str_ref(ser, "c:xVal", series.categories)
    if series.y_ref:
        _num_ref(ser, "c:yVal", series.y_ref)
    if kind in BUBBLE_KINDS:
        _num_ref(ser, "c:bubbleSize", series.size_ref)
        if kind is ChartKind.bubble_3d:
            sub_val(ser, "c:bubble3D", True)


def append_series(parent, kind: ChartKind, spec: ChartSpec, order: int = 0) -> list:
    """Append one ``c:ser`` per series; idx/order start at ``order``."""
    out = []
    for k, series in enumerate(spec.series):
        index = k + order
        ser = sub(parent, "c:ser")
        sub_val(ser, "c:idx", index)
        sub_val(ser, "c:order", index)
        if series.name:
            _str_ref(ser, "c:tx", series.name)
        _append_sp_pr(ser, kind, series, index)
        _append_marker(ser, kind, index)
        _append_dpt(ser, kind, index)
        if kind not in _NO_SERIES_DLBLS:
            append_dlbls(ser, spec)
        _append_data(ser, kind, series)
        out.append(ser)
    return out


def build_series(kind: ChartKind, spec: ChartSpec, order: int = 0) -> list:
    """Standalone ``c:ser`` elements, handy for inspecting a single series."""
    holder = new_element("c:plotArea")
    return append_series(holder, kind, spec, order)
