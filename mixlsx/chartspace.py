from __future__ import annotations

import logging
from typing import Sequence

from .axes import append_line_sp_pr
from .charts import ChartSpec, LegendSpec
from .combo import compile_plot_area
from .enums import CONTOUR_KINDS, ChartKind, LegendPosition
from .oxml import CHART_NSMAP, new_element, sub, sub_val, to_bytes

logger = logging.getLogger(__name__)

LEGEND_POSITION = {
    LegendPosition.bottom: "b",
    LegendPosition.left: "l",
    LegendPosition.right: "r",
    LegendPosition.top: "t",
    LegendPosition.top_right: "tr",
}

_RIGHT_ANGLE_KINDS = frozenset(
    kind for kind in ChartKind if kind.value.startswith(("area3D", "bar3D", "col3D"))
)
_SURFACE_3D_KINDS = frozenset({ChartKind.surface_3d, ChartKind.wireframe_surface_3d})


def view3d_rot_x(kind: ChartKind) -> int:
    if kind is ChartKind.pie_3d:
        return 30
    if kind in CONTOUR_KINDS:
        return 90
    if kind in _RIGHT_ANGLE_KINDS or kind in _SURFACE_3D_KINDS:
        return 15
    return 0


def view3d_rot_y(kind: ChartKind) -> int:
    if kind in _RIGHT_ANGLE_KINDS or kind in _SURFACE_3D_KINDS:
        return 20
    return 0


def view3d_perspective(kind: ChartKind) -> int:
    return 0 if kind in CONTOUR_KINDS else 30


def view3d_right_angle_axes(kind: ChartKind) -> bool:
    return kind in _RIGHT_ANGLE_KINDS


def _append_title(chart, spec: ChartSpec, lang: str) -> None:
    title = sub(chart, "c:title")
    tx = sub(title, "c:tx")
    rich = sub(tx, "c:rich")
    sub(rich, "a:bodyPr")
    sub(rich, "a:lstStyle")
    p = sub(rich, "a:p")
    ppr = sub(p, "a:pPr")
    rpr = sub(ppr, "a:defRPr", sz=1400, b=False, i=False, u="none", strike="noStrike", kern=1200)
    fill = sub(rpr, "a:solidFill")
    clr = sub(fill, "a:schemeClr", val="tx1")
    sub_val(clr, "a:lumMod", 65000)
    sub_val(clr, "a:lumOff", 35000)
    sub(rpr, "a:latin", typeface="+mn-lt")
    sub(rpr, "a:ea", typeface="+mn-ea")
    sub(rpr, "a:cs", typeface="+mn-cs")
    run = sub(p, "a:r")
    sub(run, "a:rPr", lang=lang, altLang=lang)
    sub(run, "a:t", spec.title.name)
    sub_val(title, "c:overlay", False)


def _append_view3d(chart, kind: ChartKind) -> None:
    view = sub(chart, "c:view3D")
    sub_val(view, "c:rotX", view3d_rot_x(kind))
    sub_val(view, "c:rotY", view3d_rot_y(kind))
    sub_val(view, "c:rAngAx", view3d_right_angle_axes(kind))
    sub_val(view, "c:perspective", view3d_perspective(kind))


def _append_legend(chart, legend: LegendSpec) -> None:
    if legend.position is LegendPosition.none:
        return
    el = sub(chart, "c:legend")
    sub_val(el, "c:legendPos", LEGEND_POSITION[legend.position])
    sub_val(el, "c:overlay", False)


def build_chart_space(spec: ChartSpec, combos: Sequence[ChartSpec] = (), lang: str = "en-US"):
    """Build the ``c:chartSpace`` tree for a chart and its combo overlays."""
    kind = spec.kind
    space = new_element("c:chartSpace", nsmap=CHART_NSMAP)
    sub_val(space, "c:date1904", False)
    sub_val(space, "c:lang", lang)
    sub_val(space, "c:roundedCorners", False)

    chart = sub(space, "c:chart")
    if spec.title.name:
        _append_title(chart, spec, lang)
        sub_val(chart, "c:autoTitleDeleted", False)
    else:
        sub_val(chart, "c:autoTitleDeleted", True)
    _append_view3d(chart, kind)
    for wall in ("c:floor", "c:sideWall", "c:backWall"):
        sub_val(sub(chart, wall), "c:thickness", 0)
    chart.append(compile_plot_area(spec, combos).to_element())
    _append_legend(chart, spec.legend)
    sub_val(chart, "c:plotVisOnly", False)
    sub_val(chart, "c:dispBlanksAs", spec.show_blanks_as)
    sub_val(chart, "c:showDLblsOverMax", False)

    sp_pr = append_line_sp_pr(space)
    fill = new_element("a:solidFill")
    sub(fill, "a:schemeClr", val="bg1")
    sp_pr.insert(0, fill)

    settings = sub(space, "c:printSettings")
    sub(settings, "c:headerFooter")
    sub(settings, "c:pageMargins", b=0.75, l=0.7, r=0.7, t=0.7, header=0.3, footer=0.3)
    sub(settings, "c:pageSetup")
    return space


def render_chart_space(spec: ChartSpec, combos: Sequence[ChartSpec] = (), lang: str = "en-US") -> bytes:
    data = to_bytes(build_chart_space(spec, combos, lang=lang))
    logger.debug("rendered %s chart (%d combos, %d bytes)", spec.type, len(combos), len(data))
    return data
