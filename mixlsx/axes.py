"""Category, value and series axis encoders for the plot area."""

from __future__ import annotations

from .charts import AxisSpec, ChartSpec
from .enums import CONTOUR_KINDS, ChartKind
from .oxml import new_element, sub, sub_val

CAT_AX_ID = 754001152
VAL_AX_ID = 753999904
SER_AX_ID = 832256642

_ORIENTATION = {True: "maxMin", False: "minMax"}
_CAT_AX_POS = {True: "t", False: "b"}
_VAL_AX_POS = {True: "r", False: "l"}

_MIDCAT_KINDS = frozenset(
    {
        ChartKind.area,
        ChartKind.area_stacked,
        ChartKind.area_percent_stacked,
        ChartKind.area_3d,
        ChartKind.area_3d_stacked,
        ChartKind.area_3d_percent_stacked,
        ChartKind.bubble,
        ChartKind.bubble_3d,
    }
)


def value_number_format(kind: ChartKind) -> str:
    return "0%" if kind.is_percent_stacked else "General"


def value_cross_between(kind: ChartKind) -> str:
    return "midCat" if kind in _MIDCAT_KINDS else "between"


def value_tick_label_position(kind: ChartKind) -> str:
    return "none" if kind in CONTOUR_KINDS else "nextTo"


def append_line_sp_pr(parent):
    """Thin light-grey outline shared by axes, gridlines and the chart space."""
    sp_pr = sub(parent, "c:spPr")
    ln = sub(sp_pr, "a:ln", w=9525, cap="flat", cmpd="sng", algn="ctr")
    fill = sub(ln, "a:solidFill")
    clr = sub(fill, "a:schemeClr", val="tx1")
    sub_val(clr, "a:lumMod", 15000)
    sub_val(clr, "a:lumOff", 85000)
    sub(ln, "a:round")
    return sp_pr


def append_tx_pr(parent):
    tx_pr = sub(parent, "c:txPr")
    sub(
        tx_pr,
        "a:bodyPr",
        rot=-60000000,
        spcFirstLastPara=True,
        vertOverflow="ellipsis",
        vert="horz",
        wrap="square",
        anchor="ctr",
        anchorCtr=True,
    )
    sub(tx_pr, "a:lstStyle")
    p = sub(tx_pr, "a:p")
    ppr = sub(p, "a:pPr")
    rpr = sub(
        ppr,
        "a:defRPr",
        sz=900,
        b=False,
        i=False,
        u="none",
        strike="noStrike",
        kern=1200,
        baseline=0,
    )
    fill = sub(rpr, "a:solidFill")
    clr = sub(fill, "a:schemeClr", val="tx1")
    sub_val(clr, "a:lumMod", 15000)
    sub_val(clr, "a:lumOff", 85000)
    sub(rpr, "a:latin", typeface="+mn-lt")
    sub(rpr, "a:ea", typeface="+mn-ea")
    sub(rpr, "a:cs", typeface="+mn-cs")
    sub(p, "a:endParaRPr", lang="en-US")
    return tx_pr


def _append_scaling(parent, axis: AxisSpec):
    scaling = sub(parent, "c:scaling")
    sub_val(scaling, "c:orientation", _ORIENTATION[axis.reverse_order])
    if axis.maximum is not None:
        sub_val(scaling, "c:max", float(axis.maximum))
    if axis.minimum is not None:
        sub_val(scaling, "c:min", float(axis.minimum))
    return scaling


def _append_gridlines(parent, axis: AxisSpec) -> None:
    if axis.major_gridlines:
        append_line_sp_pr(sub(parent, "c:majorGridlines"))
    if axis.minor_gridlines:
        append_line_sp_pr(sub(parent, "c:minorGridlines"))


def build_cat_ax(spec: ChartSpec):
    axis = spec.x_axis
    ax = new_element("c:catAx")
    sub_val(ax, "c:axId", CAT_AX_ID)
    _append_scaling(ax, axis)
    sub_val(ax, "c:delete", False)
    sub_val(ax, "c:axPos", _CAT_AX_POS[axis.reverse_order])
    _append_gridlines(ax, axis)
    sub(ax, "c:numFmt", formatCode="General", sourceLinked=True)
    sub_val(ax, "c:majorTickMark", "none")
    sub_val(ax, "c:minorTickMark", "none")
    sub_val(ax, "c:tickLblPos", "nextTo")
    append_line_sp_pr(ax)
    append_tx_pr(ax)
    sub_val(ax, "c:crossAx", VAL_AX_ID)
    sub_val(ax, "c:crosses", "autoZero")
    sub_val(ax, "c:auto", True)
    sub_val(ax, "c:lblAlgn", "ctr")
    sub_val(ax, "c:lblOffset", 100)
    if axis.tick_label_skip:
        sub_val(ax, "c:tickLblSkip", axis.tick_label_skip)
    sub_val(ax, "c:noMultiLvlLbl", False)
    return ax


def build_val_ax(spec: ChartSpec, kind: ChartKind):
    axis = spec.y_axis
    ax = new_element("c:valAx")
    sub_val(ax, "c:axId", VAL_AX_ID)
    _append_scaling(ax, axis)
    sub_val(ax, "c:delete", False)
    sub_val(ax, "c:axPos", _VAL_AX_POS[axis.reverse_order])
    _append_gridlines(ax, axis)
    sub(ax, "c:numFmt", formatCode=value_number_format(kind), sourceLinked=True)
    sub_val(ax, "c:majorTickMark", "none")
    sub_val(ax, "c:minorTickMark", "none")
    sub_val(ax, "c:tickLblPos", value_tick_label_position(kind))
    append_line_sp_pr(ax)
    append_tx_pr(ax)
    sub_val(ax, "c:crossAx", CAT_AX_ID)
    sub_val(ax, "c:crosses", "autoZero")
    sub_val(ax, "c:crossBetween", value_cross_between(kind))
    if axis.major_unit is not None:
        sub_val(ax, "c:majorUnit", float(axis.major_unit))
    return ax


def build_ser_ax(spec: ChartSpec):
    # the depth axis of surface charts scales like the value axis
    ax = new_element("c:serAx")
    sub_val(ax, "c:axId", SER_AX_ID)
    _append_scaling(ax, spec.y_axis)
    sub_val(ax, "c:delete", False)
    sub_val(ax, "c:axPos", _CAT_AX_POS[spec.x_axis.reverse_order])
    sub_val(ax, "c:tickLblPos", "nextTo")
    append_line_sp_pr(ax)
    append_tx_pr(ax)
    sub_val(ax, "c:crossAx", VAL_AX_ID)
    return ax
