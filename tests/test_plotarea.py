import pytest

from mixlsx.axes import CAT_AX_ID, SER_AX_ID, VAL_AX_ID
from mixlsx.charts import ChartSpec
from mixlsx.enums import SURFACE_KINDS, ChartKind
from mixlsx.errors import UnsupportedChartKindError
from mixlsx.oxml import NS, local_name, qn
from mixlsx.plotarea import BUILDERS, CHART_SLOTS, DOUGHNUT_HOLE_SIZE, build_plot_area

PIE_LIKE = {
    ChartKind.doughnut,
    ChartKind.pie,
    ChartKind.pie_3d,
    ChartKind.pie_of_pie,
    ChartKind.bar_of_pie,
}


def _spec(kind, n_series=1) -> ChartSpec:
    return ChartSpec(
        type=kind.value if isinstance(kind, ChartKind) else kind,
        series=[
            {
                "name": "Sheet1!$A$%d" % (i + 2),
                "categories": "Sheet1!$B$1:$D$1",
                "values": "Sheet1!$B$%d:$D$%d" % (i + 2, i + 2),
            }
            for i in range(n_series)
        ],
    )


def _val(el, tag):
    child = el.find(qn(tag))
    return None if child is None else child.get("val")


def test_every_kind_has_a_builder():
    assert set(BUILDERS) == set(ChartKind)
    assert len(ChartKind) == 54


@pytest.mark.parametrize("kind", list(ChartKind))
def test_each_kind_populates_exactly_one_chart_slot(kind):
    fragment = build_plot_area(kind, _spec(kind))
    slots = fragment.chart_slots()
    assert len(slots) == 1
    assert slots[0] in CHART_SLOTS
    assert fragment.series_count == 1


@pytest.mark.parametrize("kind", list(ChartKind))
def test_axis_ids_by_kind(kind):
    fragment = build_plot_area(kind, _spec(kind))
    if kind in PIE_LIKE:
        assert fragment.axis_ids() == []
    elif kind in SURFACE_KINDS:
        assert fragment.axis_ids() == [CAT_AX_ID, VAL_AX_ID, SER_AX_ID]
    else:
        assert fragment.axis_ids() == [CAT_AX_ID, VAL_AX_ID]


def test_chart_element_references_its_axes():
    fragment = build_plot_area(ChartKind.surface_3d, _spec(ChartKind.surface_3d))
    ids = [int(el.get("val")) for el in fragment.surface3d_chart.iterfind(qn("c:axId"))]
    assert ids == [CAT_AX_ID, VAL_AX_ID, SER_AX_ID]


def test_doughnut_hole_size():
    fragment = build_plot_area(ChartKind.doughnut, _spec(ChartKind.doughnut))
    assert DOUGHNUT_HOLE_SIZE == 75
    assert _val(fragment.doughnut_chart, "c:holeSize") == "75"


@pytest.mark.parametrize(
    "kind, of_pie_type", [(ChartKind.pie_of_pie, "pie"), (ChartKind.bar_of_pie, "bar")]
)
def test_of_pie_type_and_series_lines(kind, of_pie_type):
    chart = build_plot_area(kind, _spec(kind)).of_pie_chart
    assert _val(chart, "c:ofPieType") == of_pie_type
    assert chart.find(qn("c:serLines")) is not None


@pytest.mark.parametrize(
    "kind, slot, wireframe",
    [
        (ChartKind.surface_3d, "surface3d_chart", False),
        (ChartKind.wireframe_surface_3d, "surface3d_chart", True),
        (ChartKind.contour, "surface_chart", False),
        (ChartKind.wireframe_contour, "surface_chart", True),
    ],
)
def test_surface_slots_and_wireframe(kind, slot, wireframe):
    fragment = build_plot_area(kind, _spec(kind))
    assert fragment.chart_slots() == [slot]
    chart = fragment.get(slot)
    if wireframe:
        assert _val(chart, "c:wireframe") == "1"
    else:
        assert chart.find(qn("c:wireframe")) is None


@pytest.mark.parametrize(
    "kind, bar_dir, grouping, shape",
    [
        (ChartKind.bar, "bar", "clustered", None),
        (ChartKind.col_stacked, "col", "stacked", None),
        (ChartKind.bar_3d_cone_percent_stacked, "bar", "percentStacked", "cone"),
        (ChartKind.col_3d_cylinder, "col", "standard", "cylinder"),
        (ChartKind.col_3d_pyramid_clustered, "col", "clustered", "pyramid"),
    ],
)
def test_bar_direction_grouping_and_shape(kind, bar_dir, grouping, shape):
    fragment = build_plot_area(kind, _spec(kind))
    chart = fragment.get(fragment.chart_slots()[0])
    assert _val(chart, "c:barDir") == bar_dir
    assert _val(chart, "c:grouping") == grouping
    assert _val(chart, "c:shape") == shape


def test_stacked_bars_overlap_fully():
    chart = build_plot_area(ChartKind.col_stacked, _spec(ChartKind.col_stacked)).bar_chart
    assert _val(chart, "c:overlap") == "100"


def test_series_order_offset():
    fragment = build_plot_area(ChartKind.line, _spec(ChartKind.line, n_series=2), order=3)
    idx = [int(v) for v in fragment.line_chart.xpath("c:ser/c:idx/@val", namespaces=NS)]
    assert idx == [3, 4]


def test_plot_area_element_order():
    fragment = build_plot_area(ChartKind.area, _spec(ChartKind.area))
    plot_area = fragment.to_element()
    assert [local_name(el) for el in plot_area] == ["layout", "areaChart", "catAx", "valAx"]


def test_plot_area_leaves_fragment_intact():
    fragment = build_plot_area(ChartKind.col, _spec(ChartKind.col))
    first = fragment.to_element()
    second = fragment.to_element()
    assert [local_name(el) for el in second] == [local_name(el) for el in first]
    assert fragment.bar_chart.getparent() is None
    assert fragment.bar_chart not in list(first)


def test_unsupported_kind():
    with pytest.raises(UnsupportedChartKindError) as excinfo:
        build_plot_area("donut", _spec("donut"))
    assert excinfo.value.kind == "donut"
    assert isinstance(excinfo.value, ValueError)
