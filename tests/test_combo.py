import pytest

from mixlsx.axes import CAT_AX_ID, VAL_AX_ID
from mixlsx.charts import ChartSpec
from mixlsx.combo import compile_plot_area, merge_fragments, series_orders
from mixlsx.errors import ComboCollisionError
from mixlsx.oxml import NS, local_name, qn
from mixlsx.plotarea import build_plot_area


def _series(count, row=2):
    return [
        {"name": "Sheet1!$A$%d" % (row + i), "values": "Sheet1!$B$%d:$D$%d" % (row + i, row + i)}
        for i in range(count)
    ]


def test_bar_with_line_overlay(col_spec, line_spec):
    merged = compile_plot_area(col_spec, [line_spec])
    assert merged.chart_slots() == ["bar_chart", "line_chart"]
    assert merged.series_count == 3

    bar_idx = merged.bar_chart.xpath("c:ser/c:idx/@val", namespaces=NS)
    line_idx = merged.line_chart.xpath("c:ser/c:idx/@val", namespaces=NS)
    assert bar_idx == ["0", "1"]
    assert line_idx == ["2"]


def test_series_orders_accumulate():
    primary = ChartSpec(type="col", series=_series(2))
    overlays = [ChartSpec(type="line", series=_series(3)), ChartSpec(type="area", series=_series(1))]
    assert series_orders(primary, overlays) == [0, 2, 5]


def test_axes_are_shared(col_spec, line_spec):
    merged = compile_plot_area(col_spec, [line_spec])
    assert merged.axis_ids() == [CAT_AX_ID, VAL_AX_ID]
    plot_area = merged.to_element()
    assert [local_name(el) for el in plot_area].count("valAx") == 1


def test_first_fragment_axis_wins():
    primary = ChartSpec(type="col", series=_series(1), y_axis={"maximum": 10})
    overlay = ChartSpec(type="line", series=_series(1), y_axis={"maximum": 99})
    merged = compile_plot_area(primary, [overlay])
    assert merged.val_ax.xpath("c:scaling/c:max/@val", namespaces=NS) == ["10"]


def test_same_slot_collides():
    primary = ChartSpec(type="col", series=_series(1))
    overlay = ChartSpec(type="bar", series=_series(1))
    with pytest.raises(ComboCollisionError) as excinfo:
        compile_plot_area(primary, [overlay])
    assert excinfo.value.slot == "bar_chart"


def test_axis_with_different_id_collides():
    primary = build_plot_area("col", ChartSpec(type="col", series=_series(1)))
    overlay = build_plot_area("line", ChartSpec(type="line", series=_series(1)))
    overlay.val_ax.find(qn("c:axId")).set("val", "1")
    with pytest.raises(ComboCollisionError) as excinfo:
        merge_fragments(primary, [overlay])
    assert excinfo.value.slot == "val_ax"


def test_merge_is_idempotent():
    fragment = build_plot_area("col", ChartSpec(type="col", series=_series(2)))
    once = merge_fragments(fragment)
    twice = merge_fragments(once, [once])
    assert twice.populated() == once.populated()
    assert twice.series_count == once.series_count == 2
    assert twice.bar_chart is once.bar_chart


def test_pie_overlay_keeps_primary_axes():
    primary = ChartSpec(type="col", series=_series(1))
    overlay = ChartSpec(type="doughnut", series=_series(1, row=5))
    merged = compile_plot_area(primary, [overlay])
    assert merged.chart_slots() == ["bar_chart", "doughnut_chart"]
    assert merged.axis_ids() == [CAT_AX_ID, VAL_AX_ID]


def test_merge_renumbers_independent_fragments():
    bar = build_plot_area("col", ChartSpec(type="col", series=_series(2)))
    line = build_plot_area("line", ChartSpec(type="line", series=_series(1, row=5)))
    assert line.line_chart.xpath("c:ser/c:idx/@val", namespaces=NS) == ["0"]

    merged = merge_fragments(bar, [line])
    plot_area = merged.to_element()
    assert plot_area.xpath("*/c:ser/c:idx/@val", namespaces=NS) == ["0", "1", "2"]
    assert plot_area.xpath("*/c:ser/c:order/@val", namespaces=NS) == ["0", "1", "2"]
    assert merged.series_count == 3

    again = merge_fragments(merged, [merged])
    assert again.to_element().xpath("*/c:ser/c:idx/@val", namespaces=NS) == ["0", "1", "2"]
