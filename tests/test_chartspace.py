import pytest

from mixlsx.charts import ChartSpec
from mixlsx.chartspace import build_chart_space, render_chart_space
from mixlsx.enums import ChartKind
from mixlsx.oxml import NS, local_name, parse_xml


def _xp(el, path):
    return el.xpath(path, namespaces=NS)


def test_chart_space_layout(col_spec):
    space = build_chart_space(col_spec)
    assert local_name(space) == "chartSpace"
    assert _xp(space, "c:lang/@val") == ["en-US"]
    chart = space.find("{%s}chart" % NS["c"])
    assert [local_name(el) for el in chart] == [
        "title",
        "autoTitleDeleted",
        "view3D",
        "floor",
        "sideWall",
        "backWall",
        "plotArea",
        "legend",
        "plotVisOnly",
        "dispBlanksAs",
        "showDLblsOverMax",
    ]
    assert _xp(chart, "c:title//a:t/text()") == ["Fruit 3D Clustered Column Chart"]
    assert _xp(chart, "c:legend/c:legendPos/@val") == ["b"]
    assert _xp(chart, "c:dispBlanksAs/@val") == ["gap"]
    assert _xp(space, "c:spPr/a:solidFill/a:schemeClr/@val") == ["bg1"]
    assert _xp(space, "c:printSettings/c:pageMargins/@b") == ["0.75"]


def test_empty_title_and_hidden_legend():
    spec = ChartSpec(type="pie", title={"name": ""}, legend={"position": "none"})
    chart = build_chart_space(spec).find("{%s}chart" % NS["c"])
    assert _xp(chart, "c:title") == []
    assert _xp(chart, "c:autoTitleDeleted/@val") == ["1"]
    assert _xp(chart, "c:legend") == []


@pytest.mark.parametrize(
    "kind, rot_x, rot_y, perspective, right_angles",
    [
        (ChartKind.col, "0", "0", "30", "0"),
        (ChartKind.col_3d_clustered, "15", "20", "30", "1"),
        (ChartKind.pie_3d, "30", "0", "30", "0"),
        (ChartKind.surface_3d, "15", "20", "30", "0"),
        (ChartKind.contour, "90", "0", "0", "0"),
    ],
)
def test_view3d_tables(kind, rot_x, rot_y, perspective, right_angles):
    space = build_chart_space(ChartSpec(type=kind.value))
    view = space.find("{c}chart/{c}view3D".format(c="{%s}" % NS["c"]))
    assert _xp(view, "c:rotX/@val") == [rot_x]
    assert _xp(view, "c:rotY/@val") == [rot_y]
    assert _xp(view, "c:perspective/@val") == [perspective]
    assert _xp(view, "c:rAngAx/@val") == [right_angles]


def test_render_with_combo(col_spec, line_spec):
    data = render_chart_space(col_spec, [line_spec], lang="de-DE")
    assert data.startswith(b"<?xml")
    space = parse_xml(data)
    assert _xp(space, "c:lang/@val") == ["de-DE"]
    plot_area = _xp(space, "c:chart/c:plotArea")[0]
    assert [local_name(el) for el in plot_area] == ["layout", "barChart", "lineChart", "catAx", "valAx"]
