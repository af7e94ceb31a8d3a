import pytest

from mixlsx.anchors import AnchorManager, classify_anchor
from mixlsx.charts import PictureFormat
from mixlsx.drawing import DrawingStore, encode_drawing
from mixlsx.enums import AnchorKind, DrawingObjectKind
from mixlsx.errors import CoordinateError
from mixlsx.geometry import SheetGeometry
from mixlsx.oxml import NS, parse_xml

PATH = "xl/drawings/drawing1.xml"


@pytest.fixture
def parts():
    return {}


@pytest.fixture
def store(parts):
    return DrawingStore(parts.get, parts.__setitem__)


@pytest.fixture
def manager(store):
    return AnchorManager(store)


def _frame_id(anchor):
    return int(parse_xml(anchor.payload).xpath(".//xdr:cNvPr/@id", namespaces=NS)[0])


def _rid(anchor):
    return parse_xml(anchor.payload).xpath(".//c:chart/@r:id", namespaces=NS)[0]


def test_chart_anchor_placement(manager):
    anchor = manager.add_chart(PATH, SheetGeometry(), "E1", 480, 290, 1)
    assert anchor.kind is AnchorKind.two_cell
    assert anchor.edit_as == "twoCell"
    assert (anchor.from_.col, anchor.from_.row) == (4, 0)
    assert (anchor.from_.col_off, anchor.from_.row_off) == (0, 0)
    # 480px over 64px columns and 290px over 20px rows
    assert (anchor.to.col, anchor.to.col_off) == (11, 32 * 9525)
    assert (anchor.to.row, anchor.to.row_off) == (14, 10 * 9525)
    assert anchor.client_data.prints_with_sheet is True
    assert anchor.client_data.locks_with_sheet is False


def test_frame_and_relationship_ids_are_sequential(manager, store):
    anchors = [manager.add_chart(PATH, SheetGeometry(), "A1", 100, 100, rid) for rid in range(1, 6)]
    assert [_frame_id(a) for a in anchors] == [2, 3, 4, 5, 6]
    assert [_rid(a) for a in anchors] == ["rId1", "rId2", "rId3", "rId4", "rId5"]
    assert len(store.get_or_create(PATH).two_cell_anchors) == 5


def test_offset_scale_and_positioning(manager):
    fmt = PictureFormat(x_offset=70, y_offset=5, x_scale=0.5, positioning="oneCell", locked=True)
    anchor = manager.add_chart(PATH, SheetGeometry(), "B2", 200, 40, 1, fmt)
    assert (anchor.from_.col, anchor.from_.col_off) == (2, 6 * 9525)
    assert (anchor.from_.row, anchor.from_.row_off) == (1, 5 * 9525)
    # 100px wide after scaling, starting 6px into column C
    assert (anchor.to.col, anchor.to.col_off) == (3, 42 * 9525)
    assert anchor.edit_as == "oneCell"
    assert anchor.client_data.locks_with_sheet is True


def test_invalid_cell_does_not_touch_the_store(manager, store):
    with pytest.raises(CoordinateError):
        manager.add_chart(PATH, SheetGeometry(), "1A", 480, 290, 1)
    assert PATH not in store


def test_chart_sheet_anchor_is_absolute(manager, store):
    anchor = manager.add_chart_sheet_chart(PATH, 1)
    assert anchor.kind is AnchorKind.absolute
    assert (anchor.pos.x, anchor.pos.y) == (0, 0)
    assert (anchor.ext.cx, anchor.ext.cy) == (0, 0)
    assert anchor.from_ is None
    doc = store.get_or_create(PATH)
    assert doc.absolute_anchors == [anchor]
    root = parse_xml(encode_drawing(doc))
    assert root.xpath("xdr:absoluteAnchor/xdr:graphicFrame", namespaces=NS)


def test_picture_anchor(manager):
    anchor = manager.add_picture(PATH, SheetGeometry(), "C3", 64, 20, 4, name="logo")
    pic = parse_xml(anchor.payload)
    assert pic.xpath(".//a:blip/@r:embed", namespaces=NS) == ["rId4"]
    assert pic.xpath(".//xdr:cNvPr/@name", namespaces=NS) == ["logo"]
    assert classify_anchor(anchor) is DrawingObjectKind.picture


def test_delete_removes_adjacent_matches(manager, store):
    geometry = SheetGeometry()
    manager.add_chart(PATH, geometry, "E1", 480, 290, 1)
    manager.add_chart(PATH, geometry, "E1", 480, 290, 2)
    manager.add_picture(PATH, geometry, "E1", 64, 20, 3)
    manager.add_chart(PATH, geometry, "A1", 480, 290, 4)

    assert manager.delete(PATH, 4, 0, DrawingObjectKind.chart) == 2
    remaining = store.get_or_create(PATH).two_cell_anchors
    assert [classify_anchor(a) for a in remaining] == [
        DrawingObjectKind.picture,
        DrawingObjectKind.chart,
    ]
    assert manager.delete(PATH, 4, 0, DrawingObjectKind.chart) == 0
    assert manager.delete(PATH, 4, 0, DrawingObjectKind.picture) == 1
    assert len(manager.find(PATH, 0, 0, DrawingObjectKind.chart)) == 1


def test_delete_in_decoded_drawing(drawing_xml):
    parts = {PATH: drawing_xml}
    manager = AnchorManager(DrawingStore(parts.get, parts.__setitem__))
    assert manager.delete(PATH, 1, 1, DrawingObjectKind.chart) == 0
    assert manager.delete(PATH, 1, 1, DrawingObjectKind.picture) == 1
    assert manager.delete(PATH, 4, 0, DrawingObjectKind.chart) == 1


def test_frame_ids_count_every_anchor_list(drawing_xml):
    parts = {PATH: drawing_xml}
    manager = AnchorManager(DrawingStore(parts.get, parts.__setitem__))
    anchor = manager.add_chart(PATH, SheetGeometry(), "A1", 10, 10, 9)
    assert _frame_id(anchor) == 6
