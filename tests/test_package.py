import pytest
from pptx.opc.constants import CONTENT_TYPE as CT
from pptx.opc.constants import RELATIONSHIP_TYPE as RT

from mixlsx.errors import CorruptPartError, PartNotFoundError
from mixlsx.oxml import NS, parse_xml
from mixlsx.package import Package, relative_target, rels_path_for, resolve_target


def test_rels_path_and_targets():
    assert rels_path_for("xl/drawings/drawing1.xml") == "xl/drawings/_rels/drawing1.xml.rels"
    assert rels_path_for("xl/workbook.xml") == "xl/_rels/workbook.xml.rels"
    assert relative_target("xl/drawings/drawing1.xml", "xl/charts/chart2.xml") == "../charts/chart2.xml"
    assert resolve_target("xl/worksheets/sheet1.xml", "../drawings/drawing1.xml") == "xl/drawings/drawing1.xml"
    assert resolve_target("xl/workbook.xml", "/xl/worksheets/sheet1.xml") == "xl/worksheets/sheet1.xml"


def test_relationships_round_trip():
    package = Package()
    rels = "xl/drawings/_rels/drawing1.xml.rels"
    assert package.add_relationship(rels, RT.CHART, "../charts/chart1.xml") == 1
    assert package.add_relationship(rels, RT.IMAGE, "../media/image1.png") == 2

    reopened = Package.open(package.to_bytes())
    loaded = reopened.relationships(rels)
    assert [r.rid for r in loaded] == ["rId1", "rId2"]
    assert reopened.relationship_target(rels, "rId2") == "../media/image1.png"
    assert reopened.add_relationship(rels, RT.CHART, "../charts/chart2.xml") == 3


def test_content_types():
    package = Package()
    package.add_override("xl/charts/chart1.xml", CT.DML_CHART)
    package.add_override("xl/charts/chart1.xml", CT.DML_CHART)
    package.add_default("png", CT.PNG)
    package.flush()

    root = parse_xml(package.get_part("[Content_Types].xml"))
    assert root.xpath("ct:Override/@PartName", namespaces=NS) == ["/xl/charts/chart1.xml"]
    tags = [el.tag.split("}")[1] for el in root]
    assert tags == ["Default", "Default", "Default", "Override"]
    assert package.content_type("xl/media/image1.png") == CT.PNG
    assert package.content_type("xl/charts/chart1.xml") == CT.DML_CHART


def test_missing_and_corrupt_parts():
    package = Package({"xl/workbook.xml": b"<workbook"})
    with pytest.raises(PartNotFoundError):
        package.read_part("xl/styles.xml")
    assert package.get_part("xl/styles.xml") is None
    with pytest.raises(CorruptPartError):
        package.read_xml("xl/workbook.xml")


def test_content_types_part_is_written_first():
    package = Package({"xl/workbook.xml": b"<x/>"})
    package.add_override("xl/workbook.xml", CT.SML_SHEET_MAIN)
    reopened = Package.open(package.to_bytes())
    assert reopened.part_names()[0] == "[Content_Types].xml"
