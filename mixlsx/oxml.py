"""Namespace table and small lxml helpers shared by the chart and drawing writers."""

from __future__ import annotations

from lxml import etree

NS = {
    "a": "http://schemas.openxmlformats.org/drawingml/2006/main",
    "c": "http://schemas.openxmlformats.org/drawingml/2006/chart",
    "c16r2": "http://schemas.microsoft.com/office/drawing/2015/06/chart",
    "ct": "http://schemas.openxmlformats.org/package/2006/content-types",
    "mc": "http://schemas.openxmlformats.org/markup-compatibility/2006",
    "pr": "http://schemas.openxmlformats.org/package/2006/relationships",
    "r": "http://schemas.openxmlformats.org/officeDocument/2006/relationships",
    "x": "http://schemas.openxmlformats.org/spreadsheetml/2006/main",
    "xdr": "http://schemas.openxmlformats.org/drawingml/2006/spreadsheetDrawing",
}

CHART_NSMAP = {"c": NS["c"], "a": NS["a"], "r": NS["r"], "c16r2": NS["c16r2"]}
DRAWING_NSMAP = {"xdr": NS["xdr"], "a": NS["a"]}

# ISO/IEC 29500 strict URIs and their transitional equivalents
STRICT_TO_TRANSITIONAL = (
    (b"http://purl.oclc.org/ooxml/spreadsheetml/main", NS["x"].encode()),
    (b"http://purl.oclc.org/ooxml/drawingml/main", NS["a"].encode()),
    (b"http://purl.oclc.org/ooxml/drawingml/chart", NS["c"].encode()),
    (b"http://purl.oclc.org/ooxml/drawingml/spreadsheetDrawing", NS["xdr"].encode()),
    (
        b"http://purl.oclc.org/ooxml/drawingml/picture",
        b"http://schemas.openxmlformats.org/drawingml/2006/picture",
    ),
    (b"http://purl.oclc.org/ooxml/officeDocument/relationships", NS["r"].encode()),
)

_PARSER = etree.XMLParser(remove_blank_text=True, resolve_entities=False)


def qn(tag: str) -> str:
    """Clark notation for a prefixed tag, ``"c:ser"`` -> ``"{...chart}ser"``."""
    prefix, local = tag.split(":")
    return "{%s}%s" % (NS[prefix], local)


def local_name(element) -> str:
    return etree.QName(element).localname


def fmt_value(value) -> str:
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def new_element(tag: str, nsmap: dict | None = None, **attrs):
    el = etree.Element(qn(tag), nsmap=nsmap or CHART_NSMAP)
    for key, value in attrs.items():
        el.set(key, fmt_value(value))
    return el


def sub(parent, tag: str, text: str | None = None, **attrs):
    el = etree.SubElement(parent, qn(tag))
    for key, value in attrs.items():
        el.set(key, fmt_value(value))
    if text is not None:
        el.text = text
    return el


def sub_val(parent, tag: str, value):
    """Append the ubiquitous ``<tag val="..."/>`` element."""
    return sub(parent, tag, val=value)


def strict_to_transitional(data: bytes) -> bytes:
    for strict, transitional in STRICT_TO_TRANSITIONAL:
        data = data.replace(strict, transitional)
    return data


def parse_xml(data: bytes | str):
    if isinstance(data, str):
        data = data.encode("utf-8")
    return etree.fromstring(data, _PARSER)


def to_bytes(element) -> bytes:
    return etree.tostring(element, xml_declaration=True, encoding="UTF-8", standalone=True)


def to_string(element) -> str:
    return etree.tostring(element, encoding="unicode")
