"""Drawing parts (``xl/drawings/drawingN.xml``) and the in-memory document store.

A drawing part is read through two shapes. The *decode shape*
(`DecodedDrawing` / `DecodedAnchor`) mirrors the XML as found on disk, with
the placed object kept in a kind-specific field (graphic frame, picture,
shape, ...). The *encode shape* (`DrawingDocument` / `CellAnchor`) is what
the library edits and writes back: every anchor carries one opaque,
serialized ``payload``. `project_drawing` is the pure conversion between
the two.
"""

from __future__ import annotations

import logging
from typing import Callable, Dict, List, Optional

from lxml import etree
from pydantic import ConfigDict, Field, model_validator

from .base import JsonModel
from .enums import AnchorKind
from .errors import CorruptPartError
from .oxml import DRAWING_NSMAP, NS, local_name, parse_xml, qn, strict_to_transitional, sub, to_bytes, to_string

logger = logging.getLogger(__name__)


class AnchorMarker(JsonModel):
    """A cell corner: 0-based column/row plus an EMU offset into the cell."""

    model_config = ConfigDict(extra="forbid")

    col: int = Field(0, ge=0)
    col_off: int = Field(0, ge=0)
    row: int = Field(0, ge=0)
    row_off: int = Field(0, ge=0)


class Point2D(JsonModel):
    model_config = ConfigDict(extra="forbid")

    x: int = 0
    y: int = 0


class Extent(JsonModel):
    model_config = ConfigDict(extra="forbid")

    cx: int = Field(0, ge=0)
    cy: int = Field(0, ge=0)


class ClientData(JsonModel):
    model_config = ConfigDict(extra="forbid")

    locks_with_sheet: bool = False
    prints_with_sheet: bool = True


class _AnchorBase(JsonModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    kind: AnchorKind = AnchorKind.two_cell
    edit_as: Optional[str] = None
    from_: Optional[AnchorMarker] = Field(None, alias="from")
    to: Optional[AnchorMarker] = None
    pos: Optional[Point2D] = None
    ext: Optional[Extent] = None
    client_data: Optional[ClientData] = None

    @model_validator(mode="after")
    def _check_placement(self):
        required = {
            AnchorKind.two_cell: ("from_", "to"),
            AnchorKind.one_cell: ("from_", "ext"),
            AnchorKind.absolute: ("pos", "ext"),
        }[self.kind]
        missing = [name for name in required if getattr(self, name) is None]
        if missing:
            raise ValueError(f"{self.kind.value} requires {', '.join(missing)}")
        if self.kind is AnchorKind.absolute and (self.from_ is not None or self.to is not None):
            raise ValueError("absoluteAnchor cannot carry cell markers")
        if self.kind is not AnchorKind.absolute and self.pos is not None:
            raise ValueError(f"{self.kind.value} cannot carry an absolute position")
        return self


# decode-shape field -> element local name, in preference order
PAYLOAD_FIELDS = (
    ("graphic_frame", "graphicFrame"),
    ("pic", "pic"),
    ("sp", "sp"),
    ("grp_sp", "grpSp"),
    ("cxn_sp", "cxnSp"),
    ("content_part", "contentPart"),
    ("alternate_content", "AlternateContent"),
)


class DecodedAnchor(_AnchorBase):
    """An anchor as read from disk; exactly one payload field is normally set."""

    graphic_frame: Optional[str] = None
    pic: Optional[str] = None
    sp: Optional[str] = None
    grp_sp: Optional[str] = None
    cxn_sp: Optional[str] = None
    content_part: Optional[str] = None
    alternate_content: Optional[str] = None


class CellAnchor(_AnchorBase):
    """An anchor in the editable document; ``payload`` is the serialized object."""

    payload: str = ""


class DecodedDrawing(JsonModel):
    namespaces: Dict[str, str] = Field(default_factory=dict)
    two_cell_anchors: List[DecodedAnchor] = Field(default_factory=list)
    one_cell_anchors: List[DecodedAnchor] = Field(default_factory=list)
    absolute_anchors: List[DecodedAnchor] = Field(default_factory=list)


class DrawingDocument(JsonModel):
    namespaces: Dict[str, str] = Field(default_factory=lambda: dict(DRAWING_NSMAP))
    two_cell_anchors: List[CellAnchor] = Field(default_factory=list)
    one_cell_anchors: List[CellAnchor] = Field(default_factory=list)
    absolute_anchors: List[CellAnchor] = Field(default_factory=list)

    def anchor_lists(self) -> Dict[AnchorKind, List[CellAnchor]]:
        return {
            AnchorKind.two_cell: self.two_cell_anchors,
            AnchorKind.one_cell: self.one_cell_anchors,
            AnchorKind.absolute: self.absolute_anchors,
        }

    def anchors(self) -> List[CellAnchor]:
        return self.two_cell_anchors + self.one_cell_anchors + self.absolute_anchors

    def append(self, anchor: CellAnchor) -> None:
        self.anchor_lists()[anchor.kind].append(anchor)


# ---------- decode ----------
def _int_child(el, tag: str) -> int:
    child = el.find(qn(tag))
    if child is None or child.text is None:
        return 0
    return int(child.text.strip())


def _decode_marker(el) -> Optional[AnchorMarker]:
    if el is None:
        return None
    return AnchorMarker(
        col=_int_child(el, "xdr:col"),
        col_off=_int_child(el, "xdr:colOff"),
        row=_int_child(el, "xdr:row"),
        row_off=_int_child(el, "xdr:rowOff"),
    )


def _truthy(value: Optional[str], default: bool) -> bool:
    if value is None:
        return default
    return value in ("1", "true")


def _decode_anchor(kind: AnchorKind, el) -> DecodedAnchor:
    fields = {"kind": kind, "edit_as": el.get("editAs")}
    fields["from_"] = _decode_marker(el.find(qn("xdr:from")))
    fields["to"] = _decode_marker(el.find(qn("xdr:to")))
    pos = el.find(qn("xdr:pos"))
    if pos is not None:
        fields["pos"] = Point2D(x=int(pos.get("x", 0)), y=int(pos.get("y", 0)))
    ext = el.find(qn("xdr:ext"))
    if ext is not None:
        fields["ext"] = Extent(cx=int(ext.get("cx", 0)), cy=int(ext.get("cy", 0)))
    client = el.find(qn("xdr:clientData"))
    if client is not None:
        fields["client_data"] = ClientData(
            locks_with_sheet=_truthy(client.get("fLocksWithSheet"), True),
            prints_with_sheet=_truthy(client.get("fPrintsWithSheet"), True),
        )
    by_local = {name: field for field, name in PAYLOAD_FIELDS}
    for child in el:
        if not isinstance(child.tag, str):
            continue
        field = by_local.get(local_name(child))
        if field is not None and field not in fields:
            fields[field] = to_string(child)
    return DecodedAnchor(**fields)


_ANCHOR_TAGS = {
    qn("xdr:twoCellAnchor"): AnchorKind.two_cell,
    qn("xdr:oneCellAnchor"): AnchorKind.one_cell,
    qn("xdr:absoluteAnchor"): AnchorKind.absolute,
}


def decode_drawing(data: bytes, part_path: str = "<drawing>") -> DecodedDrawing:
    """Parse drawing XML (strict or transitional namespaces) into the decode shape."""
    try:
        root = parse_xml(strict_to_transitional(data))
    except etree.XMLSyntaxError as exc:
        raise CorruptPartError(part_path, str(exc)) from exc
    if root.tag != qn("xdr:wsDr"):
        raise CorruptPartError(part_path, f"unexpected root element {root.tag}")
    decoded = DecodedDrawing(namespaces={p: u for p, u in root.nsmap.items() if p})
    lists = {
        AnchorKind.two_cell: decoded.two_cell_anchors,
        AnchorKind.one_cell: decoded.one_cell_anchors,
        AnchorKind.absolute: decoded.absolute_anchors,
    }
    for child in root:
        kind = _ANCHOR_TAGS.get(child.tag)
        if kind is None:
            if child.tag == qn("mc:AlternateContent"):
                logger.warning(
                    "%s: skipping mc:AlternateContent anchor, it is not kept on save", part_path
                )
            continue
        try:
            lists[kind].append(_decode_anchor(kind, child))
        except ValueError as exc:
            raise CorruptPartError(part_path, str(exc)) from exc
    return decoded


def project_anchor(anchor: DecodedAnchor) -> CellAnchor:
    payload = ""
    for field, _ in PAYLOAD_FIELDS:
        value = getattr(anchor, field)
        if value:
            payload = value
            break
    return CellAnchor(
        kind=anchor.kind,
        edit_as=anchor.edit_as,
        from_=anchor.from_,
        to=anchor.to,
        pos=anchor.pos,
        ext=anchor.ext,
        client_data=anchor.client_data,
        payload=payload,
    )


def project_drawing(decoded: DecodedDrawing) -> DrawingDocument:
    namespaces = dict(DRAWING_NSMAP)
    namespaces.update(decoded.namespaces)
    return DrawingDocument(
        namespaces=namespaces,
        two_cell_anchors=[project_anchor(a) for a in decoded.two_cell_anchors],
        one_cell_anchors=[project_anchor(a) for a in decoded.one_cell_anchors],
        absolute_anchors=[project_anchor(a) for a in decoded.absolute_anchors],
    )


# ---------- encode ----------
def _append_marker(parent, tag: str, marker: AnchorMarker) -> None:
    el = sub(parent, tag)
    sub(el, "xdr:col", str(marker.col))
    sub(el, "xdr:colOff", str(marker.col_off))
    sub(el, "xdr:row", str(marker.row))
    sub(el, "xdr:rowOff", str(marker.row_off))


def _encode_anchor(parent, anchor: CellAnchor) -> None:
    el = sub(parent, "xdr:" + anchor.kind.value)
    if anchor.kind is AnchorKind.two_cell and anchor.edit_as:
        el.set("editAs", anchor.edit_as)
    if anchor.from_ is not None:
        _append_marker(el, "xdr:from", anchor.from_)
    if anchor.to is not None:
        _append_marker(el, "xdr:to", anchor.to)
    if anchor.pos is not None:
        sub(el, "xdr:pos", x=anchor.pos.x, y=anchor.pos.y)
    if anchor.ext is not None:
        sub(el, "xdr:ext", cx=anchor.ext.cx, cy=anchor.ext.cy)
    if anchor.payload:
        el.append(parse_xml(anchor.payload))
    client = anchor.client_data or ClientData()
    sub(
        el,
        "xdr:clientData",
        fLocksWithSheet=client.locks_with_sheet,
        fPrintsWithSheet=client.prints_with_sheet,
    )


def encode_drawing(doc: DrawingDocument) -> bytes:
    nsmap = dict(doc.namespaces)
    nsmap.setdefault("xdr", NS["xdr"])
    nsmap.setdefault("a", NS["a"])
    root = etree.Element(qn("xdr:wsDr"), nsmap=nsmap)
    for anchors in doc.anchor_lists().values():
        for anchor in anchors:
            _encode_anchor(root, anchor)
    return to_bytes(root)


def load_drawing(data: Optional[bytes], part_path: str = "<drawing>") -> DrawingDocument:
    """Materialize a drawing document from part bytes.

    ``None`` (no such part) and empty bytes give an empty document; bytes
    that are present but malformed raise `CorruptPartError`.
    """
    if data is None or not data.strip():
        return DrawingDocument()
    return project_drawing(decode_drawing(data, part_path))


class DrawingStore:
    """Drawing documents keyed by part path, materialized on first use.

    `reader` returns a part's bytes or ``None`` when the package lacks it;
    `writer` stores encoded bytes back into the package on `flush`.
    """

    def __init__(
        self,
        reader: Callable[[str], Optional[bytes]],
        writer: Callable[[str, bytes], None],
    ) -> None:
        self._reader = reader
        self._writer = writer
        self._documents: Dict[str, DrawingDocument] = {}

    def __contains__(self, path: str) -> bool:
        return path in self._documents

    def paths(self) -> List[str]:
        return list(self._documents)

    def get_or_create(self, path: str) -> DrawingDocument:
        doc = self._documents.get(path)
        if doc is not None:
            return doc
        data = self._reader(path)
        try:
            doc = load_drawing(data, path)
        except CorruptPartError:
            logger.warning("drawing part %s could not be decoded", path)
            raise
        logger.debug(
            "materialized %s (%s, %d anchors)",
            path,
            "new" if data is None else "existing",
            len(doc.anchors()),
        )
        self._documents[path] = doc
        return doc

    def flush(self) -> None:
        for path, doc in self._documents.items():
            self._writer(path, encode_drawing(doc))
