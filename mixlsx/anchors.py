from __future__ import annotations

import logging
from typing import Optional

from lxml import etree

from .charts import PictureFormat
from .drawing import AnchorMarker, CellAnchor, ClientData, DrawingStore, Extent, Point2D
from .enums import AnchorKind, DrawingObjectKind, Positioning
from .errors import CorruptPartError
from .geometry import SheetGeometry, position_object_pixels
from .ids import next_frame_id
from .oxml import DRAWING_NSMAP, NS, new_element, parse_xml, qn, sub, to_string
from .utils import cell_name_to_coordinates, px_to_emu

logger = logging.getLogger(__name__)


def chart_graphic_frame(frame_id: int, rid: int) -> str:
    """Serialized ``xdr:graphicFrame`` pointing at chart relationship ``rId<rid>``."""
    frame = new_element("xdr:graphicFrame", nsmap=DRAWING_NSMAP, macro="")
    nv = sub(frame, "xdr:nvGraphicFramePr")
    sub(nv, "xdr:cNvPr", id=frame_id, name="Chart %d" % frame_id)
    sub(nv, "xdr:cNvGraphicFramePr")
    xfrm = sub(frame, "xdr:xfrm")
    sub(xfrm, "a:off", x=0, y=0)
    sub(xfrm, "a:ext", cx=0, cy=0)
    graphic = sub(frame, "a:graphic")
    data = sub(graphic, "a:graphicData", uri=NS["c"])
    chart = etree.SubElement(data, qn("c:chart"), nsmap={"c": NS["c"], "r": NS["r"]})
    chart.set(qn("r:id"), "rId%d" % rid)
    return to_string(frame)


def picture_element(frame_id: int, rid: int, name: str = "") -> str:
    """Serialized ``xdr:pic`` embedding image relationship ``rId<rid>``."""
    pic = new_element("xdr:pic", nsmap=DRAWING_NSMAP)
    nv = sub(pic, "xdr:nvPicPr")
    sub(nv, "xdr:cNvPr", id=frame_id, name=name or "Picture %d" % frame_id)
    cnv = sub(nv, "xdr:cNvPicPr")
    sub(cnv, "a:picLocks", noChangeAspect=True)
    fill = sub(pic, "xdr:blipFill")
    blip = etree.SubElement(fill, qn("a:blip"), nsmap={"r": NS["r"]})
    blip.set(qn("r:embed"), "rId%d" % rid)
    stretch = sub(fill, "a:stretch")
    sub(stretch, "a:fillRect")
    sp_pr = sub(pic, "xdr:spPr")
    geom = sub(sp_pr, "a:prstGeom", prst="rect")
    sub(geom, "a:avLst")
    return to_string(pic)


def classify_anchor(anchor: CellAnchor) -> DrawingObjectKind:
    """A payload holding an ``xdr:pic`` is a picture; anything else counts as a chart."""
    if not anchor.payload:
        return DrawingObjectKind.chart
    try:
        root = parse_xml(anchor.payload)
    except etree.XMLSyntaxError as exc:
        raise CorruptPartError("<anchor payload>", str(exc)) from exc
    if root.tag == qn("xdr:pic") or root.find(".//" + qn("xdr:pic")) is not None:
        return DrawingObjectKind.picture
    return DrawingObjectKind.chart


class AnchorManager:
    """Creates and deletes anchors inside the documents of a `DrawingStore`."""

    def __init__(self, store: DrawingStore) -> None:
        self._store = store

    def _two_cell_anchor(
        self,
        geometry: SheetGeometry,
        col: int,
        row: int,
        width: int,
        height: int,
        fmt: PictureFormat,
    ) -> CellAnchor:
        width = int(width * fmt.x_scale)
        height = int(height * fmt.y_scale)
        placed = position_object_pixels(
            geometry, col, row, fmt.x_offset, fmt.y_offset, width, height
        )
        return CellAnchor(
            kind=AnchorKind.two_cell,
            edit_as=(fmt.positioning or Positioning.two_cell).value,
            from_=AnchorMarker(
                col=placed.col_start,
                col_off=px_to_emu(placed.x1),
                row=placed.row_start,
                row_off=px_to_emu(placed.y1),
            ),
            to=AnchorMarker(
                col=placed.col_end,
                col_off=px_to_emu(placed.x2),
                row=placed.row_end,
                row_off=px_to_emu(placed.y2),
            ),
            client_data=ClientData(locks_with_sheet=fmt.locked, prints_with_sheet=fmt.print_obj),
        )

    def add_chart(
        self,
        drawing_path: str,
        geometry: SheetGeometry,
        cell: str,
        width: int,
        height: int,
        rid: int,
        fmt: Optional[PictureFormat] = None,
    ) -> CellAnchor:
        """Append a two-cell anchor for chart relationship ``rId<rid>`` at ``cell``."""
        col, row = cell_name_to_coordinates(cell)
        fmt = fmt or PictureFormat()
        doc = self._store.get_or_create(drawing_path)
        anchor = self._two_cell_anchor(geometry, col - 1, row - 1, width, height, fmt)
        frame_id = next_frame_id(doc)
        anchor.payload = chart_graphic_frame(frame_id, rid)
        doc.two_cell_anchors.append(anchor)
        logger.debug("chart frame %d anchored at %s in %s (rId%d)", frame_id, cell, drawing_path, rid)
        return anchor

    def add_chart_sheet_chart(
        self, drawing_path: str, rid: int, fmt: Optional[PictureFormat] = None
    ) -> CellAnchor:
        """Append an absolute anchor; a chart sheet's page setup sizes the chart."""
        fmt = fmt or PictureFormat()
        doc = self._store.get_or_create(drawing_path)
        frame_id = next_frame_id(doc)
        anchor = CellAnchor(
            kind=AnchorKind.absolute,
            edit_as=fmt.positioning.value if fmt.positioning else None,
            pos=Point2D(),
            ext=Extent(),
            payload=chart_graphic_frame(frame_id, rid),
            client_data=ClientData(locks_with_sheet=fmt.locked, prints_with_sheet=fmt.print_obj),
        )
        doc.absolute_anchors.append(anchor)
        logger.debug("chart-sheet frame %d in %s (rId%d)", frame_id, drawing_path, rid)
        return anchor

    def add_picture(
        self,
        drawing_path: str,
        geometry: SheetGeometry,
        cell: str,
        width: int,
        height: int,
        rid: int,
        fmt: Optional[PictureFormat] = None,
        name: str = "",
    ) -> CellAnchor:
        col, row = cell_name_to_coordinates(cell)
        fmt = fmt or PictureFormat()
        doc = self._store.get_or_create(drawing_path)
        anchor = self._two_cell_anchor(geometry, col - 1, row - 1, width, height, fmt)
        frame_id = next_frame_id(doc)
        anchor.payload = picture_element(frame_id, rid, name)
        doc.two_cell_anchors.append(anchor)
        logger.debug("picture %d anchored at %s in %s (rId%d)", frame_id, cell, drawing_path, rid)
        return anchor

    def find(
        self, drawing_path: str, col: int, row: int, kind: DrawingObjectKind
    ) -> list[CellAnchor]:
        """Two-cell anchors starting at 0-based (col, row) that hold ``kind``."""
        doc = self._store.get_or_create(drawing_path)
        return [a for a in doc.two_cell_anchors if self._matches(a, col, row, kind)]

    def delete(self, drawing_path: str, col: int, row: int, kind: DrawingObjectKind) -> int:
        """Remove every matching anchor and return how many were removed."""
        doc = self._store.get_or_create(drawing_path)
        kept = [a for a in doc.two_cell_anchors if not self._matches(a, col, row, kind)]
        removed = len(doc.two_cell_anchors) - len(kept)
        doc.two_cell_anchors[:] = kept
        logger.info("deleted %d %s anchor(s) at (%d, %d) in %s", removed, kind.value, col, row, drawing_path)
        return removed

    @staticmethod
    def _matches(anchor: CellAnchor, col: int, row: int, kind: DrawingObjectKind) -> bool:
        marker = anchor.from_
        if marker is None or marker.col != col or marker.row != row:
            return False
        return classify_anchor(anchor) is kind
