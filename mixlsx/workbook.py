from __future__ import annotations

import logging
from pathlib import Path
from typing import BinaryIO, Dict, List, Literal, Optional, Union

from lxml import etree
from pptx.opc.constants import CONTENT_TYPE as CT
from pptx.opc.constants import RELATIONSHIP_TYPE as RT
from pydantic import ConfigDict

from .anchors import AnchorManager
from .base import JsonModel
from .charts import ChartSpec, Dimension, PictureFormat
from .chartspace import render_chart_space
from .drawing import DrawingStore
from .enums import DrawingObjectKind
from .errors import SheetNotFoundError
from .geometry import SheetGeometry
from .ids import (
    CHARTSHEET_PART,
    MEDIA_PART,
    WORKSHEET_PART,
    next_chart_index,
    next_drawing_index,
    next_part_index,
)
from .oxml import NS, qn
from .package import Package, relative_target, rels_path_for, resolve_target
from .settings import Settings
from .utils import cell_name_to_coordinates

logger = logging.getLogger(__name__)

WORKBOOK_PART = "xl/workbook.xml"
DRAWING_CONTENT_TYPE = getattr(
    CT, "DML_DRAWING", "application/vnd.openxmlformats-officedocument.drawing+xml"
)
# python-pptx only names the worksheet-source relationship
WORKSHEET_RELATIONSHIP = "http://schemas.openxmlformats.org/officeDocument/2006/relationships/worksheet"
IMAGE_CONTENT_TYPES = {"png": CT.PNG, "jpeg": CT.JPEG, "jpg": CT.JPEG, "gif": CT.GIF}

# elements that must follow <drawing> in worksheets and chart sheets
_AFTER_DRAWING = (
    "legacyDrawing",
    "legacyDrawingHF",
    "drawingHF",
    "picture",
    "oleObjects",
    "controls",
    "webPublishItems",
    "tableParts",
    "extLst",
)
_SHEET_NSMAP = {None: NS["x"], "r": NS["r"]}
_INVALID_SHEET_CHARS = frozenset("[]:*?/\\")


class SheetEntry(JsonModel):
    model_config = ConfigDict(extra="forbid")

    name: str
    sheet_id: int
    rid: str
    part: str
    kind: Literal["worksheet", "chartsheet"] = "worksheet"


class Workbook:
    """Chart and picture editing on top of a SpreadsheetML package.

    Drawing documents are decoded on first use and stay resident until the
    workbook is saved. A workbook is not safe for concurrent use.
    """

    def __init__(self, package: Package, settings: Optional[Settings] = None) -> None:
        self.package = package
        self.settings = settings or Settings()
        self.drawings = DrawingStore(package.get_part, package.write_part)
        self.anchors = AnchorManager(self.drawings)
        self._sheets: Dict[str, SheetEntry] = self._read_sheets()

    # ---------- construction ----------
    @classmethod
    def new(cls, settings: Optional[Settings] = None) -> "Workbook":
        package = Package()
        root = etree.Element(qn("x:workbook"), nsmap=_SHEET_NSMAP)
        etree.SubElement(root, qn("x:sheets"))
        package.write_xml(WORKBOOK_PART, root)
        package.add_relationship("_rels/.rels", RT.OFFICE_DOCUMENT, WORKBOOK_PART)
        package.add_override(WORKBOOK_PART, CT.SML_SHEET_MAIN)
        wb = cls(package, settings)
        wb.add_worksheet("Sheet1")
        return wb

    @classmethod
    def open(
        cls, source: Union[str, Path, bytes, BinaryIO], settings: Optional[Settings] = None
    ) -> "Workbook":
        return cls(Package.open(source), settings)

    def _read_sheets(self) -> Dict[str, SheetEntry]:
        sheets: Dict[str, SheetEntry] = {}
        if not self.package.has_part(WORKBOOK_PART):
            return sheets
        rels_path = rels_path_for(WORKBOOK_PART)
        rels = {rel.rid: rel for rel in self.package.relationships(rels_path)}
        root = self.package.read_xml(WORKBOOK_PART)
        for el in root.iterfind("%s/%s" % (qn("x:sheets"), qn("x:sheet"))):
            rid = el.get(qn("r:id"))
            rel = rels.get(rid)
            if rel is None:
                logger.warning("sheet %r has no workbook relationship %s", el.get("name"), rid)
                continue
            sheets[el.get("name")] = SheetEntry(
                name=el.get("name"),
                sheet_id=int(el.get("sheetId")),
                rid=rid,
                part=resolve_target(WORKBOOK_PART, rel.target),
                kind="chartsheet" if rel.type == RT.CHARTSHEET else "worksheet",
            )
        return sheets

    # ---------- sheets ----------
    @property
    def sheet_names(self) -> List[str]:
        return list(self._sheets)

    def sheet(self, name: str) -> SheetEntry:
        try:
            return self._sheets[name]
        except KeyError:
            raise SheetNotFoundError(name) from None

    def _worksheet(self, name: str) -> SheetEntry:
        entry = self.sheet(name)
        if entry.kind != "worksheet":
            raise ValueError(f"sheet {name!r} is a chart sheet")
        return entry

    def _register_sheet(self, name: str, part: str, rel_type: str, kind: str) -> SheetEntry:
        rid = self.package.add_relationship(
            rels_path_for(WORKBOOK_PART), rel_type, relative_target(WORKBOOK_PART, part)
        )
        root = self.package.read_xml(WORKBOOK_PART)
        sheets = root.find(qn("x:sheets"))
        if sheets is None:
            sheets = etree.SubElement(root, qn("x:sheets"))
        sheet_id = max((e.sheet_id for e in self._sheets.values()), default=0) + 1
        el = etree.SubElement(sheets, qn("x:sheet"), name=name, sheetId=str(sheet_id))
        el.set(qn("r:id"), "rId%d" % rid)
        self.package.write_xml(WORKBOOK_PART, root)
        entry = SheetEntry(name=name, sheet_id=sheet_id, rid="rId%d" % rid, part=part, kind=kind)
        self._sheets[name] = entry
        logger.info("added %s %r as %s", kind, name, part)
        return entry

    def _check_new_name(self, name: str) -> None:
        if not name or len(name) > 31:
            raise ValueError(f"invalid sheet name {name!r}")
        if _INVALID_SHEET_CHARS.intersection(name) or name[0] == "'" or name[-1] == "'":
            raise ValueError(f"invalid sheet name {name!r}")
        if name in self._sheets:
            raise ValueError(f"sheet {name!r} already exists")

    def add_worksheet(self, name: str) -> SheetEntry:
        self._check_new_name(name)
        index = next_part_index(self.package.part_names(), WORKSHEET_PART)
        part = "xl/worksheets/sheet%d.xml" % index
        root = etree.Element(qn("x:worksheet"), nsmap=_SHEET_NSMAP)
        etree.SubElement(root, qn("x:sheetData"))
        self.package.write_xml(part, root)
        self.package.add_override(part, CT.SML_WORKSHEET)
        return self._register_sheet(name, part, WORKSHEET_RELATIONSHIP, "worksheet")

    def geometry(self, sheet: str) -> SheetGeometry:
        entry = self.sheet(sheet)
        return SheetGeometry.from_worksheet(self.package.read_xml(entry.part), self.settings)

    # ---------- drawings ----------
    def _next_drawing_index(self) -> int:
        names = set(self.package.part_names()) | set(self.drawings.paths())
        return next_drawing_index(names)

    def _existing_drawing(self, entry: SheetEntry) -> Optional[str]:
        el = self.package.read_xml(entry.part).find(qn("x:drawing"))
        if el is None:
            return None
        target = self.package.relationship_target(rels_path_for(entry.part), el.get(qn("r:id")))
        if target is None:
            return None
        return resolve_target(entry.part, target)

    def _attach_drawing(self, entry: SheetEntry, drawing_path: str) -> None:
        rid = self.package.add_relationship(
            rels_path_for(entry.part), RT.DRAWING, relative_target(entry.part, drawing_path)
        )
        root = self.package.read_xml(entry.part)
        el = etree.SubElement(root, qn("x:drawing"))
        el.set(qn("r:id"), "rId%d" % rid)
        for name in _AFTER_DRAWING:
            successor = root.find(qn("x:" + name))
            if successor is not None:
                successor.addprevious(el)
                break
        self.package.write_xml(entry.part, root)

    def _prepare_drawing(self, entry: SheetEntry) -> str:
        """Return the sheet's drawing part, creating and linking one if needed."""
        drawing_path = self._existing_drawing(entry)
        if drawing_path is not None:
            self.drawings.get_or_create(drawing_path)
            return drawing_path
        drawing_path = "xl/drawings/drawing%d.xml" % self._next_drawing_index()
        self.drawings.get_or_create(drawing_path)
        self._attach_drawing(entry, drawing_path)
        self.package.add_override(drawing_path, DRAWING_CONTENT_TYPE)
        logger.info("created %s for sheet %r", drawing_path, entry.name)
        return drawing_path

    def _render(self, spec, combo) -> tuple:
        spec = ChartSpec.coerce(spec)
        combos = [ChartSpec.coerce(c) for c in combo]
        # rendering resolves every kind and merges slots before anything is written
        return spec, render_chart_space(spec, combos, lang=self.settings.lang)

    def _write_chart(self, chart_xml: bytes) -> str:
        part = "xl/charts/chart%d.xml" % next_chart_index(self.package.part_names())
        self.package.write_part(part, chart_xml)
        self.package.add_override(part, CT.DML_CHART)
        return part

    # ---------- charts ----------
    def add_chart(self, sheet: str, cell: str, spec, *combo) -> str:
        """Place a chart (plus optional combo overlays) with its top-left at `cell`.

        `spec` and each `combo` entry may be a `ChartSpec`, a dict or a JSON
        string. Returns the new chart part name.
        """
        entry = self._worksheet(sheet)
        cell_name_to_coordinates(cell)
        spec, chart_xml = self._render(spec, combo)
        dimension = spec.dimension or Dimension(
            width=self.settings.chart_width_px, height=self.settings.chart_height_px
        )
        geometry = self.geometry(sheet)
        drawing_path = self._prepare_drawing(entry)
        chart_part = self._write_chart(chart_xml)
        rid = self.package.add_relationship(
            rels_path_for(drawing_path), RT.CHART, relative_target(drawing_path, chart_part)
        )
        self.anchors.add_chart(
            drawing_path, geometry, cell, dimension.width, dimension.height, rid, spec.format
        )
        logger.info("added %s chart %s at %s!%s", spec.type, chart_part, sheet, cell)
        return chart_part

    def add_chart_sheet(self, name: str, spec, *combo) -> str:
        """Create a chart sheet holding one chart; returns the chart part name."""
        self._check_new_name(name)
        spec, chart_xml = self._render(spec, combo)
        index = next_part_index(self.package.part_names(), CHARTSHEET_PART)
        part = "xl/chartsheets/sheet%d.xml" % index
        drawing_path = "xl/drawings/drawing%d.xml" % self._next_drawing_index()
        self.drawings.get_or_create(drawing_path)

        root = etree.Element(qn("x:chartsheet"), nsmap=_SHEET_NSMAP)
        etree.SubElement(root, qn("x:sheetPr"))
        views = etree.SubElement(root, qn("x:sheetViews"))
        etree.SubElement(views, qn("x:sheetView"), zoomToFit="1", workbookViewId="0")
        etree.SubElement(
            root, qn("x:pageMargins"), left="0.7", right="0.7", top="0.75", bottom="0.75", header="0.3", footer="0.3"
        )
        self.package.write_xml(part, root)
        self.package.add_override(part, CT.SML_CHARTSHEET)
        entry = self._register_sheet(name, part, RT.CHARTSHEET, "chartsheet")
        self._attach_drawing(entry, drawing_path)
        self.package.add_override(drawing_path, DRAWING_CONTENT_TYPE)

        chart_part = self._write_chart(chart_xml)
        rid = self.package.add_relationship(
            rels_path_for(drawing_path), RT.CHART, relative_target(drawing_path, chart_part)
        )
        self.anchors.add_chart_sheet_chart(drawing_path, rid, spec.format)
        logger.info("added %s chart sheet %r (%s)", spec.type, name, chart_part)
        return chart_part

    def delete_chart(self, sheet: str, cell: str) -> int:
        return self._delete(sheet, cell, DrawingObjectKind.chart)

    # ---------- pictures ----------
    def add_picture(
        self,
        sheet: str,
        cell: str,
        image: bytes,
        extension: str,
        width: int,
        height: int,
        fmt=None,
        name: str = "",
    ) -> str:
        """Embed image bytes anchored at `cell`; returns the media part name."""
        entry = self._worksheet(sheet)
        ext = extension.lower().lstrip(".")
        if ext not in IMAGE_CONTENT_TYPES:
            raise ValueError(f"unsupported image extension {extension!r}")
        cell_name_to_coordinates(cell)
        fmt = PictureFormat() if fmt is None else PictureFormat.coerce(fmt)
        geometry = self.geometry(sheet)
        drawing_path = self._prepare_drawing(entry)
        media = "xl/media/image%d.%s" % (
            next_part_index(self.package.part_names(), MEDIA_PART),
            ext,
        )
        self.package.write_part(media, image)
        self.package.add_default(ext, IMAGE_CONTENT_TYPES[ext])
        rid = self.package.add_relationship(
            rels_path_for(drawing_path), RT.IMAGE, relative_target(drawing_path, media)
        )
        self.anchors.add_picture(drawing_path, geometry, cell, width, height, rid, fmt, name)
        logger.info("added picture %s at %s!%s", media, sheet, cell)
        return media

    def delete_picture(self, sheet: str, cell: str) -> int:
        return self._delete(sheet, cell, DrawingObjectKind.picture)

    def _delete(self, sheet: str, cell: str, kind: DrawingObjectKind) -> int:
        col, row = cell_name_to_coordinates(cell)
        drawing_path = self._existing_drawing(self.sheet(sheet))
        if drawing_path is None:
            return 0
        return self.anchors.delete(drawing_path, col - 1, row - 1, kind)

    # ---------- persistence ----------
    def flush(self) -> None:
        self.drawings.flush()
        self.package.flush()

    def to_bytes(self) -> bytes:
        self.drawings.flush()
        return self.package.to_bytes()

    def save(self, path: Union[str, Path]) -> None:
        self.drawings.flush()
        self.package.save(path)
