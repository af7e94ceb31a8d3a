"""In-memory OPC package: raw parts, relationship files and content types."""

from __future__ import annotations

import logging
import posixpath
import zipfile
from io import BytesIO
from pathlib import Path
from typing import BinaryIO, Dict, List, Optional, Union

from lxml import etree
from pptx.opc.constants import CONTENT_TYPE as CT
from pydantic import ConfigDict

from .base import JsonModel
from .errors import CorruptPartError, PartNotFoundError
from .ids import next_relationship_id
from .oxml import NS, parse_xml, qn, to_bytes

logger = logging.getLogger(__name__)

CONTENT_TYPES_PART = "[Content_Types].xml"


class Relationship(JsonModel):
    model_config = ConfigDict(extra="forbid")

    rid: str
    type: str
    target: str
    target_mode: Optional[str] = None


def rels_path_for(part_path: str) -> str:
    """``xl/drawings/drawing1.xml`` -> ``xl/drawings/_rels/drawing1.xml.rels``."""
    directory, name = posixpath.split(part_path)
    return posixpath.join(directory, "_rels", name + ".rels")


def resolve_target(source_part: str, target: str) -> str:
    """Resolve a relationship target relative to the part that owns it."""
    if target.startswith("/"):
        return target.lstrip("/")
    return posixpath.normpath(posixpath.join(posixpath.dirname(source_part), target))


def relative_target(source_part: str, part_path: str) -> str:
    return posixpath.relpath(part_path, posixpath.dirname(source_part))


class Package:
    def __init__(self, parts: Optional[Dict[str, bytes]] = None) -> None:
        self._parts: Dict[str, bytes] = dict(parts or {})
        self._rels: Dict[str, List[Relationship]] = {}
        self._content_types = None

    # ---------- construction / persistence ----------
    @classmethod
    def open(cls, source: Union[str, Path, bytes, BinaryIO]) -> "Package":
        if isinstance(source, (bytes, bytearray)):
            source = BytesIO(source)
        with zipfile.ZipFile(source) as zf:
            parts = {info.filename: zf.read(info) for info in zf.infolist() if not info.is_dir()}
        logger.debug("opened package with %d parts", len(parts))
        return cls(parts)

    def flush(self) -> None:
        """Write cached relationships and content types back into their parts."""
        for rels_path, rels in self._rels.items():
            root = etree.Element(qn("pr:Relationships"), nsmap={None: NS["pr"]})
            for rel in rels:
                el = etree.SubElement(root, qn("pr:Relationship"), Id=rel.rid, Type=rel.type, Target=rel.target)
                if rel.target_mode:
                    el.set("TargetMode", rel.target_mode)
            self._parts[rels_path] = to_bytes(root)
        if self._content_types is not None:
            self._parts[CONTENT_TYPES_PART] = to_bytes(self._content_types)

    def to_bytes(self) -> bytes:
        self.flush()
        buf = BytesIO()
        with zipfile.ZipFile(buf, "w", zipfile.ZIP_DEFLATED) as zf:
            names = sorted(self._parts, key=lambda n: (n != CONTENT_TYPES_PART, n))
            for name in names:
                zf.writestr(name, self._parts[name])
        return buf.getvalue()

    def save(self, path: Union[str, Path]) -> None:
        Path(path).write_bytes(self.to_bytes())

    # ---------- parts ----------
    def part_names(self) -> List[str]:
        return list(self._parts)

    def has_part(self, path: str) -> bool:
        return path in self._parts

    def get_part(self, path: str) -> Optional[bytes]:
        return self._parts.get(path)

    def read_part(self, path: str) -> bytes:
        try:
            return self._parts[path]
        except KeyError:
            raise PartNotFoundError(path) from None

    def write_part(self, path: str, data: bytes) -> None:
        self._parts[path] = data

    def read_xml(self, path: str):
        try:
            return parse_xml(self.read_part(path))
        except etree.XMLSyntaxError as exc:
            raise CorruptPartError(path, str(exc)) from exc

    def write_xml(self, path: str, root) -> None:
        self._parts[path] = to_bytes(root)

    # ---------- relationships ----------
    def relationships(self, rels_path: str) -> List[Relationship]:
        rels = self._rels.get(rels_path)
        if rels is not None:
            return rels
        rels = []
        if rels_path in self._parts:
            for el in self.read_xml(rels_path).iterfind(qn("pr:Relationship")):
                rels.append(
                    Relationship(
                        rid=el.get("Id"),
                        type=el.get("Type"),
                        target=el.get("Target"),
                        target_mode=el.get("TargetMode"),
                    )
                )
        self._rels[rels_path] = rels
        return rels

    def add_relationship(
        self, rels_path: str, rel_type: str, target: str, target_mode: Optional[str] = None
    ) -> int:
        """Append a relationship and return the number N of its ``rIdN``."""
        rels = self.relationships(rels_path)
        rid = next_relationship_id({rel.rid for rel in rels})
        rels.append(Relationship(rid="rId%d" % rid, type=rel_type, target=target, target_mode=target_mode))
        logger.debug("%s: rId%d -> %s", rels_path, rid, target)
        return rid

    def relationship_target(self, rels_path: str, rid: str) -> Optional[str]:
        for rel in self.relationships(rels_path):
            if rel.rid == rid:
                return rel.target
        return None

    # ---------- content types ----------
    def _types(self):
        if self._content_types is None:
            if CONTENT_TYPES_PART in self._parts:
                self._content_types = self.read_xml(CONTENT_TYPES_PART)
            else:
                self._content_types = etree.Element(qn("ct:Types"), nsmap={None: NS["ct"]})
                self.add_default("rels", CT.OPC_RELATIONSHIPS)
                self.add_default("xml", CT.XML)
        return self._content_types

    def content_type(self, part_name: str) -> Optional[str]:
        types = self._types()
        for el in types.iterfind(qn("ct:Override")):
            if el.get("PartName") == "/" + part_name:
                return el.get("ContentType")
        ext = part_name.rsplit(".", 1)[-1].lower()
        for el in types.iterfind(qn("ct:Default")):
            if el.get("Extension", "").lower() == ext:
                return el.get("ContentType")
        return None

    def add_default(self, extension: str, content_type: str) -> None:
        types = self._types()
        for el in types.iterfind(qn("ct:Default")):
            if el.get("Extension", "").lower() == extension.lower():
                return
        el = etree.SubElement(types, qn("ct:Default"), Extension=extension, ContentType=content_type)
        # Default entries precede Override entries
        first_override = types.find(qn("ct:Override"))
        if first_override is not None:
            first_override.addprevious(el)

    def add_override(self, part_name: str, content_type: str) -> None:
        types = self._types()
        name = "/" + part_name
        for el in types.iterfind(qn("ct:Override")):
            if el.get("PartName") == name:
                return
        etree.SubElement(types, qn("ct:Override"), PartName=name, ContentType=content_type)
