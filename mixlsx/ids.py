"""Part index, relationship ID and frame ID allocation.

Nothing here is stored: every ID is recomputed from the live collections at
the moment it is needed, so deleting an object frees its number for the next
allocation.
"""

from __future__ import annotations

import re
from typing import Collection, Iterable

from .drawing import DrawingDocument

CHART_PART = re.compile(r"^xl/charts/chart(\d+)\.xml$")
DRAWING_PART = re.compile(r"^xl/drawings/drawing(\d+)\.xml$")
CHARTSHEET_PART = re.compile(r"^xl/chartsheets/sheet(\d+)\.xml$")
WORKSHEET_PART = re.compile(r"^xl/worksheets/sheet(\d+)\.xml$")
MEDIA_PART = re.compile(r"^xl/media/image(\d+)\.\w+$")


def next_id(collection: Collection) -> int:
    return len(collection) + 1


def _used_indices(names: Iterable[str], pattern: re.Pattern) -> set:
    used = set()
    for name in names:
        match = pattern.match(name)
        if match:
            used.add(int(match.group(1)))
    return used


def next_part_index(names: Iterable[str], pattern: re.Pattern) -> int:
    """``count + 1``, stepping past indices a gap-ridden package already uses."""
    used = _used_indices(names, pattern)
    index = next_id(used)
    while index in used:
        index += 1
    return index


def next_chart_index(names: Iterable[str]) -> int:
    return next_part_index(names, CHART_PART)


def next_drawing_index(names: Iterable[str]) -> int:
    return next_part_index(names, DRAWING_PART)


def next_relationship_id(existing_ids: Collection[str]) -> int:
    """``len + 1``, stepping past numbers a gap-ridden rels file already uses."""
    rid = next_id(existing_ids)
    while "rId%d" % rid in existing_ids:
        rid += 1
    return rid


def next_frame_id(doc: DrawingDocument) -> int:
    # frame ids start at 2: anchor count + 2
    return next_id(doc.anchors()) + 1
