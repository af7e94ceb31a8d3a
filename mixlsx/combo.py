"""Combo charts: several chart-kind fragments sharing one plot area."""

from __future__ import annotations

import logging
from typing import List, Sequence

from .charts import ChartSpec
from .errors import ComboCollisionError
from .oxml import qn
from .plotarea import AXIS_SLOTS, CHART_SLOTS, PlotAreaFragment, build_plot_area

logger = logging.getLogger(__name__)


def _ax_id(axis) -> str:
    return axis.find(qn("c:axId")).get("val")


def _renumber(chart, start: int) -> int:
    """Set c:idx and c:order of each series to consecutive values from ``start``."""
    for ser in chart.iterfind(qn("c:ser")):
        for tag in ("c:idx", "c:order"):
            el = ser.find(qn(tag))
            if el is not None:
                el.set("val", str(start))
        start += 1
    return start


def _merge_into(target: PlotAreaFragment, fragment: PlotAreaFragment) -> None:
    added = False
    offset = target.series_count
    for slot in CHART_SLOTS:
        element = fragment.get(slot)
        existing = target.get(slot)
        if element is None or existing is element:
            continue
        if existing is not None:
            raise ComboCollisionError(slot)
        target.set(slot, element)
        offset = _renumber(element, offset)
        added = True
    for slot in AXIS_SLOTS:
        element = fragment.get(slot)
        existing = target.get(slot)
        if element is None or existing is element:
            continue
        if existing is None:
            target.set(slot, element)
        elif _ax_id(existing) != _ax_id(element):
            raise ComboCollisionError(slot)
        else:
            # axes are shared; the first fragment's scaling and labels win
            logger.debug("keeping shared %s (axId=%s)", slot, _ax_id(existing))
    if added:
        target.series_count = offset


def merge_fragments(
    primary: PlotAreaFragment, overlays: Sequence[PlotAreaFragment] = ()
) -> PlotAreaFragment:
    """Merge the primary fragment and its overlays slot by slot.

    Chart-kind slots are only ever written while empty, so a bar overlay on a
    bar chart raises `ComboCollisionError` instead of silently replacing it.
    """
    merged = PlotAreaFragment()
    for fragment in (primary, *overlays):
        _merge_into(merged, fragment)
    return merged


def series_orders(primary: ChartSpec, combos: Sequence[ChartSpec] = ()) -> List[int]:
    """First series index of the primary chart and of each overlay."""
    orders = []
    order = 0
    for spec in (primary, *combos):
        orders.append(order)
        order += len(spec.series)
    return orders


def compile_plot_area(primary: ChartSpec, combos: Sequence[ChartSpec] = ()) -> PlotAreaFragment:
    specs = (primary, *combos)
    fragments = [
        build_plot_area(spec.kind, spec, order)
        for spec, order in zip(specs, series_orders(primary, combos))
    ]
    merged = merge_fragments(fragments[0], fragments[1:])
    if combos:
        logger.debug(
            "merged %d combo fragments into slots %s", len(combos), merged.chart_slots()
        )
    return merged
