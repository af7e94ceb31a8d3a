from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import ConfigDict, Field, model_validator

from .base import JsonModel
from .enums import ChartKind, LegendPosition, Positioning
from .errors import UnsupportedChartKindError


def resolve_kind(kind: ChartKind | str) -> ChartKind:
    try:
        return ChartKind(kind)
    except ValueError:
        raise UnsupportedChartKindError(str(kind)) from None


class SeriesLine(JsonModel):
    model_config = ConfigDict(extra="forbid")

    width: Optional[float] = Field(None, ge=0, description="Line width in points")


class SeriesSpec(JsonModel):
    """One data series; every field is a formula reference such as ``Sheet1!$B$2:$B$5``."""

    model_config = ConfigDict(extra="forbid")

    name: str = ""
    categories: str = ""
    values: str = ""
    # scatter and bubble channels; fall back to categories/values when empty
    x_values: str = ""
    y_values: str = ""
    sizes: str = ""
    line: SeriesLine = Field(default_factory=SeriesLine)

    @property
    def y_ref(self) -> str:
        return self.y_values or self.values

    @property
    def size_ref(self) -> str:
        return self.sizes or self.values


class AxisSpec(JsonModel):
    model_config = ConfigDict(extra="forbid")

    # None means "let the application pick"; 0.0 is an explicit bound
    minimum: Optional[float] = None
    maximum: Optional[float] = None
    major_unit: Optional[float] = Field(None, gt=0)
    reverse_order: bool = False
    major_gridlines: bool = False
    minor_gridlines: bool = False
    tick_label_skip: int = Field(0, ge=0)

    @model_validator(mode="after")
    def _check_bounds(self):
        if (
            self.minimum is not None
            and self.maximum is not None
            and self.minimum > self.maximum
        ):
            raise ValueError("axis minimum must not exceed maximum")
        return self


class LegendSpec(JsonModel):
    model_config = ConfigDict(extra="forbid")

    position: LegendPosition = LegendPosition.bottom
    show_legend_key: bool = False


class TitleSpec(JsonModel):
    model_config = ConfigDict(extra="forbid")

    name: str = " "


class PlotAreaSpec(JsonModel):
    """Data label flags applied to every series in the plot area."""

    model_config = ConfigDict(extra="forbid")

    show_bubble_size: bool = False
    show_cat_name: bool = False
    show_leader_lines: bool = False
    show_percent: bool = False
    show_ser_name: bool = False
    show_val: bool = False


class PictureFormat(JsonModel):
    """Placement options for a chart or picture anchor (offsets in pixels)."""

    model_config = ConfigDict(extra="forbid")

    x_offset: int = Field(0, ge=0)
    y_offset: int = Field(0, ge=0)
    x_scale: float = Field(1.0, gt=0)
    y_scale: float = Field(1.0, gt=0)
    print_obj: bool = True
    locked: bool = False
    positioning: Optional[Positioning] = None


class Dimension(JsonModel):
    model_config = ConfigDict(extra="forbid")

    width: int = Field(480, gt=0)
    height: int = Field(290, gt=0)


class ChartSpec(JsonModel):
    """A chart format set: kind, series and presentation options.

    Accepts the JSON chart format, e.g.
    ``{"type": "col", "series": [{"name": "Sheet1!$A$2", "values": "Sheet1!$B$2:$D$2"}]}``.
    """

    model_config = ConfigDict(extra="forbid")

    type: str = Field(..., min_length=1, description="Chart kind identifier")
    series: List[SeriesSpec] = Field(default_factory=list)
    format: PictureFormat = Field(default_factory=PictureFormat)
    dimension: Optional[Dimension] = None
    legend: LegendSpec = Field(default_factory=LegendSpec)
    title: TitleSpec = Field(default_factory=TitleSpec)
    plotarea: PlotAreaSpec = Field(default_factory=PlotAreaSpec)
    show_blanks_as: Literal["gap", "span", "zero"] = "gap"
    x_axis: AxisSpec = Field(default_factory=AxisSpec)
    y_axis: AxisSpec = Field(default_factory=AxisSpec)

    @property
    def kind(self) -> ChartKind:
        return resolve_kind(self.type)
