from __future__ import annotations

from pydantic import ConfigDict, Field

from .base import JsonModel


class Settings(JsonModel):
    """Workbook-wide defaults used when compiling charts and anchors."""

    model_config = ConfigDict(extra="forbid")

    default_col_width_px: int = Field(64, gt=0, description="Width of a column without <col> data")
    default_row_height_px: int = Field(20, gt=0, description="Height of a row without ht")
    chart_width_px: int = Field(480, gt=0)
    chart_height_px: int = Field(290, gt=0)
    lang: str = Field("en-US", min_length=1)
