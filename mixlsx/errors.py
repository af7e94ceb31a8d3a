"""Exceptions raised by the chart and drawing compiler."""

from __future__ import annotations


class MixlsxError(Exception):
    """Base exception for the project."""


class CoordinateError(MixlsxError, ValueError):
    """Raised when a cell name cannot be parsed into (column, row)."""

    def __init__(self, cell: str, reason: str = "") -> None:
        self.cell = cell
        message = f"invalid cell name {cell!r}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class UnsupportedChartKindError(MixlsxError, ValueError):
    """Raised when a chart kind has no plot-area builder."""

    def __init__(self, kind: str) -> None:
        self.kind = kind
        super().__init__(f"unsupported chart type {kind!r}")


class CorruptPartError(MixlsxError):
    """Raised when a package part exists but cannot be decoded."""

    def __init__(self, part_path: str, reason: str) -> None:
        self.part_path = part_path
        super().__init__(f"corrupt part {part_path}: {reason}")


class ComboCollisionError(MixlsxError):
    """Raised when two combo fragments populate the same plot-area slot."""

    def __init__(self, slot: str) -> None:
        self.slot = slot
        super().__init__(f"combo chart fragments collide on plot-area slot {slot!r}")


class SheetNotFoundError(MixlsxError, KeyError):
    """Raised for an unknown sheet name."""

    def __str__(self) -> str:
        return f"sheet {self.args[0]!r} does not exist"


class PartNotFoundError(MixlsxError, KeyError):
    """Raised when reading a part the package does not contain."""

    def __str__(self) -> str:
        return f"part {self.args[0]!r} does not exist"
