"""Crystallographic records: unit cell, space group and 3x4 transform rows."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Sequence

from crystpdb.reference_tables import get_index_for_symbol, get_symbol_for_index
from crystpdb.structs.transformation import TransformationMatrix


@dataclass
class UnitCell:
    """Cell lengths (Å) and angles (degrees) from a CRYST1 record."""

    a: float
    b: float
    c: float
    alpha: float
    beta: float
    gamma: float

    @property
    def size(self) -> tuple[float, float, float]:
        return (self.a, self.b, self.c)

    @property
    def angles(self) -> tuple[float, float, float]:
        return (self.alpha, self.beta, self.gamma)


@dataclass(frozen=True)
class Symmetry:
    """A space group, stored by its number (1-230)."""

    index: int

    @classmethod
    def from_symbol(cls, symbol: str) -> Optional["Symmetry"]:
        """Resolve a Hermann-Mauguin symbol; None if it is not a known space group."""
        index = get_index_for_symbol(symbol)
        if index is None:
            return None
        return cls(index)

    @property
    def symbol(self) -> str:
        return get_symbol_for_index(self.index) or ""


def _identity_rows() -> list[list[float]]:
    return [[1.0 if i == j else 0.0 for j in range(4)] for i in range(3)]


@dataclass
class RowMatrix:
    """A 3x4 matrix supplied one row per record.

    Each row remembers whether it was set by a record, so a matrix with
    only some rows read is distinguishable from a complete one.
    """

    rows: list[list[float]] = field(default_factory=_identity_rows)
    rows_set: list[bool] = field(default_factory=lambda: [False, False, False])

    def set_row(self, index: int, row: Sequence[float]) -> None:
        if len(row) != 4:
            raise ValueError(f"A matrix row has 4 values, got {len(row)}")
        self.rows[index] = [float(v) for v in row]
        self.rows_set[index] = True

    def row(self, index: int) -> list[float]:
        return list(self.rows[index])

    def valid(self) -> bool:
        return all(self.rows_set)

    def transformation(self) -> TransformationMatrix:
        return TransformationMatrix(self.rows)


@dataclass
class Scale(RowMatrix):
    """Orthogonal to fractional coordinates (SCALEn)."""


@dataclass
class OrigX(RowMatrix):
    """Orthogonal to submitted coordinates (ORIGXn)."""


@dataclass
class MtriX(RowMatrix):
    """Non-crystallographic symmetry operation (MTRIXn), keyed by serial number.

    `contained` is the iGiven flag: the copy generated by this operation
    is already present in the coordinates.
    """

    serial_number: int = 0
    contained: bool = False
