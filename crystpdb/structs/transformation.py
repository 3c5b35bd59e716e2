"""Affine 3x4 transformations applied to atomic positions."""

from __future__ import annotations

from typing import Sequence

import numpy as np


class TransformationMatrix:
    """A 3x4 affine transformation (rotation/scale part plus translation column).

    Usage::

        t = TransformationMatrix.rotation_z(90).combine(TransformationMatrix.translation(1, 0, 0))
        t.apply((1.0, 0.0, 0.0))
    """

    def __init__(self, matrix: Sequence[Sequence[float]] | np.ndarray):
        m = np.asarray(matrix, dtype=float)
        if m.shape != (3, 4):
            raise ValueError(f"Transformation must be 3x4, got {m.shape}")
        self._matrix = m

    @classmethod
    def identity(cls) -> "TransformationMatrix":
        return cls(np.eye(3, 4))

    @classmethod
    def translation(cls, x: float, y: float, z: float) -> "TransformationMatrix":
        m = np.eye(3, 4)
        m[:, 3] = (x, y, z)
        return cls(m)

    @classmethod
    def scale(cls, x: float, y: float, z: float) -> "TransformationMatrix":
        m = np.zeros((3, 4))
        m[0, 0], m[1, 1], m[2, 2] = x, y, z
        return cls(m)

    @classmethod
    def rotation_x(cls, degrees: float) -> "TransformationMatrix":
        c, s = _cos_sin(degrees)
        return cls([[1, 0, 0, 0], [0, c, -s, 0], [0, s, c, 0]])

    @classmethod
    def rotation_y(cls, degrees: float) -> "TransformationMatrix":
        c, s = _cos_sin(degrees)
        return cls([[c, 0, s, 0], [0, 1, 0, 0], [-s, 0, c, 0]])

    @classmethod
    def rotation_z(cls, degrees: float) -> "TransformationMatrix":
        c, s = _cos_sin(degrees)
        return cls([[c, -s, 0, 0], [s, c, 0, 0], [0, 0, 1, 0]])

    @property
    def matrix(self) -> np.ndarray:
        return self._matrix.copy()

    def apply(self, position: Sequence[float]) -> tuple[float, float, float]:
        """Apply to a single (x, y, z) position."""
        p = np.append(np.asarray(position, dtype=float), 1.0)
        x, y, z = self._matrix @ p
        return (float(x), float(y), float(z))

    def combine(self, other: "TransformationMatrix") -> "TransformationMatrix":
        """Transformation equal to applying `self` first, then `other`."""
        return TransformationMatrix((_homogeneous(other._matrix) @ _homogeneous(self._matrix))[:3])

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TransformationMatrix):
            return NotImplemented
        return bool(np.allclose(self._matrix, other._matrix))

    def __repr__(self) -> str:
        return f"<TransformationMatrix {self._matrix.tolist()}>"


def _cos_sin(degrees: float) -> tuple[float, float]:
    rad = np.deg2rad(degrees)
    return float(np.cos(rad)), float(np.sin(rad))


def _homogeneous(m: np.ndarray) -> np.ndarray:
    return np.vstack([m, [0.0, 0.0, 0.0, 1.0]])
