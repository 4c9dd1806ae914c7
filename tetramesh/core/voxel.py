"""Voxel construction: 8 corners in fixed order with looked-up densities."""

from dataclasses import dataclass
from typing import Sequence

import numpy as np

from .field import DensityField

# Corner offsets in units of (dx, dy, dz), v0..v7
CORNER_OFFSETS = np.array([
    [0, 0, 0],  # v0
    [1, 0, 0],  # v1
    [1, 0, 1],  # v2
    [0, 0, 1],  # v3
    [0, 1, 0],  # v4
    [1, 1, 0],  # v5
    [1, 1, 1],  # v6
    [0, 1, 1],  # v7
], dtype=np.float64)


@dataclass(frozen=True, eq=False)
class Voxel:
    """Axis-aligned cell with corner positions and densities.

    Attributes:
        origin: Minimum corner (x, y, z)
        size: Per-axis extents (dx, dy, dz)
        vertices: Corner positions v0..v7, shape (8, 3)
        densities: Corner densities, shape (8,)
        missing: Number of corners that fell back to the outside density
    """
    origin: np.ndarray
    size: np.ndarray
    vertices: np.ndarray
    densities: np.ndarray
    missing: int = 0

    @property
    def volume(self) -> float:
        return float(np.prod(self.size))


def corner_positions(origin: Sequence[float], size: Sequence[float]) -> np.ndarray:
    """Positions of the 8 corners v0..v7."""
    origin = np.asarray(origin, dtype=np.float64)
    size = np.asarray(size, dtype=np.float64)
    return origin + CORNER_OFFSETS * size


def build_voxel(
    field: DensityField,
    origin: Sequence[float],
    size: Sequence[float],
) -> Voxel:
    """Build the voxel at origin and resolve each corner against the field."""
    origin = np.asarray(origin, dtype=np.float64)
    size = np.asarray(size, dtype=np.float64)
    vertices = corner_positions(origin, size)

    densities = np.empty(8, dtype=np.float64)
    missing = 0
    for i, v in enumerate(vertices):
        value = field.lookup(v)
        if value is None:
            value = field.outside_density
            missing += 1
        densities[i] = value

    return Voxel(origin=origin, size=size, vertices=vertices,
                 densities=densities, missing=missing)


def voxel_from_densities(
    densities: Sequence[float],
    origin: Sequence[float] = (0.0, 0.0, 0.0),
    size: Sequence[float] = (1.0, 1.0, 1.0),
) -> Voxel:
    """Voxel with explicitly given corner densities (v0..v7 order)."""
    densities = np.asarray(densities, dtype=np.float64)
    if densities.shape != (8,):
        raise ValueError(f"Expected 8 corner densities, got shape {densities.shape}")
    origin = np.asarray(origin, dtype=np.float64)
    size = np.asarray(size, dtype=np.float64)
    return Voxel(origin=origin, size=size,
                 vertices=corner_positions(origin, size), densities=densities)
