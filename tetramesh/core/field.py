"""Density field backed by a set of density-tagged sample positions.

Lookups are exact-position: a query matches a sample only when the two
positions agree after rounding to ``key_decimals`` places. This works for
gridded input whose voxel corners land on sample positions; scattered input
falls back to the outside density for every unmatched corner.
"""

import logging
from typing import Optional, Sequence, Tuple

import numpy as np

logger = logging.getLogger(__name__)

# Density assigned to voxel corners that have no matching sample
DEFAULT_OUTSIDE_DENSITY = 1.0


class DensityField:
    """Maps sample positions to scalar densities."""

    def __init__(
        self,
        points: np.ndarray,
        densities: np.ndarray,
        outside_density: float = DEFAULT_OUTSIDE_DENSITY,
        key_decimals: int = 6,
    ):
        """Build the position index.

        Args:
            points: Sample positions (N, 3)
            densities: Density per sample (N,)
            outside_density: Sentinel for positions with no sample
            key_decimals: Rounding applied to positions before matching
        """
        points = np.asarray(points, dtype=np.float64)
        densities = np.asarray(densities, dtype=np.float64)
        if points.ndim != 2 or points.shape[1] != 3:
            raise ValueError(f"points must have shape (N, 3), got {points.shape}")
        if len(densities) != len(points):
            raise ValueError(
                f"{len(points)} points but {len(densities)} densities"
            )

        self.points = points
        self.densities = densities
        self.outside_density = float(outside_density)
        self.key_decimals = key_decimals

        self._index: dict = {}
        for p, d in zip(points, densities):
            self._index[self._key(p)] = float(d)

        if len(self._index) < len(points):
            logger.warning(
                "Duplicate sample positions: %d points, %d unique",
                len(points), len(self._index),
            )

    def _key(self, position) -> Tuple[float, float, float]:
        d = self.key_decimals
        # +0.0 folds -0.0 into 0.0
        return (
            round(float(position[0]), d) + 0.0,
            round(float(position[1]), d) + 0.0,
            round(float(position[2]), d) + 0.0,
        )

    def __len__(self) -> int:
        return len(self.points)

    def lookup(self, position: Sequence[float]) -> Optional[float]:
        """Density of the sample at exactly this position, or None."""
        return self._index.get(self._key(position))

    def density_at(self, position: Sequence[float]) -> float:
        """Density at position, falling back to the outside density."""
        value = self.lookup(position)
        return self.outside_density if value is None else value

    @property
    def bounds(self) -> Tuple[np.ndarray, np.ndarray]:
        """Axis-aligned bounding box (min, max) of the samples."""
        if len(self.points) == 0:
            raise ValueError("Empty density field has no bounds")
        return self.points.min(axis=0), self.points.max(axis=0)

    @classmethod
    def from_grid(
        cls,
        values: np.ndarray,
        origin: Sequence[float] = (0.0, 0.0, 0.0),
        spacing: Sequence[float] = (1.0, 1.0, 1.0),
        **kwargs,
    ) -> "DensityField":
        """Field from a regular (nx, ny, nz) array of densities.

        Sample (i, j, k) sits at origin + (i, j, k) * spacing.
        """
        values = np.asarray(values, dtype=np.float64)
        if values.ndim != 3:
            raise ValueError(f"Grid values must be 3D, got shape {values.shape}")

        nx, ny, nz = values.shape
        ii, jj, kk = np.meshgrid(
            np.arange(nx), np.arange(ny), np.arange(nz), indexing="ij"
        )
        idx = np.stack([ii, jj, kk], axis=-1).reshape(-1, 3)
        points = idx * np.asarray(spacing, dtype=np.float64) + np.asarray(origin, dtype=np.float64)
        return cls(points, values.reshape(-1), **kwargs)
