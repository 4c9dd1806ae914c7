"""포인트클라우드 입력 — 합성 격자, 텍스트 로더, 복셀 크기 계산."""

from .synthetic import generate_grid, random_densities, sphere_densities
from .loader import PointCloudFormatError, load_pointcloud_txt
from .grid import compute_bounds, compute_voxel_size

__all__ = [
    "generate_grid",
    "random_densities",
    "sphere_densities",
    "PointCloudFormatError",
    "load_pointcloud_txt",
    "compute_bounds",
    "compute_voxel_size",
]
