"""합성 포인트클라우드 생성 — 정규 격자 + 밀도 부여."""

from typing import Optional, Sequence

import numpy as np


def generate_grid(
    size: int | Sequence[int] = 10,
    spacing: float | Sequence[float] = 1.0,
    origin: Sequence[float] = (0.0, 0.0, 0.0),
) -> np.ndarray:
    """정규 격자 점 생성.

    Args:
        size: 축별 점 개수 (정수 하나면 세 축 동일)
        spacing: 점 간격
        origin: 격자 원점

    Returns:
        (N, 3) 점 좌표 배열 (x 가장 빠르게 변함)
    """
    nx, ny, nz = np.broadcast_to(np.asarray(size, dtype=int), (3,))
    if min(nx, ny, nz) < 1:
        raise ValueError(f"격자 크기는 1 이상이어야 합니다: {size}")
    spacing = np.broadcast_to(np.asarray(spacing, dtype=np.float64), (3,))
    origin = np.asarray(origin, dtype=np.float64)

    zz, yy, xx = np.meshgrid(
        np.arange(nz), np.arange(ny), np.arange(nx), indexing="ij"
    )
    idx = np.stack([xx, yy, zz], axis=-1).reshape(-1, 3)
    return idx * spacing + origin


def random_densities(
    n: int,
    low: float = 0.0,
    high: float = 1.0,
    seed: Optional[int] = None,
) -> np.ndarray:
    """점마다 [low, high) 균등분포 난수 밀도 부여."""
    if high <= low:
        raise ValueError(f"밀도 범위가 잘못되었습니다: [{low}, {high})")
    rng = np.random.default_rng(seed)
    return rng.uniform(low, high, size=n)


def sphere_densities(
    points: np.ndarray,
    center: Optional[Sequence[float]] = None,
) -> np.ndarray:
    """구형 밀도장 — 중심으로부터의 거리.

    isovalue = 반지름이면 그 구면이 등치면이 된다 (내부: 거리 < 반지름).
    center 생략 시 점들의 바운딩 박스 중심 사용.
    """
    points = np.asarray(points, dtype=np.float64)
    if center is None:
        center = (points.min(axis=0) + points.max(axis=0)) / 2
    return np.linalg.norm(points - np.asarray(center, dtype=np.float64), axis=1)
