"""포인트클라우드 바운딩 박스 및 복셀 크기 계산."""

from typing import Tuple

import numpy as np

# 좌표 중복 판정 허용 오차
COORD_TOL = 1e-9


def compute_bounds(points: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """축 정렬 바운딩 박스 (min, max)."""
    points = np.asarray(points, dtype=np.float64)
    if points.size == 0:
        raise ValueError("빈 포인트클라우드의 바운딩 박스는 정의되지 않습니다")
    return points.min(axis=0), points.max(axis=0)


def compute_voxel_size(points: np.ndarray) -> Tuple[float, float, float]:
    """격자 간격으로부터 축별 복셀 크기 추정.

    축마다 서로 다른 좌표값 사이의 최소 양수 간격을 사용한다.
    좌표값이 하나뿐인 축은 1.0.
    """
    points = np.asarray(points, dtype=np.float64)
    if points.size == 0:
        raise ValueError("빈 포인트클라우드의 복셀 크기는 정의되지 않습니다")

    sizes = []
    for axis in range(3):
        coords = np.unique(points[:, axis])
        gaps = np.diff(coords)
        gaps = gaps[gaps > COORD_TOL]
        sizes.append(float(gaps.min()) if len(gaps) else 1.0)
    return tuple(sizes)
