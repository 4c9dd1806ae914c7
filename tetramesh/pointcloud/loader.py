"""텍스트 포인트클라우드 로더.

한 줄에 한 점: ``x y z`` 또는 ``x y z density`` (공백/쉼표 구분).
``#`` 이후는 주석으로 무시한다.
"""

import logging
from pathlib import Path
from typing import Optional, Tuple

import numpy as np

logger = logging.getLogger(__name__)


class PointCloudFormatError(ValueError):
    """포인트클라우드 파일 형식 오류."""


def load_pointcloud_txt(path: str | Path) -> Tuple[np.ndarray, Optional[np.ndarray]]:
    """텍스트 포인트클라우드 파일 로드.

    Args:
        path: 입력 파일 경로

    Returns:
        (points, densities) 튜플
        - points: (N, 3) 좌표
        - densities: (N,) 밀도, 파일에 밀도 열이 없으면 None

    Raises:
        FileNotFoundError: 파일 없음
        PointCloudFormatError: 열 개수 불일치, 숫자 변환 실패, 빈 파일
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"포인트클라우드 파일을 찾을 수 없습니다: {path}")

    rows = []
    n_cols = None
    with open(path, "r") as f:
        for lineno, line in enumerate(f, start=1):
            line = line.split("#", 1)[0].strip()
            if not line:
                continue

            parts = line.replace(",", " ").split()
            if len(parts) not in (3, 4):
                raise PointCloudFormatError(
                    f"{path}:{lineno}: 열 개수는 3 또는 4여야 합니다 (현재 {len(parts)})"
                )
            if n_cols is None:
                n_cols = len(parts)
            elif len(parts) != n_cols:
                raise PointCloudFormatError(
                    f"{path}:{lineno}: 열 개수가 일정하지 않습니다 ({n_cols} → {len(parts)})"
                )

            try:
                rows.append([float(p) for p in parts])
            except ValueError as e:
                raise PointCloudFormatError(f"{path}:{lineno}: 숫자 변환 실패 — {e}") from e

    if not rows:
        raise PointCloudFormatError(f"점이 없습니다: {path}")

    data = np.array(rows, dtype=np.float64)
    points = data[:, :3]
    densities = data[:, 3] if n_cols == 4 else None

    logger.info("포인트클라우드 로드: %s (%d점, 밀도 %s)",
                path.name, len(points), "있음" if densities is not None else "없음")
    return points, densities
