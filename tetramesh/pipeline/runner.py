"""등치면 추출 실행기 — 포인트클라우드 → 복셀 크기 → 삼각분할 → 내보내기."""

import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Optional

import numpy as np

from tetramesh.core.field import DensityField
from tetramesh.core.march import march
from tetramesh.core.mesh import TriangleMesh
from tetramesh.pointcloud import (
    compute_bounds,
    compute_voxel_size,
    generate_grid,
    load_pointcloud_txt,
    random_densities,
    sphere_densities,
)

from .config import TetrameshConfig

logger = logging.getLogger(__name__)


@dataclass
class ExtractionResult:
    """추출 실행 결과."""

    success: bool
    output_path: Path
    elapsed_time: float
    message: str = ""
    n_points: int = 0
    n_triangles: int = 0
    n_cells: int = 0
    n_tetrahedra: int = 0
    n_crossed: int = 0
    n_missing: int = 0
    voxel_size: tuple = (1.0, 1.0, 1.0)
    timings: dict = field(default_factory=dict)


def build_field(cfg: TetrameshConfig, input_path: Optional[str | Path] = None) -> DensityField:
    """설정(및 입력 파일)으로부터 밀도장 생성.

    입력 파일이 주어지면 파일을 읽는다. source = "file"인데 입력 파일이
    없으면 ValueError. 파일에 밀도 열이 없으면 난수 밀도를 부여한다.
    구형 패턴은 격자 밖이 내부로 분류되지 않도록 외부 밀도를
    최대 거리 + 간격 이상으로 올린다.
    """
    fc = cfg.field
    outside_density = fc.outside_density

    if input_path is None and fc.source == "file":
        raise ValueError("source = 'file'이지만 입력 포인트클라우드 경로가 없습니다")

    if input_path is not None:
        points, densities = load_pointcloud_txt(input_path)
    else:
        points = generate_grid(fc.grid_size, fc.spacing)
        densities = None
        if fc.pattern == "sphere":
            densities = sphere_densities(points)
            floor = float(densities.max()) + fc.spacing
            if outside_density < floor:
                logger.debug("구형 패턴 외부 밀도 %.3f → %.3f", outside_density, floor)
                outside_density = floor

    if densities is None:
        densities = random_densities(len(points), fc.density_low, fc.density_high, fc.seed)

    return DensityField(
        points, densities,
        outside_density=outside_density,
        key_decimals=fc.key_decimals,
    )


def run_extraction(
    cfg: TetrameshConfig,
    output_path: str | Path,
    input_path: Optional[str | Path] = None,
    progress_callback: Optional[Callable[[str, dict], None]] = None,
) -> ExtractionResult:
    """전체 추출 실행.

    Args:
        cfg: 설정
        output_path: 출력 메쉬 경로 (.ply/.obj/.stl)
        input_path: 입력 포인트클라우드 경로 (None이면 합성 격자)
        progress_callback: 진행률 콜백 (stage, details)

    Returns:
        ExtractionResult 객체
    """
    output_path = Path(output_path)
    timings = {}
    start = time.perf_counter()

    def _notify(stage: str, message: str):
        if progress_callback:
            progress_callback(stage, {"message": message})

    try:
        # 1. 포인트클라우드
        _notify("pointcloud", "포인트클라우드 준비 중...")
        t0 = time.perf_counter()
        density_field = build_field(cfg, input_path)
        timings["pointcloud"] = time.perf_counter() - t0

        # 2. 복셀 크기
        _notify("voxel_size", "복셀 크기 계산 중...")
        t0 = time.perf_counter()
        bounds = compute_bounds(density_field.points)
        if cfg.march.step is not None:
            voxel_size = tuple(cfg.march.step)
        elif input_path is not None:
            voxel_size = compute_voxel_size(density_field.points)
        else:
            voxel_size = (cfg.field.spacing,) * 3
        timings["voxel_size"] = time.perf_counter() - t0

        # 3. 삼각분할
        _notify("triangulate", f"Marching Tetrahedra 실행 중 (isovalue={cfg.march.isovalue})...")
        t0 = time.perf_counter()
        result = march(
            density_field,
            cfg.march.isovalue,
            step=voxel_size,
            bounds=bounds,
            orient=cfg.march.orient,
        )
        timings["triangulate"] = time.perf_counter() - t0
        for phase, seconds in result.timings.items():
            timings[f"triangulate.{phase}"] = seconds

        # 4. 내보내기
        _notify("export", f"메쉬 저장 중: {output_path.name}")
        t0 = time.perf_counter()
        output_path.parent.mkdir(parents=True, exist_ok=True)
        mesh = TriangleMesh.from_triangles(
            result.triangles, merge=cfg.export.merge_vertices, name=output_path.stem,
        )
        mesh.save(str(output_path), binary=cfg.export.binary)
        timings["export"] = time.perf_counter() - t0

    except (OSError, ValueError) as e:
        logger.error("등치면 추출 실패: %s", e)
        return ExtractionResult(
            success=False,
            output_path=output_path,
            elapsed_time=time.perf_counter() - start,
            message=f"추출 실패: {e}",
            timings=timings,
        )

    elapsed = time.perf_counter() - start
    _notify("done", f"완료: {result.n_triangles}개 삼각형 ({elapsed:.2f}초)")

    return ExtractionResult(
        success=True,
        output_path=output_path,
        elapsed_time=elapsed,
        message=f"{result.n_triangles}개 삼각형 추출",
        n_points=len(density_field),
        n_triangles=result.n_triangles,
        n_cells=result.n_cells,
        n_tetrahedra=result.n_tetrahedra,
        n_crossed=result.n_crossed,
        n_missing=result.n_missing,
        voxel_size=tuple(float(s) for s in voxel_size),
        timings=timings,
    )
