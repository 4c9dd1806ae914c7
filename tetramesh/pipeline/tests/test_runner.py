"""추출 실행기 테스트."""

import numpy as np
import pytest

from tetramesh.core.mesh import TriangleMesh
from tetramesh.pipeline.config import TetrameshConfig
from tetramesh.pipeline.runner import build_field, run_extraction


@pytest.fixture
def sphere_cloud(tmp_path):
    """0.5 간격 격자 위 구형 밀도 포인트클라우드 (x y z density)."""
    coords = np.arange(0, 5.01, 0.5)
    zz, yy, xx = np.meshgrid(coords, coords, coords, indexing="ij")
    points = np.stack([xx, yy, zz], axis=-1).reshape(-1, 3)
    dens = np.linalg.norm(points - 2.5, axis=1)

    path = tmp_path / "sphere.txt"
    with open(path, "w") as f:
        f.write("# x y z density\n")
        for p, d in zip(points, dens):
            f.write(f"{p[0]} {p[1]} {p[2]} {d}\n")
    return path


class TestBuildField:
    def test_synthetic_random(self):
        cfg = TetrameshConfig()
        cfg.field.grid_size = 4
        cfg.field.seed = 0
        field = build_field(cfg)
        assert len(field) == 64
        assert ((field.densities >= 0) & (field.densities < 1)).all()

    def test_synthetic_sphere(self):
        cfg = TetrameshConfig()
        cfg.field.pattern = "sphere"
        cfg.field.grid_size = 3
        field = build_field(cfg)
        assert field.lookup((1, 1, 1)) == 0.0

    def test_synthetic_sphere_raises_outside_density(self):
        """구형 패턴 → 외부 밀도가 최대 거리보다 커야 격자 밖이 외부로 분류됨."""
        cfg = TetrameshConfig()
        cfg.field.pattern = "sphere"
        cfg.field.grid_size = 10
        field = build_field(cfg)
        assert field.outside_density > field.densities.max()
        assert field.lookup((-1, -1, -1)) is None

    def test_sphere_keeps_larger_outside_density(self):
        cfg = TetrameshConfig()
        cfg.field.pattern = "sphere"
        cfg.field.outside_density = 500.0
        assert build_field(cfg).outside_density == 500.0

    def test_file_source_requires_input(self):
        """source = "file"인데 입력 경로가 없으면 ValueError."""
        cfg = TetrameshConfig()
        cfg.field.source = "file"
        with pytest.raises(ValueError, match="source"):
            build_field(cfg)

    def test_file_without_density_gets_random(self, tmp_path):
        path = tmp_path / "xyz.txt"
        path.write_text("0 0 0\n1 0 0\n")
        cfg = TetrameshConfig()
        cfg.field.seed = 5
        field = build_field(cfg, path)
        assert len(field) == 2
        assert field.lookup((1, 0, 0)) is not None


class TestRunExtraction:
    """전체 실행."""

    def test_synthetic_random(self, tmp_path):
        cfg = TetrameshConfig()
        cfg.field.grid_size = 6
        cfg.field.seed = 1
        out = tmp_path / "random.ply"

        result = run_extraction(cfg, out)

        assert result.success, result.message
        assert out.exists()
        assert result.n_points == 216
        assert result.n_triangles > 0
        assert result.voxel_size == (1.0, 1.0, 1.0)
        for phase in ("pointcloud", "voxel_size", "triangulate", "export"):
            assert phase in result.timings

    def test_file_input_sphere(self, tmp_path, sphere_cloud):
        """파일 입력 → 격자 간격에서 복셀 크기 추정, 구면 추출."""
        cfg = TetrameshConfig()
        cfg.march.isovalue = 2.0
        cfg.field.outside_density = 100.0
        out = tmp_path / "sphere.ply"

        result = run_extraction(cfg, out, input_path=sphere_cloud)

        assert result.success, result.message
        assert result.voxel_size == pytest.approx((0.5, 0.5, 0.5))
        assert result.n_triangles > 0

        mesh = TriangleMesh.load_ply(str(out))
        assert mesh.n_faces == result.n_triangles
        dist = np.linalg.norm(mesh.vertices - 2.5, axis=1)
        assert dist.max() <= 2.0 + 1e-4
        assert dist.min() > 1.7

    def test_step_override(self, tmp_path, sphere_cloud):
        cfg = TetrameshConfig()
        cfg.march.step = (1.0, 1.0, 1.0)
        result = run_extraction(cfg, tmp_path / "out.ply", input_path=sphere_cloud)
        assert result.success
        assert result.voxel_size == (1.0, 1.0, 1.0)

    def test_missing_input(self, tmp_path):
        """존재하지 않는 입력 → 실패 결과 (예외 전파 없음)."""
        result = run_extraction(
            TetrameshConfig(), tmp_path / "out.ply", input_path=tmp_path / "missing.txt",
        )
        assert not result.success
        assert "missing.txt" in result.message

    def test_progress_callback(self, tmp_path):
        """진행률 콜백 호출 확인."""
        stages = []
        cfg = TetrameshConfig()
        cfg.field.grid_size = 3
        run_extraction(cfg, tmp_path / "out.ply",
                       progress_callback=lambda stage, details: stages.append(stage))
        assert stages == ["pointcloud", "voxel_size", "triangulate", "export", "done"]

    def test_file_source_without_input_fails(self, tmp_path):
        cfg = TetrameshConfig()
        cfg.field.source = "file"
        result = run_extraction(cfg, tmp_path / "out.ply")
        assert not result.success
        assert "source" in result.message
        assert not (tmp_path / "out.ply").exists()

    def test_synthetic_sphere_surface(self, tmp_path):
        """합성 구형 패턴 → 모든 정점이 반지름 근처 (격자 경계에 가짜 껍질 없음)."""
        cfg = TetrameshConfig()
        cfg.field.pattern = "sphere"
        cfg.field.grid_size = 10
        cfg.march.isovalue = 3.0
        out = tmp_path / "sphere.ply"

        result = run_extraction(cfg, out)

        assert result.success, result.message
        assert result.n_triangles > 0
        mesh = TriangleMesh.load_ply(str(out))
        dist = np.linalg.norm(mesh.vertices - 4.5, axis=1)
        # 거리는 볼록 함수 → 모서리 보간점은 반지름 이하, 모서리 길이(≤ √3) 이내
        assert dist.max() <= 3.0 + 1e-4
        assert dist.min() >= 3.0 - np.sqrt(3) - 1e-4
