"""등치면 추출 설정 — Pydantic 모델 + TOML 로드."""

import tomllib
from pathlib import Path
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator, model_validator


class FieldConfig(BaseModel):
    """밀도장 입력 설정."""

    source: Literal["synthetic", "file"] = "synthetic"
    pattern: Literal["random", "sphere"] = "random"
    grid_size: int = Field(10, ge=2)
    spacing: float = Field(1.0, gt=0)
    density_low: float = 0.0
    density_high: float = 1.0
    seed: Optional[int] = None
    outside_density: float = 1.0
    key_decimals: int = Field(6, ge=0)

    @model_validator(mode="after")
    def _check_density_range(self) -> "FieldConfig":
        if self.density_high <= self.density_low:
            raise ValueError(
                f"density_high({self.density_high})는 density_low({self.density_low})보다 커야 합니다"
            )
        return self


class MarchConfig(BaseModel):
    """Marching Tetrahedra 설정."""

    isovalue: float = 0.5
    step: Optional[tuple[float, float, float]] = None
    orient: bool = False

    @field_validator("step")
    @classmethod
    def _positive_step(cls, v):
        if v is not None and min(v) <= 0:
            raise ValueError(f"복셀 크기는 양수여야 합니다: {v}")
        return v


class ExportConfig(BaseModel):
    """메쉬 내보내기 설정."""

    binary: bool = True
    merge_vertices: bool = True


class TetrameshConfig(BaseModel):
    """최상위 설정."""

    field: FieldConfig = Field(default_factory=FieldConfig)
    march: MarchConfig = Field(default_factory=MarchConfig)
    export: ExportConfig = Field(default_factory=ExportConfig)

    @classmethod
    def from_toml(cls, path: str | Path) -> "TetrameshConfig":
        """TOML 파일에서 설정 로드.

        Args:
            path: TOML 파일 경로

        Returns:
            TetrameshConfig 인스턴스
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"설정 파일을 찾을 수 없습니다: {path}")

        with open(path, "rb") as f:
            data = tomllib.load(f)

        return cls(**data)

    @classmethod
    def default(cls) -> "TetrameshConfig":
        """기본 설정 반환."""
        return cls()
