"""CLI 진입점 — Typer 서브커맨드."""

import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from .config import TetrameshConfig

app = typer.Typer(
    name="tetramesh",
    help="밀도 포인트클라우드 → Marching Tetrahedra 등치면 메쉬",
    no_args_is_help=True,
)

console = Console()

# 타이밍 표 출력 순서와 표시 이름
_PHASE_LABELS = {
    "pointcloud": "포인트클라우드 생성",
    "voxel_size": "복셀 크기 계산",
    "triangulate": "Marching Tetrahedra",
    "triangulate.voxel": "  복셀 구성",
    "triangulate.classify": "  꼭짓점 분류",
    "triangulate.triangulate": "  삼각형 생성",
    "export": "메쉬 저장",
}


@app.callback()
def main(
    verbose: bool = typer.Option(False, "-v", "--verbose", help="상세 로그 출력"),
):
    """밀도 포인트클라우드 → Marching Tetrahedra 등치면 메쉬."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )


def _make_progress_callback(progress: Progress, task_id):
    """Rich Progress 콜백 생성."""
    def callback(stage: str, details: dict):
        msg = details.get("message", "")
        progress.update(task_id, description=f"[cyan]{stage}[/] {msg}")
    return callback


def _load_config(
    config_path: Optional[Path],
    isovalue: Optional[float],
    orient: bool,
    ascii_ply: bool,
    outside_density: Optional[float] = None,
) -> TetrameshConfig:
    """설정 파일 로드 후 명령행 옵션으로 덮어쓰기."""
    if config_path is not None:
        cfg = TetrameshConfig.from_toml(config_path)
    else:
        cfg = TetrameshConfig.default()

    if isovalue is not None:
        cfg.march.isovalue = isovalue
    if orient:
        cfg.march.orient = True
    if ascii_ply:
        cfg.export.binary = False
    if outside_density is not None:
        cfg.field.outside_density = outside_density
    return cfg


def _run(cfg: TetrameshConfig, output_path: Path, input_path: Optional[Path] = None):
    """추출 실행 및 결과 출력."""
    from .runner import run_extraction

    with Progress(SpinnerColumn(), TextColumn("{task.description}"), console=console) as progress:
        task = progress.add_task("[cyan]tetramesh[/] 시작...", total=None)
        result = run_extraction(
            cfg, output_path, input_path, _make_progress_callback(progress, task),
        )

    if not result.success:
        console.print(f"[red]실패[/]: {result.message}")
        raise typer.Exit(1)

    console.print(f"포인트 수: {result.n_points}")
    console.print(f"복셀 크기: {result.voxel_size}")
    console.print(
        f"교차 사면체: {result.n_crossed}/{result.n_tetrahedra} "
        f"(셀 {result.n_cells}개, 누락 꼭짓점 {result.n_missing}개)"
    )
    console.print(f"삼각형 수: {result.n_triangles}")

    table = Table(title="소요 시간")
    table.add_column("단계")
    table.add_column("ms", justify="right")
    for key, label in _PHASE_LABELS.items():
        if key in result.timings:
            table.add_row(label, f"{result.timings[key] * 1000:.1f}")
    console.print(table)

    console.print(f"[green]완료[/]: {result.output_path} ({result.elapsed_time:.2f}초)")


@app.command()
def extract(
    input_path: Path = typer.Argument(..., help="입력 포인트클라우드 텍스트 파일 (x y z [density])"),
    output_path: Path = typer.Argument(..., help="출력 메쉬 경로 (.ply/.obj/.stl)"),
    config_path: Optional[Path] = typer.Option(None, "--config", help="설정 파일 경로 (TOML)"),
    isovalue: Optional[float] = typer.Option(None, "--isovalue", help="등치면 임계값"),
    orient: bool = typer.Option(False, "--orient", help="삼각형 법선을 바깥쪽으로 정렬"),
    ascii_ply: bool = typer.Option(False, "--ascii", help="ASCII PLY로 저장"),
    outside_density: Optional[float] = typer.Option(
        None, "--outside-density", help="표본이 없는 꼭짓점의 밀도 (기본 1.0)",
    ),
):
    """포인트클라우드 파일에서 등치면 메쉬 추출."""
    try:
        cfg = _load_config(config_path, isovalue, orient, ascii_ply, outside_density)
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[red]설정 오류[/]: {e}")
        raise typer.Exit(1)

    cfg.field.source = "file"
    _run(cfg, output_path, input_path)


@app.command()
def synthetic(
    output_path: Path = typer.Argument(..., help="출력 메쉬 경로 (.ply/.obj/.stl)"),
    config_path: Optional[Path] = typer.Option(None, "--config", help="설정 파일 경로 (TOML)"),
    pattern: Optional[str] = typer.Option(None, "--pattern", help="밀도 패턴 (random/sphere, sphere는 isovalue가 반지름)"),
    grid_size: Optional[int] = typer.Option(None, "--grid-size", help="축별 격자 점 개수"),
    seed: Optional[int] = typer.Option(None, "--seed", help="난수 시드"),
    isovalue: Optional[float] = typer.Option(None, "--isovalue", help="등치면 임계값"),
    orient: bool = typer.Option(False, "--orient", help="삼각형 법선을 바깥쪽으로 정렬"),
    ascii_ply: bool = typer.Option(False, "--ascii", help="ASCII PLY로 저장"),
    outside_density: Optional[float] = typer.Option(
        None, "--outside-density", help="표본이 없는 꼭짓점의 밀도 (기본 1.0)",
    ),
):
    """합성 격자 밀도장에서 등치면 메쉬 추출."""
    try:
        cfg = _load_config(config_path, isovalue, orient, ascii_ply, outside_density)
        updates = {}
        if pattern is not None:
            updates["pattern"] = pattern
        if grid_size is not None:
            updates["grid_size"] = grid_size
        if seed is not None:
            updates["seed"] = seed
        cfg.field = cfg.field.model_validate({**cfg.field.model_dump(), **updates, "source": "synthetic"})
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[red]설정 오류[/]: {e}")
        raise typer.Exit(1)

    _run(cfg, output_path)


if __name__ == "__main__":
    app()
