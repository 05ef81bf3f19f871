"""命令行入口。"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator, List, Optional

import typer
from rich.console import Console
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    SpinnerColumn,
    TextColumn,
    TimeElapsedColumn,
)
from rich.table import Table

from store_resizer.core.config import OutputConfig, OutputFormat, TargetSpec
from store_resizer.core.exceptions import InvalidConfigurationError
from store_resizer.core.models import SourceImage
from store_resizer.core.output_manager import OutputManager
from store_resizer.core.presets import PRESETS, get_preset
from store_resizer.core.progress import ProgressUpdate
from store_resizer.core.report import write_csv_report
from store_resizer.processing.image_loader import ImageLoadingError, is_supported, load_image
from store_resizer.processing.pipeline import process_batch
from store_resizer.utils.logging import setup_logging

app = typer.Typer(help="批量将图片缩放为商店素材尺寸并重新编码。")
console = Console()
LOGGER = logging.getLogger(__name__)


def _iter_source_files(sources: List[Path], recursive: bool) -> Iterator[Path]:
    seen: set[Path] = set()
    for source in sources:
        if source.is_dir():
            iterator = source.rglob("*") if recursive else source.glob("*")
            candidates = sorted((p for p in iterator if p.is_file() and is_supported(p)), key=lambda p: str(p).lower())
        else:
            candidates = [source]
        for candidate in candidates:
            if candidate in seen:
                continue
            seen.add(candidate)
            yield candidate


def _load_sources(paths: Iterator[Path]) -> List[SourceImage]:
    loaded: List[SourceImage] = []
    for path in paths:
        try:
            loaded.append(load_image(path))
        except ImageLoadingError as exc:
            LOGGER.warning("跳过无法加载的文件: %s", exc)
    return loaded


def _build_target(
    width: Optional[str],
    height: Optional[str],
    preset: Optional[str],
    output_format: str,
    quality: float,
    suffix: str,
    background_color: str,
) -> TargetSpec:
    if preset:
        try:
            chosen = get_preset(preset)
        except InvalidConfigurationError as exc:
            raise typer.BadParameter(str(exc), param_hint="--preset") from exc
        width = width or str(chosen.width)
        height = height or str(chosen.height)

    if width is None or height is None:
        raise typer.BadParameter("必须同时指定 --width 与 --height，或使用 --preset")

    try:
        return TargetSpec.from_text(
            width,
            height,
            output_format=OutputFormat.parse(output_format),
            jpeg_quality=quality,
            suffix=suffix,
            background_color=background_color,
        )
    except InvalidConfigurationError as exc:
        raise typer.BadParameter(str(exc)) from exc


def _build_progress_callback(progress: Progress):
    task_id: Optional[int] = None

    def callback(update: ProgressUpdate) -> None:
        nonlocal task_id
        if update.total == 0:
            return
        if task_id is None:
            task_id = progress.add_task("处理图片", total=update.total)
        progress.update(task_id, completed=update.completed)

    return callback


@app.command("run")
def run_cli(  # noqa: PLR0913
    source: List[Path] = typer.Argument(..., help="源图片文件或目录，可指定多个"),
    output: Path = typer.Option(..., "--output", "-o", help="输出目录"),
    width: Optional[str] = typer.Option(None, "--width", "-W", help="目标宽度（像素）"),
    height: Optional[str] = typer.Option(None, "--height", "-H", help="目标高度（像素）"),
    preset: Optional[str] = typer.Option(None, "--preset", "-p", help="设备预设，见 presets 命令"),
    output_format: str = typer.Option("png", "--format", "-f", help="输出格式 png / jpeg / tiff"),
    quality: float = typer.Option(0.9, "--quality", "-q", help="JPEG 质量 0.1~1.0"),
    suffix: str = typer.Option("_resized", "--suffix", help="输出文件名后缀"),
    background_color: str = typer.Option("#FFFFFF", "--background-color", help="JPEG 透明区域背景色"),
    batch_folder: bool = typer.Option(True, "--batch-folder/--flat", help="写入新的批量文件夹或直接平铺"),
    recursive: bool = typer.Option(False, "--recursive/--no-recursive", help="是否递归扫描目录"),
    verify: bool = typer.Option(False, "--verify", help="编码后回读并计算 SSIM/PSNR"),
    report: Optional[Path] = typer.Option(None, "--report", help="CSV 报告路径"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="输出调试日志"),
) -> None:
    """执行批量缩放与导出。"""

    setup_logging(logging.DEBUG if verbose else logging.INFO)

    try:
        OutputFormat.parse(output_format)
    except InvalidConfigurationError as exc:
        raise typer.BadParameter(str(exc), param_hint="--format") from exc

    target = _build_target(width, height, preset, output_format, quality, suffix, background_color)
    sources = [p.expanduser().resolve() for p in source]
    images = _load_sources(_iter_source_files(sources, recursive))
    if not images:
        typer.echo("没有可处理的图片。")
        raise typer.Exit(code=1)

    progress = Progress(
        SpinnerColumn(),
        TextColumn("[bold blue]{task.description}"),
        BarColumn(),
        MofNCompleteColumn(),
        TimeElapsedColumn(),
        console=console,
    )
    with progress:
        result = process_batch(images, target, progress_callback=_build_progress_callback(progress), verify=verify)

    manager = OutputManager(OutputConfig(output_dir=output.expanduser(), batch_folder=batch_folder))
    written = manager.export(result)

    typer.echo(
        f"处理完成：成功 {len(result.images)} 张，失败 {len(result.failed)} 张，写入 {len(written)} 个文件。"
    )
    if written:
        typer.echo(f"输出位置：{written[0].parent}")
    if report is not None:
        typer.echo(f"报告文件：{write_csv_report(result, report.expanduser())}")


@app.command("presets")
def list_presets() -> None:
    """列出可用的设备尺寸预设。"""

    table = Table(title="尺寸预设")
    table.add_column("key")
    table.add_column("名称")
    table.add_column("宽", justify="right")
    table.add_column("高", justify="right")
    for item in PRESETS:
        table.add_row(item.key, item.label, str(item.width), str(item.height))
    console.print(table)


if __name__ == "__main__":
    app()
