"""处理流水线：按顺序缩放、编码并收集结果。"""

from __future__ import annotations

import logging
from typing import Callable, Optional, Sequence

from store_resizer.core.config import TargetSpec
from store_resizer.core.models import BatchResult, FailedImage, ProcessedImage, SourceImage
from store_resizer.core.naming import single_filename
from store_resizer.core.progress import ProgressUpdate
from store_resizer.processing.encoder import ImageEncodeError, decode, encode
from store_resizer.processing.resizer import ImageResizeError, resize
from store_resizer.processing.validation import compute_psnr, compute_ssim

LOGGER = logging.getLogger(__name__)


ProgressCallback = Optional[Callable[[ProgressUpdate], None]]


def process_batch(
    sources: Sequence[SourceImage],
    target: TargetSpec,
    progress_callback: ProgressCallback = None,
    *,
    verify: bool = False,
) -> BatchResult:
    """批量处理入口：逐张缩放并编码，输出顺序与输入一致。

    单张失败时该图片从结果中移除（后续位置前移），并记录到 ``failed``；
    进度中的 completed 为已成功的张数，只有全部成功时才会达到 total。
    """

    total = len(sources)
    result = BatchResult(suffix=target.suffix)
    LOGGER.info(
        "开始处理 %d 张图片 -> %dx%d %s",
        total,
        target.width,
        target.height,
        target.output_format.value,
    )

    if total == 0:
        _emit_progress(progress_callback, 0, 0, "没有需要处理的图片", status="done")
        return result

    for source in sources:
        processed = _process_one(source, target, result, verify=verify)
        if processed is None:
            continue
        result.images.append(processed)
        _emit_progress(progress_callback, len(result.images), total, f"完成 {processed.filename}")

    LOGGER.info("处理完成：成功 %d 张，失败 %d 张", len(result.images), len(result.failed))
    _emit_progress(progress_callback, len(result.images), total, "处理完成", status="done")
    return result


def _process_one(
    source: SourceImage,
    target: TargetSpec,
    result: BatchResult,
    *,
    verify: bool,
) -> Optional[ProcessedImage]:
    try:
        pixels = resize(source, target)
    except ImageResizeError as exc:
        LOGGER.warning("缩放失败，已跳过 %s: %s", source.name, exc)
        result.failed.append(FailedImage(source_name=source.name, stage="resize", message=str(exc)))
        return None

    try:
        data = encode(
            pixels,
            target.output_format,
            target.jpeg_quality,
            background_color=target.background_color,
        )
    except ImageEncodeError as exc:
        LOGGER.warning("编码失败，已跳过 %s: %s", source.name, exc)
        result.failed.append(FailedImage(source_name=source.name, stage="encode", message=str(exc)))
        pixels.close()
        return None

    processed = ProcessedImage(
        source_name=source.name,
        pixels=pixels,
        data=data,
        output_format=target.output_format,
        filename=single_filename(source.name, target.output_format, target.suffix),
    )
    if verify:
        _verify(processed)
    return processed


def _verify(processed: ProcessedImage) -> None:
    decoded = decode(processed.data)
    try:
        processed.ssim = compute_ssim(processed.pixels, decoded)
        processed.psnr = compute_psnr(processed.pixels, decoded)
    finally:
        decoded.close()
    LOGGER.debug("%s: ssim=%.4f psnr=%.2f", processed.filename, processed.ssim, processed.psnr)


def _emit_progress(
    callback: ProgressCallback,
    completed: int,
    total: int,
    message: Optional[str] = None,
    *,
    status: str = "running",
) -> None:
    if not callback:
        return
    callback(ProgressUpdate(total=total, completed=completed, message=message, status=status))
