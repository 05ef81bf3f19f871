"""精确尺寸缩放。"""

from __future__ import annotations

import logging

from PIL import Image

from store_resizer.core.config import TargetSpec
from store_resizer.core.exceptions import StoreResizerError
from store_resizer.core.models import SourceImage

_RESAMPLING = getattr(Image, "Resampling", Image)

LOGGER = logging.getLogger(__name__)


class ImageResizeError(StoreResizerError):
    """无法分配或绘制目标缓冲区。"""


def resize(source: SourceImage, target: TargetSpec) -> Image.Image:
    """将源图拉伸到 ``target`` 指定的精确像素尺寸。

    输出总是 RGBA、每通道 8 位，不保持宽高比，也不裁剪或留边。
    源图像不会被修改。
    """

    width, height = target.width, target.height
    if width <= 0 or height <= 0:
        raise ImageResizeError(f"目标尺寸非法: {width}x{height}")

    try:
        pixels = source.pixels if source.pixels.mode == "RGBA" else source.pixels.convert("RGBA")
        resized = pixels.resize((width, height), _RESAMPLING.LANCZOS)
    except (MemoryError, ValueError, OSError) as exc:
        raise ImageResizeError(f"缩放失败: {source.name} -> {width}x{height}") from exc

    LOGGER.debug("%s: %dx%d -> %dx%d", source.name, source.width, source.height, width, height)
    return resized


def aspect_locked_height(source_size: tuple[int, int], width: int) -> int:
    """按源图宽高比由目标宽度推算高度（界面锁定比例时使用）。"""

    src_w, src_h = source_size
    if src_w <= 0 or src_h <= 0 or width <= 0:
        raise ImageResizeError(f"无法按比例推算高度: {source_size} / {width}")
    return max(1, round(width * src_h / src_w))
