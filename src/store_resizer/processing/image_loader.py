"""图片加载：文件选择与拖放数据两种来源。"""

from __future__ import annotations

import io
import logging
from pathlib import Path
from typing import Optional

from PIL import Image, ImageOps, UnidentifiedImageError

from store_resizer.core.exceptions import StoreResizerError
from store_resizer.core.models import SourceImage
from store_resizer.core.naming import strip_extension

LOGGER = logging.getLogger(__name__)

IMAGE_EXTENSIONS = {".png", ".jpg", ".jpeg", ".tif", ".tiff", ".bmp", ".gif", ".webp"}

_ALPHA_MODES = {"RGBA", "LA", "PA", "P", "RGBa", "La"}


class ImageLoadingError(StoreResizerError):
    """图片加载失败。"""


def load_image(path: Path) -> SourceImage:
    """从文件加载图片，尽力读取文件大小。"""

    try:
        with Image.open(path) as img:
            pixels = _normalize(img)
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError) as exc:
        LOGGER.debug("无法识别图像文件 %s: %s", path, exc)
        raise ImageLoadingError(f"无法加载图像: {path}") from exc

    return SourceImage(name=strip_extension(path.name), pixels=pixels, byte_size=_file_size(path))


def load_image_bytes(data: bytes, suggested_name: Optional[str] = None) -> SourceImage:
    """从拖放携带的编码数据加载图片。"""

    try:
        with Image.open(io.BytesIO(data)) as img:
            pixels = _normalize(img)
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError) as exc:
        raise ImageLoadingError(f"无法加载图像数据: {suggested_name or '<未命名>'}") from exc

    return SourceImage(name=strip_extension(suggested_name), pixels=pixels, byte_size=len(data))


def is_supported(path: Path) -> bool:
    return path.suffix.lower() in IMAGE_EXTENSIONS


def _normalize(img: Image.Image) -> Image.Image:
    """执行 EXIF 旋转并统一为 RGBA，返回脱离文件句柄的新图像。"""

    img.load()
    img = ImageOps.exif_transpose(img)

    if img.mode == "RGBA":
        return img.copy()
    if img.mode in _ALPHA_MODES or "transparency" in img.info:
        return img.convert("RGBA")
    # CMYK / I;16 / L 等先转 RGB 再补 Alpha
    return img.convert("RGB").convert("RGBA")


def _file_size(path: Path) -> Optional[int]:
    try:
        return path.stat().st_size
    except OSError:
        return None
