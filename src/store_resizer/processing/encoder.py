"""PNG / JPEG / TIFF 编码。"""

from __future__ import annotations

import io
import logging

from PIL import Image

from store_resizer.core.config import OutputFormat
from store_resizer.core.exceptions import StoreResizerError
from store_resizer.utils.colors import parse_color

LOGGER = logging.getLogger(__name__)


class ImageEncodeError(StoreResizerError):
    """图像无法转换或编码。"""


def encode(
    image: Image.Image,
    output_format: OutputFormat,
    quality: float = 1.0,
    *,
    background_color: str = "#FFFFFF",
) -> bytes:
    """将图像编码为指定格式的字节串。

    ``quality`` 只对 JPEG 生效，调用方负责先限制到 [0.1, 1.0]。
    JPEG 没有 Alpha 通道，透明像素会与 ``background_color`` 混合。
    """

    buffer = io.BytesIO()
    try:
        if output_format is OutputFormat.JPEG:
            flattened = _flatten(image, background_color)
            flattened.save(
                buffer,
                format=output_format.value,
                quality=round(quality * 100),
                optimize=True,
            )
        elif output_format is OutputFormat.PNG:
            _lossless_source(image).save(buffer, format=output_format.value, optimize=True)
        elif output_format is OutputFormat.TIFF:
            _lossless_source(image).save(buffer, format=output_format.value, compression="tiff_lzw")
        else:
            raise ImageEncodeError(f"不支持的输出格式: {output_format}")
    except (OSError, ValueError, KeyError) as exc:
        raise ImageEncodeError(f"编码 {output_format.value} 失败: {exc}") from exc

    return buffer.getvalue()


def decode(data: bytes) -> Image.Image:
    """将编码数据解码为 RGBA 图像。"""

    with Image.open(io.BytesIO(data)) as img:
        img.load()
        return img.convert("RGBA")


def _lossless_source(image: Image.Image) -> Image.Image:
    if image.mode in {"RGB", "RGBA"}:
        return image
    return image.convert("RGBA")


def _flatten(image: Image.Image, background_color: str) -> Image.Image:
    if image.mode == "RGB":
        return image
    rgba = image.convert("RGBA")
    background = Image.new("RGB", rgba.size, parse_color(background_color))
    background.paste(rgba, mask=rgba.getchannel("A"))
    return background
