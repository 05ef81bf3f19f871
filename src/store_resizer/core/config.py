"""处理任务的配置模型。"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Union

from store_resizer.core.exceptions import InvalidConfigurationError, InvalidTargetSizeError
from store_resizer.utils.colors import parse_color

MIN_JPEG_QUALITY = 0.1
MAX_JPEG_QUALITY = 1.0
DEFAULT_SUFFIX = "_resized"


class OutputFormat(Enum):
    """支持的输出格式，值为 Pillow 的格式名。"""

    PNG = "PNG"
    JPEG = "JPEG"
    TIFF = "TIFF"

    @property
    def extension(self) -> str:
        return _EXTENSIONS[self]

    @classmethod
    def parse(cls, value: Union[str, "OutputFormat"]) -> "OutputFormat":
        """从 ``png`` / ``jpg`` / ``tiff`` 等文本解析格式，大小写不敏感。"""

        if isinstance(value, cls):
            return value
        key = str(value).strip().lower().lstrip(".")
        try:
            return _ALIASES[key]
        except KeyError as exc:
            raise InvalidConfigurationError(f"不支持的输出格式: {value}") from exc


_EXTENSIONS = {
    OutputFormat.PNG: "png",
    OutputFormat.JPEG: "jpg",
    OutputFormat.TIFF: "tiff",
}

_ALIASES = {
    "png": OutputFormat.PNG,
    "jpg": OutputFormat.JPEG,
    "jpeg": OutputFormat.JPEG,
    "tif": OutputFormat.TIFF,
    "tiff": OutputFormat.TIFF,
}


def clamp_quality(value: float) -> float:
    """将 JPEG 质量限制在 [0.1, 1.0]。"""

    return max(MIN_JPEG_QUALITY, min(float(value), MAX_JPEG_QUALITY))


def parse_dimension(text: Union[str, int, float], label: str) -> int:
    """把界面/命令行输入的尺寸文本转换为正整数。"""

    try:
        value = float(str(text).strip())
    except ValueError as exc:
        raise InvalidTargetSizeError(f"{label} 必须为数字: {text!r}") from exc

    if not math.isfinite(value):
        raise InvalidTargetSizeError(f"{label} 必须为有限数字: {text!r}")

    pixels = int(value)
    if pixels <= 0:
        raise InvalidTargetSizeError(f"{label} 必须大于 0: {text!r}")
    return pixels


@dataclass(slots=True)
class TargetSpec:
    """单次批处理的目标尺寸与编码参数。"""

    width: int
    height: int
    output_format: OutputFormat = OutputFormat.PNG
    jpeg_quality: float = 0.9
    suffix: str = DEFAULT_SUFFIX
    background_color: str = "#FFFFFF"  # 仅在 JPEG 拍平 Alpha 时使用

    def __post_init__(self) -> None:
        if not isinstance(self.width, int) or not isinstance(self.height, int):
            raise InvalidTargetSizeError("目标宽高必须为整数")
        if self.width <= 0 or self.height <= 0:
            raise InvalidTargetSizeError(f"目标尺寸必须大于 0: {self.width}x{self.height}")
        self.output_format = OutputFormat.parse(self.output_format)
        self.jpeg_quality = clamp_quality(self.jpeg_quality)
        parse_color(self.background_color)

    @property
    def size(self) -> tuple[int, int]:
        return self.width, self.height

    @classmethod
    def from_text(
        cls,
        width_text: Union[str, int, float],
        height_text: Union[str, int, float],
        **options,
    ) -> "TargetSpec":
        """解析文本形式的宽高；任一非法时抛出 InvalidTargetSizeError。"""

        width = parse_dimension(width_text, "宽度")
        height = parse_dimension(height_text, "高度")
        return cls(width=width, height=height, **options)


@dataclass(slots=True)
class OutputConfig:
    """导出目录配置。"""

    output_dir: Path
    batch_folder: bool = True  # True: 写入新的 Resized_Batch_* 文件夹；False: 直接平铺
