"""核心数据模型定义。"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from PIL import Image

from store_resizer.core.config import DEFAULT_SUFFIX, OutputFormat
from store_resizer.core.naming import batch_folder_name


@dataclass(frozen=True, slots=True)
class SourceImage:
    """已加载的源图片，加载后不再修改。"""

    name: str
    pixels: Image.Image
    byte_size: Optional[int] = None

    @property
    def width(self) -> int:
        return self.pixels.width

    @property
    def height(self) -> int:
        return self.pixels.height

    @property
    def size(self) -> tuple[int, int]:
        return self.pixels.size


@dataclass(slots=True)
class ProcessedImage:
    """单张图片的缩放与编码结果。"""

    source_name: str
    pixels: Image.Image
    data: bytes
    output_format: OutputFormat
    filename: str
    ssim: Optional[float] = None
    psnr: Optional[float] = None

    @property
    def size(self) -> tuple[int, int]:
        return self.pixels.size


@dataclass(slots=True)
class FailedImage:
    """被丢弃的图片及原因（resize | encode）。"""

    source_name: str
    stage: str
    message: str


@dataclass(slots=True)
class BatchResult:
    """一次批处理的有序产出。"""

    images: list[ProcessedImage] = field(default_factory=list)
    failed: list[FailedImage] = field(default_factory=list)
    suffix: str = DEFAULT_SUFFIX

    @property
    def folder_name(self) -> str:
        """“全部导出”使用的文件夹名，每次读取都按当前时间生成。"""

        return batch_folder_name()

    def __len__(self) -> int:
        return len(self.images)
