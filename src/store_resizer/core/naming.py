"""输出文件名与批量文件夹名的生成规则。"""

from __future__ import annotations

import time
from pathlib import PurePath
from typing import Iterable, Optional, Tuple

from store_resizer.core.config import DEFAULT_SUFFIX, OutputFormat

FALLBACK_NAME = "image"
BATCH_FOLDER_PREFIX = "Resized_Batch_"


def strip_extension(name: Optional[str]) -> str:
    """去掉最后一个扩展名；空名称回退为 ``image``。"""

    if not name or not name.strip():
        return FALLBACK_NAME
    pure = PurePath(name.strip())
    stem = pure.stem if pure.suffix else pure.name
    return stem or FALLBACK_NAME


def single_filename(base_name: str, output_format: OutputFormat, suffix: str = DEFAULT_SUFFIX) -> str:
    """单张导出的文件名：``{base}{suffix}.{ext}``。"""

    return f"{base_name}{suffix}.{output_format.extension}"


def batch_filenames(
    items: Iterable[Tuple[str, OutputFormat]],
    suffix: str = DEFAULT_SUFFIX,
) -> list[str]:
    """批量导出的文件名：``{base}{suffix}_{index}.{ext}``。

    index 为批次内从 0 开始的位置，同名源图也不会冲突。
    """

    return [
        f"{base_name}{suffix}_{index}.{output_format.extension}"
        for index, (base_name, output_format) in enumerate(items)
    ]


def batch_folder_name(now: Optional[float] = None) -> str:
    """生成 ``Resized_Batch_{unix 秒}``，不检查是否已存在。"""

    timestamp = time.time() if now is None else now
    return f"{BATCH_FOLDER_PREFIX}{int(timestamp)}"
