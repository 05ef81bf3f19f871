"""输出写入模块：单张导出与整批导出。"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from store_resizer.core.config import OutputConfig
from store_resizer.core.models import BatchResult, ProcessedImage
from store_resizer.core.naming import batch_filenames, batch_folder_name

LOGGER = logging.getLogger(__name__)


def write_image(processed: ProcessedImage, destination: Path) -> bool:
    """将已编码数据写入磁盘；失败时记录日志并返回 False。"""

    try:
        destination.write_bytes(processed.data)
    except OSError as exc:
        LOGGER.error("写入文件失败: %s (%s)", destination, exc)
        return False
    LOGGER.debug("已写入 %s (%d 字节)", destination, len(processed.data))
    return True


def export_single(processed: ProcessedImage, directory: Path) -> Optional[Path]:
    """以单张命名规则导出到目录，返回写入的路径。"""

    destination = directory / processed.filename
    if write_image(processed, destination):
        return destination
    return None


def export_batch(result: BatchResult, directory: Path, *, folder_name: Optional[str] = None) -> Path:
    """在 ``directory`` 下新建批量文件夹并写入全部图片，返回文件夹路径。"""

    folder, _ = _write_batch(result, directory / (folder_name or batch_folder_name()))
    return folder


def _write_batch(result: BatchResult, folder: Path) -> tuple[Path, list[Path]]:
    """文件名包含批次内序号；单张写入失败只记录日志，不中断其余文件。"""

    try:
        folder.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        LOGGER.error("创建批量文件夹失败: %s (%s)", folder, exc)
        return folder, []

    names = batch_filenames(
        ((item.source_name, item.output_format) for item in result.images),
        suffix=result.suffix,
    )
    written: list[Path] = []
    for item, name in zip(result.images, names):
        destination = folder / name
        if write_image(item, destination):
            written.append(destination)

    LOGGER.info("批量导出完成: %s (%d/%d)", folder, len(written), len(result.images))
    return folder, written


class OutputManager:
    """按输出配置决定平铺写入或批量文件夹写入。"""

    def __init__(self, config: OutputConfig) -> None:
        self.config = config
        self.output_dir = config.output_dir.resolve()
        self.output_dir.mkdir(parents=True, exist_ok=True)

    def export(self, result: BatchResult) -> list[Path]:
        """导出整批结果，返回成功写入的文件路径。"""

        if self.config.batch_folder:
            _, written = _write_batch(result, self.output_dir / result.folder_name)
            return written

        single_names = [item.filename for item in result.images]
        if len(set(single_names)) != len(single_names):
            # 同名源图平铺时改用带序号的批量文件名，避免互相覆盖
            LOGGER.warning("平铺导出存在重名文件，改用带序号的文件名")
            _, written = _write_batch(result, self.output_dir)
            return written

        written = []
        for item in result.images:
            path = export_single(item, self.output_dir)
            if path is not None:
                written.append(path)
        return written
