"""拖放输入：注册 tkinterdnd2 目标并把拖入的文件转换为输入数据。"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Callable, Iterable, List, Optional, Sequence, Tuple
from urllib.parse import unquote, urlparse

from store_resizer.processing.image_loader import is_supported

LOGGER = logging.getLogger(__name__)

TKDND_AVAILABLE = False
DND_FILES: Optional[str] = None
TkinterDnD: Any = None

try:
    from tkinterdnd2 import DND_FILES, TkinterDnD

    TKDND_AVAILABLE = True
except ImportError:
    LOGGER.info("未安装 tkinterdnd2，拖放输入不可用")


def setup_drag_and_drop(
    root: Any,
    widgets: Sequence[Any],
    on_drop: Callable[[List[Path]], None],
) -> bool:
    """把 ``widgets`` 注册为文件拖放目标，返回是否至少注册成功一个。"""

    if not TKDND_AVAILABLE or not hasattr(root, "drop_target_register"):
        LOGGER.info("拖放输入已禁用：tkinterdnd2 不可用")
        return False

    def handle_drop(event: Any) -> str:
        paths = parse_drop_paths(root.tk.splitlist, getattr(event, "data", ""))
        if paths:
            on_drop(paths)
        return getattr(event, "action", "copy")

    registered = 0
    for widget in widgets:
        try:
            widget.drop_target_register(DND_FILES)
            widget.dnd_bind("<<Drop>>", handle_drop)
            registered += 1
        except Exception:  # noqa: BLE001
            LOGGER.exception("注册拖放目标失败: %s", widget)

    if registered:
        LOGGER.info("已在 %d 个控件上启用拖放", registered)
    return registered > 0


def normalize_dropped_path_text(value: str) -> str:
    """把 ``file://`` URI 转换为本地路径，其他文本原样返回。"""

    text = value.strip()
    if not text.startswith("file://"):
        return text
    parsed = urlparse(text)
    normalized = unquote(parsed.path or "")
    if parsed.netloc and parsed.netloc.lower() != "localhost":
        normalized = f"//{parsed.netloc}{normalized}"
    if os.name == "nt" and len(normalized) >= 3 and normalized[0] == "/" and normalized[2] == ":":
        normalized = normalized[1:]
    return normalized or text


def parse_drop_paths(splitlist: Callable[[str], Sequence[str]], raw_data: Any) -> List[Path]:
    """解析拖放事件数据（Tcl 列表，可能带花括号或换行），去重后保持顺序。"""

    data = str(raw_data or "").strip()
    if not data:
        return []

    items: List[str] = []
    for item in splitlist(data):
        text = str(item)
        items.extend(line for line in text.splitlines() if line.strip())

    paths: List[Path] = []
    seen: set[str] = set()
    for item in items:
        text = item.strip()
        if text.startswith("{") and text.endswith("}"):
            text = text[1:-1]
        text = normalize_dropped_path_text(text.strip().strip('"'))
        if not text or text in seen:
            continue
        seen.add(text)
        paths.append(Path(text))
    return paths


def read_drop_payloads(paths: Iterable[Path]) -> List[Tuple[bytes, str]]:
    """读取拖入的图片文件，返回 ``(bytes, 建议文件名)``；目录与不支持的文件被忽略。"""

    payloads: List[Tuple[bytes, str]] = []
    for path in paths:
        if not path.is_file() or not is_supported(path):
            LOGGER.info("忽略拖入的非图片文件: %s", path)
            continue
        try:
            payloads.append((path.read_bytes(), path.name))
        except OSError as exc:
            LOGGER.warning("读取拖入文件失败 %s: %s", path, exc)
    return payloads
