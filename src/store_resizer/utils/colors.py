"""颜色工具函数。"""

from __future__ import annotations

import re
from typing import Tuple

from PIL import ImageColor

from store_resizer.core.exceptions import InvalidConfigurationError

BARE_HEX_RE = re.compile(r"^([0-9a-fA-F]{3}|[0-9a-fA-F]{6})$")


def parse_color(value: str) -> Tuple[int, int, int]:
    """将 HEX 字符串或颜色名解析为 RGB 三元组。

    ``"#fff"``、``"ffffff"`` 与 ``"white"`` 均可接受；带 Alpha 的颜色会丢弃 Alpha。
    """

    if not value or not value.strip():
        raise InvalidConfigurationError("颜色值不能为空")

    candidate = value.strip()
    if BARE_HEX_RE.match(candidate):
        candidate = "#" + candidate

    try:
        rgb = ImageColor.getrgb(candidate)
    except ValueError as exc:
        raise InvalidConfigurationError(f"无法解析颜色值: {value}") from exc

    return rgb[0], rgb[1], rgb[2]
