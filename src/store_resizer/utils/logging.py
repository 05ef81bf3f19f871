"""日志工具。"""

from __future__ import annotations

import logging


def setup_logging(level: int = logging.INFO) -> None:
    """初始化项目日志配置。

    Pillow 在 DEBUG 级别会逐块输出 PNG/TIFF 解析日志，这里始终将其限制在 INFO 以上。
    """

    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(threadName)s] %(levelname)s %(name)s: %(message)s",
    )
    logging.getLogger("PIL").setLevel(max(level, logging.INFO))
