"""进度更新的数据模型。"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(slots=True)
class ProgressUpdate:
    """批处理过程中的进度信息，completed 只计成功的张数。"""

    total: int
    completed: int
    message: Optional[str] = None
    status: str = "running"  # running | done

    @property
    def fraction(self) -> float:
        if self.total <= 0:
            return 0.0
        return self.completed / self.total

    @property
    def label(self) -> str:
        return f"{self.completed} / {self.total}"
