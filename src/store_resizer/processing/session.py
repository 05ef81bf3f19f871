"""界面状态与后台批处理线程之间的协调。"""

from __future__ import annotations

import logging
import queue
import threading
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Tuple, Union

from store_resizer.core.config import TargetSpec
from store_resizer.core.exceptions import InvalidConfigurationError
from store_resizer.core.models import BatchResult, ProcessedImage, SourceImage
from store_resizer.core.progress import ProgressUpdate
from store_resizer.processing.image_loader import ImageLoadingError, load_image, load_image_bytes
from store_resizer.processing.pipeline import process_batch

LOGGER = logging.getLogger(__name__)

ProgressListener = Callable[[ProgressUpdate], None]
DoneListener = Callable[[BatchResult], None]
ErrorListener = Callable[[str], None]


class ResizeSession:
    """持有输入/输出列表，并保证同一时间最多一个批处理在后台运行。

    ``inputs`` 与 ``outputs`` 只应在前台（调用 ``poll_events`` 的线程）读写；
    后台线程只通过事件队列交回结果。
    """

    def __init__(self, *, verify: bool = False) -> None:
        self.inputs: List[SourceImage] = []
        self.outputs: List[ProcessedImage] = []
        self.last_result: Optional[BatchResult] = None
        self.verify = verify

        self._worker_thread: Optional[threading.Thread] = None
        self._event_queue: queue.Queue = queue.Queue()
        self._in_flight = False

        self._progress_listeners: List[ProgressListener] = []
        self._done_listeners: List[DoneListener] = []
        self._error_listeners: List[ErrorListener] = []

    # ---------------------- 监听器 ---------------------- #

    def on_progress(self, listener: ProgressListener) -> None:
        self._progress_listeners.append(listener)

    def on_done(self, listener: DoneListener) -> None:
        self._done_listeners.append(listener)

    def on_error(self, listener: ErrorListener) -> None:
        self._error_listeners.append(listener)

    # ---------------------- 输入 ---------------------- #

    @property
    def busy(self) -> bool:
        return self._in_flight

    def load_files(self, paths: Iterable[Union[str, Path]]) -> int:
        """以所选文件替换输入列表，无法加载的文件会被跳过。返回成功加载的数量。"""

        loaded: List[SourceImage] = []
        for raw in paths:
            path = Path(raw)
            try:
                loaded.append(load_image(path))
            except ImageLoadingError as exc:
                LOGGER.warning("跳过无法加载的文件 %s: %s", path, exc)
        self._replace_inputs(loaded)
        return len(loaded)

    def load_dropped(self, payloads: Iterable[Tuple[bytes, Optional[str]]]) -> int:
        """以拖放数据 ``(bytes, 建议文件名)`` 替换输入列表。"""

        loaded: List[SourceImage] = []
        for data, suggested_name in payloads:
            try:
                loaded.append(load_image_bytes(data, suggested_name))
            except ImageLoadingError as exc:
                LOGGER.warning("跳过无法加载的拖放数据: %s", exc)
        self._replace_inputs(loaded)
        return len(loaded)

    def _replace_inputs(self, loaded: List[SourceImage]) -> None:
        if self._in_flight:
            LOGGER.info("批处理进行中，忽略新的输入")
            return
        self.inputs = loaded
        self.outputs = []
        self.last_result = None
        LOGGER.info("已载入 %d 张图片", len(loaded))

    # ---------------------- 处理 ---------------------- #

    def start(self, width_text: Union[str, int], height_text: Union[str, int], **target_options) -> bool:
        """解析目标尺寸并在后台启动批处理。

        尺寸、格式或背景色非法，或已有批处理在运行时不做任何事并返回 False，原有输出保持不变。
        """

        if self._in_flight:
            LOGGER.info("已有批处理在运行，忽略本次请求")
            return False

        try:
            target = TargetSpec.from_text(width_text, height_text, **target_options)
        except InvalidConfigurationError as exc:
            LOGGER.info("目标参数无效，未执行处理: %s", exc)
            return False

        return self.start_with(target)

    def start_with(self, target: TargetSpec) -> bool:
        if self._in_flight:
            LOGGER.info("已有批处理在运行，忽略本次请求")
            return False
        if not self.inputs:
            LOGGER.info("没有待处理的图片")
            return False

        sources = list(self.inputs)
        self._in_flight = True
        self._worker_thread = threading.Thread(
            target=self._run_pipeline_thread,
            args=(sources, target),
            daemon=True,
        )
        self._worker_thread.start()
        return True

    def _run_pipeline_thread(self, sources: List[SourceImage], target: TargetSpec) -> None:
        def progress_callback(update: ProgressUpdate) -> None:
            self._event_queue.put(("progress", update))

        try:
            result = process_batch(sources, target, progress_callback=progress_callback, verify=self.verify)
            self._event_queue.put(("done", result))
        except Exception as exc:  # noqa: BLE001
            LOGGER.exception("批处理线程异常")
            self._event_queue.put(("error", str(exc)))

    def wait(self, timeout: Optional[float] = None) -> bool:
        """等待后台线程结束；返回线程是否已结束。"""

        thread = self._worker_thread
        if thread is None:
            return True
        thread.join(timeout)
        return not thread.is_alive()

    def poll_events(self) -> int:
        """在前台线程中处理所有待处理事件，不阻塞。返回处理的事件数量。"""

        handled = 0
        try:
            while True:
                kind, payload = self._event_queue.get_nowait()
                handled += 1
                if kind == "progress":
                    self._handle_progress(payload)
                elif kind == "done":
                    self._handle_done(payload)
                elif kind == "error":
                    self._handle_error(payload)
        except queue.Empty:
            pass
        return handled

    def _handle_progress(self, update: ProgressUpdate) -> None:
        for listener in self._progress_listeners:
            listener(update)

    def _handle_done(self, result: BatchResult) -> None:
        self.outputs = list(result.images)
        self.inputs = []
        self.last_result = result
        self._finish()
        for listener in self._done_listeners:
            listener(result)

    def _handle_error(self, message: str) -> None:
        self._finish()
        for listener in self._error_listeners:
            listener(message)

    def _finish(self) -> None:
        self._in_flight = False
        self._worker_thread = None
