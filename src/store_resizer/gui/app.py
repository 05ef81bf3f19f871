"""Tkinter 图形界面实现。"""

from __future__ import annotations

import logging
import tkinter as tk
from pathlib import Path
from tkinter import filedialog, messagebox, ttk
from typing import Optional

from store_resizer.core.config import OutputFormat
from store_resizer.core.models import BatchResult
from store_resizer.core.output_manager import export_batch, write_image
from store_resizer.core.presets import DEFAULT_PRESET, PRESETS, find_preset_by_label
from store_resizer.core.progress import ProgressUpdate
from store_resizer.gui.drag_drop import TKDND_AVAILABLE, TkinterDnD, read_drop_payloads, setup_drag_and_drop
from store_resizer.processing.image_loader import IMAGE_EXTENSIONS
from store_resizer.processing.resizer import ImageResizeError, aspect_locked_height
from store_resizer.processing.session import ResizeSession
from store_resizer.utils.logging import setup_logging

CUSTOM_PRESET_LABEL = "自定义"
POLL_INTERVAL_MS = 100

_ROOT_BASE = TkinterDnD.Tk if TKDND_AVAILABLE else tk.Tk


class TextWidgetHandler(logging.Handler):
    """Logging handler that writes records into a Tk Text widget."""

    def __init__(self, widget: tk.Text) -> None:
        super().__init__()
        self._widget = widget

    def emit(self, record: logging.LogRecord) -> None:  # noqa: D401 - standard logging handler signature
        message = self.format(record)
        # Schedule UI update on main thread
        self._widget.after(0, self._write, message)

    def _write(self, message: str) -> None:
        if not self._widget.winfo_exists():
            return
        self._widget.configure(state=tk.NORMAL)
        self._widget.insert(tk.END, message + "\n")
        self._widget.configure(state=tk.DISABLED)
        self._widget.see(tk.END)


class StoreResizerApp(_ROOT_BASE):
    """Tkinter 主窗口。"""

    def __init__(self) -> None:
        super().__init__()
        self.title("Store Resizer")
        self.geometry("760x560")
        self.minsize(600, 400)
        setup_logging()

        self.session = ResizeSession()
        self.session.on_progress(self._handle_progress)
        self.session.on_done(self._handle_done)
        self.session.on_error(self._handle_error)
        self.default_dir = Path.home()

        self._build_ui()
        self._attach_log_handler()
        setup_drag_and_drop(self, [self, self.input_frame], self._handle_dropped_paths)
        self.after(POLL_INTERVAL_MS, self._poll_session)

    # ---------------------- UI 构建 ---------------------- #

    def _build_ui(self) -> None:
        container = ttk.Frame(self, padding=12)
        container.pack(fill=tk.BOTH, expand=True)

        self._build_target_section(container)
        self._build_io_section(container)
        self._build_progress_section(container)

    def _build_target_section(self, parent: tk.Widget) -> None:
        frame = ttk.LabelFrame(parent, text="目标尺寸与格式", padding=8)
        frame.pack(fill=tk.X)

        ttk.Label(frame, text="预设:").grid(row=0, column=0, sticky=tk.W)
        labels = [CUSTOM_PRESET_LABEL, *(preset.label for preset in PRESETS)]
        self.preset_var = tk.StringVar(value=DEFAULT_PRESET.label)
        preset_combo = ttk.Combobox(frame, textvariable=self.preset_var, values=labels, state="readonly", width=20)
        preset_combo.grid(row=0, column=1, columnspan=3, sticky=tk.W)
        preset_combo.bind("<<ComboboxSelected>>", self._apply_preset)

        ttk.Label(frame, text="宽 x 高:").grid(row=1, column=0, sticky=tk.W, pady=4)
        self.width_var = tk.StringVar(value=str(DEFAULT_PRESET.width))
        self.height_var = tk.StringVar(value=str(DEFAULT_PRESET.height))
        width_entry = ttk.Entry(frame, textvariable=self.width_var, width=8)
        width_entry.grid(row=1, column=1, sticky=tk.W)
        width_entry.bind("<FocusOut>", self._apply_aspect_lock)
        width_entry.bind("<Return>", self._apply_aspect_lock)
        ttk.Label(frame, text="x").grid(row=1, column=2)
        ttk.Entry(frame, textvariable=self.height_var, width=8).grid(row=1, column=3, sticky=tk.W)

        self.aspect_lock_var = tk.BooleanVar(value=False)
        ttk.Checkbutton(
            frame,
            text="按首张图片锁定比例",
            variable=self.aspect_lock_var,
            command=self._apply_aspect_lock,
        ).grid(row=1, column=4, sticky=tk.W, padx=(8, 0))

        ttk.Label(frame, text="格式:").grid(row=2, column=0, sticky=tk.W)
        self.format_var = tk.StringVar(value=OutputFormat.PNG.value)
        ttk.Combobox(
            frame,
            textvariable=self.format_var,
            values=[fmt.value for fmt in OutputFormat],
            state="readonly",
            width=8,
        ).grid(row=2, column=1, sticky=tk.W)

        ttk.Label(frame, text="JPEG 质量:").grid(row=2, column=2, sticky=tk.W, padx=(8, 0))
        self.quality_var = tk.DoubleVar(value=0.9)
        ttk.Scale(frame, variable=self.quality_var, from_=0.1, to=1.0, length=140).grid(row=2, column=3, sticky=tk.W)
        self.quality_label = ttk.Label(frame, text="0.90", width=5)
        self.quality_label.grid(row=2, column=4, sticky=tk.W)
        self.quality_var.trace_add("write", lambda *_: self.quality_label.configure(text=f"{self.quality_var.get():.2f}"))

        ttk.Label(frame, text="后缀:").grid(row=3, column=0, sticky=tk.W, pady=4)
        self.suffix_var = tk.StringVar(value="_resized")
        ttk.Entry(frame, textvariable=self.suffix_var, width=14).grid(row=3, column=1, columnspan=2, sticky=tk.W)

    def _build_io_section(self, parent: tk.Widget) -> None:
        frame = ttk.Frame(parent)
        frame.pack(fill=tk.BOTH, expand=True, pady=8)

        inputs = ttk.LabelFrame(frame, text="输入（可拖入图片）", padding=8)
        self.input_frame = inputs
        inputs.pack(side=tk.LEFT, fill=tk.BOTH, expand=True, padx=(0, 4))
        self.input_count_var = tk.StringVar(value="0 张待处理")
        ttk.Label(inputs, textvariable=self.input_count_var).pack(anchor=tk.W)
        ttk.Button(inputs, text="打开图片...", command=self._open_images).pack(fill=tk.X, pady=(8, 2))
        self.process_button = ttk.Button(inputs, text="开始处理", command=self._start_processing, state=tk.DISABLED)
        self.process_button.pack(fill=tk.X, pady=2)

        results = ttk.LabelFrame(frame, text="结果", padding=8)
        results.pack(side=tk.LEFT, fill=tk.BOTH, expand=True, padx=(4, 0))
        self.result_listbox = tk.Listbox(results, height=8, selectmode=tk.EXTENDED)
        self.result_listbox.pack(fill=tk.BOTH, expand=True)
        button_row = ttk.Frame(results)
        button_row.pack(fill=tk.X, pady=(6, 0))
        self.save_button = ttk.Button(button_row, text="保存选中...", command=self._save_selected, state=tk.DISABLED)
        self.save_button.pack(side=tk.LEFT)
        self.export_button = ttk.Button(button_row, text="全部导出...", command=self._export_all, state=tk.DISABLED)
        self.export_button.pack(side=tk.LEFT, padx=(8, 0))

    def _build_progress_section(self, parent: tk.Widget) -> None:
        frame = ttk.LabelFrame(parent, text="执行进度", padding=8)
        frame.pack(fill=tk.BOTH, expand=False)

        progress_row = ttk.Frame(frame)
        progress_row.pack(fill=tk.X)
        self.progress_var = tk.DoubleVar(value=0.0)
        ttk.Progressbar(progress_row, variable=self.progress_var, maximum=100).pack(
            side=tk.LEFT, fill=tk.X, expand=True, padx=4, pady=4
        )
        self.progress_label_var = tk.StringVar(value="")
        ttk.Label(progress_row, textvariable=self.progress_label_var, width=10).pack(side=tk.LEFT)

        self.log_text = tk.Text(frame, height=6, state=tk.DISABLED)
        self.log_text.pack(fill=tk.BOTH, expand=True, padx=4)

    def _attach_log_handler(self) -> None:
        handler = TextWidgetHandler(self.log_text)
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s: %(message)s"))
        handler.setLevel(logging.INFO)
        logging.getLogger("store_resizer").addHandler(handler)

    # ---------------------- 事件处理 ---------------------- #

    def _apply_preset(self, _event: Optional[tk.Event] = None) -> None:
        preset = find_preset_by_label(self.preset_var.get())
        if preset is None:
            return
        self.width_var.set(str(preset.width))
        self.height_var.set(str(preset.height))

    def _apply_aspect_lock(self, _event: Optional[tk.Event] = None) -> None:
        if not self.aspect_lock_var.get() or not self.session.inputs:
            return
        try:
            width = int(float(self.width_var.get()))
            height = aspect_locked_height(self.session.inputs[0].size, width)
        except (ValueError, ImageResizeError):
            return
        self.height_var.set(str(height))
        self.preset_var.set(CUSTOM_PRESET_LABEL)

    def _open_images(self) -> None:
        patterns = " ".join(f"*{ext}" for ext in sorted(IMAGE_EXTENSIONS))
        filenames = filedialog.askopenfilenames(
            title="选择图片",
            filetypes=[("图像文件", patterns)],
            initialdir=str(self.default_dir),
        )
        if not filenames:
            return
        self.session.load_files(filenames)
        self.default_dir = Path(filenames[0]).parent
        self._refresh_inputs()
        self._refresh_results()
        self._apply_aspect_lock()

    def _handle_dropped_paths(self, paths: list[Path]) -> None:
        if self.session.busy:
            return
        self.session.load_dropped(read_drop_payloads(paths))
        self.default_dir = paths[0].parent
        self._refresh_inputs()
        self._refresh_results()
        self._apply_aspect_lock()

    def _start_processing(self) -> None:
        started = self.session.start(
            self.width_var.get(),
            self.height_var.get(),
            output_format=OutputFormat(self.format_var.get()),
            jpeg_quality=self.quality_var.get(),
            suffix=self.suffix_var.get(),
        )
        if not started:
            return
        self.progress_var.set(0)
        self.progress_label_var.set(f"0 / {len(self.session.inputs)}")
        self._set_running(True)

    def _poll_session(self) -> None:
        try:
            self.session.poll_events()
        finally:
            self.after(POLL_INTERVAL_MS, self._poll_session)

    def _handle_progress(self, update: ProgressUpdate) -> None:
        if update.total:
            self.progress_var.set(update.fraction * 100)
            self.progress_label_var.set(update.label)

    def _handle_done(self, result: BatchResult) -> None:
        self._set_running(False)
        self._refresh_inputs()
        self._refresh_results()
        if result.failed:
            self._append_log(f"{len(result.failed)} 张图片处理失败，已跳过。")

    def _handle_error(self, message: str) -> None:
        self._set_running(False)
        self._append_log(f"任务异常：{message}")
        messagebox.showerror("错误", message)

    def _save_selected(self) -> None:
        for index in self.result_listbox.curselection():
            processed = self.session.outputs[index]
            filename = filedialog.asksaveasfilename(
                title="保存图片",
                initialdir=str(self.default_dir),
                initialfile=processed.filename,
                defaultextension=f".{processed.output_format.extension}",
            )
            if not filename:
                return
            write_image(processed, Path(filename))

    def _export_all(self) -> None:
        directory = filedialog.askdirectory(title="选择导出目录", initialdir=str(self.default_dir))
        if not directory or self.session.last_result is None:
            return
        folder = export_batch(self.session.last_result, Path(directory))
        self._append_log(f"已导出到 {folder}")

    # ---------------------- 状态刷新 ---------------------- #

    def _set_running(self, running: bool) -> None:
        self.process_button.configure(state=tk.DISABLED if running or not self.session.inputs else tk.NORMAL)

    def _refresh_inputs(self) -> None:
        count = len(self.session.inputs)
        self.input_count_var.set(f"{count} 张待处理")
        self.process_button.configure(text=f"处理 {count} 张图片")
        self._set_running(self.session.busy)

    def _refresh_results(self) -> None:
        self.result_listbox.delete(0, tk.END)
        for processed in self.session.outputs:
            width, height = processed.size
            self.result_listbox.insert(tk.END, f"{processed.filename}  ({width}x{height})")
        state = tk.NORMAL if self.session.outputs else tk.DISABLED
        self.save_button.configure(state=state)
        self.export_button.configure(state=state)

    def _append_log(self, text: str) -> None:
        self.log_text.configure(state=tk.NORMAL)
        self.log_text.insert(tk.END, text + "\n")
        self.log_text.configure(state=tk.DISABLED)
        self.log_text.see(tk.END)


def run_gui() -> None:
    """启动 GUI 应用。"""

    app = StoreResizerApp()
    app.mainloop()

if __name__ == "__main__":
    run_gui()
