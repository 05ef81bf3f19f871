"""报告生成工具。"""

from __future__ import annotations

import csv
from pathlib import Path

from store_resizer.core.models import BatchResult

HEADER = ["source_name", "output_name", "status", "message", "ssim", "psnr"]


def write_csv_report(result: BatchResult, report_path: Path) -> Path:
    """将一次批处理的成功与失败记录写入 CSV 报告。"""

    report_path.parent.mkdir(parents=True, exist_ok=True)
    with report_path.open("w", newline="", encoding="utf-8") as handle:
        writer = csv.writer(handle)
        writer.writerow(HEADER)
        for item in result.images:
            writer.writerow(
                [
                    item.source_name,
                    item.filename,
                    "processed",
                    "",
                    _format_ssim(item.ssim),
                    _format_psnr(item.psnr),
                ]
            )
        for failure in result.failed:
            writer.writerow([failure.source_name, "", f"error-{failure.stage}", failure.message, "", ""])
    return report_path


def _format_ssim(value: float | None) -> str:
    if value is None:
        return ""
    return f"{value:.6f}"


def _format_psnr(value: float | None) -> str:
    if value is None:
        return ""
    if value == float("inf"):
        return "inf"
    return f"{value:.2f}"
