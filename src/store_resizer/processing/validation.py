"""编码保真度指标。"""

from __future__ import annotations

import cv2
import numpy as np
from PIL import Image


def compute_ssim(original: Image.Image, processed: Image.Image) -> float:
    """计算两张图片的结构相似度（SSIM，全局单窗口）。"""

    size = processed.size
    if size[0] <= 0 or size[1] <= 0:
        return 0.0

    img_a = _to_gray_array(original, size)
    img_b = _to_gray_array(processed, size)

    mu_a = img_a.mean()
    mu_b = img_b.mean()
    sigma_a_sq = ((img_a - mu_a) ** 2).mean()
    sigma_b_sq = ((img_b - mu_b) ** 2).mean()
    sigma_ab = ((img_a - mu_a) * (img_b - mu_b)).mean()

    c1 = (0.01 * 255) ** 2
    c2 = (0.03 * 255) ** 2

    numerator = (2 * mu_a * mu_b + c1) * (2 * sigma_ab + c2)
    denominator = (mu_a**2 + mu_b**2 + c1) * (sigma_a_sq + sigma_b_sq + c2)
    if denominator == 0:
        return 0.0

    value = numerator / denominator
    return float(max(min(value, 1.0), -1.0))


def compute_psnr(original: Image.Image, processed: Image.Image) -> float:
    """计算 RGB 通道上的峰值信噪比；完全相同时返回 inf。"""

    img_a = _to_rgb_array(original, processed.size)
    img_b = _to_rgb_array(processed, processed.size)
    if np.array_equal(img_a, img_b):
        return float("inf")
    return float(cv2.PSNR(img_a, img_b))


def _to_gray_array(image: Image.Image, size: tuple[int, int]) -> np.ndarray:
    gray = image.convert("L")
    if gray.size != size:
        gray = gray.resize(size, Image.LANCZOS)
    return np.asarray(gray, dtype=np.float32)


def _to_rgb_array(image: Image.Image, size: tuple[int, int]) -> np.ndarray:
    rgb = image.convert("RGB")
    if rgb.size != size:
        rgb = rgb.resize(size, Image.LANCZOS)
    return np.ascontiguousarray(np.asarray(rgb, dtype=np.uint8))
