"""缩放与编码：尺寸、透明度与无损性。"""

from __future__ import annotations

import random

import pytest
from PIL import Image

from store_resizer.core.config import OutputFormat, TargetSpec
from store_resizer.core.models import SourceImage
from store_resizer.processing.encoder import ImageEncodeError, decode, encode
from store_resizer.processing.resizer import ImageResizeError, aspect_locked_height, resize
from store_resizer.processing.validation import compute_psnr, compute_ssim


def _noise_image(size: tuple[int, int], seed: int = 0) -> Image.Image:
    width, height = size
    data = random.Random(seed).randbytes(width * height * 3)
    return Image.frombytes("RGB", size, data).convert("RGBA")


def _source(size: tuple[int, int], name: str = "sample") -> SourceImage:
    return SourceImage(name=name, pixels=_noise_image(size))


@pytest.mark.parametrize(
    ("source_size", "target_size"),
    [
        ((100, 100), (50, 50)),
        ((200, 50), (50, 50)),
        ((30, 90), (1242, 2208)),
        ((640, 480), (1, 1)),
        ((10, 10), (37, 3)),
    ],
)
def test_resize_produces_exact_dimensions(source_size, target_size) -> None:
    source = _source(source_size)
    target = TargetSpec(width=target_size[0], height=target_size[1])

    resized = resize(source, target)

    assert resized.size == target_size
    assert resized.mode == "RGBA"
    assert source.size == source_size


def test_resize_preserves_alpha() -> None:
    pixels = Image.new("RGBA", (40, 40), (255, 0, 0, 0))
    pixels.paste((0, 0, 255, 255), (20, 0, 40, 40))
    source = SourceImage(name="half", pixels=pixels)

    resized = resize(source, TargetSpec(width=80, height=20))

    assert resized.getpixel((0, 10))[3] == 0
    assert resized.getpixel((79, 10)) == (0, 0, 255, 255)


def test_resize_rejects_non_positive_dimensions() -> None:
    source = _source((10, 10))
    target = TargetSpec(width=10, height=10)
    target.width = 0

    with pytest.raises(ImageResizeError):
        resize(source, target)


def test_aspect_locked_height() -> None:
    assert aspect_locked_height((200, 100), 50) == 25
    assert aspect_locked_height((1000, 1), 10) == 1
    with pytest.raises(ImageResizeError):
        aspect_locked_height((0, 100), 50)


@pytest.mark.parametrize("output_format", [OutputFormat.PNG, OutputFormat.TIFF])
def test_lossless_formats_round_trip_pixels(output_format: OutputFormat) -> None:
    resized = resize(_source((64, 48)), TargetSpec(width=32, height=20))

    data = encode(resized, output_format)
    decoded = decode(data)

    assert decoded.size == resized.size
    assert decoded.tobytes() == resized.tobytes()


def test_png_keeps_transparency() -> None:
    image = Image.new("RGBA", (8, 8), (10, 20, 30, 0))

    decoded = decode(encode(image, OutputFormat.PNG))

    assert decoded.getpixel((0, 0)) == (10, 20, 30, 0)


def test_jpeg_quality_controls_size_and_fidelity() -> None:
    resized = resize(_source((128, 128), name="noise"), TargetSpec(width=96, height=96))

    high = encode(resized, OutputFormat.JPEG, 1.0)
    low = encode(resized, OutputFormat.JPEG, 0.1)

    assert high[:2] == b"\xff\xd8"
    assert len(high) >= len(low)
    assert compute_psnr(resized, decode(high)) > compute_psnr(resized, decode(low))


def test_jpeg_of_smooth_image_is_near_identical_at_full_quality() -> None:
    gradient = Image.linear_gradient("L").resize((64, 64)).convert("RGBA")

    decoded = decode(encode(gradient, OutputFormat.JPEG, 1.0))

    assert compute_ssim(gradient, decoded) > 0.98
    assert compute_psnr(gradient, decoded) > 35


def test_jpeg_flattens_alpha_onto_background() -> None:
    transparent = Image.new("RGBA", (16, 16), (255, 0, 0, 0))

    decoded = decode(encode(transparent, OutputFormat.JPEG, 1.0, background_color="#000000"))

    r, g, b, a = decoded.getpixel((8, 8))
    assert a == 255
    assert max(r, g, b) < 8


def test_encoder_failure_is_wrapped(monkeypatch: pytest.MonkeyPatch) -> None:
    def broken_save(self, *args, **kwargs):
        raise OSError("encoder exploded")

    monkeypatch.setattr(Image.Image, "save", broken_save)

    with pytest.raises(ImageEncodeError):
        encode(Image.new("RGBA", (4, 4)), OutputFormat.PNG)


def test_identical_images_have_perfect_metrics() -> None:
    image = _noise_image((20, 20))

    assert compute_ssim(image, image.copy()) == pytest.approx(1.0)
    assert compute_psnr(image, image.copy()) == float("inf")
