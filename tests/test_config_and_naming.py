"""配置解析、预设与命名规则。"""

from __future__ import annotations

import re

import pytest

from store_resizer.core.config import OutputFormat, TargetSpec, clamp_quality
from store_resizer.core.exceptions import InvalidConfigurationError, InvalidTargetSizeError
from store_resizer.core.models import BatchResult
from store_resizer.core.naming import batch_filenames, batch_folder_name, single_filename, strip_extension
from store_resizer.core.presets import DEFAULT_PRESET, PRESETS, get_preset
from store_resizer.utils.colors import parse_color


@pytest.mark.parametrize(("width", "height"), [("0", "10"), ("10", "-5"), ("abc", "10"), ("", "10"), ("nan", "1")])
def test_invalid_target_text_is_rejected(width: str, height: str) -> None:
    with pytest.raises(InvalidTargetSizeError):
        TargetSpec.from_text(width, height)


def test_target_text_accepts_decimal_values() -> None:
    target = TargetSpec.from_text(" 1242.0 ", "2208")

    assert target.size == (1242, 2208)
    assert target.output_format is OutputFormat.PNG
    assert target.suffix == "_resized"


def test_target_clamps_jpeg_quality() -> None:
    assert TargetSpec(width=1, height=1, jpeg_quality=3.0).jpeg_quality == 1.0
    assert TargetSpec(width=1, height=1, jpeg_quality=0.0).jpeg_quality == 0.1
    assert clamp_quality(0.55) == 0.55


def test_target_rejects_bad_background_color() -> None:
    with pytest.raises(InvalidConfigurationError):
        TargetSpec(width=1, height=1, background_color="not-a-colour")


def test_output_format_parsing() -> None:
    assert OutputFormat.parse("JPG") is OutputFormat.JPEG
    assert OutputFormat.parse(".tif") is OutputFormat.TIFF
    assert OutputFormat.parse(OutputFormat.PNG) is OutputFormat.PNG
    assert [fmt.extension for fmt in OutputFormat] == ["png", "jpg", "tiff"]
    with pytest.raises(InvalidConfigurationError):
        OutputFormat.parse("gif")


def test_parse_color_variants() -> None:
    assert parse_color("#fff") == (255, 255, 255)
    assert parse_color("00ff00") == (0, 255, 0)
    assert parse_color("black") == (0, 0, 0)
    with pytest.raises(InvalidConfigurationError):
        parse_color("")


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        ("photo.png", "photo"),
        ("archive.tar.gz", "archive.tar"),
        ("noext", "noext"),
        ("", "image"),
        (None, "image"),
    ],
)
def test_strip_extension(name, expected) -> None:
    assert strip_extension(name) == expected


def test_single_filename() -> None:
    assert single_filename("a", OutputFormat.PNG) == "a_resized.png"
    assert single_filename("a", OutputFormat.JPEG, "_store") == "a_store.jpg"


def test_batch_filenames_are_unique_for_duplicate_names() -> None:
    names = batch_filenames([("photo", OutputFormat.PNG)] * 4)

    assert names == [f"photo_resized_{index}.png" for index in range(4)]
    assert len(set(names)) == 4


def test_batch_filenames_use_position_not_content() -> None:
    names = batch_filenames([("a", OutputFormat.TIFF), ("b", OutputFormat.JPEG)], suffix="")

    assert names == ["a_0.tiff", "b_1.jpg"]


def test_batch_folder_name() -> None:
    assert batch_folder_name(1700000000.9) == "Resized_Batch_1700000000"
    assert re.fullmatch(r"Resized_Batch_\d+", BatchResult().folder_name)


def test_presets() -> None:
    assert DEFAULT_PRESET.size == (1242, 2208)
    assert get_preset("IPHONE-6.7").size == (1290, 2796)
    assert len({preset.key for preset in PRESETS}) == len(PRESETS)
    with pytest.raises(InvalidConfigurationError):
        get_preset("nokia")
