"""命令行入口。"""

from __future__ import annotations

from pathlib import Path

from PIL import Image
from typer.testing import CliRunner

from store_resizer.cli.main import app

runner = CliRunner()


def _make_inputs(directory: Path) -> Path:
    directory.mkdir()
    Image.new("RGB", (100, 100), "blue").save(directory / "a.png")
    Image.new("RGB", (200, 50), "red").save(directory / "b.png")
    (directory / "notes.txt").write_text("hello")
    return directory


def test_run_writes_batch_folder(tmp_path: Path) -> None:
    source = _make_inputs(tmp_path / "input")
    output = tmp_path / "output"

    result = runner.invoke(app, ["run", str(source), "-o", str(output), "-W", "50", "-H", "50"])

    assert result.exit_code == 0, result.output
    folders = list(output.iterdir())
    assert len(folders) == 1 and folders[0].name.startswith("Resized_Batch_")
    assert sorted(p.name for p in folders[0].iterdir()) == ["a_resized_0.png", "b_resized_1.png"]


def test_run_flat_jpeg_with_preset_and_report(tmp_path: Path) -> None:
    source = _make_inputs(tmp_path / "input")
    output = tmp_path / "output"
    report = tmp_path / "report.csv"

    result = runner.invoke(
        app,
        [
            "run",
            str(source / "a.png"),
            "-o",
            str(output),
            "--preset",
            "play-icon",
            "--format",
            "jpeg",
            "--quality",
            "0.5",
            "--flat",
            "--verify",
            "--report",
            str(report),
        ],
    )

    assert result.exit_code == 0, result.output
    with Image.open(output / "a_resized.jpg") as img:
        assert img.size == (512, 512)
        assert img.format == "JPEG"
    assert "a_resized.jpg" in report.read_text(encoding="utf-8")


def test_run_rejects_invalid_size(tmp_path: Path) -> None:
    source = _make_inputs(tmp_path / "input")
    output = tmp_path / "output"

    result = runner.invoke(app, ["run", str(source), "-o", str(output), "-W", "abc", "-H", "50"])

    assert result.exit_code == 2
    assert not output.exists()


def test_run_requires_size_or_preset(tmp_path: Path) -> None:
    source = _make_inputs(tmp_path / "input")

    result = runner.invoke(app, ["run", str(source), "-o", str(tmp_path / "out")])

    assert result.exit_code == 2


def test_presets_command_lists_presets() -> None:
    result = runner.invoke(app, ["presets"])

    assert result.exit_code == 0
    assert "iphone-5.5" in result.output
    assert "1242" in result.output


def test_run_flat_keeps_same_named_sources_apart(tmp_path: Path) -> None:
    for folder, color in (("x", "blue"), ("y", "red")):
        (tmp_path / folder).mkdir()
        Image.new("RGB", (20, 20), color).save(tmp_path / folder / "photo.png")
    output = tmp_path / "out"

    result = runner.invoke(
        app,
        ["run", str(tmp_path / "x"), str(tmp_path / "y"), "-o", str(output), "-W", "5", "-H", "5", "--flat"],
    )

    assert result.exit_code == 0, result.output
    assert sorted(p.name for p in output.iterdir()) == ["photo_resized_0.png", "photo_resized_1.png"]
    assert "写入 2 个文件" in result.output
