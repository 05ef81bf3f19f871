"""拖放输入的路径解析与读取。"""

from __future__ import annotations

from pathlib import Path

from PIL import Image

from store_resizer.gui.drag_drop import normalize_dropped_path_text, parse_drop_paths, read_drop_payloads
from store_resizer.processing.session import ResizeSession


def _fixed_splitlist(*items: str):
    return lambda _data: list(items)


def test_normalize_file_uri() -> None:
    assert normalize_dropped_path_text("file:///tmp/My%20Photo.png") == "/tmp/My Photo.png"
    assert normalize_dropped_path_text("file://localhost/tmp/a.png") == "/tmp/a.png"
    assert normalize_dropped_path_text("  /plain/path.png ") == "/plain/path.png"


def test_parse_drop_paths_handles_braces_newlines_and_duplicates() -> None:
    splitlist = _fixed_splitlist("{/tmp/with space.png}", "/tmp/a.png\n/tmp/b.png", "/tmp/a.png")

    paths = parse_drop_paths(splitlist, "raw event data")

    assert paths == [Path("/tmp/with space.png"), Path("/tmp/a.png"), Path("/tmp/b.png")]


def test_parse_drop_paths_empty_data() -> None:
    assert parse_drop_paths(_fixed_splitlist("ignored"), "") == []
    assert parse_drop_paths(_fixed_splitlist("ignored"), None) == []


def test_dropped_files_become_session_inputs(tmp_path: Path) -> None:
    Image.new("RGB", (30, 10), "red").save(tmp_path / "banner.png")
    (tmp_path / "notes.txt").write_text("hello")
    (tmp_path / "folder").mkdir()

    payloads = read_drop_payloads([tmp_path / "banner.png", tmp_path / "notes.txt", tmp_path / "folder"])
    session = ResizeSession()
    loaded = session.load_dropped(payloads)

    assert loaded == 1
    source = session.inputs[0]
    assert (source.name, source.size) == ("banner", (30, 10))
    assert source.byte_size == (tmp_path / "banner.png").stat().st_size
