from __future__ import annotations

import os
from pathlib import Path

import pytest

from conftest import make_config, write_image
from image_resizer.core.errors import EnumerationError, InputDirError, NestedOutputError, OutputDirError
from image_resizer.core.io_utils import is_nested, is_supported, list_operations, resolve_dirs, target_path


def _rel_sources(ops, root: Path) -> list[str]:
    return [os.path.relpath(op.origin_path, root) for op in ops]


def test_resolve_dirs_creates_output(tmp_path: Path) -> None:
    src = tmp_path / "in"
    src.mkdir()
    out = tmp_path / "a" / "b" / "out"

    in_dir, out_dir = resolve_dirs(str(src), str(out))

    assert in_dir == str(src)
    assert out_dir == str(out)
    assert out.is_dir()
    assert os.path.isabs(in_dir) and os.path.isabs(out_dir)


def test_resolve_dirs_relative_paths_become_absolute(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    (tmp_path / "in").mkdir()
    monkeypatch.chdir(tmp_path)

    in_dir, out_dir = resolve_dirs("in/", "./out/../out")

    assert in_dir == str(tmp_path / "in")
    assert out_dir == str(tmp_path / "out")


def test_resolve_dirs_missing_input(tmp_path: Path) -> None:
    with pytest.raises(InputDirError):
        resolve_dirs(str(tmp_path / "nope"), str(tmp_path / "out"))


@pytest.mark.parametrize("sub", ["", "b", "b/c"])
def test_resolve_dirs_rejects_nested_output(tmp_path: Path, sub: str) -> None:
    src = tmp_path / "a"
    src.mkdir()
    out = src / sub if sub else src

    with pytest.raises(NestedOutputError):
        resolve_dirs(str(src), str(out))
    if sub:
        assert not out.exists()


def test_resolve_dirs_sibling_with_shared_prefix_is_allowed(tmp_path: Path) -> None:
    (tmp_path / "a").mkdir()
    _, out_dir = resolve_dirs(str(tmp_path / "a"), str(tmp_path / "ab"))
    assert Path(out_dir).is_dir()


def test_resolve_dirs_output_is_a_file(tmp_path: Path) -> None:
    (tmp_path / "in").mkdir()
    (tmp_path / "out").write_text("x", "utf-8")
    with pytest.raises(OutputDirError):
        resolve_dirs(str(tmp_path / "in"), str(tmp_path / "out"))


def test_resolve_dirs_output_cannot_be_created(tmp_path: Path) -> None:
    (tmp_path / "in").mkdir()
    (tmp_path / "f").write_text("a file, not a folder", "utf-8")

    with pytest.raises(OutputDirError, match="Error creating output directory"):
        resolve_dirs(str(tmp_path / "in"), str(tmp_path / "f" / "out"))


def test_is_nested(tmp_path: Path) -> None:
    a = str(tmp_path / "a")
    assert is_nested(a, a)
    assert is_nested(os.path.join(a, "b"), a)
    assert not is_nested(str(tmp_path / "ab"), a)
    assert not is_nested(str(tmp_path), a)


@pytest.mark.parametrize(
    ("name", "expected"),
    [("x.png", True), ("x.PNG", True), ("x.jpg", True), ("x.jpeg", True), ("x.gif", False), ("x.txt", False), ("png", False)],
)
def test_is_supported(name: str, expected: bool) -> None:
    assert is_supported(name, frozenset({".png", ".jpg"})) is expected


def test_is_supported_requires_supported_set() -> None:
    assert not is_supported("x.webp", frozenset({".webp"}))


def test_list_operations_non_recursive(image_tree: Path, tmp_path: Path) -> None:
    cfg = make_config(image_tree, tmp_path / "out")
    ops = list_operations(cfg)
    assert _rel_sources(ops, image_tree) == ["a.png", "b.jpg"]


def test_list_operations_recursive(image_tree: Path, tmp_path: Path) -> None:
    cfg = make_config(image_tree, tmp_path / "out", recursive=True)
    ops = list_operations(cfg)
    assert _rel_sources(ops, image_tree) == [
        "a.png",
        "b.jpg",
        os.path.join("sub", "d.png"),
        os.path.join("sub", "deeper", "f.jpeg"),
    ]


def test_list_operations_respects_requested_types(image_tree: Path, tmp_path: Path) -> None:
    cfg = make_config(image_tree, tmp_path / "out", recursive=True, file_types=frozenset({".gif", ".bmp"}))
    ops = list_operations(cfg)
    assert _rel_sources(ops, image_tree) == ["c.gif", os.path.join("sub", "e.bmp")]


def test_list_operations_maps_destinations(image_tree: Path, tmp_path: Path) -> None:
    out = tmp_path / "out"
    cfg = make_config(image_tree, out, recursive=True)

    ops = list_operations(cfg)

    assert ops
    for op in ops:
        rel = os.path.relpath(op.origin_path, image_tree)
        assert op.target_path == str(out / rel)
        assert op.target_path == target_path(op.origin_path, str(image_tree), str(out))
        assert (op.width, op.height) == (8, 6)
        assert os.path.isabs(op.origin_path) and os.path.isabs(op.target_path)


def test_list_operations_is_deterministic(image_tree: Path, tmp_path: Path) -> None:
    cfg = make_config(image_tree, tmp_path / "out", recursive=True)
    assert list_operations(cfg) == list_operations(cfg)


def test_list_operations_no_matches(image_tree: Path, tmp_path: Path) -> None:
    cfg = make_config(image_tree, tmp_path / "out", file_types=frozenset())
    assert list_operations(cfg) == []


def test_list_operations_walk_error_is_fatal(tmp_path: Path) -> None:
    cfg = make_config(tmp_path / "vanished", tmp_path / "out")
    with pytest.raises(EnumerationError):
        list_operations(cfg)


def test_list_operations_skips_bare_dotfiles(tmp_path: Path) -> None:
    src = tmp_path / "in"
    write_image(src / "real.png")
    (src / ".png").write_bytes((src / "real.png").read_bytes())

    ops = list_operations(make_config(src, tmp_path / "out"))

    assert _rel_sources(ops, src) == ["real.png"]
