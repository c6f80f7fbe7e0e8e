from __future__ import annotations

from pathlib import Path
from typing import Callable

import pytest
from PIL import Image

from image_resizer.core.models import Resolution, ResizeConfig


def write_image(path: Path, size: tuple[int, int] = (40, 30), color: str = "red") -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    Image.new("RGB", size, color).save(path)
    return path


@pytest.fixture
def make_image() -> Callable[..., Path]:
    return write_image


@pytest.fixture
def image_tree(tmp_path: Path) -> Path:
    """
    in/
      a.png  b.jpg  c.gif  notes.txt
      sub/d.png  sub/e.bmp
      sub/deeper/f.jpeg
    """
    root = tmp_path / "in"
    write_image(root / "a.png")
    write_image(root / "b.jpg")
    write_image(root / "c.gif")
    (root / "notes.txt").write_text("not an image", "utf-8")
    write_image(root / "sub" / "d.png")
    write_image(root / "sub" / "e.bmp")
    write_image(root / "sub" / "deeper" / "f.jpeg")
    return root


def make_config(input_dir: Path, output_dir: Path, **kw) -> ResizeConfig:
    kw.setdefault("resolution", Resolution(8, 6))
    kw.setdefault("file_types", frozenset({".png", ".jpg"}))
    return ResizeConfig(input_dir=str(input_dir), output_dir=str(output_dir), **kw)
