import os
from typing import Optional

from .errors import ResolutionError, WorkerCountError
from .io_utils import normalize_types, resolve_dirs
from .models import Resolution, ResizeConfig

DEFAULT_TYPES = "png,jpg"

def parse_resolution(raw: str) -> Resolution:
    """Parse "<width>x<height>" (case-insensitive, surrounding whitespace ignored)."""
    s = (raw or "").strip().lower()
    if "x" not in s:
        raise ResolutionError(f'Invalid resolution format {raw!r}: missing "x" as a dimensional separator')
    parts = s.split("x")
    if len(parts) != 2:
        raise ResolutionError(f"Invalid resolution format {raw!r}: expected <width>x<height>")
    if not all(p.isascii() and p.isdigit() for p in parts):
        raise ResolutionError(f"Unable to parse width/height from {raw!r}: expected plain decimal integers")
    w, h = int(parts[0]), int(parts[1])
    if w < 1 or h < 1:
        raise ResolutionError(f"Resolution {raw!r} must have a positive width and height")
    return Resolution(w, h)

def default_workers() -> int:
    return os.cpu_count() or 1

def build_config(
    input_dir: str,
    output_dir: str,
    resolution: str,
    file_types: str = DEFAULT_TYPES,
    recursive: bool = False,
    verbose: bool = False,
    workers: Optional[int] = None,
) -> ResizeConfig:
    """Validate raw flag values and return the immutable run configuration.

    Cheap checks run first so a bad resolution never creates the output
    directory. Raises a ValidationError subclass on the first problem found.
    """
    res = parse_resolution(resolution)
    if workers is None:
        workers = default_workers()
    elif workers < 1:
        raise WorkerCountError(f"Worker count must be at least 1, got {workers}")
    types = normalize_types(file_types or "")
    in_dir, out_dir = resolve_dirs(input_dir, output_dir)
    return ResizeConfig(
        input_dir=in_dir,
        output_dir=out_dir,
        resolution=res,
        file_types=types,
        recursive=recursive,
        verbose=verbose,
        workers=workers,
    )
