import logging
import os
from typing import FrozenSet, List, Tuple

from .errors import EnumerationError, InputDirError, NestedOutputError, OutputDirError
from .models import FileOperation, ResizeConfig

log = logging.getLogger(__name__)

SUPPORTED_EXTS = frozenset({".jpg", ".png", ".gif", ".tif", ".bmp"})
EXT_SYNONYMS = {".jpeg": ".jpg", ".tiff": ".tif"}
OUTPUT_DIR_MODE = 0o755

def fold_ext(ext: str) -> str:
    ext = ext.strip().lower()
    if ext and not ext.startswith("."):
        ext = "." + ext
    return EXT_SYNONYMS.get(ext, ext)

def normalize_types(raw: str) -> FrozenSet[str]:
    """Turn "png,JPEG, .tiff" into {".png", ".jpg", ".tif"}, keeping only supported types."""
    requested = {fold_ext(t) for t in raw.split(",") if t.strip()}
    unsupported = requested - SUPPORTED_EXTS
    if unsupported:
        log.warning("Ignoring unsupported file type(s): %s", ", ".join(sorted(unsupported)))
    return frozenset(requested & SUPPORTED_EXTS)

def is_supported(path: str, file_types: FrozenSet[str]) -> bool:
    ext = fold_ext(os.path.splitext(path)[1])
    return ext in SUPPORTED_EXTS and ext in file_types

def is_nested(path: str, root: str) -> bool:
    """True when path is root itself or anywhere below it."""
    path, root = os.path.realpath(path), os.path.realpath(root)
    return os.path.commonpath([path, root]) == root

def ensure_dir(path: str) -> None:
    # concurrent callers may race on the same parent; exist_ok makes that harmless
    os.makedirs(path, mode=OUTPUT_DIR_MODE, exist_ok=True)

def resolve_dirs(input_dir: str, output_dir: str) -> Tuple[str, str]:
    in_dir = os.path.abspath(os.path.expanduser(input_dir))
    out_dir = os.path.abspath(os.path.expanduser(output_dir))

    if not os.path.isdir(in_dir):
        raise InputDirError(f"Input directory {in_dir} does not exist")
    if is_nested(out_dir, in_dir):
        raise NestedOutputError(
            f"Output directory {out_dir} can't be the input directory or a sub directory of it"
        )
    if os.path.exists(out_dir) and not os.path.isdir(out_dir):
        raise OutputDirError(f"Output path {out_dir} exists and is not a directory")
    try:
        ensure_dir(out_dir)
    except OSError as e:
        raise OutputDirError(f"Error creating output directory {out_dir}: {e}") from e
    return in_dir, out_dir

def _raise(err: OSError):
    raise err

def target_path(src: str, input_dir: str, output_dir: str) -> str:
    return os.path.join(output_dir, os.path.relpath(src, input_dir))

def list_operations(config: ResizeConfig) -> List[FileOperation]:
    """Walk the input tree depth-first and plan one FileOperation per matching file.

    Sibling directories and files are visited in sorted order so the plan is
    stable for a given tree. Any error while walking aborts the whole listing.
    """
    root = config.input_dir
    res = config.resolution
    out: List[FileOperation] = []
    try:
        for dirpath, dirnames, names in os.walk(root, onerror=_raise):
            if config.recursive:
                dirnames.sort()
            else:
                dirnames[:] = []
            for n in sorted(names):
                src = os.path.join(dirpath, n)
                if not is_supported(n, config.file_types) or not os.path.isfile(src):
                    continue
                dst = target_path(src, root, config.output_dir)
                out.append(FileOperation(src, dst, res.width, res.height))
    except OSError as e:
        raise EnumerationError(f"Error enumerating input files in {root}: {e}") from e
    log.debug("Planned %d operation(s) from %s", len(out), root)
    return out
