import os
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, List, Optional, Sequence, TextIO, Tuple

from PIL import Image

from .config import default_workers
from .errors import ResizeError
from .io_utils import ensure_dir, fold_ext
from .models import BatchSummary, FileOperation, ResizeResult
from .reporting import ErrorAggregator, ProgressReporter

EXT_TO_PIL = {".jpg": "JPEG", ".png": "PNG", ".gif": "GIF", ".tif": "TIFF", ".bmp": "BMP"}
JPEG_QUALITY = 85
Resizer = Callable[[FileOperation], ResizeResult]

def _prepare(im: Image.Image) -> Image.Image:
    # palette and bilevel images would silently fall back to nearest-neighbour
    if im.mode == "P":
        return im.convert("RGBA" if "transparency" in im.info else "RGB")
    if im.mode == "1":
        return im.convert("L")
    return im

def _save(im: Image.Image, dst: str, pil_fmt: str, jpg_quality: int = JPEG_QUALITY):
    if pil_fmt == "JPEG" and im.mode not in ("RGB", "L", "CMYK"):
        im = im.convert("RGB")
    kw = {"quality": int(jpg_quality), "optimize": True} if pil_fmt == "JPEG" else {}
    im.save(dst, format=pil_fmt, **kw)

def resize_one(op: FileOperation) -> ResizeResult:
    """Decode, stretch to exactly op.width x op.height with Lanczos, write to op.target_path.

    The output format follows the destination extension. Raises ResizeError
    naming the failing stage and path.
    """
    src, dst = op.origin_path, op.target_path
    try:
        im = Image.open(src)
    except (OSError, ValueError, Image.DecompressionBombError) as e:
        raise ResizeError(src, f"error opening image {src}: {e}") from e

    with im:
        try:
            im.load()
        except (OSError, ValueError, Image.DecompressionBombError) as e:
            raise ResizeError(src, f"error opening image {src}: {e}") from e
        in_size = im.size
        try:
            resized = _prepare(im).resize((op.width, op.height), resample=Image.Resampling.LANCZOS)
        except (OSError, ValueError, MemoryError) as e:
            raise ResizeError(src, f"error resizing image {src}: {e}") from e

    pil_fmt = EXT_TO_PIL.get(fold_ext(os.path.splitext(dst)[1]))
    if not pil_fmt:
        raise ResizeError(src, f"error saving resized image {dst}: unknown file extension")

    dst_dir = os.path.dirname(dst)
    try:
        ensure_dir(dst_dir)
    except OSError as e:
        raise ResizeError(src, f"error creating destination folder {dst_dir}: {e}") from e

    try:
        _save(resized, dst, pil_fmt)
    except (OSError, ValueError, KeyError) as e:
        raise ResizeError(src, f"error saving resized image {dst}: {e}") from e

    return ResizeResult(src, dst, True, None, in_size, resized.size)

def resize_many(ops: Sequence[FileOperation], progress: ProgressReporter, errors: ErrorAggregator,
                workers: Optional[int] = None, resizer: Resizer = resize_one) -> List[ResizeResult]:
    """Run every operation on a pool of `workers` threads and wait for all of them.

    Each operation advances `progress` exactly once and adds at most one
    message to `errors`. Nothing raised by `resizer` escapes. Results come
    back in the same order as `ops`.
    """
    def task(op: FileOperation) -> ResizeResult:
        try:
            res = resizer(op)
            if not res.ok:
                errors.append(f"Error processing image {op.origin_path}: {res.error}")
        except ResizeError as e:
            msg = f"Error processing image: {e}"
            errors.append(msg)
            res = ResizeResult(op.origin_path, None, False, str(e))
        except Exception as e:
            msg = f"Error processing image {op.origin_path}: {e}"
            errors.append(msg)
            res = ResizeResult(op.origin_path, None, False, str(e))
        finally:
            progress.advance()
        return res

    with ThreadPoolExecutor(max_workers=workers or default_workers()) as pool:
        futures = [pool.submit(task, op) for op in ops]
        return [f.result() for f in futures]

def run_batch(ops: Sequence[FileOperation], workers: Optional[int] = None, show_progress: bool = True,
              stream: Optional[TextIO] = None,
              resizer: Resizer = resize_one) -> Tuple[BatchSummary, ErrorAggregator, List[ResizeResult]]:
    """Progress phase: only the bar writes while workers run.

    Diagnostics are returned instead of printed so the caller can flush them
    once the bar is closed.
    """
    errors = ErrorAggregator()
    start = time.monotonic()
    with ProgressReporter(len(ops), enabled=show_progress, stream=stream) as progress:
        results = resize_many(ops, progress, errors, workers=workers, resizer=resizer)
        completed = progress.completed
    summary = BatchSummary(len(ops), completed, errors.count, time.monotonic() - start)
    return summary, errors, results
