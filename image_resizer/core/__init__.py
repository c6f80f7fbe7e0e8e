from .models import BatchSummary, FileOperation, Resolution, ResizeConfig, ResizeResult
from .errors import (
    EnumerationError,
    ImageResizerError,
    ResizeError,
    ValidationError,
)
from .config import build_config, parse_resolution
from .io_utils import list_operations, normalize_types, resolve_dirs
from .reporting import ErrorAggregator, ProgressReporter
from .resize_service import resize_many, resize_one, run_batch

__all__ = [
    "BatchSummary",
    "FileOperation",
    "Resolution",
    "ResizeConfig",
    "ResizeResult",
    "EnumerationError",
    "ImageResizerError",
    "ResizeError",
    "ValidationError",
    "build_config",
    "parse_resolution",
    "list_operations",
    "normalize_types",
    "resolve_dirs",
    "ErrorAggregator",
    "ProgressReporter",
    "resize_many",
    "resize_one",
    "run_batch",
]
