from dataclasses import dataclass
from typing import FrozenSet, Optional, Tuple

@dataclass(frozen=True)
class Resolution:
    width: int
    height: int

    def __str__(self) -> str:
        return f"{self.width}x{self.height}"

@dataclass(frozen=True)
class FileOperation:
    """One planned resize: absolute source, absolute destination, exact target size."""
    origin_path: str
    target_path: str
    width: int
    height: int

@dataclass(frozen=True)
class ResizeConfig:
    input_dir: str
    output_dir: str
    resolution: Resolution
    file_types: FrozenSet[str] = frozenset({".png", ".jpg"})
    recursive: bool = False
    verbose: bool = False
    workers: Optional[int] = None

@dataclass
class ResizeResult:
    src_path: str
    dst_path: Optional[str]
    ok: bool
    error: Optional[str] = None
    in_size: Optional[Tuple[int, int]] = None
    out_size: Optional[Tuple[int, int]] = None

@dataclass
class BatchSummary:
    total: int
    completed: int
    failed: int
    elapsed: float = 0.0

    @property
    def succeeded(self) -> int:
        return self.completed - self.failed
