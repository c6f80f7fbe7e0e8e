import sys
import threading
from typing import List, Optional, TextIO

from tqdm import tqdm

PROGRESS_DESC = "Resizing images"
PROGRESS_INTERVAL = 0.2  # seconds between redraws

class ProgressReporter:
    """Counts finished operations and mirrors the count on a tqdm bar.

    advance() may be called from any worker thread. The bar redraw is
    throttled; `completed` is always exact.
    """

    def __init__(self, total: int, enabled: bool = True, stream: Optional[TextIO] = None):
        self.total = total
        self._completed = 0
        self._lock = threading.Lock()
        self._bar = tqdm(
            total=total,
            desc=PROGRESS_DESC,
            unit="img",
            file=stream if stream is not None else sys.stderr,
            mininterval=PROGRESS_INTERVAL,
            dynamic_ncols=True,
            disable=not enabled,
        )

    @property
    def completed(self) -> int:
        with self._lock:
            return self._completed

    def advance(self) -> None:
        with self._lock:
            self._completed += 1
            self._bar.update(1)

    def close(self) -> None:
        self._bar.close()

    def __enter__(self) -> "ProgressReporter":
        return self

    def __exit__(self, *exc) -> None:
        self.close()


class ErrorAggregator:
    """Failure messages collected from concurrent workers, reported after the batch."""

    def __init__(self):
        self._messages: List[str] = []
        self._lock = threading.Lock()

    def append(self, message: str) -> None:
        with self._lock:
            self._messages.append(message)

    @property
    def messages(self) -> List[str]:
        with self._lock:
            return list(self._messages)

    @property
    def count(self) -> int:
        with self._lock:
            return len(self._messages)

    def __len__(self) -> int:
        return self.count

    def report(self, verbose: bool = False, stream: Optional[TextIO] = None) -> None:
        out = stream if stream is not None else sys.stdout
        msgs = self.messages
        if msgs:
            print(f"\n{len(msgs)} image operations failed", file=out)
        if verbose:
            for m in msgs:
                print(m, file=out)
