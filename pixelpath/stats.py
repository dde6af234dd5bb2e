"""In-progress counters and error type labels for metrics."""

from __future__ import annotations

import threading


class InProgressStats:
    """Thread-safe counters of requests and images being processed."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._requests = 0
        self._images = 0

    def inc_requests(self) -> None:
        with self._lock:
            self._requests += 1

    def dec_requests(self) -> None:
        with self._lock:
            self._requests -= 1

    def inc_images(self) -> None:
        with self._lock:
            self._images += 1

    def dec_images(self) -> None:
        with self._lock:
            self._images -= 1

    def requests_in_progress(self) -> float:
        with self._lock:
            return float(self._requests)

    def images_in_progress(self) -> float:
        with self._lock:
            return float(self._images)


def format_err_type(err_type: str, err: BaseException, known_types=()) -> str:
    """Build an error label; unknown error classes get their type name appended."""
    label = err_type + "_error"
    if not isinstance(err, known_types):
        label = f"{label} ({type(err).__name__})"
    return label