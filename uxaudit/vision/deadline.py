import time
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from typing import TypeVar

from uxaudit.vision.exceptions import VisionTimeoutError

T = TypeVar("T")

Clock = Callable[[], float]


class Deadline:
    """An absolute point on a monotonic clock after which work is abandoned."""

    def __init__(self, expires_at: float, clock: Clock = time.monotonic) -> None:
        self._expires_at = expires_at
        self._clock = clock

    @classmethod
    def after(cls, seconds: float, clock: Clock = time.monotonic) -> "Deadline":
        return cls(clock() + seconds, clock)

    def remaining(self) -> float:
        """Seconds left, never negative."""
        return max(0.0, self._expires_at - self._clock())

    @property
    def expired(self) -> bool:
        return self.remaining() <= 0.0


def run_with_deadline(func: Callable[[], T], deadline: Deadline, what: str = "call") -> T:
    """Run func on a worker thread and stop waiting for it at the deadline.

    The worker thread is abandoned, not killed, when the deadline passes; its
    eventual result is discarded.

    Raises:
        VisionTimeoutError: if the deadline has already passed or passes while waiting.
    """
    if deadline.expired:
        raise VisionTimeoutError(f"Deadline expired before {what} started")

    executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="deadline")
    try:
        future = executor.submit(func)
        try:
            return future.result(timeout=deadline.remaining())
        except FutureTimeoutError as exc:
            future.cancel()
            raise VisionTimeoutError(f"Deadline expired during {what}") from exc
    finally:
        executor.shutdown(wait=False, cancel_futures=True)
