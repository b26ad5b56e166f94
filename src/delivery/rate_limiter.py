import threading
import time
from dataclasses import dataclass, field
from typing import Callable, TypeVar

T = TypeVar("T")


@dataclass
class RateLimiter:
    """FIFO, one call at a time, with a minimum gap between call starts."""

    min_interval_seconds: float = 0.1
    _condition: threading.Condition = field(default_factory=threading.Condition, init=False, repr=False)
    _next_ticket: int = field(default=0, init=False, repr=False)
    _now_serving: int = field(default=0, init=False, repr=False)
    _last_start: float | None = field(default=None, init=False, repr=False)

    def __post_init__(self) -> None:
        if self.min_interval_seconds < 0:
            raise ValueError("min_interval_seconds must be >= 0")

    def schedule(self, task: Callable[[], T]) -> T:
        with self._condition:
            ticket = self._next_ticket
            self._next_ticket += 1
            while ticket != self._now_serving:
                self._condition.wait()

        try:
            self._wait_for_slot()
            return task()
        finally:
            with self._condition:
                self._now_serving += 1
                self._condition.notify_all()

    def _wait_for_slot(self) -> None:
        if self._last_start is not None:
            wait_seconds = self.min_interval_seconds - (time.monotonic() - self._last_start)
            if wait_seconds > 0:
                time.sleep(wait_seconds)
        self._last_start = time.monotonic()
