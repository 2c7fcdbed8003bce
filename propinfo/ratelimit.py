import threading
import time
from typing import Callable, Optional


class RequestRateLimiter:
    """Rejects a request that arrives within ``window_sec`` of the last accepted one.

    One instance per process. The timestamp is recorded on acceptance, before
    any scraping starts, so two near-simultaneous calls can't both get through.
    """

    def __init__(self, window_sec: float = 5.0, clock: Callable[[], float] = time.monotonic):
        self.window_sec = window_sec
        self.clock = clock
        self._lock = threading.Lock()
        self._last: Optional[float] = None

    def admit(self, now: Optional[float] = None) -> bool:
        with self._lock:
            if now is None:
                now = self.clock()
            if self._last is not None and now - self._last < self.window_sec:
                return False
            self._last = now
            return True

    def reset(self):
        with self._lock:
            self._last = None
