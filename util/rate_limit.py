import time
from dataclasses import dataclass
from typing import Callable, Dict


@dataclass
class Window:
    count: int
    started: float


class RateLimiter:
    """
    Fixed-window request counter keyed by client address.

    Windows that have elapsed are pruned once ``max_clients`` addresses are
    tracked; if every tracked window is still open the oldest one is dropped.
    """

    def __init__(
        self,
        limit: int = 1000,
        window_seconds: float = 60,
        clock: Callable[[], float] = time.monotonic,
        max_clients: int = 10000,
    ):
        self.limit = limit
        self.window_seconds = window_seconds
        self.max_clients = max_clients
        self._clock = clock
        self._windows: Dict[str, Window] = {}

    def _prune(self, now: float) -> None:
        elapsed = [
            key for key, window in self._windows.items()
            if now - window.started > self.window_seconds
        ]
        for key in elapsed:
            del self._windows[key]
        while len(self._windows) >= self.max_clients:
            del self._windows[next(iter(self._windows))]

    def hit(self, key: str) -> bool:
        """
        Count one request for key. Returns True when key is over its limit.
        """
        now = self._clock()
        window = self._windows.get(key)
        if window is None or now - window.started > self.window_seconds:
            self._windows.pop(key, None)
            if len(self._windows) >= self.max_clients:
                self._prune(now)
            window = Window(count=1, started=now)
            self._windows[key] = window
        else:
            window.count += 1
        return window.count > self.limit

    def reset(self) -> None:
        self._windows.clear()

    def __len__(self) -> int:
        return len(self._windows)
