"""Fixed-window request counting per caller identity."""

import threading
import time
from collections.abc import Callable
from dataclasses import dataclass, field


@dataclass
class RateLimitWindow:
    """Request count for one identity within the current window."""

    count: int
    started_at: float


@dataclass(frozen=True)
class RateLimitDecision:
    """Outcome of counting one request."""

    allowed: bool
    remaining: int
    reset_after: float


@dataclass
class FixedWindowRateLimiter:
    """Allow at most `limit` requests per identity in each fixed window."""

    limit: int = 10
    window_seconds: float = 60.0
    clock: Callable[[], float] = time.monotonic
    windows: dict[str, RateLimitWindow] = field(default_factory=dict)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def hit(self, identity: str) -> RateLimitDecision:
        """Count a request from identity and report whether it may proceed."""
        with self._lock:
            now = self.clock()
            self._prune(now)
            window = self.windows.get(identity)
            if window is None:
                window = RateLimitWindow(count=0, started_at=now)
                self.windows[identity] = window
            window.count += 1
            reset_after = max(0.0, window.started_at + self.window_seconds - now)
            return RateLimitDecision(
                allowed=window.count <= self.limit,
                remaining=max(0, self.limit - window.count),
                reset_after=reset_after,
            )

    def _prune(self, now: float) -> None:
        expired = [
            identity
            for identity, window in self.windows.items()
            if now - window.started_at >= self.window_seconds
        ]
        for identity in expired:
            del self.windows[identity]
