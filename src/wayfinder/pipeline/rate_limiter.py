"""
Sliding-window rate limiter for outbound provider calls.
"""

import asyncio
import logging
import time
from collections import deque
from collections.abc import Awaitable, Callable

logger = logging.getLogger(__name__)


class RateLimiter:
    """
    Admit at most ``max_requests`` calls in any trailing ``window_seconds``.

    Callers are admitted in the order they reach the internal lock, so
    concurrent executions cannot undercount admissions.
    """

    def __init__(
        self,
        max_requests: int = 10,
        window_seconds: float = 60.0,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        """
        Initialize rate limiter.

        Args:
            max_requests: Maximum calls allowed in the window
            window_seconds: Window length in seconds
            clock: Monotonic time source
            sleep: Coroutine used to wait
        """
        if max_requests < 1:
            raise ValueError("max_requests must be >= 1")
        if window_seconds <= 0:
            raise ValueError("window_seconds must be > 0")

        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock
        self._sleep = sleep
        self._requests: deque[float] = deque()
        self._lock = asyncio.Lock()

    def _prune(self, now: float) -> None:
        while self._requests and now - self._requests[0] >= self.window_seconds:
            self._requests.popleft()

    async def wait_if_needed(self) -> None:
        """Wait until a slot is free, then record this call."""
        async with self._lock:
            now = self._clock()
            self._prune(now)

            if len(self._requests) >= self.max_requests:
                wait_time = self.window_seconds - (now - self._requests[0])
                if wait_time > 0:
                    logger.info(f"Rate limit reached, waiting {wait_time:.1f}s")
                    await self._sleep(wait_time)
                now = self._clock()
                self._prune(now)

            self._requests.append(now)

    def remaining(self) -> int:
        """Free slots in the current window."""
        self._prune(self._clock())
        return max(self.max_requests - len(self._requests), 0)
