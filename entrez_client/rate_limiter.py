"""
Sliding-window rate limiter for NCBI E-utilities.

NCBI does not allow more than 3 requests per second from one client.
Unless the request 3 admissions ago was at least a second ago, the
caller is put to sleep for long enough to honor the limit.
"""

import logging
import threading
import time
from collections import deque
from typing import Callable, Deque, Optional, Tuple

from .config import MAX_REQUESTS_PER_WINDOW, RATE_LIMIT_WINDOW

logger = logging.getLogger(__name__)


class RateLimiter:
    """
    Admits at most ``max_requests`` requests within any rolling ``window``.

    Only the last ``max_requests`` admission times are kept. The clock and
    sleep functions can be swapped out for tests.

    Example:
        >>> limiter = RateLimiter()
        >>> limiter.admit()  # returns immediately for the first 3 calls
        0.0
    """

    def __init__(
        self,
        max_requests: int = MAX_REQUESTS_PER_WINDOW,
        window: float = RATE_LIMIT_WINDOW,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """
        Initialize the rate limiter.

        Args:
            max_requests: Maximum admissions per window
            window: Window length in seconds
            clock: Returns the current time in seconds
            sleep: Blocks for the given number of seconds
        """
        if max_requests < 1:
            raise ValueError("max_requests must be at least 1")
        if window <= 0:
            raise ValueError("window must be positive")

        self.max_requests = max_requests
        self.window = window
        self._clock = clock
        self._sleep = sleep
        self._history: Deque[float] = deque(maxlen=max_requests)
        self._lock = threading.Lock()

        logger.debug(f"RateLimiter initialized: {max_requests} requests per {window}s")

    def admit(self) -> float:
        """
        Block until a new request may be issued, then record it.

        Returns:
            Seconds spent sleeping (0.0 if admitted immediately)
        """
        with self._lock:
            sleep_time = self._wait_time()
            if sleep_time > 0:
                logger.info(f"Rate limiting: sleeping {sleep_time:.3f}s")
                self._sleep(sleep_time)
            self._history.append(self._clock())
            return sleep_time

    def _wait_time(self) -> float:
        """Seconds to wait before the next admission; never negative."""
        if len(self._history) < self.max_requests:
            return 0.0
        elapsed = self._clock() - self._history[0]
        if elapsed >= self.window:
            return 0.0
        # A clock running backwards makes elapsed negative; cap at one window
        return min(max(self.window - elapsed, 0.0), self.window)

    @property
    def history(self) -> Tuple[float, ...]:
        """Recorded admission times, oldest first."""
        with self._lock:
            return tuple(self._history)

    def reset(self) -> None:
        """Forget all recorded admissions."""
        with self._lock:
            self._history.clear()


_default_limiter: Optional[RateLimiter] = None
_default_lock = threading.Lock()


def default_rate_limiter() -> RateLimiter:
    """Return the process-wide limiter shared by clients that are not given one."""
    global _default_limiter
    with _default_lock:
        if _default_limiter is None:
            _default_limiter = RateLimiter()
        return _default_limiter
