"""In-memory sliding-window rate limiter for the staff login endpoint.

State lives in the process, so each instance of the API keeps its own window.
"""
import logging
import time
from collections import defaultdict
from threading import Lock
from typing import Dict, Tuple

logger = logging.getLogger(__name__)


class RateLimiter:
    """Counts requests per client key inside a sliding time window."""

    def __init__(self, max_requests: int = 10, window_seconds: int = 300):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._requests: Dict[str, list] = defaultdict(list)
        self._lock = Lock()

    def _cleanup_old_requests(self, key: str, current_time: float) -> None:
        cutoff = current_time - self.window_seconds
        self._requests[key] = [t for t in self._requests[key] if t > cutoff]

    def is_allowed(self, key: str) -> Tuple[bool, int]:
        """
        Check whether another request from ``key`` fits in the window.

        Returns:
            Tuple of (is_allowed, remaining_requests)
        """
        current_time = time.time()

        with self._lock:
            self._cleanup_old_requests(key, current_time)

            request_count = len(self._requests[key])
            remaining = max(0, self.max_requests - request_count)

            if request_count >= self.max_requests:
                logger.warning(f"Rate limit exceeded for {key}: {request_count} requests in window")
                return False, 0

            return True, remaining

    def record_request(self, key: str) -> None:
        with self._lock:
            self._requests[key].append(time.time())

    def get_request_count(self, key: str) -> int:
        with self._lock:
            self._cleanup_old_requests(key, time.time())
            return len(self._requests[key])

    def reset(self) -> None:
        with self._lock:
            self._requests.clear()
