"""
Client-side rate limit tracking based on X-RateLimit response headers.

The limiter is advisory: it rejects requests early while the last known
quota is exhausted, but the server remains authoritative.
"""

import logging
import math
import time
from typing import Mapping, Tuple

from .errors import BluefoxError

logger = logging.getLogger(__name__)

LIMIT_HEADER = 'x-ratelimit-limit'
REMAINING_HEADER = 'x-ratelimit-remaining'
RESET_HEADER = 'x-ratelimit-reset'


def _parse_int(value, default: float) -> float:
    if value is None or value == '':
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        logger.debug(f"Ignoring malformed rate limit header value: {value!r}")
        return default


class RateLimiter:
    """Tracks the rate limit window reported by the API.

    Attributes:
        limit: Requests allowed per window (inf when unknown)
        remaining: Requests left in the current window (inf when unknown)
        reset: Epoch milliseconds at which the window resets
    """

    def __init__(self):
        self.limit: float = math.inf
        self.remaining: float = math.inf
        self.reset: float = 0

    @property
    def info(self) -> Tuple[float, float, float]:
        """Current (limit, remaining, reset) snapshot."""
        return self.limit, self.remaining, self.reset

    def update_from_headers(self, headers: Mapping[str, str]):
        """Update the window from response headers.

        Missing or malformed values reset the field to unbounded
        (limit/remaining) or 0 (reset).

        Args:
            headers: Response headers (names are matched case-insensitively)
        """
        normalized = {str(key).lower(): value for key, value in (headers or {}).items()}

        self.limit = _parse_int(normalized.get(LIMIT_HEADER), math.inf)
        self.remaining = _parse_int(normalized.get(REMAINING_HEADER), math.inf)
        reset_seconds = _parse_int(normalized.get(RESET_HEADER), 0)
        self.reset = reset_seconds * 1000

        if self.remaining != math.inf:
            logger.debug(f"Rate limit: {self.remaining}/{self.limit} remaining, resets at {self.reset}")

    def check_rate_limit(self):
        """Fail fast if the known quota is exhausted.

        The limiter never waits. Once the reset time has passed requests
        are allowed again, but the counters only change with the next
        response headers.

        Raises:
            BluefoxError: RATE_LIMIT_ERROR while remaining <= 0 and the
                reset time lies in the future
        """
        if self.remaining <= 0:
            now = time.time() * 1000
            if now < self.reset:
                raise BluefoxError.rate_limit(self.reset)
