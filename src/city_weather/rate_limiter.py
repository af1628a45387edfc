"""Global sliding-window rate limiter backed by Redis."""

import logging
import time

import redis.asyncio as redis

from city_weather.config import (
    RATE_LIMIT_REQUESTS_PER_SECOND,
    RATE_LIMIT_REDIS_KEY_PREFIX
)

logger = logging.getLogger(__name__)


class RateLimiter:
    """Rate limiter using a Redis sorted set as a sliding window.

    Every request is recorded with its timestamp as score; entries older than
    the window are trimmed before counting. Requests are allowed when Redis is
    unavailable.
    """

    def __init__(
        self,
        redis_client: redis.Redis,
        max_requests: int = RATE_LIMIT_REQUESTS_PER_SECOND,
        window_size: float = 1.0,
        key_prefix: str = RATE_LIMIT_REDIS_KEY_PREFIX
    ):
        """Initialize rate limiter.

        Args:
            redis_client: Redis client; the caller owns and closes it
            max_requests: Requests allowed per window
            window_size: Window length in seconds
            key_prefix: Prefix for the Redis key
        """
        self.redis_client = redis_client
        self.max_requests = max_requests
        self.window_size = window_size
        self.sorted_set_key = f"{key_prefix}:global"

    async def is_allowed(self) -> tuple[bool, int]:
        """Check if a request is allowed under the rate limit.

        Returns:
            Tuple of (is_allowed, retry_after_seconds)
            - is_allowed: True if request should be allowed
            - retry_after_seconds: Seconds to wait before retrying (0 if allowed)
        """
        try:
            current_time = time.time()
            # Scores in microseconds
            current_timestamp = int(current_time * 1000000)
            window_start = (current_time - self.window_size) * 1000000

            pipe = self.redis_client.pipeline()
            pipe.zadd(self.sorted_set_key, {str(current_timestamp): current_timestamp})
            pipe.zremrangebyscore(self.sorted_set_key, 0, window_start)
            pipe.zcard(self.sorted_set_key)
            pipe.expire(self.sorted_set_key, max(1, int(self.window_size * 2)))

            _, _, request_count, _ = await pipe.execute()

        except Exception as e:
            # Allow request if Redis is down
            logger.error(f"Rate limiter error: {e}")
            return True, 0

        if request_count > self.max_requests:
            retry_after = max(1, int(self.window_size * 2))
            logger.debug(f"Rate limited: count={request_count}, max={self.max_requests}, retry_after={retry_after}")
            return False, retry_after

        logger.debug(f"Not rate limited: count={request_count}, max={self.max_requests}")
        return True, 0
