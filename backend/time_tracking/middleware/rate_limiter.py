import logging
import time

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from time_tracking.config import settings
from time_tracking.middleware.error_handler import error_response

logger = logging.getLogger(__name__)


class RateLimiterMiddleware(BaseHTTPMiddleware):
    """Simple IP-based rate limiter.

    Production – uses Redis for distributed rate limiting (set REDIS_URL).
    Development – falls back to in-process counters so Redis is optional.
    """

    def __init__(self, app, limit: int = None, window_seconds: int = None, redis_url: str = None):
        super().__init__(app)
        self.limit = limit or settings.RATE_LIMIT
        self.window_seconds = window_seconds or settings.RATE_LIMIT_WINDOW
        self.redis_url = redis_url if redis_url is not None else settings.REDIS_URL
        self._local_cache: dict[str, list[float]] = {}
        self._redis = None
        self._redis_unavailable = False  # Cache Redis health to avoid log spam

    async def dispatch(self, request: Request, call_next):
        if settings.DISABLE_RATE_LIMIT:
            return await call_next(request)

        # CORS pre-flight requests are never limited
        if request.method == "OPTIONS":
            return await call_next(request)

        client_ip = request.client.host if request.client else "unknown"

        if self.redis_url and not self._redis_unavailable:
            try:
                allowed = await self._allow_redis(client_ip)
            except Exception as exc:  # Redis down, bad URL, ...
                logger.warning(
                    "RateLimiter: Redis unavailable – falling back to in-memory store (%s)",
                    exc,
                )
                self._redis_unavailable = True
            else:
                if not allowed:
                    return error_response(429, "Too Many Requests")
                return await call_next(request)

        if not self._allow_local(client_ip):
            return error_response(429, "Too Many Requests")

        return await call_next(request)

    async def _allow_redis(self, client_ip: str) -> bool:
        if self._redis is None:
            from redis import asyncio as aioredis  # Local import so Redis stays optional

            self._redis = aioredis.from_url(self.redis_url)

        key = f"rate:{client_ip}"
        current = await self._redis.get(key)
        if current and int(current) >= self.limit:
            return False

        async with self._redis.pipeline(transaction=True) as tx:
            tx.incr(key)
            tx.expire(key, self.window_seconds)
            await tx.execute()
        return True

    def _allow_local(self, client_ip: str) -> bool:
        now = time.time()
        window_start = now - self.window_seconds

        # Purge old timestamps for this IP
        timestamps = [ts for ts in self._local_cache.get(client_ip, []) if ts > window_start]

        if len(timestamps) >= self.limit:
            self._local_cache[client_ip] = timestamps
            return False

        timestamps.append(now)
        self._local_cache[client_ip] = timestamps
        return True
