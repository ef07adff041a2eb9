"""
Security utilities: admin token and per-client rate limiting
"""

import time
from collections import deque
from typing import Callable, Deque, Dict

from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from app.core.config import settings
from app.utils.responses import rate_limit_error, unauthorized_error

security = HTTPBearer()

def verify_admin_token(credentials: HTTPAuthorizationCredentials = Depends(security)):
    """Verify admin authentication token"""
    if credentials.credentials != settings.ADMIN_TOKEN:
        unauthorized_error("Invalid admin token")
    return credentials.credentials


class RateLimiter:
    """Sliding one-minute window of request times per client"""

    window = 60

    def __init__(self, limit: int | None = None, clock: Callable[[], float] = time.time):
        self.limit = limit
        self._clock = clock
        self._hits: Dict[str, Deque[float]] = {}
        self._last_sweep = clock()

    def _sweep(self, now: float) -> None:
        """Drop clients with no request inside the window"""
        idle = [key for key, hits in self._hits.items() if not hits or hits[-1] <= now - self.window]
        for key in idle:
            del self._hits[key]
        self._last_sweep = now

    def check(self, client_key: str) -> bool:
        limit = self.limit if self.limit is not None else settings.RATE_LIMIT_PER_MINUTE
        now = self._clock()
        if now - self._last_sweep >= self.window:
            self._sweep(now)

        hits = self._hits.get(client_key)
        if hits is None:
            if limit < 1:
                return False
            self._hits[client_key] = deque([now])
            return True

        while hits and hits[0] <= now - self.window:
            hits.popleft()
        if len(hits) >= limit:
            return False
        hits.append(now)
        return True

    def tracked_clients(self) -> int:
        return len(self._hits)

    def reset(self) -> None:
        self._hits.clear()


rate_limiter = RateLimiter()

def get_client_ip(request: Request) -> str:
    """Extract client IP from request"""
    # Reverse proxy headers first
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        return forwarded_for.split(",")[0].strip()

    real_ip = request.headers.get("X-Real-IP")
    if real_ip:
        return real_ip

    return request.client.host if request.client else "unknown"

def enforce_rate_limit(request: Request) -> None:
    """Dependency rejecting clients over RATE_LIMIT_PER_MINUTE"""
    if not rate_limiter.check(get_client_ip(request)):
        rate_limit_error()
