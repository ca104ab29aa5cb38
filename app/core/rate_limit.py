# app/core/rate_limit.py
from collections import defaultdict, deque
import threading
import time
from typing import Deque, Dict, Optional

from fastapi import Request

from app.core.config import settings
from app.core.errors import RateLimitedError


class RateLimiter:
    """Fixed-window limiter keyed by an arbitrary string (client IP, email)."""

    def __init__(self, limit: int, window_seconds: int):
        self.limit = limit
        self.window_seconds = window_seconds
        self._events: Dict[str, Deque[float]] = defaultdict(deque)
        self._lock = threading.Lock()

    def _prune(self, events: Deque[float], now: float) -> None:
        threshold = now - self.window_seconds
        while events and events[0] <= threshold:
            events.popleft()

    def allow(self, key: str) -> bool:
        now = time.monotonic()
        with self._lock:
            events = self._events[key]
            self._prune(events, now)
            if len(events) >= self.limit:
                return False
            events.append(now)
            return True

    def retry_after(self, key: str) -> float:
        now = time.monotonic()
        with self._lock:
            events = self._events.get(key)
            if not events:
                return 0.0
            self._prune(events, now)
            if len(events) < self.limit:
                return 0.0
            return max(0.0, self.window_seconds - (now - events[0]))

    def reset(self, key: str) -> None:
        with self._lock:
            self._events.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._events.clear()

    def enforce(self, key: Optional[str]) -> None:
        if not settings.RATE_LIMIT_ENABLED or not key:
            return
        if not self.allow(key):
            retry = int(self.retry_after(key)) + 1
            raise RateLimitedError(headers={"Retry-After": str(retry)})


# server.ts 의 express-rate-limit 과 같은 IP 단위 전체 제한
AUTH_LIMITER = RateLimiter(settings.AUTH_RATE_LIMIT, settings.AUTH_RATE_WINDOW_SECONDS)
# 6자리 코드 무차별 대입 방지 (이메일 단위)
VERIFY_LIMITER = RateLimiter(settings.VERIFY_RATE_LIMIT, settings.VERIFY_RATE_WINDOW_SECONDS)
LOGIN_LIMITER = RateLimiter(settings.LOGIN_RATE_LIMIT, settings.LOGIN_RATE_WINDOW_SECONDS)
RESET_REQUEST_LIMITER = RateLimiter(settings.RESET_REQUEST_RATE_LIMIT, settings.RESET_REQUEST_RATE_WINDOW_SECONDS)

LIMITERS = (AUTH_LIMITER, VERIFY_LIMITER, LOGIN_LIMITER, RESET_REQUEST_LIMITER)


def reset_limiters() -> None:
    for limiter in LIMITERS:
        limiter.clear()


def client_ip(request: Request) -> str:
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    if request.client:
        return request.client.host
    return "unknown"


def auth_rate_limit(request: Request) -> None:
    AUTH_LIMITER.enforce(client_ip(request))
