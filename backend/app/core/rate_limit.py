"""In-memory fixed-window rate limiting for the auth and tutor endpoints.

Buckets live in process memory, so every worker enforces its own limit.
Expired windows are swept out at most once per window.
"""

from __future__ import annotations

import time
from dataclasses import dataclass

from fastapi import HTTPException, Request, status

from app.core.config import settings

WINDOW_SECONDS = 60


@dataclass
class _Bucket:
    window_start: float
    count: int


# "<scope>:<client>" -> bucket
_BUCKETS: dict[str, _Bucket] = {}
_last_sweep: float = 0.0


def _now() -> float:
    return time.time()


def _client_ip(request: Request) -> str:
    if settings.trust_forwarded_for:
        xff = request.headers.get("x-forwarded-for")
        if xff:
            return xff.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


def _get_client_key(request: Request, user_id: str | None) -> str:
    if user_id:
        return f"user:{user_id}"
    return f"ip:{_client_ip(request)}"


def _sweep(now: float) -> None:
    """Drop buckets whose window has closed."""
    global _last_sweep
    if now - _last_sweep < WINDOW_SECONDS:
        return
    _last_sweep = now
    for key in [k for k, b in _BUCKETS.items() if now - b.window_start >= WINDOW_SECONDS]:
        del _BUCKETS[key]


def bucket_count() -> int:
    return len(_BUCKETS)


def reset_rate_limits() -> None:
    """Forget every bucket."""
    global _last_sweep
    _BUCKETS.clear()
    _last_sweep = 0.0


def enforce_rate_limit(
    request: Request,
    *,
    user_id: str | None,
    limit_per_minute: int,
    scope: str,
) -> None:
    """Count a request against ``scope`` for the caller.

    Callers are identified by user id when known, otherwise by client IP.

    Raises:
        HTTPException(429) when the limit for the current window is used up.
    """
    if not settings.rate_limit_enabled:
        return

    now = _now()
    _sweep(now)

    key = f"{scope}:{_get_client_key(request, user_id)}"
    bucket = _BUCKETS.get(key)
    if bucket is None or now - bucket.window_start >= WINDOW_SECONDS:
        _BUCKETS[key] = _Bucket(window_start=now, count=1)
        return

    if bucket.count >= limit_per_minute:
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail="Rate limit exceeded",
            headers={
                "Retry-After": str(max(1, int(WINDOW_SECONDS - (now - bucket.window_start)))),
            },
        )

    bucket.count += 1
