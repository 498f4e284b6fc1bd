"""
Per-client throttling for the auth endpoints.

Hits live in process memory as a sliding window of timestamps per key, so a
limit applies per worker. RATE_LIMIT_ENABLED turns it off entirely;
RATE_LIMIT_AUTH_PER_MINUTE is the budget for register and login.
"""

import time
from collections import defaultdict, deque
from functools import wraps
from threading import Lock
from typing import Optional

from flask import current_app, request

from gramasathi.errors import RateLimited

WINDOW_SECONDS = 60

_lock = Lock()
_hits: dict = defaultdict(deque)


def hit(key: str, limit: int, window: int = WINDOW_SECONDS, now: Optional[float] = None) -> bool:
    """Count one request for key. False once `limit` requests already fall inside the window."""
    if limit <= 0:
        return True
    now = time.monotonic() if now is None else now
    with _lock:
        recent = _hits[key]
        while recent and recent[0] <= now - window:
            recent.popleft()
        if len(recent) >= limit:
            return False
        recent.append(now)
        return True


def reset() -> None:
    with _lock:
        _hits.clear()


def client_address() -> str:
    forwarded = request.headers.get("X-Forwarded-For", "")
    return forwarded.split(",")[0].strip() or request.remote_addr or "unknown"


def rate_limited(config_key: str, key_prefix: str):
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            cfg = current_app.config
            if cfg.get("RATE_LIMIT_ENABLED", True):
                key = f"{key_prefix}:{client_address()}"
                if not hit(key, int(cfg.get(config_key, 0))):
                    raise RateLimited(retry_after=WINDOW_SECONDS)
            return fn(*args, **kwargs)

        return wrapper

    return decorator
