import os
import json
import redis
from flask import current_app

REDIS_URL = os.getenv("REDIS_URL", "redis://127.0.0.1:6379/0")
_client = None


def r():
    global _client
    if _client is None:
        _client = redis.Redis.from_url(REDIS_URL, decode_responses=True)
    return _client


def progress_key(campaign_id: str) -> str:
    return f"campaign:{campaign_id}:progress:v1"


def get_json(key: str):
    try:
        cached = r().get(key)
    except redis.RedisError as e:
        current_app.logger.warning("cache read failed for %s: %s", key, e)
        return None
    return json.loads(cached) if cached else None


def set_json(key: str, value, ttl: int) -> None:
    try:
        r().setex(key, ttl, json.dumps(value, default=str))
    except redis.RedisError as e:
        current_app.logger.warning("cache write failed for %s: %s", key, e)


def invalidate(*keys: str) -> None:
    """Drop cached entries after a write; a cache outage only costs staleness."""
    try:
        r().delete(*keys)
    except redis.RedisError as e:
        current_app.logger.warning("cache invalidation failed for %s: %s", keys, e)
