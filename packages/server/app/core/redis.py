"""Redis client for activity notifications."""

from __future__ import annotations

import json
from typing import Any

import redis.asyncio as redis

from app.core.config import get_settings

settings = get_settings()

_client: redis.Redis | None = None


async def get_redis() -> redis.Redis:
    """Shared client, created on first use."""
    global _client
    if _client is None:
        _client = redis.from_url(settings.redis_url, decode_responses=True)
    return _client


async def publish_json(client: redis.Redis, channel: str, message: dict[str, Any]) -> int:
    """Publish ``message`` as JSON; returns the number of receiving subscribers."""
    return await client.publish(channel, json.dumps(message, default=str))


async def close_redis() -> None:
    global _client
    if _client is not None:
        await _client.aclose()
        _client = None
