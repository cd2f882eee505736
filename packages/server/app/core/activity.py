"""
Activity sink: audit trail plus real-time notification fan-out.

Routers schedule ``ActivitySink.emit`` as a background task once the core
mutation has committed. The sink writes an ``activity_events`` row in its own
session and publishes the event on Redis Pub/Sub. Failures are logged and
dropped: a lost audit row or notification never undoes a committed mutation.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

import structlog
from redis.exceptions import RedisError
from sqlalchemy.exc import SQLAlchemyError

from app.core.config import get_settings
from app.core.database import get_session_context
from app.core.redis import get_redis, publish_json
from app.models.activity_event import ActivityEvent

log = structlog.get_logger()
settings = get_settings()


class ActivitySink:
    """Fire-and-forget audit/notification dispatcher."""

    def __init__(self, session_context=get_session_context, redis_getter=get_redis):
        self._session_context = session_context
        self._redis_getter = redis_getter

    async def emit(self, tenant_id: int, event_type: str, payload: dict[str, Any]) -> None:
        event_data = {
            "tenant_id": tenant_id,
            "type": event_type,
            "payload": payload,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
        await self._record(tenant_id, event_type, payload)
        if settings.notifications_enabled:
            await self._publish(event_data)

    async def _record(self, tenant_id: int, event_type: str, payload: dict[str, Any]) -> None:
        try:
            async with self._session_context() as session:
                session.add(ActivityEvent(tenant_id=tenant_id, type=event_type, payload=payload))
        except SQLAlchemyError as exc:
            log.warning("activity.record_failed", event_type=event_type, tenant_id=tenant_id, error=str(exc))

    async def _publish(self, event_data: dict[str, Any]) -> None:
        try:
            redis = await self._redis_getter()
            await publish_json(redis, settings.notifications_channel, event_data)
        except (RedisError, OSError) as exc:
            log.warning("activity.publish_failed", event_type=event_data["type"], error=str(exc))


_sink = ActivitySink()


def get_activity_sink() -> ActivitySink:
    """FastAPI dependency for the activity sink (overridden in tests)."""
    return _sink
