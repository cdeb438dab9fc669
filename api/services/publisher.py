"""Publisher service for pushing job updates to Redis."""
import json
import logging
from typing import Optional
import redis.asyncio as redis
from redis.exceptions import RedisError
from shared.config import settings
from shared.utils import format_datetime, get_utc_now

logger = logging.getLogger(__name__)


class PublisherService:
    """Publishes job status changes to the result channel for WebSocket clients.

    Notifications are advisory: the job document stays the source of truth,
    so a Redis failure is logged and never fails the caller.
    """

    def __init__(self, redis_client: redis.Redis):
        self.redis = redis_client
        self.result_channel = settings.redis_result_channel

    async def publish_job_update(
        self,
        job_id: str,
        status: str,
        article_id: Optional[str] = None,
        error: Optional[str] = None
    ) -> bool:
        """Publish a job update to the result channel."""
        update = {
            "type": "job_update",
            "job_id": job_id,
            "status": status,
            "article_id": article_id,
            "error": error,
            "timestamp": format_datetime(get_utc_now())
        }
        try:
            await self.redis.publish(self.result_channel, json.dumps(update))
        except RedisError as e:
            logger.warning(f"Could not publish update for job {job_id}: {e}")
            return False
        return True
