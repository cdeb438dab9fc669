"""WebSocket handler for real-time job status updates."""
import asyncio
import json
import logging
from typing import Dict, Optional, Set
from fastapi import WebSocket, WebSocketDisconnect
import redis.asyncio as redis
from shared.config import settings

logger = logging.getLogger(__name__)


class JobUpdateManager:
    """Tracks WebSocket subscribers, either for one job or for every job."""

    def __init__(self):
        self.job_subscribers: Dict[str, Set[WebSocket]] = {}
        self.global_subscribers: Set[WebSocket] = set()

    async def connect(self, websocket: WebSocket, job_id: Optional[str] = None):
        """Accept a connection and register it."""
        await websocket.accept()
        if job_id:
            self.job_subscribers.setdefault(job_id, set()).add(websocket)
        else:
            self.global_subscribers.add(websocket)

    def disconnect(self, websocket: WebSocket, job_id: Optional[str] = None):
        """Forget a connection."""
        self.global_subscribers.discard(websocket)
        if job_id and job_id in self.job_subscribers:
            self.job_subscribers[job_id].discard(websocket)
            if not self.job_subscribers[job_id]:
                del self.job_subscribers[job_id]

    async def _send(self, connections: Set[WebSocket], message: dict) -> Set[WebSocket]:
        dead = set()
        for connection in list(connections):
            try:
                await connection.send_json(message)
            except Exception as e:
                logger.debug(f"Dropping WebSocket client: {e}")
                dead.add(connection)
        return dead

    async def dispatch(self, message: dict):
        """Deliver an update to its job's subscribers and to global subscribers."""
        job_id = message.get("job_id")
        if job_id in self.job_subscribers:
            for connection in await self._send(self.job_subscribers[job_id], message):
                self.disconnect(connection, job_id)

        for connection in await self._send(self.global_subscribers, message):
            self.disconnect(connection)


# Global update manager
manager = JobUpdateManager()


async def redis_subscriber(redis_client: redis.Redis):
    """Forward job updates from the Redis result channel to WebSocket clients."""
    pubsub = redis_client.pubsub()
    await pubsub.subscribe(settings.redis_result_channel)

    try:
        async for message in pubsub.listen():
            if message["type"] != "message":
                continue
            try:
                data = json.loads(message["data"])
            except json.JSONDecodeError:
                logger.warning(f"Ignoring malformed job update: {message['data']!r}")
                continue
            await manager.dispatch(data)
    except asyncio.CancelledError:
        pass
    finally:
        await pubsub.unsubscribe(settings.redis_result_channel)
        await pubsub.aclose()


async def websocket_endpoint(websocket: WebSocket, job_id: Optional[str] = None):
    """Keep a subscriber connection open, answering pings and sending heartbeats."""
    await manager.connect(websocket, job_id)

    try:
        while True:
            try:
                data = await asyncio.wait_for(
                    websocket.receive_text(),
                    timeout=settings.ws_heartbeat_interval
                )
                if data == "ping":
                    await websocket.send_text("pong")
            except asyncio.TimeoutError:
                await websocket.send_json({"type": "heartbeat"})
    except WebSocketDisconnect:
        manager.disconnect(websocket, job_id)
