"""
Realtime updates over Server-Sent Events.

Clients open ``/api/events/stream`` and receive ``challenge_leaderboard_update``
and ``impact_metric_update`` events, pushed after likes, posts and comments
change. Every frame's ``data:`` line is ``{"type", "data", "timestamp"}``.
"""
import asyncio
import json
import threading
import uuid
from dataclasses import dataclass, field
from typing import AsyncIterator, Dict, List, Tuple

from fastapi import APIRouter, Request
from fastapi.responses import StreamingResponse
from sqlalchemy import func
from sqlalchemy.orm import Session

from ..logging_config import events_logger
from ..models import Comment, Like, Post, User
from ..responses import utc_timestamp

router = APIRouter(prefix="/api/events", tags=["events"])

LEADERBOARD_UPDATE = "challenge_leaderboard_update"
IMPACT_METRIC_UPDATE = "impact_metric_update"
EVENT_TYPES = [LEADERBOARD_UPDATE, IMPACT_METRIC_UPDATE]

LEADERBOARD_SIZE = 5
KEEPALIVE_SECONDS = 30.0


@dataclass
class Event:
    type: str
    data: Dict
    id: str = field(default_factory=lambda: f"evt_{uuid.uuid4().hex[:8]}")
    timestamp: str = field(default_factory=utc_timestamp)

    def to_sse(self) -> str:
        body = json.dumps({"type": self.type, "data": self.data, "timestamp": self.timestamp})
        return f"id: {self.id}\nevent: {self.type}\ndata: {body}\n\n"


class EventManager:
    """
    Fan-out of events to connected stream clients.

    Each client owns an asyncio.Queue bound to the loop that created it.
    Sync route handlers run in worker threads, so ``broadcast`` never touches
    a queue directly and schedules the put on the owning loop instead.
    The client table is shared with those threads and guarded by a lock.
    """

    def __init__(self):
        self._clients: Dict[str, Tuple[asyncio.AbstractEventLoop, asyncio.Queue]] = {}
        self._lock = threading.Lock()

    @property
    def client_count(self) -> int:
        return len(self._clients)

    async def connect(self, client_id: str) -> asyncio.Queue:
        queue: asyncio.Queue = asyncio.Queue()
        queue.put_nowait(Event(type="connected", data={"client_id": client_id}))
        with self._lock:
            self._clients[client_id] = (asyncio.get_running_loop(), queue)
        events_logger.info("Stream client connected", client_id=client_id, clients=self.client_count)
        return queue

    async def disconnect(self, client_id: str):
        with self._lock:
            removed = self._clients.pop(client_id, None)
        if removed is not None:
            events_logger.info("Stream client disconnected", client_id=client_id, clients=self.client_count)

    def broadcast(self, event: Event):
        with self._lock:
            clients = list(self._clients.values())
        for loop, queue in clients:
            if not loop.is_closed():
                loop.call_soon_threadsafe(queue.put_nowait, event)
        events_logger.debug("Event broadcast", type=event.type, clients=len(clients))

    async def stream(self, request: Request, client_id: str) -> AsyncIterator[str]:
        """Yield SSE frames for one client until it disconnects."""
        queue = await self.connect(client_id)
        try:
            while not await request.is_disconnected():
                try:
                    event = await asyncio.wait_for(queue.get(), timeout=KEEPALIVE_SECONDS)
                except asyncio.TimeoutError:
                    yield ": keepalive\n\n"
                    continue
                yield event.to_sse()
        finally:
            await self.disconnect(client_id)


event_manager = EventManager()


# ============================================================
# PAYLOADS AND EMITTERS
# ============================================================

def leaderboard(db: Session, size: int = LEADERBOARD_SIZE) -> List[Dict]:
    """Users ranked by likes received on their posts."""
    likes = func.count(Like.post_id)
    rows = (
        db.query(User.id, User.username, likes.label("likes"))
        .join(Post, Post.user_id == User.id)
        .join(Like, Like.post_id == Post.id)
        .group_by(User.id, User.username)
        .order_by(likes.desc(), User.id.asc())
        .limit(size)
        .all()
    )
    return [
        {"rank": rank, "user_id": str(user_id), "username": username, "likes": count}
        for rank, (user_id, username, count) in enumerate(rows, start=1)
    ]


def impact_metrics(db: Session, user_id: int) -> Dict:
    """Posts, comments and likes made by one user."""
    def count(column, owner):
        return db.query(func.count(column)).filter(owner == user_id).scalar()

    return {
        "user_id": str(user_id),
        "posts": count(Post.id, Post.user_id),
        "comments": count(Comment.id, Comment.user_id),
        "likes": count(Like.post_id, Like.user_id),
    }


def emit_leaderboard_update(db: Session):
    if event_manager.client_count:
        event_manager.broadcast(Event(type=LEADERBOARD_UPDATE, data={"leaderboard": leaderboard(db)}))


def emit_impact_update(db: Session, user_id: int):
    if event_manager.client_count:
        event_manager.broadcast(Event(type=IMPACT_METRIC_UPDATE, data=impact_metrics(db, user_id)))


# ============================================================
# ROUTES
# ============================================================

@router.get("/stream")
async def sse_stream(request: Request):
    """Open an event stream. The first event is ``connected``."""
    client_id = f"client_{uuid.uuid4().hex[:8]}"
    return StreamingResponse(
        event_manager.stream(request, client_id),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
            "X-Accel-Buffering": "no",
        },
    )


@router.get("/status")
async def events_status():
    return {
        "connected_clients": event_manager.client_count,
        "event_types": EVENT_TYPES,
    }
