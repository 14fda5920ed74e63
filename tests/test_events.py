"""
Tests for the realtime event system.
"""
import asyncio
import json

import pytest

from eco3.routes import events
from eco3.routes.events import (
    IMPACT_METRIC_UPDATE,
    LEADERBOARD_UPDATE,
    Event,
    EventManager,
    impact_metrics,
    leaderboard,
)


class RecordingManager:
    """Stands in for the global event manager with one pretend client."""

    client_count = 1

    def __init__(self):
        self.events = []

    def broadcast(self, event):
        self.events.append(event)


@pytest.fixture
def recorder(monkeypatch):
    manager = RecordingManager()
    monkeypatch.setattr(events, "event_manager", manager)
    return manager


class TestEventFormat:
    def test_to_sse(self):
        event = Event(type=LEADERBOARD_UPDATE, data={"leaderboard": []})
        lines = event.to_sse().split("\n")

        assert lines[0] == f"id: {event.id}"
        assert lines[1] == f"event: {LEADERBOARD_UPDATE}"
        payload = json.loads(lines[2][len("data: "):])
        assert payload["type"] == LEADERBOARD_UPDATE
        assert payload["data"] == {"leaderboard": []}
        assert event.to_sse().endswith("\n\n")


class TestEventManager:
    @pytest.mark.asyncio
    async def test_connect_sends_connected_event(self):
        manager = EventManager()
        queue = await manager.connect("client_1")

        first = await asyncio.wait_for(queue.get(), timeout=1)
        assert first.type == "connected"
        assert manager.client_count == 1

        await manager.disconnect("client_1")
        assert manager.client_count == 0

    @pytest.mark.asyncio
    async def test_broadcast_reaches_every_client(self):
        manager = EventManager()
        queues = [await manager.connect(f"client_{i}") for i in range(2)]
        for queue in queues:
            await queue.get()

        manager.broadcast(Event(type=IMPACT_METRIC_UPDATE, data={"user_id": "1"}))

        for queue in queues:
            event = await asyncio.wait_for(queue.get(), timeout=1)
            assert event.type == IMPACT_METRIC_UPDATE

    @pytest.mark.asyncio
    async def test_broadcast_from_worker_thread(self):
        manager = EventManager()
        queue = await manager.connect("client_1")
        await queue.get()

        await asyncio.to_thread(manager.broadcast, Event(type=LEADERBOARD_UPDATE, data={}))

        event = await asyncio.wait_for(queue.get(), timeout=1)
        assert event.type == LEADERBOARD_UPDATE

    @pytest.mark.asyncio
    async def test_broadcast_while_clients_come_and_go(self):
        manager = EventManager()
        steady = await manager.connect("steady")
        await steady.get()

        def broadcast_many():
            for _ in range(50):
                manager.broadcast(Event(type=IMPACT_METRIC_UPDATE, data={}))

        async def churn():
            for i in range(50):
                await manager.connect(f"client_{i}")
                await asyncio.sleep(0)
                await manager.disconnect(f"client_{i}")

        await asyncio.gather(
            asyncio.to_thread(broadcast_many),
            asyncio.to_thread(broadcast_many),
            churn(),
        )
        await asyncio.sleep(0)

        received = 0
        while not steady.empty():
            assert steady.get_nowait().type == IMPACT_METRIC_UPDATE
            received += 1
        assert received == 100
        assert manager.client_count == 1


class TestMetrics:
    def test_leaderboard_ranks_by_likes_received(self, db, test_user, other_user, test_post, make_like):
        make_like(test_user, test_post)
        make_like(other_user, test_post)

        board = leaderboard(db)
        assert board == [{"rank": 1, "user_id": str(test_user.id), "username": "testuser", "likes": 2}]

    def test_impact_metrics(self, db, test_user, other_user, test_post, make_comment, make_like):
        make_comment(test_user, test_post)
        make_like(test_user, test_post)

        assert impact_metrics(db, test_user.id) == {
            "user_id": str(test_user.id),
            "posts": 1,
            "comments": 1,
            "likes": 1,
        }
        assert impact_metrics(db, other_user.id)["posts"] == 0


class TestEmitters:
    def test_like_emits_impact_and_leaderboard(self, client, recorder, other_user, test_post):
        client.post("/api/likes", json={"user_id": other_user.id, "post_id": test_post.id})

        types = [event.type for event in recorder.events]
        assert types == [IMPACT_METRIC_UPDATE, LEADERBOARD_UPDATE]
        assert recorder.events[1].data["leaderboard"][0]["likes"] == 1

    def test_unlike_emits_leaderboard(self, client, recorder, other_user, test_post, make_like):
        make_like(other_user, test_post)
        client.delete(f"/api/likes/{other_user.id}/{test_post.id}")

        assert [event.type for event in recorder.events] == [LEADERBOARD_UPDATE]
        assert recorder.events[0].data == {"leaderboard": []}

    def test_post_and_comment_emit_impact(self, client, recorder, test_user, test_post):
        client.post("/api/posts", json={"user_id": test_user.id, "title": "Composting"})
        client.post("/api/comments", json={"user_id": test_user.id, "post_id": test_post.id, "content": "Go"})

        assert [event.type for event in recorder.events] == [IMPACT_METRIC_UPDATE, IMPACT_METRIC_UPDATE]
        assert recorder.events[-1].data["comments"] == 1
        assert recorder.events[-1].data["posts"] == 2

    def test_no_clients_no_work(self, db, test_user):
        # The module-level manager starts with nobody listening
        assert events.event_manager.client_count == 0
        events.emit_impact_update(db, test_user.id)

    def test_status(self, client):
        response = client.get("/api/events/status")
        assert response.status_code == 200
        assert response.json() == {
            "connected_clients": 0,
            "event_types": [LEADERBOARD_UPDATE, IMPACT_METRIC_UPDATE],
        }
