#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""Tests for the notification fan-out and the /ws endpoint."""
# -----------------------------------------------------------------------------

from __future__ import annotations

import asyncio

import pytest
from fastapi.testclient import TestClient


# -----------------------------------------------------------------------------

from inkwell.core.exceptions import ArticleNotFound
from inkwell.schemas import ArticleCreate, ArticleUpdate, ArticleUpdatedEvent
from inkwell.services.notifications import Notifier, SubscriberLimitReached
from tests.conftest import DEFAULT_WS, FakeUpload


def _event(n: int) -> ArticleUpdatedEvent:
    return ArticleUpdatedEvent(article_id=f"a-{n}", title=f"Title {n}")


@pytest.mark.asyncio(loop_scope="session")
class TestNotifier:
    async def test_fan_out(self):
        notifier = Notifier()
        a, b = notifier.subscribe(), notifier.subscribe()
        assert notifier.publish(_event(1)) == 2
        assert (await a.get()).article_id == "a-1"
        assert (await b.get()).article_id == "a-1"

    async def test_publish_without_subscribers(self):
        assert Notifier().publish(_event(1)) == 0

    async def test_full_queue_drops_instead_of_blocking(self):
        notifier = Notifier(queue_size=2)
        sub = notifier.subscribe()
        for n in range(5):
            notifier.publish(_event(n))
        assert sub.dropped == 3
        assert [(await sub.get()).article_id for _ in range(2)] == ["a-0", "a-1"]

    async def test_subscriber_limit(self):
        notifier = Notifier(max_subscribers=1)
        first = notifier.subscribe()
        with pytest.raises(SubscriberLimitReached):
            notifier.subscribe()
        notifier.unsubscribe(first)
        notifier.subscribe()
        assert notifier.subscriber_count == 1

    async def test_unsubscribed_gets_nothing_more(self):
        notifier = Notifier()
        sub = notifier.subscribe()
        notifier.unsubscribe(sub)
        assert notifier.publish(_event(1)) == 0
        assert await sub.get() is None

    async def test_close_wakes_waiters(self):
        notifier = Notifier(queue_size=1)
        sub = notifier.subscribe()
        notifier.publish(_event(1))
        waiter = asyncio.create_task(sub.get())
        assert (await waiter).article_id == "a-1"

        waiter = asyncio.create_task(sub.get())
        await asyncio.sleep(0)
        notifier.close()
        assert await asyncio.wait_for(waiter, timeout=1) is None
        assert notifier.subscriber_count == 0


@pytest.mark.asyncio(loop_scope="session")
class TestServiceEvents:
    async def test_update_publishes_after_commit(self, service, notifier):
        art = await service.create(ArticleCreate(title="Watched", content="A", workspace_id=DEFAULT_WS))
        sub = notifier.subscribe()
        assert sub.queue.empty()

        await service.update(art.id, ArticleUpdate(title="Watched closely", content="B"))
        event = await sub.get()
        assert event.type == "articleUpdated"
        assert (event.article_id, event.title) == (art.id, "Watched closely")

    async def test_attachment_events(self, service, notifier):
        art = await service.create(ArticleCreate(title="Pictures", content="A", workspace_id=DEFAULT_WS))
        sub = notifier.subscribe()

        att = await service.add_attachment(art.id, FakeUpload(b"\x89PNG....."))
        added = await sub.get()
        assert added.type == "attachmentAdded"
        assert added.attachment.id == att.id
        assert added.title == "Pictures"

        await service.remove_attachment(art.id, att.id)
        removed = await sub.get()
        assert removed.type == "articleUpdated"

    async def test_failed_update_publishes_nothing(self, service, notifier):
        sub = notifier.subscribe()
        with pytest.raises(ArticleNotFound):
            await service.update("ghost", ArticleUpdate(title="Nothing", content="x"))
        assert sub.queue.empty()


class TestWebSocket:
    def test_connected_greeting(self, app):
        client = TestClient(app)
        with client.websocket_connect("/ws") as ws:
            message = ws.receive_json()
            assert message["type"] == "connected"
            assert "timestamp" in message
            assert app.state.notifier.subscriber_count == 1

    def test_published_event_is_pushed(self, app):
        client = TestClient(app)
        notifier = app.state.notifier
        with client.websocket_connect("/ws") as ws:
            assert ws.receive_json()["type"] == "connected"

            # Publish from the event loop that runs the socket.
            delivered = ws.portal.call(
                notifier.publish, ArticleUpdatedEvent(article_id="a-1", title="Pushed")
            )
            assert delivered == 1

            message = ws.receive_json()
            assert message["type"] == "articleUpdated"
            assert (message["article_id"], message["title"]) == ("a-1", "Pushed")

    def test_reconnect_after_disconnect(self, app):
        client = TestClient(app)
        for _ in range(2):
            with client.websocket_connect("/ws") as ws:
                assert ws.receive_json()["type"] == "connected"


# -----------------------------------------------------------------------------
