#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""
Notifications router
====================
WS /ws — push stream of article events.

On connect the client receives {"type": "connected"}, then every
articleUpdated / attachmentAdded event published while it stays connected.
Nothing is replayed; a slow client may miss events.
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

import logging

import anyio
from fastapi import APIRouter, WebSocket, WebSocketDisconnect, status


# -----------------------------------------------------------------------------

from inkwell.schemas import ConnectedEvent
from inkwell.services.notifications import Notifier, SubscriberLimitReached, Subscription

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Notifications"])


async def _pump(websocket: WebSocket, sub: Subscription, scope: anyio.CancelScope) -> None:
    try:
        while (event := await sub.get()) is not None:
            await websocket.send_json(event.model_dump(mode="json"))
    except (WebSocketDisconnect, RuntimeError):
        logger.debug("Subscriber %s went away while sending", sub.id)
    scope.cancel()


async def _drain(websocket: WebSocket, scope: anyio.CancelScope) -> None:
    # Clients have nothing to say; reading only detects the disconnect.
    try:
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        pass
    scope.cancel()


@router.websocket("/ws")
async def notifications_ws(websocket: WebSocket):
    notifier: Notifier = websocket.app.state.notifier
    try:
        sub = notifier.subscribe()
    except SubscriberLimitReached:
        logger.warning("Rejecting websocket: %d subscribers already", notifier.subscriber_count)
        await websocket.close(code=status.WS_1013_TRY_AGAIN_LATER)
        return

    try:
        await websocket.accept()
        await websocket.send_json(ConnectedEvent().model_dump(mode="json"))
        # Whichever side finishes first cancels the other.
        async with anyio.create_task_group() as tg:
            tg.start_soon(_pump, websocket, sub, tg.cancel_scope)
            tg.start_soon(_drain, websocket, tg.cancel_scope)
    finally:
        notifier.unsubscribe(sub)
