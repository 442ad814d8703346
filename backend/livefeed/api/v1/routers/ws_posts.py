import json
import asyncio
import logging
from fastapi import APIRouter, WebSocket

from livefeed.core.pubsub import BroadcastHub

router = APIRouter()
logger = logging.getLogger("uvicorn.error")

# "Try again later": sent when the hub drops a client that cannot keep up
CLOSE_TRY_AGAIN_LATER = 1013

async def _receive_until_disconnect(ws: WebSocket) -> None:
    while True:
        msg = await ws.receive()
        if msg["type"] == "websocket.disconnect":
            return

@router.websocket("/ws/posts")
async def ws_posts(ws: WebSocket):
    """
    WebSocket endpoint for live post updates.

    Message flow:
    1. Client connects to WebSocket
    2. Server registers the connection with the broadcast hub
    3. Server sends: {"type": "ready"}
    4. Server pushes {"type": "newEntry", "data": {...}} for every post created afterwards

    Inbound frames are ignored. The connection is unregistered when it closes,
    whatever the reason. If the hub drops the observer (buffer overflow or a
    failed send) the server closes the socket with code 1013.
    """
    await ws.accept()
    hub: BroadcastHub = ws.app.state.hub
    async with hub.session(ws) as observer:
        logger.info("[ws_posts] connected (%d live)", len(hub))
        await ws.send_text(json.dumps({"type": "ready"}))
        reader = asyncio.create_task(_receive_until_disconnect(ws))
        sender = asyncio.create_task(observer.pump())
        dropped = asyncio.create_task(observer.dropped.wait())
        tasks = {reader, sender, dropped}
        try:
            done, _ = await asyncio.wait(tasks, return_when=asyncio.FIRST_COMPLETED)
        finally:
            for t in tasks:
                t.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)

        if reader not in done:
            logger.warning("[ws_posts] observer dropped by hub, closing")
            try:
                await ws.close(code=CLOSE_TRY_AGAIN_LATER)
            except Exception as e:
                # Transport already gone
                logger.info("[ws_posts] close after drop failed: %r", e)
    logger.info("[ws_posts] disconnected (%d live)", len(hub))
