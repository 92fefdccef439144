"""FastAPI routes: the relay socket and the plain-HTTP fallback."""
from __future__ import annotations

import asyncio

from fastapi import APIRouter, WebSocket
from fastapi.responses import PlainTextResponse

from motor_relay.lifecycle import Relay

router = APIRouter()


@router.websocket("/")
@router.websocket("/{path:path}")
async def ws_endpoint(ws: WebSocket):
    relay: Relay = ws.app.state.relay
    await ws.accept()
    conn = relay.connect(ws, ws.client.host if ws.client else None)
    try:
        await relay.open(conn)
        while True:
            message = await ws.receive()
            if message["type"] == "websocket.disconnect":
                break
            raw = message.get("text")
            if raw is None:
                raw = message.get("bytes") or b""
            await relay.handle(conn, raw)
    finally:
        # Peers must hear about the disconnect even if this task is cancelled.
        await asyncio.shield(relay.close(conn))


@router.get("/")
@router.get("/{path:path}")
async def upgrade_required():
    return PlainTextResponse("Upgrade failed", status_code=500)
