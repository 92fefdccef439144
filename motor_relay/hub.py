"""WebSocket hub for broadcasting messages to connected peers."""
from __future__ import annotations

import asyncio
import logging
from typing import Optional

from motor_relay.messages import WireMessage
from motor_relay.presence import Peer, PresenceRegistry

logger = logging.getLogger(__name__)


class Hub:
    """Sends messages to registered peers, best effort.

    A peer whose write fails or times out is unsubscribed and its socket
    closed; the fan-out carries on with the others and nothing is raised.
    """

    def __init__(self, registry: PresenceRegistry, send_timeout: float = 5.0) -> None:
        self.registry = registry
        self.send_timeout = send_timeout

    async def send_to(self, peer: Peer, message: WireMessage) -> None:
        await asyncio.gather(self._deliver(peer, message.to_wire()))

    async def broadcast(self, message: WireMessage, excluding: Optional[str] = None) -> None:
        payload = message.to_wire()
        targets = [p for p in self.registry.all() if p.id != excluding]
        # gather wraps every send in a task right away; tasks start in creation
        # order, so each peer's lock is taken in the order sends are issued.
        await asyncio.gather(*(self._deliver(peer, payload) for peer in targets))

    async def _deliver(self, peer: Peer, payload: str) -> None:
        async with peer.send_lock:
            if not peer.subscribed:
                return
            try:
                await asyncio.wait_for(peer.socket.send_text(payload), timeout=self.send_timeout)
            except Exception as exc:
                logger.warning("Delivery to %s failed, dropping peer: %r", peer.id, exc)
                peer.subscribed = False
                await self._close(peer)

    async def _close(self, peer: Peer) -> None:
        try:
            await asyncio.wait_for(peer.socket.close(code=1011), timeout=self.send_timeout)
        except Exception as exc:
            logger.debug("Closing %s after failed delivery raised %r", peer.id, exc)


__all__ = ["Hub"]
