"""Registry of connected peers."""
from __future__ import annotations

import asyncio
import random
import string
import threading
from typing import Dict, List, Optional, Protocol

_ID_ALPHABET = string.ascii_lowercase + string.digits
_ID_LENGTH = 9


class PeerSocket(Protocol):
    async def send_text(self, data: str) -> None: ...

    async def close(self, code: int = 1000) -> None: ...


def new_peer_id() -> str:
    # Non-cryptographic and unchecked for collisions; fine for a handful of peers.
    return "".join(random.choices(_ID_ALPHABET, k=_ID_LENGTH))


class Peer:
    """A connected client session: the control UI or an actuator device."""

    def __init__(self, socket: PeerSocket, address: str, peer_id: Optional[str] = None) -> None:
        self.id = peer_id or new_peer_id()
        self.address = address
        self.socket = socket
        # Cleared by the hub when a write fails; the peer gets nothing further.
        self.subscribed = True
        # Serializes writes so each peer sees messages in send order.
        self.send_lock = asyncio.Lock()

    def __repr__(self) -> str:
        return f"Peer(id={self.id!r}, address={self.address!r}, subscribed={self.subscribed})"


class PresenceRegistry:
    """Tracks which peers are currently connected."""

    def __init__(self) -> None:
        self._peers: Dict[str, Peer] = {}
        self._lock = threading.Lock()

    def register(self, peer: Peer) -> None:
        with self._lock:
            self._peers[peer.id] = peer

    def deregister(self, peer_id: str) -> None:
        with self._lock:
            self._peers.pop(peer_id, None)

    def count(self) -> int:
        with self._lock:
            return len(self._peers)

    def all(self) -> List[Peer]:
        """Point-in-time copy of the registered peers."""
        with self._lock:
            return list(self._peers.values())


__all__ = ["Peer", "PeerSocket", "PresenceRegistry", "new_peer_id"]
