"""Per-connection lifecycle: open, message and close handling for the relay."""
from __future__ import annotations

import enum
import logging
from typing import Optional, Union

from motor_relay.hub import Hub
from motor_relay.messages import (
    CommandEvent,
    CursorEvent,
    StateSnapshot,
    UserCount,
    UserDisconnected,
)
from motor_relay.presence import Peer, PeerSocket, PresenceRegistry
from motor_relay.routing import MessageParseError, classify
from motor_relay.state import StateStore

logger = logging.getLogger(__name__)


class ConnectionState(str, enum.Enum):
    CONNECTING = "connecting"
    OPEN = "open"
    CLOSED = "closed"


class Connection:
    """One peer's session. Moves CONNECTING -> OPEN -> CLOSED, never back."""

    def __init__(self, peer: Peer) -> None:
        self.peer = peer
        self.state = ConnectionState.CONNECTING

    @property
    def id(self) -> str:
        return self.peer.id


class Relay:
    """Wires the state store, presence registry and hub to connection events.

    Shared resources are read or mutated synchronously and the resulting
    sends are issued before the handler yields, so the order peers observe
    matches the order events were handled.
    """

    def __init__(
        self,
        store: Optional[StateStore] = None,
        registry: Optional[PresenceRegistry] = None,
        send_timeout: float = 5.0,
    ) -> None:
        self.store = store or StateStore()
        self.registry = registry or PresenceRegistry()
        self.hub = Hub(self.registry, send_timeout=send_timeout)

    def connect(self, socket: PeerSocket, address: Optional[str] = None) -> Connection:
        """Create the session for an accepted upgrade; nothing is shared yet."""
        return Connection(Peer(socket, address or "Unknown"))

    async def open(self, conn: Connection) -> None:
        if conn.state is not ConnectionState.CONNECTING:
            return
        # OPEN and registered together, so a later close always deregisters.
        conn.state = ConnectionState.OPEN
        logger.info("New device connected: %s (ID: %s)", conn.peer.address, conn.id)

        self.registry.register(conn.peer)
        snapshot = StateSnapshot(**self.store.read().as_dict(), user_id=conn.id)
        await self.hub.send_to(conn.peer, snapshot)
        await self.hub.broadcast(UserCount(count=self.registry.count()))

    async def handle(self, conn: Connection, raw: Union[str, bytes]) -> None:
        if conn.state is not ConnectionState.OPEN:
            return
        try:
            event = classify(raw, conn.id)
        except MessageParseError as exc:
            logger.warning("Failed to parse message from %s: %s", conn.id, exc)
            return

        if isinstance(event, CursorEvent):
            # The sender draws its own cursor locally.
            await self.hub.broadcast(event, excluding=conn.id)
        elif isinstance(event, CommandEvent):
            new_state = self.store.apply({"speed": event.speed, "forward": event.forward})
            # Includes the sender so it sees the normalized value.
            await self.hub.broadcast(StateSnapshot(**new_state.as_dict()))

    async def close(self, conn: Connection) -> None:
        if conn.state is not ConnectionState.OPEN:
            return
        conn.state = ConnectionState.CLOSED
        conn.peer.subscribed = False
        logger.info("Device disconnected (ID: %s)", conn.id)

        self.registry.deregister(conn.id)
        await self.hub.broadcast(UserDisconnected(id=conn.id))
        # Deregistration is done, so the count no longer includes this peer.
        await self.hub.broadcast(UserCount(count=self.registry.count()))


__all__ = ["Connection", "ConnectionState", "Relay"]
