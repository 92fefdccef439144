"""Pydantic models for the JSON messages exchanged over the relay socket.

Every outbound message carries a ``type`` discriminator so the browser UI
and the actuator firmware can dispatch on it the same way.
"""
from __future__ import annotations

from typing import Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class WireMessage(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    def to_wire(self) -> str:
        """Serialize to the JSON text frame sent to peers."""
        # Omit fields that were never given; an explicit null goes out as null.
        omitted = {
            name
            for name in type(self).model_fields
            if name not in self.model_fields_set and getattr(self, name) is None
        }
        return self.model_dump_json(by_alias=True, exclude=omitted)


# -----------------------------
# Client -> server
# -----------------------------

class CursorEvent(WireMessage):
    """Pointer position of one peer, relayed to every other peer."""

    type: Literal["cursor"] = "cursor"
    id: str
    # Coordinates are relayed untouched; range checks are the peer's business.
    x: Any = None
    y: Any = None


class CommandEvent(WireMessage):
    """Requested update of the shared state. ``speed`` is normalized by the store."""

    type: Literal["command"] = "command"
    speed: Any = None
    forward: Any = None


# -----------------------------
# Server -> client
# -----------------------------

class StateSnapshot(WireMessage):
    type: Literal["state"] = "state"
    speed: int
    forward: bool
    # Only set on the snapshot a peer receives right after connecting.
    user_id: Optional[str] = Field(default=None, alias="userId")


class UserCount(WireMessage):
    type: Literal["users"] = "users"
    count: int


class UserDisconnected(WireMessage):
    type: Literal["user_disconnected"] = "user_disconnected"
    id: str


InboundMessage = Union[CursorEvent, CommandEvent]

__all__ = [
    "WireMessage",
    "CursorEvent",
    "CommandEvent",
    "StateSnapshot",
    "UserCount",
    "UserDisconnected",
    "InboundMessage",
]
