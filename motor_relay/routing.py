"""Classify inbound payloads into relay events."""
from __future__ import annotations

import json
from typing import Optional, Union

from motor_relay.messages import CommandEvent, CursorEvent, InboundMessage


class MessageParseError(ValueError):
    """Inbound payload is not a JSON object."""


def decode(raw: Union[str, bytes]) -> dict:
    if isinstance(raw, (bytes, bytearray)):
        try:
            raw = raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise MessageParseError(f"payload is not UTF-8: {exc}") from exc
    try:
        data = json.loads(raw)
    except (ValueError, RecursionError) as exc:
        # ValueError covers JSONDecodeError and integers past the digit limit.
        raise MessageParseError(f"invalid JSON: {exc!r}") from exc
    if not isinstance(data, dict):
        raise MessageParseError(f"expected a JSON object, got {type(data).__name__}")
    return data


def classify(raw: Union[str, bytes], sender_id: str) -> Optional[InboundMessage]:
    """Return the event ``raw`` asks for, or None when it asks for nothing.

    Legacy actuator firmware sends commands without a ``type`` field, so an
    untyped payload counts as a command only when it carries ``speed``.
    """
    data = decode(raw)
    msg_type = data.get("type")

    if msg_type == "cursor":
        coords = {key: data[key] for key in ("x", "y") if key in data}
        return CursorEvent(id=sender_id, **coords)

    if msg_type == "command" or (not msg_type and "speed" in data):
        return CommandEvent(speed=data.get("speed"), forward=data.get("forward"))

    return None


__all__ = ["MessageParseError", "classify", "decode"]
