"""Shared motor state and the guarded store that owns it."""
from __future__ import annotations

import math
import re
import threading
from dataclasses import dataclass, replace
from typing import Any, Mapping

_INT_PREFIX = re.compile(r"([+-]?)(?:0[xX]([0-9a-fA-F]+)|([0-9]+))")


@dataclass(frozen=True)
class SharedState:
    speed: int = 0
    forward: bool = True

    def as_dict(self) -> dict:
        return {"speed": self.speed, "forward": self.forward}


def parse_speed(value: Any) -> int:
    """Read ``value`` the way the UI's ``parseInt`` does; anything unreadable is 0."""
    if isinstance(value, bool) or value is None:
        return 0
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if not math.isfinite(value):
            return 0
        return int(value)
    if isinstance(value, str):
        match = _INT_PREFIX.match(value.lstrip())
        if not match:
            return 0
        sign, hex_digits, dec_digits = match.groups()
        try:
            number = int(hex_digits, 16) if hex_digits else int(dec_digits)
        except ValueError:
            # Past the interpreter's digit limit.
            return 0
        return -number if sign == "-" else number
    return 0


def parse_forward(value: Any) -> bool:
    if value is None:
        return True
    return bool(value)


class StateStore:
    """Owns the single ``SharedState``; every access goes through ``read``/``apply``."""

    def __init__(self, initial: SharedState | None = None) -> None:
        self._state = initial or SharedState()
        self._lock = threading.Lock()

    def read(self) -> SharedState:
        with self._lock:
            return replace(self._state)

    def apply(self, update: Mapping[str, Any]) -> SharedState:
        """Normalize ``update`` and replace the stored record atomically.

        Malformed input is never rejected: an unreadable ``speed`` becomes 0
        and a missing or null ``forward`` becomes True.
        """
        new_state = SharedState(
            speed=parse_speed(update.get("speed")),
            forward=parse_forward(update.get("forward")),
        )
        with self._lock:
            self._state = new_state
        return new_state


__all__ = ["SharedState", "StateStore", "parse_speed", "parse_forward"]
