"""
Event System - synchronous notification sources.

Provides:
- Signal: observer pattern whose subscriptions are cancelable handles
- Connection: the handle returned by Signal.connect() / Signal.once()

Usage:
    from rallypoint.core.events import Signal

    changed = Signal("changed")
    connection = changed.connect(on_changed)
    changed.emit("value")
    connection.disconnect()
"""
from .observer import Connection, Signal


__all__ = ["Signal", "Connection"]
