"""
Triggerable sources - classification and arming.

A source is resolved to a SourceKind by the capabilities it exposes,
checked in order:

    PLAYBACK      has play() and a `completed` notification source
    ONE_SHOT      has once(callback)
    SUBSCRIPTION  has connect(callback)
    PROCEDURE     any other callable; it fires when it returns

Arming a notification source subscribes a callback that calls `fire`
exactly once and leaves the subscription disconnected afterwards.
"""
from enum import Enum
from typing import Any, Callable

from rallypoint.handles import cancel

from .errors import InvalidSourceKind


class SourceKind(Enum):
    PLAYBACK = "playback"
    ONE_SHOT = "one_shot"
    SUBSCRIPTION = "subscription"
    PROCEDURE = "procedure"


def _has(value: Any, name: str) -> bool:
    return callable(getattr(value, name, None))


def classify_source(source: Any, index: int = 0) -> SourceKind:
    if _has(source, "play") and hasattr(source, "completed"):
        return SourceKind.PLAYBACK
    if _has(source, "once"):
        return SourceKind.ONE_SHOT
    if _has(source, "connect"):
        return SourceKind.SUBSCRIPTION
    if callable(source):
        return SourceKind.PROCEDURE
    raise InvalidSourceKind(source, index)


def subscribe_once(source: Any, fire: Callable[[], None]):
    """
    Subscribe `fire` to the next notification of `source`.

    Uses the source's own once() when it has one. Otherwise the connection
    is disconnected before `fire` runs; a notification delivered while
    connect() is still running is honoured once connect() returns the handle.

    Returns:
        The subscription handle
    """
    if _has(source, "once"):
        fired = False

        def _on_notify(*args, **kwargs):
            nonlocal fired
            if fired:
                return
            fired = True
            fire()

        return source.once(_on_notify)

    connection = None
    fired = False

    def _on_notify(*args, **kwargs):
        nonlocal fired
        if fired:
            return
        fired = True
        cancel(connection)
        fire()

    connection = source.connect(_on_notify)
    if fired:
        cancel(connection)
    return connection


def arm_playback(playback: Any, fire: Callable[[], None]):
    """Subscribe to the playback's completion, then start it if it is idle."""
    handle = subscribe_once(playback.completed, fire)
    if not getattr(playback, "is_playing", False):
        try:
            playback.play()
        except Exception:
            cancel(handle)
            raise
    return handle
