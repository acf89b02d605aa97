"""
Cancel any supported live resource.

Values are resolved to a HandleKind by the capabilities they expose,
checked in a fixed order, so host objects never have to subclass anything:

    HANDLE        CancelableHandle instances (Connection, ScheduledHandle, ...)
    SUBSCRIPTION  has disconnect()
    PLAYBACK      has pause() and destroy()
    SCHEDULED     asyncio Future/Task, or anything with cancel() and done()/cancelled()
    TEARDOWN      any other callable

A capability only counts when it can be called without arguments, so a
notification source such as Signal (whose disconnect() needs the callback)
is rejected with InvalidHandleKind rather than failing mid-cleanup.
"""
import asyncio
import inspect
from enum import Enum
from typing import Any

from .base import CancelableHandle
from .errors import InvalidHandleKind
from .kinds import abort_scheduled, invoke_teardown, invoke_teardown_async


class HandleKind(Enum):
    HANDLE = "handle"
    SUBSCRIPTION = "subscription"
    PLAYBACK = "playback"
    SCHEDULED = "scheduled"
    TEARDOWN = "teardown"


def _no_required_args(fn: Any) -> bool:
    try:
        signature = inspect.signature(fn)
    except (TypeError, ValueError):
        return True  # builtins without introspection data
    return all(
        param.default is not param.empty
        or param.kind in (param.VAR_POSITIONAL, param.VAR_KEYWORD)
        for param in signature.parameters.values()
    )


def _has(value: Any, *names: str) -> bool:
    """True when every named attribute is callable without arguments."""
    for name in names:
        attr = getattr(value, name, None)
        if not callable(attr) or not _no_required_args(attr):
            return False
    return True


def classify_handle(value: Any) -> HandleKind:
    """
    Resolve the cancelable variant of a value.

    Raises:
        InvalidHandleKind: if the value exposes none of the capabilities
    """
    if isinstance(value, CancelableHandle):
        return HandleKind.HANDLE
    if _has(value, "disconnect"):
        return HandleKind.SUBSCRIPTION
    if _has(value, "pause", "destroy"):
        return HandleKind.PLAYBACK
    if isinstance(value, (asyncio.Future, asyncio.Handle)):
        return HandleKind.SCHEDULED
    if _has(value, "cancel") and (_has(value, "done") or _has(value, "cancelled")):
        return HandleKind.SCHEDULED
    if callable(value) and _no_required_args(value):
        return HandleKind.TEARDOWN
    raise InvalidHandleKind(value)


def is_cancelable(value: Any) -> bool:
    try:
        classify_handle(value)
    except InvalidHandleKind:
        return False
    return True


def cancel(handle: Any) -> None:
    """
    Release a live resource.

    None is accepted and ignored. Exceptions raised by the underlying
    teardown propagate to the caller.

    Args:
        handle: Subscription, scheduled execution, playback, teardown
            callable or CancelableHandle

    Raises:
        InvalidHandleKind: if handle is none of the supported variants
        SuspendingTeardown: if the teardown is a coroutine function
    """
    if handle is None:
        return

    kind = classify_handle(handle)
    if kind is HandleKind.HANDLE:
        handle.cancel()
    elif kind is HandleKind.SUBSCRIPTION:
        handle.disconnect()
    elif kind is HandleKind.PLAYBACK:
        handle.pause()
        handle.destroy()
    elif kind is HandleKind.SCHEDULED:
        if isinstance(handle, (asyncio.Future, asyncio.Handle)):
            abort_scheduled(handle)
        elif not (handle.done() if _has(handle, "done") else handle.cancelled()):
            handle.cancel()
    else:
        invoke_teardown(handle)


async def cancel_async(handle: Any) -> None:
    """
    Like cancel(), but awaits teardowns that suspend.

    The calling task is suspended for as long as the teardown runs.
    """
    if handle is None:
        return

    kind = classify_handle(handle)
    if kind is HandleKind.HANDLE:
        await handle.cancel_async()
    elif kind is HandleKind.TEARDOWN:
        await invoke_teardown_async(handle)
    else:
        cancel(handle)
