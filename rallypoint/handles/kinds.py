"""
Concrete cancelable handles.

- TeardownHandle: wraps a no-argument procedure; cancel = invoke it.
- ScheduledHandle: wraps a pending task, future or loop callback; cancel = abort.
- PlaybackHandle: wraps a timed playback; cancel = pause, then destroy.

Subscriptions are the fourth variant; see rallypoint.core.events.Connection.
"""
import asyncio
import inspect
from typing import Any, Callable, Optional, Union

from .base import CancelableHandle
from .errors import SuspendingTeardown


def calling_task() -> Optional[asyncio.Task]:
    """Return the task running the caller, or None outside of a loop."""
    try:
        return asyncio.current_task()
    except RuntimeError:
        return None


def is_suspending(fn: Callable) -> bool:
    """True when calling fn produces something that has to be awaited."""
    target = getattr(fn, "func", fn)  # functools.partial
    return inspect.iscoroutinefunction(target) or inspect.iscoroutinefunction(
        getattr(target, "__call__", None)
    )


def abort_scheduled(target: Union[asyncio.Future, asyncio.Handle]) -> None:
    """
    Abort a pending execution.

    Finished futures and the calling task itself are left alone.
    """
    if isinstance(target, asyncio.Future):
        if target.done() or target is calling_task():
            return
        target.cancel()
    elif not target.cancelled():
        target.cancel()


def invoke_teardown(fn: Callable) -> None:
    """Run a synchronous teardown and discard its result."""
    if is_suspending(fn):
        raise SuspendingTeardown(fn)
    result = fn()
    if inspect.isawaitable(result):
        if inspect.iscoroutine(result):
            result.close()
        raise SuspendingTeardown(fn)


async def invoke_teardown_async(fn: Callable) -> None:
    result = fn()
    if inspect.isawaitable(result):
        await result


class TeardownHandle(CancelableHandle):
    """Cancel by calling an arbitrary procedure."""

    def __init__(self, fn: Callable[[], Any]):
        super().__init__()
        if not callable(fn):
            raise TypeError(f"Teardown must be callable, got {type(fn).__name__}")
        self.fn = fn

    @property
    def suspending(self) -> bool:
        return is_suspending(self.fn)

    def cancel(self) -> None:
        if self._cancelled:
            return
        # Checked before the flag flips so the handle stays usable from async code.
        if self.suspending:
            raise SuspendingTeardown(self.fn)
        super().cancel()

    async def cancel_async(self) -> None:
        if self._cancelled:
            return
        self._cancelled = True
        await invoke_teardown_async(self.fn)

    def _release(self) -> None:
        invoke_teardown(self.fn)


class ScheduledHandle(CancelableHandle):
    """
    A pending execution: an asyncio Task/Future or a loop callback Handle.

    Loop callbacks carry no completion state of their own, so whoever
    schedules them calls mark_done() when the callback has run.
    """

    def __init__(self, target: Union[asyncio.Future, asyncio.Handle], name: Optional[str] = None):
        super().__init__()
        self.target = target
        self.name = name
        self._finished = False

    @property
    def done(self) -> bool:
        if isinstance(self.target, asyncio.Future):
            return self.target.done()
        return self._finished or self.target.cancelled()

    def mark_done(self) -> None:
        self._finished = True

    def _release(self) -> None:
        if self.done:
            return
        abort_scheduled(self.target)

    def __repr__(self):
        state = "done" if self.done else "pending"
        return f"<ScheduledHandle {self.name or self.target!r} {state}>"


class PlaybackHandle(CancelableHandle):
    """Owns a timed playback; cancel stops it and releases it."""

    def __init__(self, playback):
        super().__init__()
        self.playback = playback

    def _release(self) -> None:
        self.playback.pause()
        self.playback.destroy()
