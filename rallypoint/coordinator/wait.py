"""
Wait Coordinator - suspend a task until all / any triggerable sources fire.

Arming happens synchronously in caller order; procedures are spawned only
after every other source is armed and started. Completion is delivered
through an asyncio Future, so the waiting task is always resumed by the
loop and never from inside the firing source's call stack. A source that
fires while arming is still running is counted, and the task resumes as
soon as it awaits.

Usage:
    from rallypoint.coordinator import await_all, await_any

    handles = await await_all([door.opened, Timer(5.0), load_assets])
    handles = await await_any([player_left, Timer(30.0)])
    for handle in handles:
        cancel(handle)  # await_any leaves the others armed
"""
import asyncio
import inspect
from enum import Enum
from typing import Any, Callable, List, Optional, Sequence
from loguru import logger

from rallypoint.handles import cancel
from rallypoint.scheduling import CooperativeScheduler

from .sources import SourceKind, arm_playback, classify_source, subscribe_once


class WaitMode(Enum):
    ALL = "all"
    ANY = "any"


class Wait:
    """
    One armed wait.

    `handles` is available as soon as the wait is armed, so the caller can
    cancel sources early. Awaiting the wait returns the same list, with
    entries of procedures that already ran replaced by None.
    """

    def __init__(self, sources: Sequence[Any], mode: WaitMode):
        self.sources = list(sources)
        self.mode = mode
        self.handles: List[Optional[Any]] = [None] * len(self.sources)
        self._kinds = [classify_source(source, i) for i, source in enumerate(self.sources)]
        self._consumed = [False] * len(self.sources)
        self._remaining = len(self.sources)
        self._fired = 0
        self._started: List[Any] = []  # playbacks this wait set playing
        self._future: Optional[asyncio.Future] = None

    @property
    def fired(self) -> int:
        """Number of sources that have fired so far."""
        return self._fired

    @property
    def remaining(self) -> int:
        return max(self._remaining, 0)

    def done(self) -> bool:
        return self._future is not None and self._future.done()

    def arm(self, scheduler: CooperativeScheduler) -> 'Wait':
        """Arm every source. Called once by WaitCoordinator."""
        if self._future is not None:
            raise RuntimeError("Wait is already armed")
        self._future = scheduler.loop.create_future()

        if not self.sources:
            if self.mode is WaitMode.ALL:
                self._future.set_result(None)
            else:
                logger.warning("await_any() called with no sources; it will never resume")
            return self

        procedures = []
        try:
            for index, (source, kind) in enumerate(zip(self.sources, self._kinds)):
                if kind is SourceKind.PROCEDURE:
                    procedures.append((index, source))
                elif kind is SourceKind.PLAYBACK:
                    idle = not getattr(source, "is_playing", False)
                    self.handles[index] = arm_playback(source, self._fire_callback(index))
                    if idle:
                        self._started.append(source)
                else:
                    self.handles[index] = subscribe_once(source, self._fire_callback(index))
        except Exception:
            # Nothing has been spawned yet; undo what was armed so far.
            self._release()
            self._future.cancel()
            raise

        for index, procedure in procedures:
            name = getattr(procedure, "__qualname__", None) or f"procedure#{index}"
            self.handles[index] = scheduler.spawn(self._run_procedure, index, procedure, name=name)

        logger.debug(
            f"Armed {len(self.sources)} sources (mode={self.mode.value}, procedures={len(procedures)})"
        )
        return self

    def result(self) -> List[Optional[Any]]:
        """Arming handles in source order; None for procedures that completed."""
        return [None if consumed else handle for handle, consumed in zip(self.handles, self._consumed)]

    def cancel(self) -> None:
        """
        Cancel every arming handle and stop waiting.

        Playbacks that were idle until this wait started them are paused;
        playbacks that were already playing are left alone.
        """
        self._release()
        if self._future is not None and not self._future.done():
            self._future.cancel()

    def _release(self, skip: Optional[int] = None) -> None:
        for index, handle in enumerate(self.result()):
            if index != skip:
                cancel(handle)
        for playback in self._started:
            if getattr(playback, "is_playing", False):
                playback.pause()
        self._started.clear()

    def __await__(self):
        return self._wait().__await__()

    async def _wait(self) -> List[Optional[Any]]:
        if self._future is None:
            raise RuntimeError("Wait must be armed before it is awaited")
        await self._future
        return self.result()

    def _fire_callback(self, index: int) -> Callable[[], None]:
        def _fire():
            self._on_fired(index)
        return _fire

    def _on_fired(self, index: int) -> None:
        self._fired += 1
        self._remaining -= 1
        if self._future.done():
            return
        if self.mode is WaitMode.ANY or self._remaining <= 0:
            logger.trace(f"Wait resolved by source #{index} ({self._fired}/{len(self.sources)} fired)")
            self._future.set_result(None)

    async def _run_procedure(self, index: int, procedure: Callable) -> None:
        try:
            result = procedure()
            if inspect.isawaitable(result):
                await result
        except Exception as e:
            if self._future.done():
                raise
            logger.debug(f"Procedure #{index} failed, releasing the other sources: {e}")
            try:
                self._release(skip=index)
            finally:
                self._future.set_exception(e)
            return
        self._consumed[index] = True
        self._on_fired(index)

    def __repr__(self):
        return f"<Wait {self.mode.value} fired={self._fired}/{len(self.sources)}>"


class WaitCoordinator:
    """
    Arms waits on a scheduler.

    A coordinator never stores the waits it arms; the returned handles
    belong to the caller.
    """

    def __init__(self, scheduler: Optional[CooperativeScheduler] = None):
        self.scheduler = scheduler or CooperativeScheduler()

    def arm_all(self, sources: Sequence[Any]) -> Wait:
        return Wait(sources, WaitMode.ALL).arm(self.scheduler)

    def arm_any(self, sources: Sequence[Any]) -> Wait:
        return Wait(sources, WaitMode.ANY).arm(self.scheduler)

    async def await_all(self, sources: Sequence[Any]) -> List[Optional[Any]]:
        return await self.arm_all(sources)

    async def await_any(self, sources: Sequence[Any]) -> List[Optional[Any]]:
        return await self.arm_any(sources)


async def await_all(sources: Sequence[Any], *, scheduler: Optional[CooperativeScheduler] = None) -> List[Optional[Any]]:
    """
    Suspend until every source has fired once.

    Args:
        sources: Playbacks, signals and zero-argument callables
        scheduler: Scheduler used to run procedures (a fresh one by default)

    Returns:
        Arming handles in source order; None for procedures that ran

    Raises:
        InvalidSourceKind: before anything is armed, if a source is not triggerable
    """
    return await WaitCoordinator(scheduler).await_all(sources)


async def await_any(sources: Sequence[Any], *, scheduler: Optional[CooperativeScheduler] = None) -> List[Optional[Any]]:
    """
    Suspend until the first source fires.

    The other sources stay armed; cancelling their handles is up to the caller.
    An empty list never resumes.
    """
    return await WaitCoordinator(scheduler).await_any(sources)
