"""
Core - Cooperative Scheduler

Front for the running asyncio loop: every execution context is a task,
and every scheduled piece of work comes back as a ScheduledHandle that can
be cancelled or stored in a RegistryNode.
"""
import asyncio
import inspect
from typing import Any, Callable, Optional, Set, Union
from loguru import logger

from rallypoint.core.base_system import BaseSystem
from rallypoint.handles.kinds import ScheduledHandle


def _describe(fn: Any) -> str:
    return getattr(fn, "__qualname__", None) or getattr(fn, "__name__", None) or type(fn).__name__


class CooperativeScheduler(BaseSystem):
    """
    Spawns, defers and delays work on the running loop.

    Outstanding tasks are tracked so shutdown() can cancel whatever is
    still suspended. Loop callbacks (defer/delay) are not tracked; their
    handles are the caller's to cancel.

    Usage:
        async with CooperativeScheduler() as scheduler:
            handle = scheduler.spawn(worker, "job-1")
            later = scheduler.delay(2.0, refresh)
            later.cancel()
    """

    def __init__(self, config=None):
        super().__init__(config)
        self._tasks: Set[asyncio.Task] = set()

    async def initialize(self):
        """Mark the scheduler ready."""
        logger.info("CooperativeScheduler initializing...")
        await super().initialize()

    async def shutdown(self):
        """Cancel every outstanding task and wait for them to unwind."""
        logger.info("CooperativeScheduler shutting down...")
        current = asyncio.current_task()
        tasks = [task for task in self._tasks if not task.done() and task is not current]
        for task in tasks:
            task.cancel()

        if tasks:
            timeout = self.config.data.scheduler.shutdown_timeout
            done, pending = await asyncio.wait(tasks, timeout=timeout)
            for task in done:
                if not task.cancelled() and task.exception() is not None:
                    logger.debug(f"Task {task.get_name()} ended with {task.exception()!r} during shutdown")
            if pending:
                logger.warning(f"{len(pending)} tasks still running after {timeout}s shutdown timeout")
            logger.info(f"Cancelled {len(tasks)} scheduled tasks")

        await super().shutdown()

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        return asyncio.get_running_loop()

    @property
    def pending(self) -> int:
        """Number of spawned tasks that have not finished yet."""
        return sum(1 for task in self._tasks if not task.done())

    def spawn(self, fn: Union[Callable, Any], *args, name: Optional[str] = None) -> ScheduledHandle:
        """
        Run work as a new execution context.

        The task starts on the next loop iteration, never synchronously.

        Args:
            fn: Coroutine function, coroutine object, or plain callable
            *args: Arguments for fn
            name: Label used in the task name and logs

        Returns:
            ScheduledHandle wrapping the task
        """
        label = name or _describe(fn)
        if inspect.iscoroutine(fn):
            if args:
                raise TypeError("Arguments cannot be passed with a coroutine object")
            coro = fn
        elif inspect.iscoroutinefunction(fn):
            coro = fn(*args)
        elif callable(fn):
            coro = self._call(fn, *args)
        else:
            raise TypeError(f"Cannot spawn {type(fn).__name__}")

        prefix = self.config.data.scheduler.task_name_prefix
        task = self.loop.create_task(coro, name=f"{prefix}:{label}")
        self._tasks.add(task)
        task.add_done_callback(self._on_task_done)
        return ScheduledHandle(task, name=label)

    def defer(self, fn: Callable, *args, name: Optional[str] = None) -> ScheduledHandle:
        """Run a plain callable on the next loop iteration."""
        scheduled: Optional[ScheduledHandle] = None

        def _run():
            try:
                fn(*args)
            finally:
                scheduled.mark_done()

        scheduled = ScheduledHandle(self.loop.call_soon(_run), name=name or _describe(fn))
        return scheduled

    def delay(self, seconds: float, fn: Callable, *args, name: Optional[str] = None) -> ScheduledHandle:
        """Run a plain callable after `seconds`."""
        scheduled: Optional[ScheduledHandle] = None

        def _run():
            try:
                fn(*args)
            finally:
                scheduled.mark_done()

        scheduled = ScheduledHandle(self.loop.call_later(max(seconds, 0), _run), name=name or _describe(fn))
        return scheduled

    async def sleep(self, seconds: float) -> None:
        await asyncio.sleep(seconds)

    @staticmethod
    async def _call(fn: Callable, *args):
        return fn(*args)

    def _on_task_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            logger.debug(f"Task {task.get_name()} cancelled")
            return
        error = task.exception()
        if error is not None:
            logger.error(f"Error in task {task.get_name()}: {error!r}")
