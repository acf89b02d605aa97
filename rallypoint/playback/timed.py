"""
Timed playbacks - resources with a finite duration and a completion event.

A TimedPlayback stands for anything the host plays over time (a tween, an
animation, a sound). Playing it arms a loop timer for the remaining
duration; `completed` fires when that timer runs out.
"""
from typing import Optional
from loguru import logger

from rallypoint.core.events import Signal
from rallypoint.handles.kinds import ScheduledHandle
from rallypoint.scheduling import CooperativeScheduler


class PlaybackDestroyed(RuntimeError):
    """Raised when playing a playback that has been destroyed."""
    pass


class TimedPlayback:
    """
    Playback with a fixed duration.

    pause() keeps the elapsed time, so play() resumes where it stopped.
    Playing again after completion restarts from zero. destroy() is final.
    """

    def __init__(self, duration: float, *, scheduler: Optional[CooperativeScheduler] = None,
                 name: str = "TimedPlayback"):
        if duration < 0:
            raise ValueError(f"Duration must be non-negative, got {duration}")
        self.duration = duration
        self.name = name
        self.completed = Signal(f"{name}.completed")
        self._scheduler = scheduler or CooperativeScheduler()
        self._elapsed = 0.0
        self._started_at: Optional[float] = None
        self._timer: Optional[ScheduledHandle] = None
        self._finished = False
        self._destroyed = False

    @property
    def is_playing(self) -> bool:
        return self._timer is not None

    @property
    def finished(self) -> bool:
        return self._finished

    @property
    def destroyed(self) -> bool:
        return self._destroyed

    @property
    def elapsed(self) -> float:
        if self._started_at is None:
            return self._elapsed
        return self._elapsed + (self._scheduler.loop.time() - self._started_at)

    def play(self) -> None:
        if self._destroyed:
            raise PlaybackDestroyed(f"{self.name} has been destroyed")
        if self.is_playing:
            return
        if self._finished:
            self._elapsed = 0.0
            self._finished = False

        self._started_at = self._scheduler.loop.time()
        self._timer = self._scheduler.delay(self.duration - self._elapsed, self._complete, name=self.name)
        logger.trace(f"{self.name} playing ({self.duration - self._elapsed:.3f}s left)")

    def pause(self) -> None:
        if not self.is_playing:
            return
        self._elapsed = self.elapsed
        self._started_at = None
        self._timer.cancel()
        self._timer = None

    def destroy(self) -> None:
        if self._destroyed:
            return
        self.pause()
        self._destroyed = True
        self.completed.disconnect_all()

    def _complete(self) -> None:
        self._timer = None
        self._started_at = None
        self._elapsed = self.duration
        self._finished = True
        logger.trace(f"{self.name} completed")
        self.completed.emit(self)

    def __repr__(self):
        state = "destroyed" if self._destroyed else "playing" if self.is_playing else "idle"
        return f"<{type(self).__name__} {self.name} {self.duration}s {state}>"


class Timer(TimedPlayback):
    """A playback with nothing to play: fires `completed` after `seconds`."""

    def __init__(self, seconds: float, *, scheduler: Optional[CooperativeScheduler] = None,
                 name: str = "Timer"):
        super().__init__(seconds, scheduler=scheduler, name=name)
