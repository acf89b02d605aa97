"""
Playback - timed resources that complete on their own.
"""
from .timed import PlaybackDestroyed, TimedPlayback, Timer

__all__ = ["TimedPlayback", "Timer", "PlaybackDestroyed"]
