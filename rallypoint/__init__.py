"""
Rallypoint - wait coordination and resource cleanup for cooperative hosts.

Provides:
- await_all / await_any: suspend a task until all / any sources fire
- RegistryNode: tree of cancelable handles with recursive cleanup
- cancel: uniform teardown for subscriptions, tasks, playbacks and callables
- CooperativeScheduler, Signal, TimedPlayback, Timer: host primitives

Usage:
    from rallypoint import RegistryNode, Signal, Timer, await_any, cancel

    registry = RegistryNode("round")
    handles = await await_any([round_ended, Timer(60.0)])
    for handle in filter(None, handles):
        registry.add(handle)
    registry.empty()
"""
from .handles import (
    CancelableHandle,
    HandleError,
    HandleKind,
    InvalidHandleKind,
    PlaybackHandle,
    ScheduledHandle,
    SuspendingTeardown,
    TeardownHandle,
    cancel,
    cancel_async,
    classify_handle,
)
from .core import BaseSystem, ConfigManager, Connection, Signal, setup_logging
from .scheduling import CooperativeScheduler
from .playback import PlaybackDestroyed, TimedPlayback, Timer
from .coordinator import InvalidSourceKind, Wait, WaitCoordinator, await_all, await_any
from .registry import RegistryNode, clean, clean_keys, empty, empty_keys

__all__ = [
    # Handles
    "CancelableHandle",
    "TeardownHandle",
    "ScheduledHandle",
    "PlaybackHandle",
    "HandleKind",
    "cancel",
    "cancel_async",
    "classify_handle",
    "HandleError",
    "InvalidHandleKind",
    "SuspendingTeardown",

    # Core
    "BaseSystem",
    "ConfigManager",
    "Signal",
    "Connection",
    "setup_logging",

    # Host primitives
    "CooperativeScheduler",
    "TimedPlayback",
    "Timer",
    "PlaybackDestroyed",

    # Coordinator
    "await_all",
    "await_any",
    "Wait",
    "WaitCoordinator",
    "InvalidSourceKind",

    # Registry
    "RegistryNode",
    "clean",
    "empty",
    "clean_keys",
    "empty_keys",
]
