"""
Cancelable Handles - uniform teardown over heterogeneous live resources.

Provides:
- cancel / cancel_async: release any supported value exactly once
- classify_handle: resolve which variant a value is
- CancelableHandle and its concrete variants

Usage:
    from rallypoint.handles import cancel, TeardownHandle

    handle = TeardownHandle(lambda: print("released"))
    cancel(handle)
    cancel(handle)  # no-op
"""
from .base import CancelableHandle
from .cancel import HandleKind, cancel, cancel_async, classify_handle, is_cancelable
from .errors import HandleError, InvalidHandleKind, SuspendingTeardown
from .kinds import PlaybackHandle, ScheduledHandle, TeardownHandle

__all__ = [
    "CancelableHandle",
    "TeardownHandle",
    "ScheduledHandle",
    "PlaybackHandle",
    "HandleKind",
    "cancel",
    "cancel_async",
    "classify_handle",
    "is_cancelable",
    "HandleError",
    "InvalidHandleKind",
    "SuspendingTeardown",
]
