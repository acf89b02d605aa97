"""
Wait Coordinator - suspend until all or any triggerable sources fire.

Provides:
- await_all / await_any: coroutine entry points
- WaitCoordinator: binds waits to a scheduler
- Wait: an armed wait, awaitable, with early access to its handles
"""
from .errors import InvalidSourceKind
from .sources import SourceKind, classify_source
from .wait import Wait, WaitCoordinator, WaitMode, await_all, await_any

__all__ = [
    "await_all",
    "await_any",
    "Wait",
    "WaitCoordinator",
    "WaitMode",
    "SourceKind",
    "classify_source",
    "InvalidSourceKind",
]
