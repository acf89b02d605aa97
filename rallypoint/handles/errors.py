"""
Handle errors.

Raised by cancel() and by registry operations that validate their values.
"""


class HandleError(Exception):
    """Base class for cancelable handle failures."""
    pass


class InvalidHandleKind(HandleError, TypeError):
    """Raised when a value matches none of the cancelable handle variants."""

    def __init__(self, value):
        self.value = value
        super().__init__(
            f"Cannot cancel value of type {type(value).__name__}: "
            f"expected a subscription, scheduled execution, playback or teardown callable"
        )


class SuspendingTeardown(HandleError):
    """Raised when a synchronous cancel meets a teardown that must be awaited."""

    def __init__(self, teardown):
        self.teardown = teardown
        name = getattr(teardown, "__qualname__", repr(teardown))
        super().__init__(
            f"Teardown '{name}' suspends; use cancel_async() or the async registry operations"
        )
