from abc import ABC, abstractmethod


class CancelableHandle(ABC):
    """
    Opaque token for a live side effect that can be torn down once.

    Subclasses implement _release(); cancel() guarantees it runs at most
    once. Handles are context managers: leaving the block cancels them.

    Usage:
        with TeardownHandle(close_socket):
            ...  # close_socket() runs on exit
    """

    def __init__(self):
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        """Release the underlying resource. Further calls do nothing."""
        if self._cancelled:
            return
        self._cancelled = True
        self._release()

    async def cancel_async(self) -> None:
        """Awaitable cancel; variants whose teardown suspends override this."""
        self.cancel()

    @abstractmethod
    def _release(self) -> None:
        """Variant-specific teardown."""

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.cancel()
