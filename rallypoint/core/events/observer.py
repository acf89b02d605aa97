import asyncio
from typing import Any, Callable, List, Tuple
from loguru import logger

from rallypoint.handles.base import CancelableHandle


class Connection(CancelableHandle):
    """
    Live subscription to a Signal.

    Returned by Signal.connect() and Signal.once(). Cancelling (or
    disconnecting) removes the callback from the signal; both are safe
    to call any number of times.
    """

    def __init__(self, signal: 'Signal', callback: Callable, once: bool = False):
        super().__init__()
        self.signal = signal
        self.callback = callback
        self.once = once

    @property
    def connected(self) -> bool:
        return not self._cancelled

    def disconnect(self) -> None:
        """Remove this subscription from its signal."""
        self.cancel()

    def _release(self) -> None:
        self.signal._remove(self)

    def _deliver(self, args: Tuple, kwargs: dict) -> None:
        if self._cancelled:
            return
        if self.once:
            self.cancel()
        self.callback(*args, **kwargs)

    def __repr__(self):
        state = "connected" if self.connected else "disconnected"
        return f"<Connection {self.signal.name}:{getattr(self.callback, '__name__', self.callback)} {state}>"


class Signal:
    """
    A simple observer pattern implementation (Synchronous).
    Allows subscribers to connect to this signal and receive notifications.
    Equivalent to Qt's Signal or C#'s event.

    Every subscription is a Connection handle, so it can be stored in a
    RegistryNode or cancelled directly.
    """
    def __init__(self, name: str = "Signal"):
        self.name = name
        self._connections: List[Connection] = []

    @property
    def subscriber_count(self) -> int:
        return len(self._connections)

    def connect(self, callback: Callable) -> Connection:
        """Connect a callback function to this signal."""
        connection = Connection(self, callback)
        self._connections.append(connection)
        return connection

    def once(self, callback: Callable) -> Connection:
        """
        Connect a callback that fires on the next emission only.

        The connection is removed before the callback runs, so a callback
        that emits the same signal again is not re-entered.
        """
        connection = Connection(self, callback, once=True)
        self._connections.append(connection)
        return connection

    def disconnect(self, callback: Callable) -> None:
        """Disconnect every connection of a callback function from this signal."""
        for connection in list(self._connections):
            if connection.callback == callback:
                connection.disconnect()

    def disconnect_all(self) -> None:
        for connection in list(self._connections):
            connection.disconnect()

    def emit(self, *args, **kwargs):
        """Broadcast arguments to all subscribers synchronously."""
        for connection in list(self._connections):
            try:
                connection._deliver(args, kwargs)
            except Exception as e:
                logger.error(f"Signal '{self.name}' error in subscriber '{connection.callback}': {e}")

    async def wait(self) -> Any:
        """
        Suspend until the next emission.

        Returns:
            The single emitted argument, a tuple when several were emitted,
            or None for a bare emit(). Keyword arguments come back as a
            dict, appended to the positional ones when there are both.
        """
        future = asyncio.get_running_loop().create_future()

        def _resolve(*args, **kwargs):
            if not future.done():
                future.set_result((args, kwargs))

        connection = self.once(_resolve)
        try:
            args, kwargs = await future
        finally:
            connection.disconnect()
        if kwargs:
            return (*args, kwargs) if args else kwargs
        if not args:
            return None
        return args[0] if len(args) == 1 else args

    def _remove(self, connection: Connection) -> None:
        if connection in self._connections:
            self._connections.remove(connection)

    def __repr__(self):
        return f"<Signal {self.name} subscribers={len(self._connections)}>"
