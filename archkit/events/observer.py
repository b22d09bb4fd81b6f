from dataclasses import dataclass
from typing import Any, Callable, List, Optional


@dataclass(eq=False)
class Connection:
    """One entry in a Signal's subscriber list. Compared by identity."""
    callback: Callable[..., Any]


class Signal:
    """
    A simple observer pattern implementation (Synchronous).
    Allows subscribers to connect to this signal and receive notifications.
    Equivalent to Qt's Signal or C#'s event.

    Connecting the same callback twice creates two independent entries,
    each removable on its own.
    """
    def __init__(self, name: str = "Signal"):
        self.name = name
        self._connections: List[Connection] = []

    def connect(self, callback: Callable) -> Connection:
        """Connect a callback function to this signal."""
        connection = Connection(callback)
        self._connections.append(connection)
        return connection

    def disconnect(self, callback: Callable) -> bool:
        """
        Disconnect a callback function from this signal.

        Removes the most recently connected entry for the callback.
        Returns False if the callback was not connected.
        """
        for index in range(len(self._connections) - 1, -1, -1):
            if self._connections[index].callback == callback:
                del self._connections[index]
                return True
        return False

    def remove(self, connection: Optional[Connection]) -> bool:
        """Remove exactly one connection entry."""
        for index, existing in enumerate(self._connections):
            if existing is connection:
                del self._connections[index]
                return True
        return False

    def emit(self, *args, **kwargs):
        """Broadcast arguments to all subscribers synchronously."""
        # Subscribers may connect or disconnect while we iterate.
        for connection in list(self._connections):
            connection.callback(*args, **kwargs)

    @property
    def callbacks(self) -> List[Callable]:
        return [c.callback for c in self._connections]

    def __len__(self) -> int:
        return len(self._connections)
