"""
EventBus - Type-keyed Event System

Events are plain objects; subscribers register for an event class and
receive every instance sent under that class, in registration order.
"""
from abc import ABC, abstractmethod
from typing import Any, Callable, ClassVar, Dict, Generic, Optional, Type, TypeVar
from loguru import logger

from .observer import Connection, Signal
from .unregister import EventUnregister, IUnregister

E = TypeVar('E')


class EventBus:
    """
    Type-keyed pub/sub.

    Usage:
        # Subscribe
        handle = event_bus.register(ScoreChanged, on_score_changed)

        # Publish an instance, or a class to send a default instance
        event_bus.send(ScoreChanged(10))
        event_bus.send(GameStarted)

        # Unsubscribe
        handle.unregister()

    Handler exceptions propagate to the sender. Not thread-safe: all calls
    are expected from one thread.
    """

    GLOBAL: ClassVar['EventBus']

    def __init__(self, name: str = "EventBus", trace: bool = False):
        self.name = name
        self.trace = trace
        self._subscribers: Dict[type, Signal] = {}

    def send(self, event: Any, event_type: Optional[type] = None) -> None:
        """
        Send an event to every handler registered for its type.

        Args:
            event: Event instance, or an event class to default-construct
            event_type: Key to dispatch under (defaults to the event's class)
        """
        if isinstance(event, type):
            event_type = event_type or event
            event = event()
        key = event_type if event_type is not None else type(event)

        signal = self._subscribers.get(key)
        if signal is None:
            if self.trace:
                logger.trace(f"{self.name}: no subscribers for {key.__name__}")
            return

        if self.trace:
            logger.trace(f"{self.name}: {key.__name__} -> {len(signal)} handler(s)")
        signal.emit(event)

    def register(self, event_type: Type[E], handler: Callable[[E], Any]) -> IUnregister:
        """
        Subscribe a handler to an event type.

        Args:
            event_type: Event class to listen for
            handler: Callable receiving the event instance

        Returns:
            Handle that removes exactly this subscription
        """
        signal = self._subscribers.get(event_type)
        if signal is None:
            signal = Signal(event_type.__name__)
            self._subscribers[event_type] = signal

        connection = signal.connect(handler)
        logger.debug(f"{self.name}: subscribed {_name_of(handler)} to {event_type.__name__}")
        return EventUnregister(self, event_type, connection)

    def unregister(self, event_type: type, handler: Callable) -> None:
        """
        Remove a handler from an event type.

        Removes the most recent subscription of ``handler``; unknown handlers
        are ignored.
        """
        signal = self._subscribers.get(event_type)
        if signal is not None and signal.disconnect(handler):
            logger.debug(f"{self.name}: unsubscribed {_name_of(handler)} from {event_type.__name__}")

    def remove_connection(self, event_type: type, connection: Connection) -> None:
        """Remove one exact subscription entry (used by EventUnregister)."""
        signal = self._subscribers.get(event_type)
        if signal is not None:
            signal.remove(connection)

    def subscriber_count(self, event_type: type) -> int:
        signal = self._subscribers.get(event_type)
        return len(signal) if signal is not None else 0


# Process-wide bus for cross-cutting events not tied to one architecture
EventBus.GLOBAL = EventBus("GlobalEventBus")

TypeEventSystem = EventBus


class IOnEvent(ABC, Generic[E]):
    """Object that handles one event type through its ``on_event`` method."""

    @abstractmethod
    def on_event(self, e: E) -> None:
        pass


def register_global_event(listener: IOnEvent, event_type: type) -> IUnregister:
    """Subscribe ``listener.on_event`` to ``event_type`` on the global bus."""
    return EventBus.GLOBAL.register(event_type, listener.on_event)


def unregister_global_event(listener: IOnEvent, event_type: type) -> None:
    EventBus.GLOBAL.unregister(event_type, listener.on_event)


def _name_of(handler: Callable) -> str:
    return getattr(handler, '__qualname__', None) or repr(handler)
