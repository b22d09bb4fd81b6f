"""
Bindable Property.

Holds a value and notifies subscribers when it changes.

Usage:
    score = BindableProperty(0)
    handle = score.register(lambda value: print(f"score: {value}"))

    score.value = 10   # prints "score: 10"
    score.value = 10   # unchanged, no notification
    handle.unregister()
"""
from typing import Any, Callable, Generic, Optional, TypeVar

from .events.observer import Connection, Signal
from .events.unregister import BindablePropertyUnregister, IUnregister

T = TypeVar('T')


class BindableProperty(Generic[T]):
    """
    Observable value cell.

    Subscribers are called with the new value, in registration order, only
    when an assignment changes the value under ``==``. Assigning ``None``
    over ``None`` is never a change.

    Args:
        default: Initial value for the property.
    """

    def __init__(self, default: Optional[T] = None):
        self._value = default
        self._on_value_changed = Signal("BindableProperty")

    @property
    def value(self) -> T:
        return self._value

    @value.setter
    def value(self, new_value: T) -> None:
        if new_value is None and self._value is None:
            return
        if new_value == self._value:
            return

        self._value = new_value
        self._on_value_changed.emit(new_value)

    def register(self, on_value_changed: Callable[[T], Any]) -> IUnregister:
        """Subscribe to future changes. Does not fire immediately."""
        connection = self._on_value_changed.connect(on_value_changed)
        return BindablePropertyUnregister(self, connection)

    def register_with_init_value(self, on_value_changed: Callable[[T], Any]) -> IUnregister:
        """Call the handler with the current value, then subscribe to changes."""
        on_value_changed(self._value)
        return self.register(on_value_changed)

    register_with_initial = register_with_init_value

    def unregister(self, on_value_changed: Callable[[T], Any]) -> None:
        self._on_value_changed.disconnect(on_value_changed)

    def remove_connection(self, connection: Connection) -> None:
        self._on_value_changed.remove(connection)

    @property
    def subscriber_count(self) -> int:
        return len(self._on_value_changed)

    def __repr__(self) -> str:
        return f"BindableProperty({self._value!r})"
