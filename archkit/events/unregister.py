"""
Unregistration handles.

Every subscription made through an EventBus or a BindableProperty returns an
IUnregister. Handles can be released one by one, collected into an
UnregisterGroup, or tied to the lifetime of an owner object.
"""
import weakref
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Callable, Dict, Optional

from loguru import logger

from .observer import Connection

if TYPE_CHECKING:
    from .bus import EventBus
    from ..bindable import BindableProperty


class IUnregister(ABC):
    """Cancels exactly one prior subscription."""

    @abstractmethod
    def unregister(self) -> None:
        """Remove the subscription. Calling it again is a no-op."""
        pass

    def add_to(self, group: 'UnregisterGroup') -> 'IUnregister':
        """Hand this handle to a group and return it for chaining."""
        group.add(self)
        return self

    def unregister_when_collected(self, owner: Any) -> 'IUnregister':
        """Release this handle once ``owner`` is garbage collected."""
        return unregister_when_collected(self, owner)


class EventUnregister(IUnregister):
    """Handle for a subscription on an EventBus."""

    def __init__(self, bus: 'EventBus', event_type: type, connection: Connection):
        self.bus: Optional['EventBus'] = bus
        self.event_type: Optional[type] = event_type
        self.connection: Optional[Connection] = connection

    def unregister(self) -> None:
        if self.bus is None:
            return
        self.bus.remove_connection(self.event_type, self.connection)
        self.bus = None
        self.event_type = None
        self.connection = None


class BindablePropertyUnregister(IUnregister):
    """Handle for a change subscription on a BindableProperty."""

    def __init__(self, bindable_property: 'BindableProperty', connection: Connection):
        self.bindable_property: Optional['BindableProperty'] = bindable_property
        self.connection: Optional[Connection] = connection

    def unregister(self) -> None:
        if self.bindable_property is None:
            return
        self.bindable_property.remove_connection(self.connection)
        self.bindable_property = None
        self.connection = None


class CustomUnregister(IUnregister):
    """Wraps an arbitrary cleanup callable as a handle."""

    def __init__(self, on_unregister: Callable[[], None]):
        self._on_unregister: Optional[Callable[[], None]] = on_unregister

    def unregister(self) -> None:
        callback, self._on_unregister = self._on_unregister, None
        if callback is not None:
            callback()


class UnregisterGroup:
    """
    Collects handles so they can be released together.

    Usage:
        group = UnregisterGroup()
        bus.register(Scored, on_scored).add_to(group)
        score.register(on_score).add_to(group)
        ...
        group.unregister_all()

    Also usable as a context manager; handles are released on exit.
    """

    def __init__(self):
        # dict keeps insertion order; values unused
        self._handles: Dict[IUnregister, None] = {}

    def add(self, handle: IUnregister) -> IUnregister:
        self._handles[handle] = None
        return handle

    def unregister_all(self) -> None:
        handles = list(self._handles)
        self._handles.clear()
        for handle in handles:
            handle.unregister()

    def __len__(self) -> int:
        return len(self._handles)

    def __enter__(self) -> 'UnregisterGroup':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.unregister_all()


# owner id -> handles released when that owner is collected
_owner_groups: Dict[int, UnregisterGroup] = {}


def _release_owner(owner_id: int, owner_name: str) -> None:
    group = _owner_groups.pop(owner_id, None)
    if group is not None:
        logger.debug(f"{owner_name} collected, releasing {len(group)} subscription(s)")
        group.unregister_all()


class _WeakBoundMethod:
    """Calls a bound method through a weak reference to its object."""

    def __init__(self, method: Callable):
        self._ref = weakref.WeakMethod(method)

    def __call__(self, *args, **kwargs):
        method = self._ref()
        if method is not None:
            return method(*args, **kwargs)

    def __eq__(self, other):
        method = self._ref()
        return method is not None and (other is self or other == method)

    __hash__ = object.__hash__


def _weaken_owner_callback(handle: IUnregister, owner: Any) -> None:
    connection = getattr(handle, "connection", None)
    if connection is None:
        return
    callback = connection.callback
    if getattr(callback, "__self__", None) is owner:
        connection.callback = _WeakBoundMethod(callback)


def unregister_when_collected(handle: IUnregister, owner: Any) -> IUnregister:
    """
    Tie a handle to the lifetime of ``owner``.

    When ``owner`` is garbage collected, every handle tied to it is
    released. ``owner`` must support weak references.

    A handler that is a bound method of ``owner`` is then held weakly, so
    the subscription does not keep ``owner`` alive. Other callbacks that
    reference ``owner`` (lambdas, closures) still do; release those with
    an UnregisterGroup.

    Returns:
        The handle, for chaining
    """
    owner_id = id(owner)
    group = _owner_groups.get(owner_id)
    if group is None:
        group = UnregisterGroup()
        weakref.finalize(owner, _release_owner, owner_id, type(owner).__name__)
        _owner_groups[owner_id] = group
    _weaken_owner_callback(handle, owner)
    group.add(handle)
    return handle
