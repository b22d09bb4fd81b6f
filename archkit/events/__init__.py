"""
Event System - Typed Pub/Sub Messaging.

Provides:
- Signal: Ordered multicast list of callbacks (sync notifications)
- EventBus: Pub/sub keyed by event class, plus the process-wide EventBus.GLOBAL
- IUnregister: Handle returned by every subscription
- UnregisterGroup: Releases many handles at once

Usage:
    from archkit.events import EventBus

    handle = bus.register(ScoreChanged, on_score_changed)
    bus.send(ScoreChanged(10))
    handle.unregister()
"""
from .observer import Signal, Connection
from .bus import (
    EventBus,
    TypeEventSystem,
    IOnEvent,
    register_global_event,
    unregister_global_event,
)
from .unregister import (
    IUnregister,
    EventUnregister,
    BindablePropertyUnregister,
    CustomUnregister,
    UnregisterGroup,
    unregister_when_collected,
)


__all__ = [
    "Signal",
    "Connection",
    "EventBus",
    "TypeEventSystem",
    "IOnEvent",
    "register_global_event",
    "unregister_global_event",
    "IUnregister",
    "EventUnregister",
    "BindablePropertyUnregister",
    "CustomUnregister",
    "UnregisterGroup",
    "unregister_when_collected",
]
