"""
Decorator Utilities for archkit.
"""
from typing import Callable, List


def subscribe_event(*event_types: type) -> Callable:
    """
    Decorator to mark a system method as an event handler.

    The method is registered on the architecture's event bus when the
    system initializes.

    Args:
        *event_types: Event classes to subscribe to

    Usage:
        class ScoreSystem(AbstractSystem):
            @subscribe_event(EnemyKilled)
            def on_enemy_killed(self, e):
                ...
    """
    if not event_types:
        raise ValueError("subscribe_event needs at least one event type")

    def decorator(func):
        events: List[type] = list(getattr(func, '_subscribed_events', []))
        events.extend(event_types)
        func._subscribed_events = events
        return func
    return decorator
