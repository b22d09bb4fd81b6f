"""
Architecture Lifecycle State Machine.

An architecture moves UNINITIALIZED -> INITIALIZING -> READY exactly once
and never goes back.
"""
from enum import Enum
from loguru import logger

from .errors import LifecycleError
from .events.observer import Signal


class ArchitectureState(Enum):
    """Architecture lifecycle states."""
    UNINITIALIZED = "uninitialized"
    INITIALIZING = "initializing"
    READY = "ready"


class LifecycleManager:
    """
    Tracks the lifecycle state of one architecture.

    Usage:
        lifecycle = LifecycleManager("GameArchitecture")
        lifecycle.on_state_changed.connect(on_changed)
        lifecycle.transition_to(ArchitectureState.INITIALIZING)
    """

    # Valid state transitions
    VALID_TRANSITIONS = {
        ArchitectureState.UNINITIALIZED: [ArchitectureState.INITIALIZING],
        ArchitectureState.INITIALIZING: [ArchitectureState.READY],
        ArchitectureState.READY: [],
    }

    def __init__(self, name: str = "Architecture"):
        self.name = name
        self._state = ArchitectureState.UNINITIALIZED
        self.on_state_changed = Signal(f"{name}.StateChanged")

    @property
    def state(self) -> ArchitectureState:
        """Get current state."""
        return self._state

    def can_transition(self, target: ArchitectureState) -> bool:
        return target in self.VALID_TRANSITIONS.get(self._state, [])

    def transition_to(self, target: ArchitectureState) -> None:
        """
        Transition to target state.

        Raises:
            LifecycleError: If transition is invalid
        """
        if not self.can_transition(target):
            raise LifecycleError(
                f"{self.name}: invalid transition {self._state.value} -> {target.value}"
            )

        old_state = self._state
        self._state = target
        logger.info(f"{self.name}: {old_state.value} -> {target.value}")
        self.on_state_changed.emit(old_state, target)

    @property
    def is_uninitialized(self) -> bool:
        return self._state == ArchitectureState.UNINITIALIZED

    @property
    def is_initializing(self) -> bool:
        return self._state == ArchitectureState.INITIALIZING

    @property
    def is_ready(self) -> bool:
        return self._state == ArchitectureState.READY
