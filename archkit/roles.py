"""
Module Roles and Capability Rules.

Registered modules come in three roles:
- Model: holds state; may get utilities and send events
- System: long-lived logic; may get models, systems and utilities,
  send and register events
- Utility: self-contained helper; gets no architecture reference

Controllers sit outside the architecture (UI, input handlers) and reach in
through ``get_architecture()``.

Each capability is a small mixin forwarding to the architecture, so a
class only gains the operations its role allows.
"""
import inspect
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Callable, Optional, Type, TypeVar, Union
from loguru import logger

from .errors import LifecycleError
from .events.unregister import IUnregister, UnregisterGroup

if TYPE_CHECKING:
    from .architecture import IArchitecture
    from .commands.base import ICommand, IQuery

T = TypeVar('T')
R = TypeVar('R')


# --- Rules ---

class CanGetArchitecture(ABC):
    @abstractmethod
    def get_architecture(self) -> 'IArchitecture':
        pass


class CanSetArchitecture(ABC):
    @abstractmethod
    def set_architecture(self, architecture: 'IArchitecture') -> None:
        pass


class CanGetModel(CanGetArchitecture):
    def get_model(self, model_type: Type[T]) -> Optional[T]:
        return self.get_architecture().get_model(model_type)


class CanGetSystem(CanGetArchitecture):
    def get_system(self, system_type: Type[T]) -> Optional[T]:
        return self.get_architecture().get_system(system_type)


class CanGetUtility(CanGetArchitecture):
    def get_utility(self, utility_type: Type[T]) -> Optional[T]:
        return self.get_architecture().get_utility(utility_type)


class CanSendEvent(CanGetArchitecture):
    def send_event(self, event: Any, event_type: Optional[type] = None) -> None:
        self.get_architecture().send_event(event, event_type)


class CanRegisterEvent(CanGetArchitecture):
    def register_event(self, event_type: Type[T], handler: Callable[[T], Any]) -> IUnregister:
        return self.get_architecture().register_event(event_type, handler)

    def unregister_event(self, event_type: type, handler: Callable) -> None:
        self.get_architecture().unregister_event(event_type, handler)


class CanSendCommand(CanGetArchitecture):
    def send_command(self, command: Union['ICommand', Type['ICommand']]) -> None:
        self.get_architecture().send_command(command)


class CanSendQuery(CanGetArchitecture):
    def send_query(self, query: 'IQuery[R]') -> R:
        return self.get_architecture().send_query(query)


# --- Roles ---

class IModel(CanSetArchitecture, CanGetUtility, CanSendEvent):
    @abstractmethod
    def init(self) -> None:
        pass


class ISystem(CanSetArchitecture, CanGetSystem, CanGetModel, CanGetUtility,
              CanSendEvent, CanRegisterEvent):
    @abstractmethod
    def init(self) -> None:
        pass


class IUtility(ABC):
    """Marker interface for utilities."""
    pass


class IController(CanSendCommand, CanSendQuery, CanGetSystem, CanGetModel,
                  CanRegisterEvent):
    """
    Entry point for code outside the architecture.

    Example:
        class ScorePanel(IController):
            def get_architecture(self):
                return GameArchitecture.interface()
    """
    pass


class _ArchitectureBound:
    _architecture: Optional['IArchitecture'] = None
    _initialized: bool = False

    def get_architecture(self) -> 'IArchitecture':
        return self._architecture

    def set_architecture(self, architecture: 'IArchitecture') -> None:
        self._architecture = architecture

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    def _mark_initialized(self) -> None:
        if self._initialized:
            raise LifecycleError(f"{self.__class__.__name__} is already initialized")
        self._initialized = True


class AbstractModel(_ArchitectureBound, IModel):
    """
    Base class for models.

    Example:
        class ScoreModel(AbstractModel):
            def on_init(self):
                self.score = BindableProperty(0)
    """

    def init(self) -> None:
        self._mark_initialized()
        self.on_init()

    @abstractmethod
    def on_init(self) -> None:
        pass


class AbstractSystem(_ArchitectureBound, ISystem):
    """
    Base class for systems.

    Supports automatic event subscription via @subscribe_event decorator:
        from archkit.decorators import subscribe_event

        class AchievementSystem(AbstractSystem):
            @subscribe_event(ScoreChanged)
            def on_score_changed(self, e):
                ...

    Decorated handlers are registered before ``on_init`` runs.
    """

    def init(self) -> None:
        self._mark_initialized()
        self._auto_subscribe_events()
        self.on_init()

    @abstractmethod
    def on_init(self) -> None:
        pass

    def unregister_events(self) -> None:
        """Release every handler registered through @subscribe_event."""
        group = self.__dict__.get('_event_group')
        if group is not None:
            group.unregister_all()

    def _auto_subscribe_events(self) -> None:
        """
        Scan for methods decorated with @subscribe_event and subscribe them.
        """
        group = self.__dict__.setdefault('_event_group', UnregisterGroup())
        for name, func in inspect.getmembers(type(self), predicate=inspect.isfunction):
            events = getattr(func, '_subscribed_events', None)
            if not events:
                continue
            method = getattr(self, name)
            for event_type in events:
                group.add(self.register_event(event_type, method))
                logger.debug(f"{self.__class__.__name__}.{name} auto-subscribed to: {event_type.__name__}")
