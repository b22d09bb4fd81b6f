"""
Architecture - the application graph coordinator.

An Architecture subclass owns a type registry and an event bus. Its
``init`` hook registers the application's models, systems and utilities;
models and systems registered before the architecture is ready are staged
and initialized together once ``init`` and the register patch have run.

Usage:
    class GameArchitecture(Architecture):
        def init(self):
            self.register_model(ScoreModel())
            self.register_system(AchievementSystem())
            self.register_utility(JsonStorage(), key=IStorage)

    game = GameArchitecture.interface()
    game.send_command(AddScoreCommand(10))
    total = game.send_query(TotalScoreQuery())
"""
from abc import ABC, abstractmethod
from typing import Any, Callable, ClassVar, List, Optional, Type, TypeVar, Union
from loguru import logger

from .commands.base import ICommand, IQuery
from .config import ConfigManager
from .events.bus import EventBus
from .events.unregister import IUnregister
from .lifecycle import ArchitectureState, LifecycleManager
from .registry import TypeRegistry
from .roles import IModel, ISystem, IUtility

T = TypeVar('T')
R = TypeVar('R')


class IArchitecture(ABC):
    """Operations modules, commands and controllers may call."""

    @abstractmethod
    def register_model(self, model: IModel, key: Optional[type] = None) -> None: ...

    @abstractmethod
    def register_system(self, system: ISystem, key: Optional[type] = None) -> None: ...

    @abstractmethod
    def register_utility(self, utility: IUtility, key: Optional[type] = None) -> None: ...

    @abstractmethod
    def get_model(self, model_type: Type[T]) -> Optional[T]: ...

    @abstractmethod
    def get_system(self, system_type: Type[T]) -> Optional[T]: ...

    @abstractmethod
    def get_utility(self, utility_type: Type[T]) -> Optional[T]: ...

    @abstractmethod
    def send_command(self, command: Union[ICommand, Type[ICommand]]) -> None: ...

    @abstractmethod
    def send_query(self, query: IQuery[R]) -> R: ...

    @abstractmethod
    def send_event(self, event: Any, event_type: Optional[type] = None) -> None: ...

    @abstractmethod
    def register_event(self, event_type: Type[T], handler: Callable[[T], Any]) -> IUnregister: ...

    @abstractmethod
    def unregister_event(self, event_type: type, handler: Callable) -> None: ...


def _no_patch(architecture: 'Architecture') -> None:
    pass


class Architecture(IArchitecture):
    """
    Base class for application architectures.

    Each subclass is a lazily created singleton reached through
    ``interface()``. The first call constructs the instance, runs ``init``,
    calls ``on_register_patch`` with the fresh instance, initializes staged
    models then staged systems in registration order, and marks the
    architecture ready. Registrations after that initialize immediately.

    Exceptions raised during that bootstrap propagate to the caller. The
    half-built instance is kept and the bootstrap is never re-run.

    Not thread-safe: use from a single thread.
    """

    # Config file for this architecture (JSON or TOML); None uses defaults
    config_path: ClassVar[Optional[str]] = None

    # Replace per class to patch registrations (e.g. with test doubles)
    # after init() and before staged modules initialize.
    on_register_patch: ClassVar[Callable[['Architecture'], None]] = staticmethod(_no_patch)

    def __init__(self):
        name = type(self).__name__
        self.config = ConfigManager(self.config_path)
        self.lifecycle = LifecycleManager(name)
        self._container = TypeRegistry()
        self._event_bus = EventBus(f"{name}.EventBus", trace=self.config.data.events.trace_dispatch)
        self._models: List[IModel] = []
        self._systems: List[ISystem] = []

        self.config.on_changed.connect(self._on_config_change)

    @abstractmethod
    def init(self) -> None:
        """Register the application's models, systems and utilities."""
        pass

    # --- Singleton ---

    @classmethod
    def interface(cls: Type[T]) -> T:
        """Return this class's architecture, building it on first access."""
        architecture = cls.__dict__.get('_instance')
        if architecture is None:
            architecture = cls._make_sure_architecture()
        return architecture

    @classmethod
    def _make_sure_architecture(cls) -> 'Architecture':
        architecture = cls()
        # Stored before bootstrap so a failed bootstrap is not retried
        cls._instance = architecture
        architecture._bootstrap()
        return architecture

    def _bootstrap(self) -> None:
        name = type(self).__name__
        self.lifecycle.transition_to(ArchitectureState.INITIALIZING)

        self.init()
        type(self).on_register_patch(self)

        logger.debug(f"{name}: initializing {len(self._models)} model(s), {len(self._systems)} system(s)")
        # Modules may register further modules from their own init
        while self._models or self._systems:
            while self._models:
                self._models.pop(0).init()
            while self._systems:
                self._systems.pop(0).init()

        self.lifecycle.transition_to(ArchitectureState.READY)

    @classmethod
    def register(cls, instance: Any, key: Optional[type] = None) -> None:
        """Register any instance on this class's architecture."""
        cls.interface()._container.register(instance, key)

    @classmethod
    def get(cls, key: Type[T]) -> Optional[T]:
        """Look up any registered instance on this class's architecture."""
        return cls.interface()._container.get(key)

    @property
    def is_ready(self) -> bool:
        return self.lifecycle.is_ready

    @property
    def event_bus(self) -> EventBus:
        return self._event_bus

    # --- Models, Systems, Utilities ---

    def register_model(self, model: IModel, key: Optional[type] = None) -> None:
        """
        Register a model and hand it this architecture.

        Args:
            model: Model instance
            key: Type to register under (defaults to the model's class)
        """
        if not isinstance(model, IModel):
            raise TypeError(f"{type(model).__name__} is not an IModel")
        model.set_architecture(self)
        self._container.register(model, key)
        logger.debug(f"Registered model {type(model).__name__}")

        self._stage_or_init(model, self._models)

    def register_system(self, system: ISystem, key: Optional[type] = None) -> None:
        """
        Register a system and hand it this architecture.

        Args:
            system: System instance
            key: Type to register under (defaults to the system's class)
        """
        if not isinstance(system, ISystem):
            raise TypeError(f"{type(system).__name__} is not an ISystem")
        system.set_architecture(self)
        self._container.register(system, key)
        logger.debug(f"Registered system {type(system).__name__}")

        self._stage_or_init(system, self._systems)

    def _stage_or_init(self, module, staged: list) -> None:
        # The same instance may be registered more than once; it initializes once.
        if getattr(module, "is_initialized", False):
            return
        if self.is_ready:
            module.init()
        elif not any(queued is module for queued in staged):
            staged.append(module)

    def register_utility(self, utility: IUtility, key: Optional[type] = None) -> None:
        """Register a utility. Utilities get no architecture reference."""
        if not isinstance(utility, IUtility):
            raise TypeError(f"{type(utility).__name__} is not an IUtility")
        self._container.register(utility, key)
        logger.debug(f"Registered utility {type(utility).__name__}")

    def get_model(self, model_type: Type[T]) -> Optional[T]:
        return self._container.get(model_type)

    def get_system(self, system_type: Type[T]) -> Optional[T]:
        return self._container.get(system_type)

    def get_utility(self, utility_type: Type[T]) -> Optional[T]:
        return self._container.get(utility_type)

    # --- Commands & Queries ---

    def send_command(self, command: Union[ICommand, Type[ICommand]]) -> None:
        """
        Execute a command against this architecture.

        Args:
            command: Command instance, or a command class to default-construct
        """
        if isinstance(command, type):
            command = command()
        if not isinstance(command, ICommand):
            raise TypeError(f"{type(command).__name__} is not an ICommand")
        command.execute(self)

    def send_query(self, query: IQuery[R]) -> R:
        """Run a query against this architecture and return its result."""
        if not isinstance(query, IQuery):
            raise TypeError(f"{type(query).__name__} is not an IQuery")
        return query.do(self)

    # --- Events ---

    def send_event(self, event: Any, event_type: Optional[type] = None) -> None:
        self._event_bus.send(event, event_type)

    def register_event(self, event_type: Type[T], handler: Callable[[T], Any]) -> IUnregister:
        return self._event_bus.register(event_type, handler)

    def unregister_event(self, event_type: type, handler: Callable) -> None:
        self._event_bus.unregister(event_type, handler)

    def _on_config_change(self, section: str, key: str, value: Any) -> None:
        if section == "events" and key == "trace_dispatch":
            self._event_bus.trace = value
