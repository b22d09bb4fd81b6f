"""
archkit - In-process application architecture.

Provides:
- Architecture: Lazily created application graph with staged initialization
- TypeRegistry: One instance per type, last registration wins
- EventBus: Pub/sub keyed by event class
- BindableProperty: Observable value with change suppression
- Roles: AbstractModel, AbstractSystem, IUtility, IController
- Commands and queries: AbstractCommand, AbstractQuery

Usage:
    from archkit import Architecture, AbstractModel, BindableProperty

    class CounterModel(AbstractModel):
        def on_init(self):
            self.count = BindableProperty(0)

    class CounterApp(Architecture):
        def init(self):
            self.register_model(CounterModel())

    model = CounterApp.interface().get_model(CounterModel)
"""
from .errors import ArchkitError, TypeMismatchError, LifecycleError
from .registry import TypeRegistry, type_key
from .bindable import BindableProperty
from .lifecycle import LifecycleManager, ArchitectureState
from .config import (
    ConfigManager,
    ArchkitConfig,
    GeneralSettings,
    LoggingSettings,
    EventSettings,
)
from .logging import setup_logging, setup_logging_from_config
from .events import (
    Signal,
    EventBus,
    TypeEventSystem,
    IOnEvent,
    register_global_event,
    unregister_global_event,
    IUnregister,
    CustomUnregister,
    UnregisterGroup,
    unregister_when_collected,
)
from .commands import ICommand, AbstractCommand, IQuery, AbstractQuery
from .roles import (
    IModel,
    ISystem,
    IUtility,
    IController,
    AbstractModel,
    AbstractSystem,
    CanGetModel,
    CanGetSystem,
    CanGetUtility,
    CanSendEvent,
    CanRegisterEvent,
    CanSendCommand,
    CanSendQuery,
)
from .architecture import IArchitecture, Architecture
from .decorators import subscribe_event

__all__ = [
    # Errors
    "ArchkitError",
    "TypeMismatchError",
    "LifecycleError",

    # Core infrastructure
    "Architecture",
    "IArchitecture",
    "TypeRegistry",
    "type_key",
    "BindableProperty",

    # Lifecycle
    "LifecycleManager",
    "ArchitectureState",

    # Configuration
    "ConfigManager",
    "ArchkitConfig",
    "GeneralSettings",
    "LoggingSettings",
    "EventSettings",
    "setup_logging",
    "setup_logging_from_config",

    # Events
    "Signal",
    "EventBus",
    "TypeEventSystem",
    "IOnEvent",
    "register_global_event",
    "unregister_global_event",
    "IUnregister",
    "CustomUnregister",
    "UnregisterGroup",
    "unregister_when_collected",

    # Commands
    "ICommand",
    "AbstractCommand",
    "IQuery",
    "AbstractQuery",

    # Roles
    "IModel",
    "ISystem",
    "IUtility",
    "IController",
    "AbstractModel",
    "AbstractSystem",
    "CanGetModel",
    "CanGetSystem",
    "CanGetUtility",
    "CanSendEvent",
    "CanRegisterEvent",
    "CanSendCommand",
    "CanSendQuery",

    # Decorators
    "subscribe_event",
]
