"""
Type-indexed instance registry.

Each type key maps to exactly one instance; registering again under the
same key replaces the previous binding.
"""
from typing import Any, Dict, Iterator, Optional, Type, TypeVar
from loguru import logger

from .errors import TypeMismatchError

T = TypeVar('T')


def type_key(obj_or_type: Any) -> type:
    """Return the registry key for a class or an instance of it."""
    if isinstance(obj_or_type, type):
        return obj_or_type
    return type(obj_or_type)


class TypeRegistry:
    """
    Maps a type to the single instance registered for it.

    Usage:
        registry = TypeRegistry()
        registry.register(CounterModel())
        model = registry.get(CounterModel)

    Instances may also be registered under an interface so that lookups go
    through the abstraction:

        registry.register(SqlStorage(), key=IStorage)
        storage = registry.get(IStorage)
    """

    def __init__(self):
        self._instances: Dict[type, Any] = {}

    def register(self, instance: Any, key: Optional[type] = None) -> None:
        """
        Store or replace the binding for a type.

        Args:
            instance: Object to register
            key: Type to register under (defaults to the instance's class)
        """
        key = key if key is not None else type_key(instance)
        if key in self._instances:
            logger.debug(f"Replacing registration for {key.__name__}")
        self._instances[key] = instance

    def get(self, key: Type[T]) -> Optional[T]:
        """
        Look up the instance registered under a type.

        Returns:
            The instance, or None if nothing is registered

        Raises:
            TypeMismatchError: If the stored instance is not a ``key``
        """
        instance = self._instances.get(key)
        if instance is None:
            return None
        if isinstance(key, type) and not isinstance(instance, key):
            raise TypeMismatchError(key, instance)
        return instance

    def keys(self) -> Iterator[type]:
        return iter(list(self._instances))

    def __contains__(self, key: type) -> bool:
        return key in self._instances

    def __len__(self) -> int:
        return len(self._instances)
