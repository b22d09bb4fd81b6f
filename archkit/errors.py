"""
Exception types raised by archkit.

Lookups that miss return None; only misuse raises.
"""


class ArchkitError(Exception):
    """Base class for framework errors."""
    pass


class TypeMismatchError(ArchkitError, TypeError):
    """Raised when a registered instance does not match the requested type."""

    def __init__(self, key: type, instance: object):
        self.key = key
        self.instance = instance
        super().__init__(
            f"Instance of {type(instance).__name__} registered under "
            f"{getattr(key, '__name__', key)} is not a {getattr(key, '__name__', key)}"
        )


class LifecycleError(ArchkitError):
    """Exception raised for invalid lifecycle transitions."""
    pass
