"""
Type registry.

Maps parameter types to factories of a caller-chosen shape. Lookups try the
exact binding first and fall back to a single default factory supplier.

Registries are not locked. Finish registering before sharing a registry
between threads, or guard registration and lookup with an external lock.
"""

import logging
from collections.abc import Callable, Mapping
from types import MappingProxyType
from typing import Generic, TypeVar

from .exceptions import FactoryNotFound
from .types import TypeKey, type_key, type_name


logger = logging.getLogger(__name__)

F = TypeVar("F")

DefaultFactorySupplier = Callable[[TypeKey], F]


class TypeRegistry(Generic[F]):
    """
    Registry of type -> factory bindings with an optional default supplier.

    The default supplier is called on a lookup miss with the requested type.
    Whatever it returns or raises is handed back to the caller unchanged and
    is never stored in the registry.
    """

    def __init__(self) -> None:
        self._factories: dict[TypeKey, F] = {}
        self._default_factory: DefaultFactorySupplier[F] | None = None

    def __repr__(self) -> str:
        """String representation of the registry."""
        return (
            f"<{self.__class__.__name__} factories={len(self._factories)} "
            f"default={self._default_factory is not None}>"
        )

    def __len__(self) -> int:
        """Number of exact bindings."""
        return len(self._factories)

    def __contains__(self, key: TypeKey) -> bool:
        """Return True if an exact binding exists for key."""
        return type_key(key) in self._factories

    def register(self, key: TypeKey, factory: F) -> None:
        """Bind factory to key, replacing any previous binding."""
        key = type_key(key)
        if key in self._factories:
            logger.debug("replacing factory for %s", type_name(key))
        self._factories[key] = factory

    def register_for(self, key: TypeKey) -> Callable[[F], F]:
        r"""Return a decorator that binds the decorated factory to key.

        Example: @registry.register_for(int).
        """

        def decorator(factory: F) -> F:
            self.register(key, factory)
            return factory

        return decorator

    def unregister(self, key: TypeKey) -> None:
        """Remove the exact binding for key. Raises FactoryNotFound if absent."""
        key = type_key(key)
        try:
            del self._factories[key]
        except KeyError:
            raise FactoryNotFound(key) from None

    def lookup(self, key: TypeKey) -> F:
        """
        Return the factory for key.

        Exact bindings always win. On a miss the default supplier is asked;
        without one FactoryNotFound is raised.
        """
        key = type_key(key)
        try:
            return self._factories[key]
        except KeyError:
            pass
        if self._default_factory is None:
            raise FactoryNotFound(key)
        logger.debug("no factory for %s, using default factory", type_name(key))
        return self._default_factory(key)

    def set_default_factory(self, supplier: DefaultFactorySupplier[F] | None) -> None:
        """Install or replace the default factory supplier (None removes it)."""
        self._default_factory = supplier

    @property
    def default_factory(self) -> DefaultFactorySupplier[F] | None:
        """The installed default factory supplier, if any."""
        return self._default_factory

    @property
    def factory_map(self) -> Mapping[TypeKey, F]:
        """Read-only view of the exact bindings."""
        return MappingProxyType(self._factories)
