"""
Default factories backed by the singleton container.

``InjectorFactory`` resolves a parameter type from a container that follows
the ``DependencyContainer`` protocol. Three shapes are handled:

* a plain singleton (interfaces, built-ins, any registered type),
* a reference ``Ref[T]`` to a singleton registered for ``T``,
* a dataclass whose tagged fields are filled one by one when the container
  has no singleton for the dataclass as a whole.

Container errors are re-raised as they are, so ``DependencyNotFound`` still
reaches the caller of ``Introspector.introspect`` as the cause of the failing
position.
"""

from collections.abc import Callable
from typing import Any, Protocol

from .injector import DependencyError, DependencyNotFound, Injector, injector
from .registry import DefaultFactorySupplier
from .types import Ref, TypeKey, is_ref, is_struct, ref_target, zero_value


class DependencyContainer(Protocol):
    """Protocol for containers InjectorFactory can resolve from."""

    def inject_singleton(self, key: TypeKey) -> Any:
        """Return the singleton for key or raise DependencyNotFound."""

    def inject_into(self, target: Ref) -> None:
        """Store the singleton for target.type in target.value."""

    def fill(self, target: Ref) -> None:
        """Populate the tagged fields of the dataclass held by target."""


def constant(value: Any) -> Callable[..., Any]:
    """Return a factory that ignores its inputs and always returns value."""

    def factory(*args: Any, **kwargs: Any) -> Any:
        return value

    return factory


class InjectorFactory:
    """
    Resolves parameter types from a dependency container.

    Install it as the default factory of an introspector so that any type
    without an explicit binding is looked up in the container::

        introspector.set_default_factory(InjectorFactory().supplier())
    """

    def __init__(self, container: DependencyContainer | None = None) -> None:
        self._container = container

    def __repr__(self) -> str:
        """String representation of the factory."""
        return f"<{self.__class__.__name__} container={self.container!r}>"

    @property
    def container(self) -> DependencyContainer:
        """The container in use; the global injector unless one was given."""
        return self._container if self._container is not None else injector

    def resolve(self, key: TypeKey) -> Any:
        """
        Return a value for key from the container.

        A ``Ref[T]`` with no singleton of its own is served from ``T`` and
        handed back inside a reference.
        """
        container = self.container
        wants_ref = False
        if is_ref(key):
            try:
                container.inject_singleton(key)
            except DependencyError:
                wants_ref = True
                key = ref_target(key)

        target = Ref(key, zero_value(key))

        if is_struct(key):
            # first treat the dataclass as a single dependency
            try:
                container.inject_into(target)
            except DependencyNotFound:
                # otherwise it is a context object whose tagged fields are dependencies
                container.fill(target)
        else:
            # interfaces and built-in types are always single dependencies
            container.inject_into(target)

        if wants_ref:
            return target
        return target.value

    __call__ = resolve

    def supplier(
        self, wrap: Callable[[Any], Any] = constant
    ) -> DefaultFactorySupplier[Any]:
        """
        Return a default factory supplier for ``set_default_factory``.

        The value is resolved when the parameter is introspected and passed
        to wrap, whose return value becomes the factory (by default a
        factory returning the value whatever its inputs).
        """

        def default_factory(key: TypeKey) -> Any:
            return wrap(self.resolve(key))

        return default_factory


def injector_factory(key: TypeKey, container: Injector | None = None) -> Any:
    """Resolve key from container (the global injector by default)."""
    return InjectorFactory(container).resolve(key)
