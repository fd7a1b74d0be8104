"""
Singleton dependency container.

Holds lazily built singletons keyed by type and hands them out through three
operations used by ``InjectorFactory``:

* ``inject_singleton(type)`` returns the singleton for a type,
* ``inject_into(ref)`` stores the singleton for ``ref.type`` in the reference,
* ``fill(ref)`` populates the tagged fields of the dataclass held by ``ref``.

Fields are tagged for filling with ``inject_field()``::

    @dataclass
    class CheckoutContext:
        cart: Cart = inject_field()
        payments: PaymentGateway = inject_field()
"""

import dataclasses
import inspect
import logging
import threading
import typing
from collections.abc import Callable
from typing import Any

from .conf import get_config
from .types import Ref, TypeKey, return_annotation, type_key, type_name


logger = logging.getLogger(__name__)

# Sentinel for "singleton currently being built" to detect cycles
_IN_PROGRESS: object = object()


class DependencyError(Exception):
    """Base class for errors raised by the dependency container."""


class DependencyNotFound(DependencyError, LookupError):
    """Raised when no singleton is registered for a type."""

    def __init__(self, type_key: TypeKey) -> None:
        """Store the type that has no provider."""
        self.type_key = type_key
        super().__init__(f"No dependency registered for type {type_name(type_key)}")


class DependencyCycleError(DependencyError):
    """Raised when singleton providers depend on each other in a cycle."""

    def __init__(self, cycle: list[TypeKey]) -> None:
        """Store cycle path and set exception message."""
        self.cycle = cycle
        super().__init__(
            f"Circular dependency: {' -> '.join(type_name(key) for key in cycle)}"
        )


def inject_field(*, tag: str | None = None, **kwargs: Any) -> Any:
    """
    Declare a dataclass field that the container fills with a singleton.

    Accepts the keyword arguments of ``dataclasses.field``. The field defaults
    to None unless a default or default factory is given.
    """
    metadata = dict(kwargs.pop("metadata", None) or {})
    metadata[tag or get_config()["FIELD_TAG"]] = "type"
    if "default" not in kwargs and "default_factory" not in kwargs:
        kwargs["default"] = None
    return dataclasses.field(metadata=metadata, **kwargs)


class Injector:
    """
    Registry of singleton providers.

    Providers run once, on first access, and may declare parameters of their
    own; each parameter is resolved from the container by its annotation.
    Construction happens under a lock so a singleton is built exactly once
    even when first requested from several threads.
    """

    def __init__(self, field_tag: str | None = None) -> None:
        self._providers: dict[TypeKey, Callable[..., Any]] = {}
        self._instances: dict[TypeKey, Any] = {}
        self._field_tag = field_tag
        self._lock = threading.RLock()
        self._stack: list[TypeKey] = []

    def __repr__(self) -> str:
        """String representation of the container."""
        return (
            f"<{self.__class__.__name__} providers={len(self._providers)} "
            f"built={len(self._instances)}>"
        )

    def __contains__(self, key: TypeKey) -> bool:
        """Return True if a singleton is registered for key."""
        key = type_key(key)
        return key in self._providers or key in self._instances

    @property
    def field_tag(self) -> str:
        """Metadata key marking dataclass fields that ``fill`` populates."""
        return self._field_tag or get_config()["FIELD_TAG"]

    def singleton(
        self,
        provider: Callable[..., Any] | None = None,
        *,
        for_type: TypeKey = None,
    ) -> Any:
        r"""Register provider as the singleton source for its return type.

        The type is for_type when given, the class itself for classes, else
        the provider's return annotation. Use directly, as
        @injector.singleton, or as @injector.singleton(for_type=Clock).
        """

        def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
            key = for_type
            if key is None and isinstance(func, type):
                key = func
            elif key is None:
                key = return_annotation(func)
                if key is inspect.Parameter.empty:
                    raise DependencyError(
                        f"Cannot infer the singleton type of {func!r}; "
                        "annotate its return type or pass for_type"
                    )
            key = type_key(key)
            with self._lock:
                self._providers[key] = func
                self._instances.pop(key, None)
            logger.debug("registered singleton provider for %s", type_name(key))
            return func

        if provider is None:
            return decorator
        return decorator(provider)

    def register_value(self, key: TypeKey, value: Any) -> None:
        """Register an already built singleton for key."""
        key = type_key(key)
        with self._lock:
            self._providers.pop(key, None)
            self._instances[key] = value

    def reset(self) -> None:
        """Forget every provider and singleton."""
        with self._lock:
            self._providers.clear()
            self._instances.clear()
            self._stack.clear()

    def inject_singleton(self, key: TypeKey) -> Any:
        """Return the singleton for key, building it on first access."""
        key = type_key(key)
        with self._lock:
            if key in self._instances:
                value = self._instances[key]
                if value is _IN_PROGRESS:
                    raise DependencyCycleError([*self._stack, key])
                return value
            try:
                provider = self._providers[key]
            except KeyError:
                raise DependencyNotFound(key) from None

            self._stack.append(key)
            self._instances[key] = _IN_PROGRESS
            try:
                value = provider(**self._provider_arguments(provider))
            finally:
                self._stack.pop()
                if self._instances.get(key) is _IN_PROGRESS:
                    del self._instances[key]
            self._instances[key] = value
            logger.debug("built singleton for %s", type_name(key))
            return value

    def _provider_arguments(self, provider: Callable[..., Any]) -> dict[str, Any]:
        """Resolve the parameters of a provider from the container."""
        sig = inspect.signature(provider)
        if not sig.parameters:
            return {}
        # classes declare their parameters on __init__
        target = provider.__init__ if isinstance(provider, type) else provider
        try:
            hints = typing.get_type_hints(target, include_extras=True)
        except (NameError, TypeError):
            hints = {}
        arguments: dict[str, Any] = {}
        for name, param in sig.parameters.items():
            if param.kind in (
                inspect.Parameter.VAR_POSITIONAL,
                inspect.Parameter.VAR_KEYWORD,
            ):
                continue
            key = type_key(hints.get(name, param.annotation))
            if key not in self and param.default is not inspect.Parameter.empty:
                continue
            arguments[name] = self.inject_singleton(key)
        return arguments

    def inject_into(self, target: Ref) -> None:
        """Store the singleton for ``target.type`` in ``target.value``."""
        target.value = self.inject_singleton(target.type)

    def fill(self, target: Ref) -> None:
        """
        Populate the tagged fields of the dataclass instance held by target.

        Each tagged field receives the singleton for its annotation. Raises
        DependencyNotFound for the first field without a provider.
        """
        instance = target.value
        if not dataclasses.is_dataclass(instance) or isinstance(instance, type):
            raise DependencyError(
                f"Cannot fill {type_name(target.type)}: not a dataclass instance"
            )
        try:
            hints = typing.get_type_hints(type(instance), include_extras=True)
        except (NameError, TypeError):
            hints = {}
        tag = self.field_tag
        for f in dataclasses.fields(instance):
            if tag not in f.metadata:
                continue
            value = self.inject_singleton(hints.get(f.name, f.type))
            # frozen dataclasses block regular assignment
            object.__setattr__(instance, f.name, value)


# global container used when no other is configured
injector = Injector()
