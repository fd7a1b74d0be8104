"""Exceptions raised while building registries and introspecting callables."""

from collections.abc import Callable, Sequence
from typing import Any

from .types import TypeKey, type_name


class IntrospectorError(Exception):
    """Base class for every error raised by the introspector."""


class InvalidResultShape(IntrospectorError, TypeError):
    """Raised when a result type does not satisfy the result contract."""

    def __init__(self, result_type: Any, reason: str) -> None:
        """Store the offending result type and the reason it was rejected."""
        self.result_type = result_type
        self.reason = reason
        super().__init__(f"Invalid result type {result_type!r}: {reason}")


class InvalidSignature(IntrospectorError, TypeError):
    """Raised when a value is not a callable whose signature can be inspected."""

    def __init__(self, func: Any, reason: str) -> None:
        """Store the rejected value and the reason."""
        self.func = func
        self.reason = reason
        super().__init__(f"Cannot introspect {func!r}: {reason}")


class VariadicSignatureUnsupported(InvalidSignature):
    """Raised when a callable declares ``*args`` or ``**kwargs``."""

    def __init__(self, func: Any, parameter: str) -> None:
        """Store the callable and the name of its variadic parameter."""
        self.parameter = parameter
        super().__init__(func, f"variadic parameter {parameter!r} is not supported")


class FactoryNotFound(IntrospectorError, LookupError):
    """Raised when no factory is bound to a type and no default factory is set."""

    def __init__(self, type_key: TypeKey) -> None:
        """Store the type that could not be resolved."""
        self.type_key = type_key
        super().__init__(f"No factory registered for type {type_name(type_key)}")


class ResolutionError(IntrospectorError):
    """A single parameter position that could not be resolved."""

    def __init__(self, position: int, type_key: TypeKey, cause: BaseException) -> None:
        """Store the failing position, its type and the underlying cause."""
        self.position = position
        self.type_key = type_key
        self.cause = cause
        self.__cause__ = cause
        super().__init__(
            f"Parameter {position} ({type_name(type_key)}): {cause}"
        )


class IntrospectionError(IntrospectorError):
    """
    Raised when a callable cannot be introspected.

    Holds every failure found in one pass, so all unresolvable parameters are
    reported together instead of one at a time.
    """

    def __init__(self, func: Callable[..., Any] | None, errors: Sequence[Exception]) -> None:
        """Store the callable and the complete list of failures."""
        self.func = func
        self.errors = list(errors)
        name = "callables" if func is None else getattr(func, "__qualname__", repr(func))
        details = "; ".join(str(error) for error in self.errors)
        super().__init__(
            f"{len(self.errors)} error(s) introspecting {name}: {details}"
        )

    def __len__(self) -> int:
        """Number of collected failures."""
        return len(self.errors)

    def __iter__(self):
        """Iterate over the collected failures."""
        return iter(self.errors)
