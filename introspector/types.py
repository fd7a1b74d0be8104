"""
Type keys and references.

Parameters are matched against factories by their annotation object. This
module normalizes annotations into hashable keys and provides ``Ref``, the
box used when a callable asks for a reference to a value rather than the
value itself.
"""

import dataclasses
import inspect
import typing
from collections.abc import Callable
from typing import Any, Generic, TypeVar, get_origin


T = TypeVar("T")

TypeKey = Any

# built-in types whose zero value is produced by calling them without arguments
_ZERO_CONSTRUCTIBLE: tuple[type, ...] = (
    bool,
    int,
    float,
    complex,
    str,
    bytes,
    tuple,
    list,
    dict,
    set,
    frozenset,
)


class Ref(Generic[T]):
    """
    Mutable reference to a value of a declared type.

    ``Ref[T]`` is the reference form of ``T`` when used as an annotation, and
    the two are distinct type keys. At runtime a ``Ref`` remembers the type it
    was allocated for, so a container can populate it without being told the
    type separately.
    """

    __slots__ = ("type", "value")

    def __init__(self, type_: TypeKey, value: Any = None) -> None:
        self.type = type_
        self.value = value

    def __repr__(self) -> str:
        """String representation of the reference."""
        return f"<{self.__class__.__name__} type={type_name(self.type)} value={self.value!r}>"

    def __eq__(self, other: Any) -> bool:
        """References are equal when they point at equal values of the same type."""
        if not isinstance(other, Ref):
            return NotImplemented
        return self.type == other.type and self.value == other.value

    __hash__ = None  # type: ignore[assignment]


def type_key(annotation: Any) -> TypeKey:
    """Normalize an annotation into the key used by registries."""
    if annotation is None:
        return type(None)
    if annotation is inspect.Parameter.empty:
        return Any
    return annotation


def is_ref(key: TypeKey) -> bool:
    """Return True if key is a ``Ref[...]`` annotation."""
    return get_origin(key) is Ref


def ref_target(key: TypeKey) -> TypeKey:
    """Return ``T`` for ``Ref[T]`` (``Any`` for a bare ``Ref``)."""
    args = typing.get_args(key)
    return args[0] if args else Any


def is_struct(key: TypeKey) -> bool:
    """Return True if key is a dataclass type or a reference annotation."""
    return (isinstance(key, type) and dataclasses.is_dataclass(key)) or is_ref(key)


def zero_value(key: TypeKey) -> Any:
    """
    Allocate the zero value of a type.

    Dataclasses are allocated without running ``__init__``: fields with a
    default take it, fields with a default factory get a fresh value, and the
    remaining fields are set to None, ready to be filled in place. Simple
    built-ins are called without arguments. Anything else is None.
    """
    if isinstance(key, type) and dataclasses.is_dataclass(key):
        instance = object.__new__(key)
        for f in dataclasses.fields(key):
            if f.default is not dataclasses.MISSING:
                value = f.default
            elif f.default_factory is not dataclasses.MISSING:
                value = f.default_factory()
            else:
                value = None
            # frozen dataclasses block regular assignment
            object.__setattr__(instance, f.name, value)
        return instance
    if isinstance(key, type) and key in _ZERO_CONSTRUCTIBLE:
        return key()
    return None


def type_name(key: TypeKey) -> str:
    """Human-readable name of a type key for messages and logs."""
    if isinstance(key, type):
        if key.__module__ == "builtins":
            return key.__qualname__
        return f"{key.__module__}.{key.__qualname__}"
    return repr(key)


def return_annotation(func: Callable[..., Any]) -> TypeKey:
    """Return the resolved return annotation of func, or ``inspect.Parameter.empty``."""
    try:
        hints = typing.get_type_hints(func, include_extras=True)
    except (NameError, TypeError):
        hints = {}
    if "return" in hints:
        return type_key(hints["return"])
    try:
        annotation = inspect.signature(func).return_annotation
    except (ValueError, TypeError):
        return inspect.Parameter.empty
    if annotation is inspect.Signature.empty:
        return inspect.Parameter.empty
    return type_key(annotation)
