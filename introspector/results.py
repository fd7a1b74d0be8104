"""
Introspection results.

A result records the signature of an introspected callable and the factory
resolved for every parameter position. Applications subclass ``Result`` to
attach their own declaration-site data::

    @dataclass(frozen=True)
    class PageResult(Result[RequestFactory]):
        template: str = ""
"""

import inspect
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Generic, Protocol, TypeVar, runtime_checkable


F = TypeVar("F")


@runtime_checkable
class IntrospectorResult(Protocol[F]):
    """Contract every result type must satisfy."""

    @property
    def signature(self) -> inspect.Signature:
        """Signature of the introspected callable."""

    @property
    def factory_map(self) -> Mapping[int, F]:
        """Factory for each parameter position."""


@dataclass(frozen=True)
class Result(Generic[F]):
    """Immutable base result; subclasses add fields with defaults."""

    signature: inspect.Signature
    factory_map: Mapping[int, F]
    parameter_names: tuple[str, ...] = ()
    keyword_only: frozenset[int] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        # freeze the mapping handed in by the caller
        if not isinstance(self.factory_map, MappingProxyType):
            object.__setattr__(
                self, "factory_map", MappingProxyType(dict(self.factory_map))
            )

    def factory_for(self, name: str) -> F:
        """Return the factory resolved for the parameter called name."""
        try:
            position = self.parameter_names.index(name)
        except ValueError:
            raise KeyError(name) from None
        return self.factory_map[position]

    def build_arguments(self, *inputs: Any, **kw_inputs: Any) -> tuple[list[Any], dict[str, Any]]:
        """
        Call every factory with the given inputs and split the values into
        positional and keyword-only arguments for the introspected callable.
        """
        args: list[Any] = []
        kwargs: dict[str, Any] = {}
        for position in range(len(self.factory_map)):
            value = self.factory_map[position](*inputs, **kw_inputs)
            if position in self.keyword_only:
                kwargs[self.parameter_names[position]] = value
            else:
                args.append(value)
        return args, kwargs
