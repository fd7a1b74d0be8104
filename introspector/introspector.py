"""
Signature introspection.

Matches the parameters of a callable against a ``TypeRegistry`` and returns
a result holding one factory per parameter position.

Usage:
    introspector = Introspector(PageResult)
    introspector.register(HttpRequest, lambda request: request)
    result = introspector.introspect(handler)
    args, kwargs = result.build_arguments(request)
"""

import inspect
import logging
import typing
from collections.abc import Callable, Iterable
from typing import Any, Generic, TypeVar

from .exceptions import (
    IntrospectionError,
    InvalidResultShape,
    InvalidSignature,
    ResolutionError,
    VariadicSignatureUnsupported,
)
from .registry import TypeRegistry
from .results import Result
from .types import TypeKey, type_key


logger = logging.getLogger(__name__)

F = TypeVar("F")
R = TypeVar("R")

_VARIADIC_KINDS = (
    inspect.Parameter.VAR_POSITIONAL,
    inspect.Parameter.VAR_KEYWORD,
)


def validate_result_type(result_type: Any) -> None:
    """
    Check that result_type can carry an introspection result.

    A probe instance is built with empty data; its ``signature`` and
    ``factory_map`` must both be present and not None. Raises
    InvalidResultShape otherwise.
    """
    if not isinstance(result_type, type):
        raise InvalidResultShape(result_type, "not a class")
    try:
        probe = result_type(
            signature=inspect.Signature(),
            factory_map={},
            parameter_names=(),
            keyword_only=frozenset(),
        )
    except TypeError as e:
        raise InvalidResultShape(result_type, f"cannot be constructed: {e}") from e
    for attr in ("signature", "factory_map"):
        if getattr(probe, attr, None) is None:
            raise InvalidResultShape(result_type, f"{attr} is missing or None")


def _parameter_hints(func: Callable[..., Any]) -> dict[str, Any]:
    """Resolve string annotations where possible; fall back to raw ones."""
    target = func
    if isinstance(func, type):
        target = func.__init__
    elif not (inspect.isfunction(func) or inspect.ismethod(func)):
        # callable instances carry annotations on __call__
        target = getattr(func, "__call__", func)
    try:
        return typing.get_type_hints(target, include_extras=True)
    except (NameError, TypeError, AttributeError):
        return {}


class Introspector(TypeRegistry[F], Generic[F, R]):
    """
    Resolves a factory for every parameter of a callable.

    ``F`` is the factory shape chosen by the application (for example
    ``Callable[[HttpRequest], Any]``); ``R`` is the result type produced by
    ``introspect``. The result type is validated when the introspector is
    built, so a malformed result class fails immediately instead of at the
    first introspection.
    """

    def __init__(self, result_type: type[R] = Result) -> None:  # type: ignore[assignment]
        validate_result_type(result_type)
        super().__init__()
        self.result_type = result_type

    def __repr__(self) -> str:
        """String representation of the introspector."""
        return (
            f"<{self.__class__.__name__} result={self.result_type.__name__} "
            f"factories={len(self)} default={self.default_factory is not None}>"
        )

    def signature_of(self, func: Callable[..., Any]) -> inspect.Signature:
        """
        Return the signature of func, rejecting what cannot be introspected.

        Raises InvalidSignature for non-callables and callables without an
        inspectable signature, VariadicSignatureUnsupported for ``*args`` and
        ``**kwargs``.
        """
        if not callable(func):
            raise InvalidSignature(func, "not callable")
        try:
            sig = inspect.signature(func)
        except (ValueError, TypeError) as e:
            raise InvalidSignature(func, str(e)) from e
        for param in sig.parameters.values():
            if param.kind in _VARIADIC_KINDS:
                raise VariadicSignatureUnsupported(func, param.name)
        return sig

    def parameter_types(self, func: Callable[..., Any]) -> list[TypeKey]:
        """Return the type key of every parameter of func in declaration order."""
        sig = self.signature_of(func)
        hints = _parameter_hints(func)
        return [
            type_key(hints.get(name, param.annotation))
            for name, param in sig.parameters.items()
        ]

    def introspect(self, func: Callable[..., Any]) -> R:
        """
        Resolve a factory for every parameter of func.

        Every position is attempted; if any fails, IntrospectionError is
        raised with one ResolutionError per failing position and no result
        is produced.
        """
        try:
            sig = self.signature_of(func)
        except InvalidSignature as e:
            raise IntrospectionError(func, [e]) from e

        hints = _parameter_hints(func)
        factories: dict[int, F] = {}
        errors: list[Exception] = []
        names: list[str] = []
        keyword_only: set[int] = set()

        for position, (name, param) in enumerate(sig.parameters.items()):
            names.append(name)
            if param.kind is inspect.Parameter.KEYWORD_ONLY:
                keyword_only.add(position)
            key = type_key(hints.get(name, param.annotation))
            try:
                factories[position] = self.lookup(key)
            except Exception as e:
                errors.append(ResolutionError(position, key, e))

        if errors:
            logger.debug(
                "introspection of %r failed at %d of %d parameters",
                func,
                len(errors),
                len(names),
            )
            raise IntrospectionError(func, errors)

        return self.result_type(
            signature=sig,
            factory_map=factories,
            parameter_names=tuple(names),
            keyword_only=frozenset(keyword_only),
        )

    def introspect_all(self, funcs: Iterable[Callable[..., Any]]) -> dict[Callable[..., Any], R]:
        """
        Introspect several callables, reporting every failure at once.

        Raises a single IntrospectionError whose errors are the
        IntrospectionErrors of the callables that failed.
        """
        results: dict[Callable[..., Any], R] = {}
        failures: list[Exception] = []
        for func in funcs:
            try:
                results[func] = self.introspect(func)
            except IntrospectionError as e:
                failures.append(e)
        if failures:
            raise IntrospectionError(None, failures)
        return results
