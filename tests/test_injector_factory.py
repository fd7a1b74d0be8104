"""Tests for introspector.injector_factory (InjectorFactory as default factory)."""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Protocol
from unittest.mock import MagicMock

import pytest
from django.http import HttpRequest, HttpResponse

from introspector import (
    DependencyError,
    DependencyNotFound,
    Injector,
    InjectorFactory,
    IntrospectionError,
    Introspector,
    Ref,
    Result,
    constant,
    inject_field,
)
from introspector.injector_factory import injector_factory


class ValueSource(Protocol):
    def get_value(self) -> int: ...


@dataclass
class Dependency:
    value: int

    def get_value(self) -> int:
        return self.value


@dataclass
class Context:
    dep: Dependency = inject_field()


@dataclass
class FaultyContext:
    response: HttpResponse = inject_field()


InjectedFactory = Callable[[], Any]


@pytest.fixture
def container() -> Injector:
    """Create an empty container."""
    return Injector()


@pytest.fixture
def introspector(container) -> Introspector[InjectedFactory, Result]:
    """Create an introspector whose default factory resolves from container."""
    introspector = Introspector()
    introspector.set_default_factory(InjectorFactory(container).supplier())
    return introspector


def first_factory(introspector: Introspector, func: Callable[..., Any]) -> InjectedFactory:
    """Introspect func and return the factory of its first parameter."""
    return introspector.introspect(func).factory_map[0]


class TestInjectorFactoryIntrospection:
    """InjectorFactory installed as the default factory of an introspector."""

    def test_non_ref_struct_dependency(self, container, introspector) -> None:
        """A dataclass singleton satisfies both T and Ref[T] parameters."""
        container.singleton(lambda: Dependency(value=69), for_type=Dependency)

        def by_value(d: Dependency) -> None:
            pass

        def by_ref(d: Ref[Dependency]) -> None:
            pass

        value = first_factory(introspector, by_value)()
        assert value.value == 69

        ref = first_factory(introspector, by_ref)()
        assert isinstance(ref, Ref)
        assert ref.type is Dependency
        assert ref.value.value == 69
        assert ref.value == value

    def test_ref_struct_dependency(self, container, introspector) -> None:
        """A singleton registered for Ref[T] is returned as it is."""
        registered = Ref(Dependency, Dependency(value=69))
        container.singleton(lambda: registered, for_type=Ref[Dependency])

        def by_ref(d: Ref[Dependency]) -> None:
            pass

        assert first_factory(introspector, by_ref)() is registered

    def test_interface_dependency(self, container, introspector) -> None:
        """Protocols resolve as single dependencies."""
        container.singleton(lambda: Dependency(value=69), for_type=ValueSource)

        def handler(d: ValueSource) -> None:
            pass

        assert first_factory(introspector, handler)().get_value() == 69

    def test_dependency_not_found(self, introspector) -> None:
        """An unknown type surfaces DependencyNotFound unchanged."""

        def handler(w: HttpResponse) -> None:
            pass

        with pytest.raises(IntrospectionError) as exc_info:
            introspector.introspect(handler)

        errors = exc_info.value.errors
        assert len(errors) == 1
        assert isinstance(errors[0].cause, DependencyNotFound)
        assert errors[0].cause.type_key is HttpResponse

    def test_struct_fill_dependency(self, container, introspector) -> None:
        """A context dataclass gets its tagged fields filled."""
        container.singleton(lambda: Dependency(value=69), for_type=Dependency)

        def handler(ctx: Context) -> None:
            pass

        ctx = first_factory(introspector, handler)()
        assert isinstance(ctx, Context)
        assert ctx.dep.value == 69

    def test_struct_fill_missing_field(self, introspector) -> None:
        """An unresolvable tagged field fails with DependencyNotFound."""

        def handler(ctx: FaultyContext) -> None:
            pass

        with pytest.raises(IntrospectionError) as exc_info:
            introspector.introspect(handler)

        cause = exc_info.value.errors[0].cause
        assert isinstance(cause, DependencyNotFound)
        assert cause.type_key is HttpResponse

    def test_struct_fill_through_ref(self, container, introspector) -> None:
        """Ref[Context] is filled and returned inside a reference."""
        container.singleton(lambda: Dependency(value=7), for_type=Dependency)

        def handler(ctx: Ref[Context]) -> None:
            pass

        ref = first_factory(introspector, handler)()
        assert isinstance(ref, Ref)
        assert ref.value.dep.value == 7

    def test_builtin_dependency(self, container, introspector) -> None:
        """Built-in types resolve as single dependencies."""
        container.singleton(lambda: 69, for_type=int)

        def handler(d: int) -> None:
            pass

        assert first_factory(introspector, handler)() == 69

    def test_default_factory_singleton(self, container) -> None:
        """Default factory serves a singleton while the registry stays empty."""
        request = MagicMock(spec=HttpRequest)
        container.register_value(HttpRequest, request)
        introspector = Introspector()
        introspector.set_default_factory(InjectorFactory(container).supplier())
        assert len(introspector.factory_map) == 0

        def handler(r: HttpRequest) -> None:
            pass

        result = introspector.introspect(handler)
        assert len(result.factory_map) == 1
        assert result.factory_map[0](1) is request

    def test_exact_binding_skips_container(self, container, introspector) -> None:
        """Registered factories are used without touching the container."""
        container.inject_singleton = MagicMock()
        introspector.register(int, constant(2))

        def handler(d: int) -> None:
            pass

        assert first_factory(introspector, handler)() == 2
        container.inject_singleton.assert_not_called()


class TestInjectorFactoryResolve:
    """Direct tests for InjectorFactory.resolve."""

    def test_whole_value_preferred_over_fill(self, container) -> None:
        """A singleton for the dataclass itself wins over filling its fields."""
        whole = Context(dep=Dependency(value=1))
        container.register_value(Context, whole)
        container.register_value(Dependency, Dependency(value=2))

        assert InjectorFactory(container).resolve(Context) is whole

    def test_other_errors_skip_fill(self) -> None:
        """Errors other than DependencyNotFound are raised without fill."""
        error = DependencyError("broken provider")
        container = MagicMock(spec=Injector)
        container.inject_into.side_effect = error

        with pytest.raises(DependencyError) as exc_info:
            InjectorFactory(container).resolve(Context)

        assert exc_info.value is error
        container.fill.assert_not_called()

    def test_provider_exception_propagates(self, container) -> None:
        """Exceptions raised by providers are not wrapped."""
        error = RuntimeError("down")

        def broken() -> Dependency:
            raise error

        container.singleton(broken)
        with pytest.raises(RuntimeError) as exc_info:
            InjectorFactory(container).resolve(Dependency)
        assert exc_info.value is error

    def test_ref_to_missing_builtin(self, container) -> None:
        """Ref[int] without any int singleton raises DependencyNotFound for int."""
        with pytest.raises(DependencyNotFound) as exc_info:
            InjectorFactory(container).resolve(Ref[int])
        assert exc_info.value.type_key is int

    def test_callable_alias(self, container) -> None:
        """The factory can be called directly."""
        container.register_value(int, 3)
        assert InjectorFactory(container)(int) == 3

    def test_supplier_wrap(self, container) -> None:
        """supplier passes the resolved value to wrap."""
        container.register_value(int, 3)
        supplier = InjectorFactory(container).supplier(wrap=lambda value: ("wrapped", value))
        assert supplier(int) == ("wrapped", 3)

    def test_uses_global_injector_by_default(self, global_injector) -> None:
        """Without a container the global injector is used."""
        global_injector.register_value(bytes, b"global")
        factory = InjectorFactory()
        assert factory.container is global_injector
        assert factory.resolve(bytes) == b"global"
        assert injector_factory(bytes) == b"global"


class TestConstant:
    """Tests for constant."""

    def test_ignores_inputs(self) -> None:
        """The factory returns the value for any inputs."""
        factory = constant("value")
        assert factory() == "value"
        assert factory(1, request=None) == "value"
