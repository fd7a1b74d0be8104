"""
dependency injection example for the introspector.

demonstrates resolving request-derived parameters through explicit
factories and everything else through the singleton container, then
building the call arguments for a handler from one request.
"""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from django.http import HttpRequest

from introspector import (
    Injector,
    InjectorFactory,
    IntrospectionError,
    Introspector,
    Ref,
    inject_field,
)


RequestFactory = Callable[[HttpRequest], Any]


@dataclass
class Clock:
    """singleton dependency shared by every request."""

    now: str = "2025-01-01T00:00:00Z"


@dataclass
class AuditContext:
    """context object whose tagged fields come from the container."""

    clock: Clock = inject_field()


def render_greeting(request: HttpRequest, method: str, audit: AuditContext, clock: Ref[Clock]) -> str:
    """
    handler whose parameters are resolved by type.

    request and method come from the request itself, audit is filled by the
    container, clock is a reference to the Clock singleton.
    """
    return f"{method} {request.path} at {audit.clock.now} ({clock.value is audit.clock})"


def render_broken(request: HttpRequest, count: int, ratio: float) -> str:
    """handler with two parameters nothing can provide."""
    return ""


def main():
    """demonstrate the introspector with a mock request."""
    from unittest.mock import MagicMock

    container = Injector()
    container.singleton(Clock)

    introspector: Introspector[RequestFactory, Any] = Introspector()
    introspector.register(HttpRequest, lambda request: request)

    @introspector.register_for(str)
    def request_method(request: HttpRequest) -> str:
        return request.method

    introspector.set_default_factory(InjectorFactory(container).supplier())

    # example 1: resolve once, call many times
    result = introspector.introspect(render_greeting)
    request = MagicMock(spec=HttpRequest)
    request.method = "GET"
    request.path = "/example"
    args, kwargs = result.build_arguments(request)
    print("render output:", render_greeting(*args, **kwargs))

    # example 2: every unresolvable parameter is reported at once
    try:
        introspector.introspect(render_broken)
    except IntrospectionError as e:
        for error in e.errors:
            print("unresolved:", error)


if __name__ == "__main__":
    main()
