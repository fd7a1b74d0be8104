"""
introspector
------------

Parameter factory resolution: given any callable, find for every parameter
type a factory that turns one input value (a request, a job, an event) into
a value for that parameter.
"""

from .exceptions import (
    FactoryNotFound,
    IntrospectionError,
    IntrospectorError,
    InvalidResultShape,
    InvalidSignature,
    ResolutionError,
    VariadicSignatureUnsupported,
)
from .injector import (
    DependencyCycleError,
    DependencyError,
    DependencyNotFound,
    Injector,
    inject_field,
)
from .injector_factory import InjectorFactory, constant
from .introspector import Introspector
from .registry import TypeRegistry
from .results import IntrospectorResult, Result
from .types import Ref


__version__ = "0.1.0"

__all__ = [
    "__version__",
    "DependencyCycleError",
    "DependencyError",
    "DependencyNotFound",
    "FactoryNotFound",
    "Injector",
    "InjectorFactory",
    "IntrospectionError",
    "Introspector",
    "IntrospectorError",
    "IntrospectorResult",
    "InvalidResultShape",
    "InvalidSignature",
    "Ref",
    "ResolutionError",
    "Result",
    "TypeRegistry",
    "VariadicSignatureUnsupported",
    "constant",
    "inject_field",
]
