import logging

from django.apps import AppConfig
from django.utils.module_loading import import_string

from .conf import get_config
from .injector import DependencyError, injector


logger = logging.getLogger(__name__)


class IntrospectorConfig(AppConfig):
    name = "introspector"
    verbose_name = "Introspector"

    def ready(self) -> None:
        from . import checks  # noqa: F401

        register_configured_singletons()


def register_configured_singletons() -> int:
    """
    Register every provider listed in INTROSPECTOR["SINGLETONS"].

    Entries that cannot be imported or registered are logged and skipped;
    the system checks report them as errors. Returns the number registered.
    """
    singletons = get_config()["SINGLETONS"]
    if not isinstance(singletons, (list, tuple)):
        return 0

    registered = 0
    for dotted_path in singletons:
        try:
            provider = import_string(dotted_path)
            if not callable(provider):
                raise TypeError("provider is not callable")
            injector.singleton(provider)
        except (ImportError, AttributeError, TypeError, DependencyError) as e:
            logger.warning("skipping singleton provider %r: %s", dotted_path, e)
            continue
        registered += 1
    return registered
