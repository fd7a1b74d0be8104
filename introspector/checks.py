from typing import Any

from django.conf import settings
from django.core.checks import WARNING, CheckMessage, Error, Tags, register
from django.utils.module_loading import import_string

from .conf import DEFAULTS, get_user_config


@register(Tags.compatibility)
def check_introspector_configuration(
    app_configs: Any, **kwargs: Any
) -> list[CheckMessage]:
    """Check INTROSPECTOR configuration for errors."""
    errors: list[CheckMessage] = []
    warnings: list[CheckMessage] = []

    if (config := get_user_config()) is None:
        return []  # no configuration means defaults will be used

    if not isinstance(config, dict):
        errors.append(
            Error(
                "INTROSPECTOR must be a dictionary.",
                obj=settings,
                id="introspector.E001",
            )
        )
        return errors

    # check SINGLETONS
    singletons = config.get("SINGLETONS", [])
    if not isinstance(singletons, (list, tuple)):
        errors.append(
            Error(
                "INTROSPECTOR['SINGLETONS'] must be a list of dotted paths.",
                obj=settings,
                id="introspector.E002",
            )
        )
    else:
        for i, dotted_path in enumerate(singletons):
            errors.extend(_check_singleton_provider(i, dotted_path))

    # check FIELD_TAG
    field_tag = config.get("FIELD_TAG", DEFAULTS["FIELD_TAG"])
    if not isinstance(field_tag, str) or not field_tag:
        errors.append(
            Error(
                "INTROSPECTOR['FIELD_TAG'] must be a non-empty string.",
                obj=settings,
                id="introspector.E005",
            )
        )

    # check for unknown keys
    for key in sorted(set(config) - set(DEFAULTS), key=str):
        warnings.append(
            CheckMessage(
                WARNING,
                f"INTROSPECTOR contains unknown key {key!r}.",
                hint=f"Known keys: {', '.join(DEFAULTS)}.",
                obj=settings,
                id="introspector.W001",
            )
        )

    return errors + warnings


def _check_singleton_provider(index: int, dotted_path: Any) -> list[CheckMessage]:
    """Check that one SINGLETONS entry imports to a callable."""
    if not isinstance(dotted_path, str):
        return [
            Error(
                f"INTROSPECTOR['SINGLETONS'][{index}] must be a dotted path string.",
                obj=settings,
                id="introspector.E003",
            )
        ]

    try:
        provider = import_string(dotted_path)
    except ImportError as e:
        return [
            Error(
                f'INTROSPECTOR["SINGLETONS"][{index}] cannot import "{dotted_path}": {e}',
                obj=settings,
                id="introspector.E003",
            )
        ]

    if not callable(provider):
        return [
            Error(
                f'INTROSPECTOR["SINGLETONS"][{index}] "{dotted_path}" is not callable.',
                obj=settings,
                id="introspector.E004",
            )
        ]

    return []
