"""
Settings for the introspector app.

Configured through the ``INTROSPECTOR`` Django setting::

    INTROSPECTOR = {
        "SINGLETONS": ["shop.providers.make_payment_gateway"],
        "FIELD_TAG": "injector",
    }

Missing keys fall back to the defaults below. Without configured Django
settings the defaults are used as they are.
"""

from typing import Any

from django.conf import settings


SETTING_NAME = "INTROSPECTOR"

# Configuration defaults
DEFAULT_FIELD_TAG = "injector"

DEFAULTS: dict[str, Any] = {
    "SINGLETONS": [],
    "FIELD_TAG": DEFAULT_FIELD_TAG,
}


def get_user_config() -> Any:
    """Return the raw INTROSPECTOR setting, or None when it is not defined."""
    if not settings.configured:
        return None
    return getattr(settings, SETTING_NAME, None)


def get_config() -> dict[str, Any]:
    """Return the INTROSPECTOR setting merged over the defaults."""
    config = dict(DEFAULTS)
    user_config = get_user_config()
    if isinstance(user_config, dict):
        config.update(user_config)
    return config
