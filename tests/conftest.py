import sys
from pathlib import Path

import django
import pytest
from django.conf import settings

# add project root to python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

# configure django settings for tests
if not settings.configured:
    settings.configure(
        DEBUG=True,
        DATABASES={
            'default': {
                'ENGINE': 'django.db.backends.sqlite3',
                'NAME': ':memory:',
            }
        },
        INSTALLED_APPS=[
            'django.contrib.contenttypes',
            'django.contrib.auth',
            'introspector',
        ],
        INTROSPECTOR={
            'SINGLETONS': ['tests.providers.make_greeting'],
            'FIELD_TAG': 'injector',
        },
        SECRET_KEY='test-secret-key',
        USE_TZ=True,
        TIME_ZONE='UTC',
    )
    django.setup()


@pytest.fixture
def global_injector():
    """Yield the global injector and restore its state afterwards."""
    from introspector.injector import injector

    providers = dict(injector._providers)
    instances = dict(injector._instances)
    yield injector
    injector.reset()
    injector._providers.update(providers)
    injector._instances.update(instances)
