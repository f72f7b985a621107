"""
Project-wide pytest configuration.

This module configures Django for the test-suite and marks tests by kind.
App-specific fixtures are defined in each app's tests/conftest.py.
"""

import os

import django
import pytest

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings")


def pytest_configure():
    """Configure Django settings before tests run."""
    django.setup()

    from django.conf import settings

    # Disable throttling during tests to prevent rate limit failures
    settings.REST_FRAMEWORK["DEFAULT_THROTTLE_CLASSES"] = []
    settings.REST_FRAMEWORK["DEFAULT_THROTTLE_RATES"] = {}

    # Use fast password hasher for tests (PBKDF2 is too slow with 870K iterations)
    settings.PASSWORD_HASHERS = [
        "django.contrib.auth.hashers.MD5PasswordHasher",
    ]

    # In-process presence cache and channel layer instead of Redis
    settings.CACHES = {
        "default": {
            "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
            "LOCATION": "conversex-tests",
        }
    }
    settings.SESSION_ENGINE = "django.contrib.sessions.backends.db"
    settings.CHANNEL_LAYERS = {
        "default": {"BACKEND": "channels.layers.InMemoryChannelLayer"},
    }

    # Celery tasks run inline when called with .delay()
    settings.CELERY_TASK_ALWAYS_EAGER = True
    settings.CELERY_TASK_EAGER_PROPAGATES = True


def pytest_collection_modifyitems(items):
    """
    Auto-mark tests based on filename patterns.

    Mapping:
    - test_consumers.py, test_integration.py → e2e (full realtime/HTTP journeys)
    - test_views.py, test_services.py, test_tasks.py, etc. → integration
    - test_models.py, test_timeline.py, test_api.py, etc. → unit
    - chat_client/tests/* → unit (fake hub and stub API; end-to-end
      classes carry an explicit e2e marker)
    - Unmatched files → integration (safe default for Django)

    Explicit markers on test functions/classes take precedence.
    """
    e2e_patterns = ["test_integration.py", "test_consumers.py"]

    # Matched on the path before the filename patterns
    unit_dirs = ["chat_client/tests"]

    integration_patterns = [
        "test_views.py",
        "test_services.py",
        "test_tasks.py",
        "test_audit.py",
        "test_presence.py",
        "test_realtime.py",
        "test_middleware.py",
    ]

    unit_patterns = [
        "test_models.py",
        "test_serializers.py",
        "test_api.py",
        "test_timeline.py",
        "test_hidden_store.py",
    ]

    for item in items:
        # Skip if test already has unit/integration/e2e marker
        existing_markers = {m.name for m in item.iter_markers()}
        if existing_markers & {"unit", "integration", "e2e"}:
            continue

        filename = item.path.name
        path = item.path.as_posix()

        if any(f"/{directory}/" in path for directory in unit_dirs):
            item.add_marker(pytest.mark.unit)
        elif any(pattern in filename for pattern in e2e_patterns):
            item.add_marker(pytest.mark.e2e)
        elif any(pattern in filename for pattern in integration_patterns):
            item.add_marker(pytest.mark.integration)
        elif any(pattern in filename for pattern in unit_patterns):
            item.add_marker(pytest.mark.unit)
        else:
            # Default: integration (safe for Django where most tests hit DB)
            item.add_marker(pytest.mark.integration)
