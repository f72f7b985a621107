"""
Root pytest configuration for the Django project.

Sets the environment the settings module needs before Django is set up:
an SQLite database and throwaway secrets, so the suite runs without the
Docker services. Real environment variables take precedence.

pytest-django and project-wide hooks are configured in app/conftest.py.
App-specific fixtures are defined in each app's tests/conftest.py.
"""

import os

# Ensure Django settings are configured before any tests run
os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings")
os.environ.setdefault("SECRET_KEY", "test-secret-key-not-for-production")
os.environ.setdefault("DATABASE_URL", "sqlite://:memory:")
os.environ.setdefault("ALLOWED_HOSTS", "testserver,localhost")
os.environ.setdefault("SECURE_SSL_REDIRECT", "False")
os.environ.setdefault("MEETING_LINK_BASE_URL", "https://meet.conversex.test")
