"""
Celery configuration for ConverseX.

Celery runs the maintenance tasks, currently the directory integrity
audit (communities.tasks.audit_directory_integrity), scheduled through
django-celery-beat.

Redis is used as both the message broker and result backend. Tasks are
auto-discovered from all installed Django apps.

Usage:
    from communities.tasks import audit_directory_integrity

    audit_directory_integrity.delay(repair=True)

For more information, see:
https://docs.celeryq.dev/en/stable/django/first-steps-with-django.html
"""

import os

from celery import Celery

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings")

app = Celery("config")

# All Celery settings are prefixed with CELERY_ in settings.py
app.config_from_object("django.conf:settings", namespace="CELERY")

app.autodiscover_tasks()
