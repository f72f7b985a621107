"""
WSGI config for ConverseX.

The realtime hub needs ASGI (config/asgi.py); WSGI is provided for
serving the REST API alone with a traditional WSGI server.

For more information on this file, see:
https://docs.djangoproject.com/en/5.2/howto/deployment/wsgi/
"""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings")

application = get_wsgi_application()
