"""WSGI entry point for the property rental backend.

Production WSGI servers (gunicorn, uwsgi) load ``application`` from here,
so the production settings are the default. Set DJANGO_SETTINGS_MODULE to
override.
"""

import os
from django.core.wsgi import get_wsgi_application  # type: ignore

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'config.settings.prod')

application = get_wsgi_application()
