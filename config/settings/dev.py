"""Development settings.

This module extends the base settings with development specific
configuration, such as enabling debug, allowing all hosts and exposing
underlying error messages in 500 responses. Do not use these settings in
production!
"""

from .base import *  # noqa: F401,F403

# Enable debug mode for development
DEBUG = True

# Allow all hosts in development
ALLOWED_HOSTS = ['*']

# Mobile clients and emulators call the API from many origins
CORS_ALLOW_ALL_ORIGINS = True

# Use console email backend during development
EMAIL_BACKEND = 'django.core.mail.backends.console.EmailBackend'
