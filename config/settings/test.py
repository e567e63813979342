"""Test settings.

Runs the suite against an in-memory SQLite database, executes Celery
tasks inline and keeps uploaded images in a throwaway directory.
"""

import tempfile
from pathlib import Path

from .base import *  # noqa: F401,F403

DEBUG = False

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
    }
}

PASSWORD_HASHERS = ['django.contrib.auth.hashers.MD5PasswordHasher']

CELERY_TASK_ALWAYS_EAGER = True
CELERY_TASK_EAGER_PROPAGATES = True

IMAGE_STORAGE_BACKEND = 'local'
MEDIA_ROOT = Path(tempfile.mkdtemp(prefix='property-rental-media-'))

STORAGES = {
    'default': {
        'BACKEND': 'django.core.files.storage.FileSystemStorage',
    },
    'staticfiles': {
        'BACKEND': 'django.contrib.staticfiles.storage.StaticFilesStorage',
    },
}
