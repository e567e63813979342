from django.apps import AppConfig
from django.conf import settings


class PropertiesConfig(AppConfig):
    name = 'apps.properties'
    label = 'properties'
    default_auto_field = 'django.db.models.BigAutoField'

    image_store = None

    def ready(self):
        from .storage import build_image_store

        # Resolved once per process; views pass it to the services.
        self.image_store = build_image_store(settings)
