"""URL configuration for the property rental backend.

The `urlpatterns` list routes URLs to views. Every API endpoint lives under
the `/api/` prefix; uploaded images are served from `MEDIA_URL` in debug.
"""
from django.conf import settings  # type: ignore
from django.conf.urls.static import static  # type: ignore
from django.contrib import admin  # type: ignore
from django.urls import path, include  # type: ignore
from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView  # type: ignore

from apps.core.views import health

urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/health', health, name='health'),
    # Application URLs
    path('api/auth/', include(('apps.users.auth_urls', 'auth'), namespace='auth')),
    path('api/', include('apps.properties.urls')),
    path('api/', include('apps.bookings.urls')),
    # API docs
    path('api/schema/', SpectacularAPIView.as_view(), name='schema'),
    path('api/docs/', SpectacularSwaggerView.as_view(url_name='schema'), name='swagger-ui'),
]

if settings.DEBUG:
    urlpatterns += static(settings.MEDIA_URL, document_root=settings.MEDIA_ROOT)

handler404 = 'apps.core.views.route_not_found'
handler500 = 'apps.core.views.server_error'
