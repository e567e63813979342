import structlog
from django.http import JsonResponse
from django.utils import timezone
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_http_methods

from .exceptions import error_payload, server_error_payload

logger = structlog.get_logger(__name__)


@csrf_exempt
@require_http_methods(["GET"])
def health(request):
    """Liveness probe."""
    return JsonResponse(
        {
            "status": "OK",
            "message": "Server is running",
            "timestamp": timezone.now().isoformat(),
        },
        status=200,
    )


def route_not_found(request, exception=None):
    return JsonResponse(error_payload("Route not found"), status=404)


def server_error(request):
    logger.error("http.server_error", path=request.path)
    return JsonResponse(server_error_payload(), status=500)
