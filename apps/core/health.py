"""
Health check endpoints for load balancers and deployment verification.
"""

import logging
import os

from django.conf import settings
from django.db import connection
from django.http import JsonResponse
from django.urls import path
from django.views.decorators.cache import never_cache
from django.views.decorators.http import require_GET

logger = logging.getLogger(__name__)


@never_cache
@require_GET
def health_check(request) -> JsonResponse:
    """
    Basic health check endpoint.

    Returns 200 OK if the application is running.
    """
    return JsonResponse(
        {
            "status": "ok",
            "version": getattr(settings, "VERSION", "1.0.0"),
        }
    )


@never_cache
@require_GET
def readiness_check(request) -> JsonResponse:
    """
    Readiness check: the database answers and invoices can be written.

    Returns:
        JsonResponse: {"status": "ready", "checks": {...}} or 503 if not ready
    """
    checks = {}
    ready = True

    try:
        with connection.cursor() as cursor:
            cursor.execute("SELECT 1")
            cursor.fetchone()
        checks["database"] = "healthy"
    except Exception as e:
        logger.error(f"Database health check failed: {e}")
        checks["database"] = f"unhealthy: {str(e)}"
        ready = False

    invoices_dir = os.path.join(settings.MEDIA_ROOT, settings.INVOICE_DIRNAME)
    try:
        os.makedirs(invoices_dir, exist_ok=True)
        if not os.access(invoices_dir, os.W_OK):
            raise PermissionError(f"{invoices_dir} is not writable")
        checks["invoice_storage"] = "healthy"
    except OSError as e:
        logger.error(f"Invoice storage health check failed: {e}")
        checks["invoice_storage"] = f"unhealthy: {str(e)}"
        ready = False

    return JsonResponse(
        {"status": "ready" if ready else "not_ready", "checks": checks},
        status=200 if ready else 503,
    )


# URL patterns for health check endpoints
urlpatterns = [
    path("", health_check, name="health"),
    path("ready/", readiness_check, name="readiness"),
]
