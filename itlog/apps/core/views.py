import logging

from django.http import JsonResponse

from itlog.apps.core.health import check_storage

logger = logging.getLogger(__name__)


def healthz(request):
    """Public health check endpoint."""
    try:
        details = check_storage()
    except Exception as exc:  # noqa: BLE001
        logger.warning("Health check failed", extra={"error": str(exc)})
        resp = JsonResponse({"status": "error", "error": str(exc)})
        resp.status_code = 503
        resp["Cache-Control"] = "no-store"
        return resp

    resp = JsonResponse({"status": "ok", "checks": details})
    resp["Cache-Control"] = "no-store"
    return resp
