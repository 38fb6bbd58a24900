import logging

from django.apps import AppConfig

logger = logging.getLogger(__name__)


class MaintenanceConfig(AppConfig):
    name = "itlog.apps.maintenance"
    verbose_name = "Maintenance"

    def ready(self):
        """Register HEIF opener so Pillow can read iPhone camera photos."""
        try:
            from pillow_heif import register_heif_opener
        except ImportError:  # pragma: no cover - optional codec
            logger.warning("HEIF support unavailable; HEIC photos will be rejected.")
            return
        register_heif_opener()
