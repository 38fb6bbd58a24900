"""Health check helpers."""

from __future__ import annotations

from itlog.apps.maintenance.gateway import get_gateway


def check_storage() -> dict:
    """Verify the data service answers a minimal query on the log table."""
    return get_gateway().ping()
