"""Client IP address lookup."""

from __future__ import annotations

from django.http import HttpRequest
from ipware import get_client_ip


def get_real_ip(request: HttpRequest) -> str | None:
    """Return the client address, honoring X-Forwarded-For behind a proxy.

    Returns None if the address cannot be determined.
    """
    ip, _ = get_client_ip(request)
    return ip
