"""Project-level views."""

from __future__ import annotations

import mimetypes
from pathlib import Path

from django.conf import settings
from django.core.exceptions import SuspiciousFileOperation
from django.http import FileResponse, Http404
from django.utils._os import safe_join


def serve_media(request, bucket: str, name: str):
    """Serve a maintenance photo the local storage backend wrote to disk.

    Photos live at ``MEDIA_ROOT/<bucket>/<name>``; only the configured photo
    bucket is exposed. Object names are never reused, so responses are
    cacheable forever.
    """
    if bucket != settings.MAINTENANCE_IMAGE_BUCKET:
        raise Http404("Unknown bucket.")
    if not getattr(settings, "MEDIA_ROOT", None):
        raise Http404("Media storage is not configured.")

    try:
        photo_path = Path(safe_join(str(settings.MEDIA_ROOT), bucket, name))
    except (ValueError, SuspiciousFileOperation) as exc:
        raise Http404("Invalid photo name.") from exc
    if not photo_path.is_file():
        raise Http404("Photo not found.")

    content_type = mimetypes.guess_type(name)[0] or "application/octet-stream"
    response = FileResponse(photo_path.open("rb"), content_type=content_type)
    response["Content-Length"] = photo_path.stat().st_size
    response["Cache-Control"] = "public, max-age=31536000, immutable"
    return response
