"""Photo type configuration and preview helpers.

Used by:
- Web form validation (uploads)
- Object naming when a photo is sent to the data service
- Previews shown while a log entry is still a draft
"""

from __future__ import annotations

import base64
import binascii
import mimetypes
import re
from pathlib import Path

ALLOWED_HEIC_EXTENSIONS = {".heic", ".heif"}

MAX_PHOTO_FILE_SIZE_BYTES = 20 * 1024 * 1024  # 20MB

DEFAULT_PHOTO_CONTENT_TYPE = "application/octet-stream"

# Longest preview data URI a photo within the size limit encodes to
# (base64 body plus room for the "data:<type>;base64," prefix)
MAX_PREVIEW_DATA_URI_LENGTH = 4 * ((MAX_PHOTO_FILE_SIZE_BYTES + 2) // 3) + 256

_DATA_URI_RE = re.compile(r"^data:(?P<content_type>[\w.+-]+/[\w.+-]+)?;base64,(?P<payload>.*)$", re.S)


def photo_extension(filename: str, content_type: str = "") -> str:
    """Return the dotted extension to store a photo under.

    Falls back to the content type when the filename has no suffix, and to
    an empty string when neither says anything.
    """
    ext = Path(filename or "").suffix.lower()
    if ext:
        return ext
    return mimetypes.guess_extension(content_type or "") or ""


def image_data_uri(content: bytes, content_type: str) -> str:
    """Encode raw image bytes as a data URI the browser can render directly."""
    encoded = base64.b64encode(content).decode("ascii")
    return f"data:{content_type or DEFAULT_PHOTO_CONTENT_TYPE};base64,{encoded}"


def decode_data_uri(uri: str) -> tuple[bytes, str] | None:
    """Inverse of ``image_data_uri``.

    Returns:
        ``(content, content_type)``, or None if ``uri`` is not a base64 data URI.
    """
    match = _DATA_URI_RE.match((uri or "").strip())
    if not match:
        return None
    try:
        content = base64.b64decode(match.group("payload"), validate=True)
    except (binascii.Error, ValueError):
        return None
    return content, match.group("content_type") or DEFAULT_PHOTO_CONTENT_TYPE
