import os
import tempfile

# Not a real secret - tests don't need cryptographic security
os.environ.setdefault("SECRET_KEY", "test-key-not-secret")  # pragma: allowlist secret

from .base import *  # noqa

DEBUG = False

# Tests always run against the in-process backend
STORAGE_BACKEND = "local"
MEDIA_ROOT = tempfile.mkdtemp(prefix="itlog-test-media-")

# Suppress app logs during tests
# Tests verify behavior through assertions, not log inspection
LOGGING["loggers"]["itlog"]["level"] = "CRITICAL"  # type: ignore[index]  # noqa: F405
