"""Production settings."""

from decouple import config

from .base import *  # noqa

DEBUG = False
SESSION_COOKIE_SECURE = True
CSRF_COOKIE_SECURE = True
SECURE_SSL_REDIRECT = config("SECURE_SSL_REDIRECT", default=True, cast=bool)
SECURE_HSTS_SECONDS = 31536000
SECURE_HSTS_INCLUDE_SUBDOMAINS = True

# Trust X-Forwarded-Proto header from the hosting system's reverse proxy
SECURE_PROXY_SSL_HEADER = ("HTTP_X_FORWARDED_PROTO", "https")

# Whitenoise for static file serving
MIDDLEWARE.insert(1, "whitenoise.middleware.WhiteNoiseMiddleware")  # noqa: F405
STORAGES = {
    "default": {"BACKEND": "django.core.files.storage.FileSystemStorage"},
    "staticfiles": {"BACKEND": "whitenoise.storage.CompressedManifestStaticFilesStorage"},
}

# Production reads and writes the hosted data service
STORAGE_BACKEND = config("STORAGE_BACKEND", default="supabase").strip().lower()

LOGGING["loggers"]["itlog"]["level"] = config(  # noqa: F405
    "WEB_LOG_LEVEL",
    default=APP_LOG_LEVEL,  # noqa: F405
).upper()
