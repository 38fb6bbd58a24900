"""Base Django settings."""

from __future__ import annotations

from pathlib import Path

from decouple import Csv, config

from itlog.apps.core.media import MAX_PHOTO_FILE_SIZE_BYTES, MAX_PREVIEW_DATA_URI_LENGTH

REPO_ROOT = Path(__file__).resolve().parent.parent.parent
BASE_DIR = REPO_ROOT

SECRET_KEY = config("SECRET_KEY", default="dev-secret-key")
DEBUG = config("DEBUG", default=True, cast=bool)
ALLOWED_HOSTS = config("ALLOWED_HOSTS", default="localhost,127.0.0.1", cast=Csv())

INSTALLED_APPS = [
    "django.contrib.messages",
    "django.contrib.staticfiles",
    "itlog.apps.core",
    "itlog.apps.maintenance",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "itlog.middleware.RequestContextMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.contrib.messages.middleware.MessageMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
]

ROOT_URLCONF = "itlog.urls"

TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [REPO_ROOT / "templates"],
        "APP_DIRS": True,
        "OPTIONS": {
            "context_processors": [
                "django.template.context_processors.debug",
                "django.template.context_processors.request",
                "django.contrib.messages.context_processors.messages",
            ],
        },
    },
]

WSGI_APPLICATION = "itlog.wsgi.application"

# Records live in the external data service; Django itself keeps no tables.
DATABASES: dict = {}

# No session store, so flash messages ride in a signed cookie
MESSAGE_STORAGE = "django.contrib.messages.storage.cookie.CookieStorage"

LANGUAGE_CODE = "en-us"
TIME_ZONE = "UTC"
USE_I18N = True
USE_TZ = True

STATIC_URL = "/static/"
STATIC_ROOT = REPO_ROOT / "static_collected"
STATICFILES_DIRS = [REPO_ROOT / "itlog/static"]

MEDIA_URL = "/media/"
MEDIA_ROOT = REPO_ROOT / "media"

# A retry after a failed save carries the photo back as a base64 preview
# field, so non-file form data must fit the largest preview plus the text fields
DATA_UPLOAD_MAX_MEMORY_SIZE = MAX_PREVIEW_DATA_URI_LENGTH + 1024 * 1024
FILE_UPLOAD_MAX_MEMORY_SIZE = MAX_PHOTO_FILE_SIZE_BYTES + 1024 * 1024

# External data service
# ---------------------
# "local" keeps records in process and photos under MEDIA_ROOT (development).
# "supabase" talks to a hosted PostgREST + storage project.
STORAGE_BACKEND = config("STORAGE_BACKEND", default="local").strip().lower()
SUPABASE_URL = config("SUPABASE_URL", default="").strip()
SUPABASE_KEY = config("SUPABASE_KEY", default="").strip()
MAINTENANCE_LOG_TABLE = config("MAINTENANCE_LOG_TABLE", default="maintenance_logs")
MAINTENANCE_IMAGE_BUCKET = config("MAINTENANCE_IMAGE_BUCKET", default="maintenance-images")
STORAGE_TIMEOUT_SECONDS = config("STORAGE_TIMEOUT_SECONDS", default=10, cast=float)

# Logging
# -------
LOG_LEVEL = config("LOG_LEVEL", default="INFO").upper()
APP_LOG_LEVEL = config("APP_LOG_LEVEL", default="INFO").upper()
DJANGO_LOG_LEVEL = config("DJANGO_LOG_LEVEL", default="WARNING").upper()
LOG_FORMAT = config("LOG_FORMAT", default="json").lower()

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "filters": {
        "request_context": {"()": "itlog.logging.RequestContextFilter"},
    },
    "formatters": {
        "json": {"()": "itlog.logging.JsonFormatter"},
        "dev": {"()": "itlog.logging.DevFormatter"},
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": LOG_FORMAT if LOG_FORMAT in {"json", "dev"} else "json",
            "filters": ["request_context"],
        },
    },
    "root": {"handlers": ["console"], "level": LOG_LEVEL},
    "loggers": {
        "itlog": {"handlers": ["console"], "level": APP_LOG_LEVEL, "propagate": False},
        "django.request": {
            "handlers": ["console"],
            "level": DJANGO_LOG_LEVEL,
            "propagate": False,
        },
        "django.server": {
            "handlers": ["console"],
            "level": DJANGO_LOG_LEVEL,
            "propagate": False,
        },
    },
}
