from django.conf import settings
from django.urls import include, path, re_path

from itlog.apps.core.views import healthz
from itlog.views import serve_media

urlpatterns = [
    path("", include("itlog.apps.maintenance.urls")),  # Form + history page
    path("healthz", healthz, name="healthz"),  # Health check
]

# Photos stored by the local backend; hosted storage serves its own URLs
if settings.STORAGE_BACKEND == "local":
    urlpatterns += [
        re_path(
            rf"^{settings.MEDIA_URL.strip('/')}/(?P<bucket>[\w.-]+)/(?P<name>[^/]+)$",
            serve_media,
            name="media",
        ),
    ]
