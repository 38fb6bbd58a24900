"""Adapters for the external data service that stores maintenance logs.

The service offers two things: a table of rows (select ordered, insert) and a
bucket of objects (upload, public URL). ``SupabaseBackend`` talks to a hosted
PostgREST + storage project over HTTP; ``LocalBackend`` keeps rows in process
and writes photos under ``MEDIA_ROOT`` for development and tests.
"""

from __future__ import annotations

import threading
import uuid
from abc import ABC, abstractmethod
from functools import lru_cache
from pathlib import Path
from typing import Any
from urllib.parse import quote

import requests
from django.conf import settings
from django.core.exceptions import ImproperlyConfigured
from django.utils import timezone

from itlog.apps.maintenance.errors import FetchError, InsertError, PersistenceError, UploadError

Row = dict[str, Any]


class StorageBackend(ABC):
    @abstractmethod
    def select(self, table: str, order_by: str, descending: bool = True) -> list[Row]:
        """Return every row of ``table`` ordered by ``order_by``."""

    @abstractmethod
    def insert(self, table: str, row: Row) -> Row:
        """Insert ``row`` and return it as stored (with service-assigned fields)."""

    @abstractmethod
    def upload(self, bucket: str, path: str, content: bytes, content_type: str) -> None:
        """Store ``content`` at ``path``. Existing objects are never overwritten."""

    @abstractmethod
    def public_url(self, bucket: str, path: str) -> str:
        """Return a durable public reference to a stored object."""

    @abstractmethod
    def ping(self, table: str) -> dict[str, Any]:
        """Cheap reachability check used by the health endpoint."""


class SupabaseBackend(StorageBackend):
    """PostgREST table API plus storage API of a Supabase project."""

    def __init__(
        self,
        base_url: str,
        api_key: str,
        timeout: float = 10.0,
        session: requests.Session | None = None,
    ) -> None:
        self.base_url = base_url.strip().rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({"apikey": api_key, "Authorization": f"Bearer {api_key}"})

    def select(self, table: str, order_by: str, descending: bool = True) -> list[Row]:
        direction = "desc" if descending else "asc"
        response = self._request(
            "GET",
            f"/rest/v1/{table}",
            FetchError,
            params={"select": "*", "order": f"{order_by}.{direction}"},
        )
        rows = self._json(response, FetchError)
        if not isinstance(rows, list):
            raise FetchError(f"Expected a list of rows from {table}, got {type(rows).__name__}")
        return rows

    def insert(self, table: str, row: Row) -> Row:
        response = self._request(
            "POST",
            f"/rest/v1/{table}",
            InsertError,
            json=[row],
            headers={"Prefer": "return=representation"},
        )
        stored = self._json(response, InsertError)
        if not isinstance(stored, list) or not stored:
            raise InsertError(f"Insert into {table} returned no row")
        return stored[0]

    def upload(self, bucket: str, path: str, content: bytes, content_type: str) -> None:
        self._request(
            "POST",
            f"/storage/v1/object/{bucket}/{quote(path)}",
            UploadError,
            data=content,
            headers={"Content-Type": content_type or "application/octet-stream", "x-upsert": "false"},
        )

    def public_url(self, bucket: str, path: str) -> str:
        return f"{self.base_url}/storage/v1/object/public/{bucket}/{quote(path)}"

    def ping(self, table: str) -> dict[str, Any]:
        self._request("GET", f"/rest/v1/{table}", FetchError, params={"select": "id", "limit": "1"})
        return {"backend": "supabase", "table": table}

    def _request(
        self,
        method: str,
        path: str,
        error_class: type[PersistenceError],
        **kwargs: Any,
    ) -> requests.Response:
        try:
            response = self.session.request(
                method, f"{self.base_url}{path}", timeout=self.timeout, **kwargs
            )
            response.raise_for_status()
        except requests.RequestException as exc:
            raise error_class(str(exc)) from exc
        return response

    @staticmethod
    def _json(response: requests.Response, error_class: type[PersistenceError]) -> Any:
        try:
            return response.json()
        except ValueError as exc:
            raise error_class(f"Invalid JSON from data service: {exc}") from exc


class LocalBackend(StorageBackend):
    """In-process rows, photos on disk (or in memory when no root is given)."""

    def __init__(self, media_root: Path | str | None = None, media_url: str = "/media/") -> None:
        self.media_root = Path(media_root) if media_root else None
        self.media_url = media_url if media_url.endswith("/") else f"{media_url}/"
        self._tables: dict[str, list[Row]] = {}
        self._objects: dict[tuple[str, str], bytes] = {}
        # runserver handles requests on threads
        self._lock = threading.Lock()

    def select(self, table: str, order_by: str, descending: bool = True) -> list[Row]:
        with self._lock:
            rows = [dict(row) for row in self._tables.get(table, [])]
        return sorted(rows, key=lambda row: str(row.get(order_by) or ""), reverse=descending)

    def insert(self, table: str, row: Row) -> Row:
        stored = dict(row)
        stored.setdefault("id", str(uuid.uuid4()))
        if not stored.get("log_date"):
            stored["log_date"] = timezone.now().isoformat()
        with self._lock:
            self._tables.setdefault(table, []).append(stored)
        return dict(stored)

    def upload(self, bucket: str, path: str, content: bytes, content_type: str) -> None:
        key = (bucket, path)
        with self._lock:
            if key in self._objects:
                raise UploadError(f"Object {bucket}/{path} already exists")
            if self.media_root is not None:
                target = self.media_root / bucket / path
                try:
                    target.parent.mkdir(parents=True, exist_ok=True)
                    target.write_bytes(content)
                except OSError as exc:
                    raise UploadError(str(exc)) from exc
            self._objects[key] = content

    def public_url(self, bucket: str, path: str) -> str:
        return f"{self.media_url}{bucket}/{quote(path)}"

    def ping(self, table: str) -> dict[str, Any]:
        with self._lock:
            count = len(self._tables.get(table, []))
        return {"backend": "local", "table": table, "rows": count}

    def get_object(self, bucket: str, path: str) -> bytes | None:
        with self._lock:
            return self._objects.get((bucket, path))


def create_backend(
    name: str,
    *,
    supabase_url: str = "",
    supabase_key: str = "",
    timeout: float = 10.0,
    media_root: Path | str | None = None,
    media_url: str = "/media/",
) -> StorageBackend:
    normalized = name.strip().lower()
    if normalized == "local":
        return LocalBackend(media_root=media_root, media_url=media_url)
    if normalized == "supabase":
        if not supabase_url or not supabase_key:
            raise ImproperlyConfigured(
                "STORAGE_BACKEND=supabase requires SUPABASE_URL and SUPABASE_KEY."
            )
        return SupabaseBackend(supabase_url, supabase_key, timeout=timeout)
    raise ImproperlyConfigured(f"Unsupported STORAGE_BACKEND: {name}")


@lru_cache(maxsize=1)
def get_backend() -> StorageBackend:
    """Process-wide backend built from settings (cleared in tests)."""
    return create_backend(
        settings.STORAGE_BACKEND,
        supabase_url=settings.SUPABASE_URL,
        supabase_key=settings.SUPABASE_KEY,
        timeout=settings.STORAGE_TIMEOUT_SECONDS,
        media_root=settings.MEDIA_ROOT,
        media_url=settings.MEDIA_URL,
    )
