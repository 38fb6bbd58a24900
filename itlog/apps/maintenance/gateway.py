"""Translation between maintenance log records and the data service.

The data service stores rows with its own column names (``computer_model``,
``log_date``, ``image_url`` ...) and raw string timestamps. Everything that
crosses that boundary goes through ``record_from_row`` or ``row_from_dto``
here, so views and templates only ever see ``MaintenanceLog`` objects.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Mapping
from datetime import UTC, datetime
from typing import Any

from django.conf import settings
from django.utils import timezone
from django.utils.dateparse import parse_datetime

from itlog.apps.core.media import photo_extension
from itlog.apps.maintenance.backends import Row, StorageBackend, get_backend
from itlog.apps.maintenance.errors import FetchError, InsertError, PersistenceError
from itlog.apps.maintenance.records import CreateLogDTO, ImageUpload, MaintenanceLog

logger = logging.getLogger(__name__)


def _optional_text(value: Any) -> str | None:
    """Stored NULLs and empty strings both mean "not provided"."""
    if value is None:
        return None
    text = str(value)
    return text if text else None


def _parse_log_date(value: Any) -> datetime:
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value:
        parsed = parse_datetime(value)
        if parsed is None:
            raise ValueError(f"unparseable log_date {value!r}")
    else:
        raise ValueError("missing log_date")
    if timezone.is_naive(parsed):
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def record_from_row(row: Mapping[str, Any]) -> MaintenanceLog:
    """Map one stored row to a record.

    Raises:
        KeyError: A required column is missing.
        ValueError: ``log_date`` is missing or unparseable.
    """
    return MaintenanceLog(
        id=str(row["id"]),
        computer_model=row["computer_model"],
        serial_number=row["serial_number"],
        owner=row["owner"],
        ip_address=_optional_text(row.get("ip_address")),
        reported_issue=row["reported_issue"],
        diagnosis=row["diagnosis"],
        actions_taken=row["actions_taken"],
        status=row["status"],
        image_url=_optional_text(row.get("image_url")),
        log_date=_parse_log_date(row.get("log_date")),
    )


def row_from_dto(dto: CreateLogDTO, *, image_url: str | None, log_date: datetime) -> Row:
    return {
        "computer_model": dto.computer_model,
        "serial_number": dto.serial_number,
        "owner": dto.owner,
        "ip_address": dto.ip_address or None,
        "reported_issue": dto.reported_issue,
        "diagnosis": dto.diagnosis,
        "actions_taken": dto.actions_taken,
        "status": str(dto.status),
        "image_url": image_url,
        "log_date": log_date.isoformat(),
    }


class MaintenanceLogGateway:
    """Reads and writes maintenance logs through a ``StorageBackend``."""

    def __init__(
        self,
        backend: StorageBackend,
        *,
        table: str = "maintenance_logs",
        bucket: str = "maintenance-images",
        clock: Callable[[], datetime] = timezone.now,
    ) -> None:
        self.backend = backend
        self.table = table
        self.bucket = bucket
        self.clock = clock

    def list_all(self) -> list[MaintenanceLog]:
        """All logs, most recent ``log_date`` first."""
        rows = self.backend.select(self.table, order_by="log_date", descending=True)
        try:
            records = [record_from_row(row) for row in rows]
        except (KeyError, TypeError, ValueError) as exc:
            raise FetchError(f"Malformed maintenance log row: {exc}") from exc
        # The service already orders rows; this keeps the guarantee when it
        # compares timestamps as text.
        records.sort(key=lambda record: record.log_date, reverse=True)
        return records

    def create(self, dto: CreateLogDTO, image: ImageUpload | None = None) -> MaintenanceLog:
        """Upload the photo (if any), then insert the row.

        A failed upload means nothing is inserted. A failed insert after a
        successful upload leaves the photo in the bucket.
        """
        image_url = None
        object_path = None
        if image is not None:
            object_path = self.object_name(image)
            self.backend.upload(self.bucket, object_path, image.content, image.content_type)
            image_url = self.backend.public_url(self.bucket, object_path)
            logger.info(
                "Uploaded maintenance photo",
                extra={"bucket": self.bucket, "object_path": object_path, "bytes": image.size},
            )

        row = row_from_dto(dto, image_url=image_url, log_date=self.clock())
        try:
            stored = self.backend.insert(self.table, row)
        except PersistenceError:
            if object_path is not None:
                logger.warning(
                    "Maintenance log insert failed after photo upload; photo is orphaned",
                    extra={"bucket": self.bucket, "object_path": object_path},
                )
            raise

        try:
            record = record_from_row(stored)
        except (KeyError, TypeError, ValueError) as exc:
            raise InsertError(f"Data service returned a malformed row: {exc}") from exc

        logger.info(
            "Created maintenance log",
            extra={"log_id": record.id, "status": record.status, "has_photo": image is not None},
        )
        return record

    def object_name(self, image: ImageUpload) -> str:
        """Time-based object name keeping the photo's extension."""
        millis = time.time_ns() // 1_000_000
        return f"{millis}{photo_extension(image.name, image.content_type)}"

    def ping(self) -> dict[str, Any]:
        return self.backend.ping(self.table)


def get_gateway() -> MaintenanceLogGateway:
    return MaintenanceLogGateway(
        get_backend(),
        table=settings.MAINTENANCE_LOG_TABLE,
        bucket=settings.MAINTENANCE_IMAGE_BUCKET,
    )
