"""The page's copy of the maintenance history."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from itlog.apps.maintenance.errors import PersistenceError
from itlog.apps.maintenance.gateway import MaintenanceLogGateway
from itlog.apps.maintenance.records import CreateLogDTO, ImageUpload, MaintenanceLog

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FetchResult:
    """Outcome of listing logs: the records, or the reason there are none."""

    records: tuple[MaintenanceLog, ...] = ()
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, records: Iterable[MaintenanceLog]) -> FetchResult:
        return cls(records=tuple(records))

    @classmethod
    def failure(cls, reason: str) -> FetchResult:
        return cls(error=reason)


class LogBook:
    """Holds the current record collection and keeps it in step with storage.

    The collection is only ever replaced as a whole, never edited in place.
    A failed fetch leaves whatever was there before.
    """

    def __init__(
        self, gateway: MaintenanceLogGateway, records: Iterable[MaintenanceLog] = ()
    ) -> None:
        self.gateway = gateway
        self._records: tuple[MaintenanceLog, ...] = tuple(records)
        self.loading = False
        self.last_error: str | None = None

    @property
    def records(self) -> tuple[MaintenanceLog, ...]:
        return self._records

    def replace(self, records: Iterable[MaintenanceLog]) -> None:
        self._records = tuple(records)

    def load(self) -> FetchResult:
        return self.refresh()

    def refresh(self) -> FetchResult:
        self.loading = True
        try:
            records = self.gateway.list_all()
        except PersistenceError as exc:
            self.last_error = str(exc)
            logger.warning("Could not load maintenance logs", extra={"error": self.last_error})
            return FetchResult.failure(self.last_error)
        finally:
            self.loading = False

        self.replace(records)
        self.last_error = None
        return FetchResult.success(self._records)

    def submit(self, dto: CreateLogDTO, image: ImageUpload | None = None) -> MaintenanceLog:
        """Create a log, then re-read the whole list from storage.

        Errors from ``create`` propagate. A failed re-read does not undo a
        successful create; it shows up as ``last_error`` instead.
        """
        record = self.gateway.create(dto, image)
        self.refresh()
        return record
