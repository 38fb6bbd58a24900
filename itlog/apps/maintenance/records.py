"""Maintenance log record types.

A ``MaintenanceLog`` is what the data service hands back; a ``CreateLogDTO``
is what the entry form submits. Records are never edited after creation.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from django.db import models


class LogStatus(models.TextChoices):
    """Where a maintenance event stands."""

    REPORTED = "Reported", "Reported"
    IN_PROGRESS = "In Progress", "In Progress"
    PENDING_PARTS = "Pending Parts", "Pending Parts"
    RESOLVED = "Resolved", "Resolved"
    CLOSED = "Closed", "Closed"


# Draft text fields the form must fill before a log can be created
REQUIRED_TEXT_FIELDS = (
    "computer_model",
    "serial_number",
    "owner",
    "reported_issue",
    "diagnosis",
    "actions_taken",
)
OPTIONAL_TEXT_FIELDS = ("ip_address",)
DRAFT_FIELDS = (*REQUIRED_TEXT_FIELDS, *OPTIONAL_TEXT_FIELDS, "status")


@dataclass(frozen=True)
class ImageUpload:
    """A photo picked in the form, held as raw bytes until it is uploaded."""

    name: str
    content: bytes
    content_type: str = ""

    @property
    def size(self) -> int:
        return len(self.content)


@dataclass(frozen=True)
class CreateLogDTO:
    """Payload for creating a log. ``image_url`` is set only by the gateway."""

    computer_model: str
    serial_number: str
    owner: str
    reported_issue: str
    diagnosis: str
    actions_taken: str
    status: str = LogStatus.REPORTED
    ip_address: str | None = None
    image_url: str | None = None


@dataclass(frozen=True)
class MaintenanceLog:
    id: str
    computer_model: str
    serial_number: str
    owner: str
    reported_issue: str
    diagnosis: str
    actions_taken: str
    status: str
    log_date: datetime
    ip_address: str | None = None
    image_url: str | None = None

    @property
    def status_label(self) -> str:
        try:
            return LogStatus(self.status).label
        except ValueError:
            return self.status

