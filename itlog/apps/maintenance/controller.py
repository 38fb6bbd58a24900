"""Draft state for the maintenance log entry form.

``LogFormController`` owns one draft: the text fields, the status, and an
optional photo with its preview. ``submit`` hands the finished draft to a
handler exactly once and either resets (success) or leaves everything in
place so the technician can retry (failure).
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass

from itlog.apps.core.media import image_data_uri
from itlog.apps.maintenance.errors import PersistenceError
from itlog.apps.maintenance.records import (
    DRAFT_FIELDS,
    REQUIRED_TEXT_FIELDS,
    CreateLogDTO,
    ImageUpload,
    LogStatus,
    MaintenanceLog,
)

logger = logging.getLogger(__name__)

FAILURE_NOTICE = "Failed to save log. Please try again."

SubmitHandler = Callable[[CreateLogDTO, ImageUpload | None], MaintenanceLog]


class UnknownFieldError(ValueError):
    """``set_field`` was given a name that is not part of the draft."""


class DraftIncompleteError(ValueError):
    def __init__(self, missing: list[str]) -> None:
        self.missing = tuple(missing)
        super().__init__(f"Missing required fields: {', '.join(self.missing)}")


class SubmissionInProgressError(RuntimeError):
    """A submit was attempted while the previous one is still running."""


def initial_draft() -> dict[str, str]:
    draft = {name: "" for name in DRAFT_FIELDS}
    draft["status"] = LogStatus.REPORTED
    return draft


@dataclass(frozen=True)
class SubmitOutcome:
    ok: bool
    record: MaintenanceLog | None = None
    notice: str = ""
    error: Exception | None = None


class LogFormController:
    def __init__(self) -> None:
        self.draft = initial_draft()
        self.image: ImageUpload | None = None
        self.preview: str | None = None
        self.is_submitting = False

    def set_field(self, name: str, value: str | None) -> None:
        if name not in self.draft:
            raise UnknownFieldError(name)
        self.draft[name] = "" if value is None else value

    def select_image(self, upload: ImageUpload) -> None:
        """Pick a photo, replacing any earlier one; the preview is built immediately."""
        self.image = upload
        self.preview = image_data_uri(upload.content, upload.content_type)

    def clear_image(self) -> None:
        self.image = None
        self.preview = None

    def reset(self) -> None:
        self.draft = initial_draft()
        self.clear_image()

    @property
    def is_pristine(self) -> bool:
        return self.draft == initial_draft() and self.image is None and self.preview is None

    def missing_fields(self) -> list[str]:
        return [name for name in REQUIRED_TEXT_FIELDS if not str(self.draft[name]).strip()]

    def to_dto(self) -> CreateLogDTO:
        text = {name: str(self.draft[name]).strip() for name in REQUIRED_TEXT_FIELDS}
        ip_address = str(self.draft["ip_address"]).strip()
        return CreateLogDTO(
            **text,
            status=self.draft["status"] or LogStatus.REPORTED,
            ip_address=ip_address or None,
        )

    def submit(self, handler: SubmitHandler) -> SubmitOutcome:
        """Send the draft and the raw photo (never the preview) to ``handler``.

        Raises:
            SubmissionInProgressError: ``handler`` has not returned yet.
            DraftIncompleteError: A required field is blank.
        """
        if self.is_submitting:
            raise SubmissionInProgressError("A maintenance log is already being saved.")
        missing = self.missing_fields()
        if missing:
            raise DraftIncompleteError(missing)

        dto = self.to_dto()
        self.is_submitting = True
        try:
            record = handler(dto, self.image)
        except PersistenceError as exc:
            logger.warning(
                "Maintenance log submission failed",
                extra={"error": str(exc), "has_photo": self.image is not None},
            )
            return SubmitOutcome(ok=False, notice=FAILURE_NOTICE, error=exc)
        finally:
            self.is_submitting = False

        self.reset()
        return SubmitOutcome(ok=True, record=record)
