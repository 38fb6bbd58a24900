"""Core form utilities and mixins."""

from __future__ import annotations

from pathlib import Path

from django import forms
from django.core.files.uploadedfile import UploadedFile
from PIL import Image, UnidentifiedImageError

from itlog.apps.core.media import ALLOWED_HEIC_EXTENSIONS, MAX_PHOTO_FILE_SIZE_BYTES

# Widget type to CSS class mapping
WIDGET_CSS_CLASSES = {
    forms.TextInput: "form-input",
    forms.Textarea: "form-input form-textarea",
    forms.Select: "form-input form-select",
    # File inputs are rendered as picker buttons in templates
}


class StyledFormMixin:
    """
    Mixin that adds CSS classes to form widgets automatically.

    Apply to form classes to enable use of {{ field }} in templates
    while maintaining consistent styling.

    Usage:
        class MyForm(StyledFormMixin, forms.Form):
            name = forms.CharField()

    Existing widget classes are kept; missing ones are appended.
    """

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._apply_widget_classes()

    def _apply_widget_classes(self):
        for field in self.fields.values():
            widget = field.widget
            for widget_type, css_class in WIDGET_CSS_CLASSES.items():
                if isinstance(widget, widget_type):
                    existing_classes = widget.attrs.get("class", "").split()
                    for cls in css_class.split():
                        if cls not in existing_classes:
                            existing_classes.append(cls)
                    widget.attrs["class"] = " ".join(existing_classes)
                    break


def validate_image_file(photo: UploadedFile | None) -> UploadedFile | None:
    """Validate an uploaded photo.

    Args:
        photo: The uploaded file, or None when nothing was picked.

    Returns:
        The same file, rewound to the start.

    Raises:
        forms.ValidationError: If the file is too large or is not an image.
    """
    if not photo:
        return None

    if photo.size and photo.size > MAX_PHOTO_FILE_SIZE_BYTES:
        raise forms.ValidationError("File too large. Maximum size is 20MB.")

    content_type = (getattr(photo, "content_type", "") or "").lower()
    ext = Path(getattr(photo, "name", "") or "").suffix.lower()

    # Browsers often send HEIC photos without an image/* content type
    if content_type and not content_type.startswith("image/") and ext not in ALLOWED_HEIC_EXTENSIONS:
        raise forms.ValidationError("Upload a valid image.")

    try:
        photo.seek(0)
        Image.open(photo).verify()
    except (UnidentifiedImageError, OSError) as err:
        raise forms.ValidationError("Upload a valid image.") from err
    finally:
        try:
            photo.seek(0)
        except (OSError, AttributeError):
            pass

    return photo
