"""Forms for the maintenance log page."""

from __future__ import annotations

from django import forms
from django.core.files.uploadedfile import SimpleUploadedFile

from itlog.apps.core.forms import StyledFormMixin, validate_image_file
from itlog.apps.core.media import decode_data_uri, photo_extension
from itlog.apps.maintenance.records import ImageUpload, LogStatus

PHOTO_ACCEPT = "image/*,.heic,.heif,image/heic,image/heif"


class MaintenanceLogForm(StyledFormMixin, forms.Form):
    computer_model = forms.CharField(
        label="Model / Asset Tag",
        max_length=200,
        widget=forms.TextInput(attrs={"placeholder": "e.g. Dell Latitude", "autocomplete": "off"}),
    )
    serial_number = forms.CharField(
        label="Serial Number",
        max_length=200,
        widget=forms.TextInput(attrs={"placeholder": "e.g. 5CG123...", "autocomplete": "off"}),
    )
    owner = forms.CharField(
        label="Owner / Dept",
        max_length=200,
        widget=forms.TextInput(attrs={"placeholder": "User name"}),
    )
    ip_address = forms.CharField(
        label="IP Address",
        max_length=100,
        required=False,
        widget=forms.TextInput(attrs={"placeholder": "Optional", "autocomplete": "off"}),
    )
    reported_issue = forms.CharField(
        label="Reported Issue",
        widget=forms.Textarea(attrs={"rows": 2, "placeholder": "What is the problem?"}),
    )
    diagnosis = forms.CharField(
        label="Diagnosis",
        widget=forms.Textarea(attrs={"rows": 2, "placeholder": "Technical analysis..."}),
    )
    actions_taken = forms.CharField(
        label="Actions Taken",
        widget=forms.Textarea(attrs={"rows": 2, "placeholder": "Resolution steps..."}),
    )
    status = forms.ChoiceField(
        label="Status",
        choices=LogStatus.choices,
        initial=LogStatus.REPORTED,
    )

    # One input for both camera and library; the page toggles its capture attribute
    photo = forms.FileField(
        label="Photo",
        required=False,
        widget=forms.FileInput(attrs={"accept": PHOTO_ACCEPT}),
    )
    # Photo kept from a failed submit, as a data URI
    image_preview = forms.CharField(required=False, widget=forms.HiddenInput())
    image_name = forms.CharField(required=False, widget=forms.HiddenInput())
    clear_image = forms.BooleanField(label="Remove photo", required=False)

    def clean_photo(self):
        return validate_image_file(self.cleaned_data.get("photo"))

    def clean(self):
        cleaned = super().clean()
        picked = cleaned.get("photo")
        if picked:
            cleaned["image"] = ImageUpload(
                name=picked.name,
                content=picked.read(),
                content_type=getattr(picked, "content_type", "") or "",
            )
        elif cleaned.get("clear_image"):
            cleaned["image"] = None
        else:
            cleaned["image"] = self._restore_preview(
                cleaned.get("image_preview") or "", cleaned.get("image_name") or ""
            )
        return cleaned

    def _restore_preview(self, preview: str, name: str) -> ImageUpload | None:
        if not preview:
            return None
        decoded = decode_data_uri(preview)
        if decoded is None:
            self.add_error(None, "The selected photo could not be restored. Please pick it again.")
            return None

        content, content_type = decoded
        name = name or f"photo{photo_extension('', content_type)}"
        try:
            validate_image_file(SimpleUploadedFile(name, content, content_type=content_type))
        except forms.ValidationError:
            self.add_error(None, "The selected photo could not be restored. Please pick it again.")
            return None
        return ImageUpload(name=name, content=content, content_type=content_type)
