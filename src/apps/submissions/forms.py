"""Server-side validation for submissions.

These forms are the source of truth for what gets stored. Their bounds differ
from the advisory rules in ``apps.submissions.rules`` on purpose.
"""

import re
from typing import Any

from django import forms
from django.core.exceptions import NON_FIELD_ERRORS, ValidationError
from django.core.files.uploadedfile import UploadedFile
from django.core.validators import ProhibitNullCharactersValidator, RegexValidator

PHONE_VALIDATOR = RegexValidator(r"^[+\d\s()-]{7,20}$", "Enter a valid phone number.", code="invalid_phone")
NULL_CHARACTERS_VALIDATOR = ProhibitNullCharactersValidator()

RESUME_CONTENT_TYPES = frozenset(
    {
        "application/pdf",
        "application/msword",
        "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    }
)
RESUME_MAX_BYTES = 5 * 1024 * 1024

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


def to_snake(key: str) -> str:
    """``scrapTypes`` -> ``scrap_types``."""
    return _CAMEL_BOUNDARY.sub("_", key).lower()


def to_camel(name: str) -> str:
    """``scrap_types`` -> ``scrapTypes``."""
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


def form_data_from_payload(payload: dict[str, Any]) -> dict[str, Any]:
    """Rename camelCase request keys to the forms' field names."""
    return {to_snake(str(key)): value for key, value in payload.items()}


def error_details(form: forms.Form) -> list[dict[str, str | None]]:
    """Flatten form errors into a list of per-field entries keyed by JSON name."""
    details = []
    for field, errors in form.errors.get_json_data().items():
        name = None if field == NON_FIELD_ERRORS else to_camel(field)
        details.extend({"field": name, "message": error["message"], "code": error["code"]} for error in errors)
    return details


def validate_resume(upload: UploadedFile) -> None:
    """Reject anything that is not a PDF or Word document up to 5 MB."""
    content_type = getattr(upload, "content_type", None)
    if content_type not in RESUME_CONTENT_TYPES:
        raise ValidationError(
            "Only PDF, DOC or DOCX files are accepted.",
            code="invalid_type",
        )
    if upload.size > RESUME_MAX_BYTES:
        raise ValidationError(
            "Resume must be 5 MB or smaller (got %(size)d bytes).",
            code="file_too_large",
            params={"size": upload.size},
        )


class StringListField(forms.Field):
    """A JSON array of non-empty strings, each trimmed."""

    default_error_messages = {
        "invalid": "Enter a list of values.",
        "invalid_item": "Item %(index)d must be non-empty text.",
        "min_items": "Select at least %(limit)d item(s).",
        "max_items": "Select at most %(limit)d items.",
    }

    def __init__(self, *, min_items: int = 1, max_items: int = 20, **kwargs):
        self.min_items = min_items
        self.max_items = max_items
        super().__init__(**kwargs)

    def to_python(self, value):
        if value in self.empty_values:
            return []
        if not isinstance(value, (list, tuple)):
            raise ValidationError(self.error_messages["invalid"], code="invalid")
        return [self.clean_item(index, item) for index, item in enumerate(value)]

    def clean_item(self, index: int, item) -> str:
        """Trim one entry; blank, non-text or NUL-bearing entries are rejected."""
        invalid = ValidationError(self.error_messages["invalid_item"], code="invalid_item", params={"index": index})
        if not isinstance(item, str) or not item.strip():
            raise invalid
        try:
            NULL_CHARACTERS_VALIDATOR(item)
        except ValidationError as exc:
            raise invalid from exc
        return item.strip()

    def validate(self, value):
        super().validate(value)
        if len(value) < self.min_items:
            raise ValidationError(self.error_messages["min_items"], code="min_items", params={"limit": self.min_items})
        if len(value) > self.max_items:
            raise ValidationError(self.error_messages["max_items"], code="max_items", params={"limit": self.max_items})


class SubmissionForm(forms.Form):
    """Base form carrying the honeypot field every submission accepts."""

    # Any non-empty value, whitespace included, marks the submission as spam.
    bot_field = forms.CharField(required=False, strip=False)

    def submission_data(self) -> dict[str, Any]:
        """Cleaned data minus the transient fields that are never stored."""
        data = dict(self.cleaned_data)
        data.pop("bot_field", None)
        return data

    @property
    def is_bot(self) -> bool:
        return bool(self.cleaned_data.get("bot_field"))


class PickupRequestForm(SubmissionForm):
    name = forms.CharField(min_length=2, max_length=100)
    email = forms.EmailField(max_length=200)
    phone = forms.CharField(required=False, empty_value=None, validators=[PHONE_VALIDATOR])
    address = forms.CharField(min_length=10, max_length=500)
    scrap_types = StringListField(min_items=1, max_items=20)
    estimated_quantity = forms.CharField(required=False, empty_value=None, min_length=1, max_length=50)
    additional_notes = forms.CharField(required=False, empty_value=None, max_length=1000)


class ContactMessageForm(SubmissionForm):
    name = forms.CharField(min_length=2, max_length=100)
    email = forms.EmailField(max_length=200)
    phone = forms.CharField(validators=[PHONE_VALIDATOR])
    subject = forms.CharField(min_length=2, max_length=150)
    message = forms.CharField(min_length=1, max_length=2000)


class CareerApplicationForm(SubmissionForm):
    name = forms.CharField(min_length=2, max_length=100)
    email = forms.EmailField(max_length=200)
    phone = forms.CharField(validators=[PHONE_VALIDATOR])
    position = forms.CharField(min_length=2, max_length=100)
    cover_letter = forms.CharField(required=False, empty_value=None, max_length=5000)
    cv_file_name = forms.CharField(required=False, empty_value=None, max_length=255)
    resume = forms.FileField(required=False, validators=[validate_resume])

    def submission_data(self) -> dict[str, Any]:
        data = super().submission_data()
        data.pop("resume", None)
        return data


class NewsletterSubscriptionForm(SubmissionForm):
    email = forms.EmailField(max_length=200)
