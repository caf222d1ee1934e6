"""Submission models for the lead-capture forms."""

import uuid
from typing import Any, ClassVar

from django.db import models
from django.db.models.functions import Lower
from django.utils import timezone

POSITION_CHOICES = [
    ("collection-agent", "Collection Agent"),
    ("driver", "Driver"),
    ("sorting-staff", "Sorting Staff"),
    ("supervisor", "Supervisor"),
    ("operations-manager", "Operations Manager"),
    ("other", "Other Position"),
]

POSITION_MAP = dict(POSITION_CHOICES)


class Submission(models.Model):
    """Fields shared by every submission kind.

    ``id`` and ``created_at`` are assigned on instantiation so that unsaved
    instances held by the in-memory store look exactly like stored rows.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    created_at = models.DateTimeField("created", default=timezone.now, editable=False)

    # Model field name -> JSON key
    json_fields: ClassVar[dict[str, str]] = {}

    class Meta:
        abstract = True
        ordering: ClassVar[list[str]] = ["-created_at"]

    def to_dict(self) -> dict[str, Any]:
        """Return the camelCase JSON representation."""
        data: dict[str, Any] = {"id": str(self.id)}
        for field_name, key in self.json_fields.items():
            data[key] = getattr(self, field_name)
        data["createdAt"] = self.created_at.isoformat()
        return data


class PickupRequest(Submission):
    """A request to collect scrap from an address."""

    name = models.CharField(max_length=100)
    email = models.EmailField(max_length=200)
    phone = models.CharField(max_length=20, null=True, blank=True)
    address = models.CharField(max_length=500)
    scrap_types = models.JSONField(default=list)
    estimated_quantity = models.CharField(max_length=50, null=True, blank=True)
    additional_notes = models.TextField(null=True, blank=True)

    json_fields: ClassVar[dict[str, str]] = {
        "name": "name",
        "email": "email",
        "phone": "phone",
        "address": "address",
        "scrap_types": "scrapTypes",
        "estimated_quantity": "estimatedQuantity",
        "additional_notes": "additionalNotes",
    }

    class Meta(Submission.Meta):
        db_table = "pickup_requests"
        verbose_name = "pickup request"
        verbose_name_plural = "pickup requests"

    def __str__(self) -> str:
        return f"{self.name} - {', '.join(self.scrap_types)} ({self.created_at:%Y-%m-%d})"


class ContactMessage(Submission):
    """A message sent through the contact form."""

    name = models.CharField(max_length=100)
    email = models.EmailField(max_length=200)
    phone = models.CharField(max_length=20)
    subject = models.CharField(max_length=150)
    message = models.TextField()

    json_fields: ClassVar[dict[str, str]] = {
        "name": "name",
        "email": "email",
        "phone": "phone",
        "subject": "subject",
        "message": "message",
    }

    class Meta(Submission.Meta):
        db_table = "contact_messages"
        verbose_name = "contact message"
        verbose_name_plural = "contact messages"

    def __str__(self) -> str:
        return f"{self.name} - {self.subject}"


class CareerApplication(Submission):
    """A job application, optionally with an uploaded resume."""

    name = models.CharField(max_length=100)
    email = models.EmailField(max_length=200)
    phone = models.CharField(max_length=20)
    position = models.CharField(max_length=100)
    cover_letter = models.TextField(null=True, blank=True)
    cv_file_name = models.CharField(max_length=255, null=True, blank=True)
    resume_storage_path = models.CharField(max_length=1024, null=True, blank=True)
    resume_url = models.URLField(max_length=2048, null=True, blank=True)

    json_fields: ClassVar[dict[str, str]] = {
        "name": "name",
        "email": "email",
        "phone": "phone",
        "position": "position",
        "cover_letter": "coverLetter",
        "cv_file_name": "cvFileName",
        "resume_storage_path": "resumeStoragePath",
        "resume_url": "resumeUrl",
    }

    class Meta(Submission.Meta):
        db_table = "career_applications"
        verbose_name = "career application"
        verbose_name_plural = "career applications"

    def __str__(self) -> str:
        return f"{self.name} - {self.position}"

    @property
    def position_display(self) -> str:
        return POSITION_MAP.get(self.position, self.position)


class NewsletterSubscription(Submission):
    """A newsletter signup. One per email address, case-insensitively."""

    email = models.EmailField(max_length=200)

    json_fields: ClassVar[dict[str, str]] = {"email": "email"}

    class Meta(Submission.Meta):
        db_table = "newsletter_subscriptions"
        verbose_name = "newsletter subscription"
        verbose_name_plural = "newsletter subscriptions"
        constraints: ClassVar[list] = [
            models.UniqueConstraint(Lower("email"), name="newsletter_subscriptions_email_ci_unique"),
        ]

    def __str__(self) -> str:
        return self.email
