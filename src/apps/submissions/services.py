"""Staff email notifications for new submissions."""

import enum
import logging
from collections.abc import Callable

from django.conf import settings
from django.core.mail import EmailMultiAlternatives
from django.template.loader import render_to_string

from .models import CareerApplication, ContactMessage, PickupRequest

logger = logging.getLogger(__name__)

SMTP_BACKEND = "django.core.mail.backends.smtp.EmailBackend"


class NotificationOutcome(enum.Enum):
    SENT = "sent"
    SKIPPED = "skipped-not-configured"
    FAILED = "failed"


Notifier = Callable[..., NotificationOutcome]


def get_recipients() -> list[str]:
    return list(getattr(settings, "NOTIFICATION_EMAILS", []))


def delivery_configured() -> bool:
    """Whether the active email backend has what it needs to deliver mail."""
    if not get_recipients():
        return False
    backend = settings.EMAIL_BACKEND
    if backend == SMTP_BACKEND:
        return all(
            [
                settings.EMAIL_HOST,
                settings.EMAIL_PORT,
                settings.EMAIL_HOST_USER,
                settings.EMAIL_HOST_PASSWORD,
            ]
        )
    if backend.startswith("anymail."):
        return bool(getattr(settings, "ANYMAIL", {}).get("MAILGUN_API_KEY"))
    return True


def _send(*, subject: str, text_body: str, template: str, context: dict, reply_to: str) -> NotificationOutcome:
    if not delivery_configured():
        logger.warning("Email delivery not configured, skipping notification: %s", subject)
        return NotificationOutcome.SKIPPED

    recipients = get_recipients()
    html_body = render_to_string(template, {"app_name": settings.APP_NAME, **context})
    msg = EmailMultiAlternatives(
        subject=subject,
        body=text_body,
        from_email=settings.DEFAULT_FROM_EMAIL,
        to=recipients,
        reply_to=[reply_to],
    )
    msg.attach_alternative(html_body, "text/html")
    msg.send(fail_silently=False)
    logger.info("Notification sent to %s: %s", recipients, subject)
    return NotificationOutcome.SENT


def send_pickup_request_notification(request: PickupRequest) -> NotificationOutcome:
    """Tell staff about a new pickup request."""
    scrap_types = ", ".join(request.scrap_types)
    subject = f"[{settings.APP_NAME}] New pickup request from {request.name}"
    text_body = (
        f"New pickup request received:\n\n"
        f"Name: {request.name}\n"
        f"Email: {request.email}\n"
        f"Phone: {request.phone or 'Not provided'}\n"
        f"Address: {request.address}\n"
        f"Scrap types: {scrap_types}\n"
        f"Estimated quantity: {request.estimated_quantity or 'Not provided'}\n"
        f"Notes: {request.additional_notes or 'None'}\n\n"
        f"Submitted: {request.created_at:%Y-%m-%d %H:%M}\n"
    )
    return _send(
        subject=subject,
        text_body=text_body,
        template="emails/pickup_request_notification.html",
        context={"request": request, "scrap_types": scrap_types},
        reply_to=f"{request.name} <{request.email}>",
    )


def send_contact_notification(message: ContactMessage) -> NotificationOutcome:
    """Tell staff about a new contact message."""
    subject = f"[{settings.APP_NAME}] New contact message: {message.subject}"
    text_body = (
        f"New contact message:\n\n"
        f"Name: {message.name}\n"
        f"Email: {message.email}\n"
        f"Phone: {message.phone}\n"
        f"Subject: {message.subject}\n\n"
        f"Message:\n{message.message}\n"
    )
    return _send(
        subject=subject,
        text_body=text_body,
        template="emails/contact_notification.html",
        context={"message": message},
        reply_to=f"{message.name} <{message.email}>",
    )


def send_career_application_notification(application: CareerApplication) -> NotificationOutcome:
    """Tell the hiring team about a new application."""
    subject = f"[{settings.APP_NAME}] New application for {application.position_display}: {application.name}"
    resume = application.resume_url or application.resume_storage_path or application.cv_file_name or "Not provided"
    text_body = (
        f"New career application:\n\n"
        f"Name: {application.name}\n"
        f"Email: {application.email}\n"
        f"Phone: {application.phone}\n"
        f"Position: {application.position_display}\n"
        f"Resume: {resume}\n\n"
        f"Cover letter:\n{application.cover_letter or 'Not provided'}\n"
    )
    return _send(
        subject=subject,
        text_body=text_body,
        template="emails/career_application_notification.html",
        context={"application": application, "resume": resume},
        reply_to=f"{application.name} <{application.email}>",
    )

