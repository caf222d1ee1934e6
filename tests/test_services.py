"""Tests for staff notifications and the background dispatcher."""

import logging

import pytest
from django.core import mail

from apps.submissions.dispatcher import NotificationDispatcher
from apps.submissions.models import CareerApplication, ContactMessage, PickupRequest
from apps.submissions.services import (
    NotificationOutcome,
    delivery_configured,
    send_career_application_notification,
    send_contact_notification,
    send_pickup_request_notification,
)


@pytest.fixture
def pickup() -> PickupRequest:
    return PickupRequest(
        name="Asha Rao",
        email="asha@example.com",
        address="12 MG Road, Bengaluru 560001",
        scrap_types=["Plastic", "Metal"],
    )


@pytest.fixture
def contact() -> ContactMessage:
    return ContactMessage(
        name="Ravi Kumar",
        email="ravi@example.com",
        phone="+91 91234 56789",
        subject="Bulk pickup",
        message="We have 200 kg of cardboard.",
    )


@pytest.fixture
def application() -> CareerApplication:
    return CareerApplication(
        name="Meena Iyer",
        email="meena@example.com",
        phone="+91 99887 76655",
        position="driver",
        cv_file_name="meena.pdf",
        resume_storage_path="kabadi-resumes/resumes/2026/01/05/abc.pdf",
        resume_url="https://files.kabadi.test/resumes/2026/01/05/abc.pdf",
    )


class TestDeliveryConfigured:
    def test_locmem_backend_with_recipients(self) -> None:
        assert delivery_configured()

    def test_no_recipients(self, settings) -> None:
        settings.NOTIFICATION_EMAILS = []
        assert not delivery_configured()

    def test_smtp_needs_credentials(self, settings) -> None:
        settings.EMAIL_BACKEND = "django.core.mail.backends.smtp.EmailBackend"
        settings.EMAIL_HOST = "smtp.kabadi.test"
        settings.EMAIL_PORT = 587
        settings.EMAIL_HOST_USER = "mailer"
        settings.EMAIL_HOST_PASSWORD = ""
        assert not delivery_configured()

        settings.EMAIL_HOST_PASSWORD = "secret"
        assert delivery_configured()

    def test_mailgun_needs_api_key(self, settings) -> None:
        settings.EMAIL_BACKEND = "anymail.backends.mailgun.EmailBackend"
        settings.ANYMAIL = {"MAILGUN_API_KEY": ""}
        assert not delivery_configured()

        settings.ANYMAIL = {"MAILGUN_API_KEY": "key-123"}
        assert delivery_configured()


class TestNotifications:
    def test_pickup_notification(self, pickup: PickupRequest) -> None:
        assert send_pickup_request_notification(pickup) is NotificationOutcome.SENT

        assert len(mail.outbox) == 1
        sent = mail.outbox[0]
        assert sent.subject == "[Kabadi] New pickup request from Asha Rao"
        assert sent.to == ["ops@kabadi.test", "hiring@kabadi.test"]
        assert sent.reply_to == ["Asha Rao <asha@example.com>"]
        assert "Scrap types: Plastic, Metal" in sent.body
        assert "Phone: Not provided" in sent.body
        html, mimetype = sent.alternatives[0]
        assert mimetype == "text/html"
        assert "Plastic, Metal" in html

    def test_contact_notification(self, contact: ContactMessage) -> None:
        assert send_contact_notification(contact) is NotificationOutcome.SENT

        sent = mail.outbox[0]
        assert sent.subject == "[Kabadi] New contact message: Bulk pickup"
        assert "We have 200 kg of cardboard." in sent.body

    def test_career_notification_links_resume(self, application: CareerApplication) -> None:
        assert send_career_application_notification(application) is NotificationOutcome.SENT

        sent = mail.outbox[0]
        assert sent.subject == "[Kabadi] New application for Driver: Meena Iyer"
        assert "Resume: https://files.kabadi.test/resumes/2026/01/05/abc.pdf" in sent.body
        assert 'href="https://files.kabadi.test/resumes/2026/01/05/abc.pdf"' in sent.alternatives[0][0]

    def test_career_notification_without_resume(self, application: CareerApplication) -> None:
        application.cv_file_name = None
        application.resume_storage_path = None
        application.resume_url = None
        send_career_application_notification(application)
        assert "Resume: Not provided" in mail.outbox[0].body

    def test_skipped_when_not_configured(self, settings, contact: ContactMessage, caplog) -> None:
        settings.NOTIFICATION_EMAILS = []
        with caplog.at_level(logging.WARNING, logger="apps.submissions.services"):
            outcome = send_contact_notification(contact)

        assert outcome is NotificationOutcome.SKIPPED
        assert outcome.value == "skipped-not-configured"
        assert mail.outbox == []
        assert "not configured" in caplog.text


class TestNotificationDispatcher:
    def test_delivers_in_background(self, contact: ContactMessage) -> None:
        dispatcher = NotificationDispatcher(max_workers=1)
        try:
            future = dispatcher.dispatch(send_contact_notification, contact)
            assert future.result(timeout=5) is NotificationOutcome.SENT
        finally:
            dispatcher.shutdown()
        assert len(mail.outbox) == 1

    def test_failure_is_logged_not_raised(self, contact: ContactMessage, caplog) -> None:
        def broken(entity):
            raise ConnectionRefusedError("smtp down")

        dispatcher = NotificationDispatcher(max_workers=1)
        try:
            with caplog.at_level(logging.WARNING, logger="apps.submissions.dispatcher"):
                future = dispatcher.dispatch(broken, contact)
                assert future.result(timeout=5) is NotificationOutcome.FAILED
        finally:
            dispatcher.shutdown()
        assert "smtp down" in caplog.text

    def test_wait_drains_pending(self, contact: ContactMessage) -> None:
        dispatcher = NotificationDispatcher(max_workers=2)
        try:
            for _ in range(3):
                dispatcher.dispatch(send_contact_notification, contact)
            dispatcher.wait(timeout=5)
        finally:
            dispatcher.shutdown()
        assert len(mail.outbox) == 3
