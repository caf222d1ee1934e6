"""Submission API views.

Every POST endpoint runs the same pipeline: validate, persist, then hand the
stored entity to a background notifier unless the honeypot field was filled
in. The subclasses only say which form, storage operation and notifier to use.
"""

import json
import logging

from asgiref.sync import sync_to_async
from django.conf import settings
from django.http import Http404, HttpRequest, JsonResponse
from django.http.multipartparser import MultiPartParserError
from django.utils.decorators import method_decorator
from django.views import View
from django.views.decorators.csrf import csrf_exempt

from apps.core.ratelimit import RateLimiter, RateLimitMixin

from . import services, uploads
from .dispatcher import get_dispatcher
from .forms import (
    CareerApplicationForm,
    ContactMessageForm,
    NewsletterSubscriptionForm,
    PickupRequestForm,
    SubmissionForm,
    error_details,
    form_data_from_payload,
)
from .storage import get_storage

logger = logging.getLogger(__name__)

newsletter_rate_limiter = RateLimiter(window=60)


@method_decorator(csrf_exempt, name="dispatch")
class SubmissionView(View):
    """Generic create/list endpoint for one submission kind."""

    form_class: type[SubmissionForm]
    create_operation: str
    list_operation: str
    # Name of a function in ``apps.submissions.services``; None disables notification.
    notifier_name: str | None = None
    invalid_message = "Invalid request data"
    create_failed_message = "Failed to save submission"
    list_failed_message = "Failed to fetch submissions"

    async def get(self, request: HttpRequest) -> JsonResponse:
        """Return every stored submission of this kind."""
        try:
            entities = await getattr(get_storage(), self.list_operation)()
        except Exception:
            logger.exception("Storage %s failed", self.list_operation)
            return JsonResponse({"error": self.list_failed_message}, status=500)
        return JsonResponse([entity.to_dict() for entity in entities], safe=False)

    def get_form(self, request: HttpRequest) -> SubmissionForm:
        """Bind the form from a JSON body or form-encoded/multipart data."""
        if request.content_type == "application/json":
            payload = json.loads(request.body or b"{}")
            if not isinstance(payload, dict):
                raise ValueError("JSON body must be an object")
        else:
            payload = request.POST.dict()
        return self.form_class(data=form_data_from_payload(payload), files=request.FILES)

    async def prepare(self, form: SubmissionForm, data: dict) -> dict:
        """Hook for work between validation and persistence."""
        return data

    async def post(self, request: HttpRequest) -> JsonResponse:
        """Validate, persist and notify."""
        try:
            form = self.get_form(request)
        except ValueError:
            return JsonResponse({"error": "Invalid JSON body"}, status=400)
        except MultiPartParserError as exc:
            logger.info("Unreadable form body on %s: %s", request.path, exc)
            return JsonResponse({"error": "Invalid form body"}, status=400)

        if not form.is_valid():
            return JsonResponse(
                {"error": self.invalid_message, "details": error_details(form)},
                status=400,
            )

        data = await self.prepare(form, form.submission_data())

        try:
            entity = await getattr(get_storage(), self.create_operation)(data)
        except Exception:
            logger.exception("Storage %s failed", self.create_operation)
            return JsonResponse({"error": self.create_failed_message}, status=500)

        if form.is_bot:
            logger.info("Honeypot filled on %s %s, not notifying", self.create_operation, entity.pk)
        elif self.notifier_name:
            get_dispatcher().dispatch(getattr(services, self.notifier_name), entity)

        return JsonResponse(entity.to_dict(), status=201)


class PickupRequestView(SubmissionView):
    form_class = PickupRequestForm
    create_operation = "create_pickup_request"
    list_operation = "list_pickup_requests"
    notifier_name = "send_pickup_request_notification"
    create_failed_message = "Failed to create pickup request"
    list_failed_message = "Failed to fetch pickup requests"


class ContactMessageView(SubmissionView):
    form_class = ContactMessageForm
    create_operation = "create_contact_message"
    list_operation = "list_contact_messages"
    notifier_name = "send_contact_notification"
    invalid_message = "Invalid message data"
    create_failed_message = "Failed to send message"
    list_failed_message = "Failed to fetch messages"


class CareerApplicationView(SubmissionView):
    form_class = CareerApplicationForm
    create_operation = "create_career_application"
    list_operation = "list_career_applications"
    notifier_name = "send_career_application_notification"
    invalid_message = "Invalid application data"
    create_failed_message = "Failed to submit application"
    list_failed_message = "Failed to fetch applications"

    async def prepare(self, form: SubmissionForm, data: dict) -> dict:
        """Upload the attached resume, if any, and record where it went."""
        resume = form.cleaned_data.get("resume")
        if resume is None:
            return data

        data["cv_file_name"] = data.get("cv_file_name") or resume.name
        # Bots get their record but not a file in the bucket.
        if form.is_bot:
            return data

        stored = await sync_to_async(uploads.upload_resume)(resume)
        if stored is not None:
            data["resume_storage_path"] = stored.storage_path
            data["resume_url"] = stored.url
        return data


@method_decorator(csrf_exempt, name="dispatch")
class NewsletterSubscriptionView(RateLimitMixin, SubmissionView):
    form_class = NewsletterSubscriptionForm
    create_operation = "create_newsletter_subscription"
    list_operation = "list_newsletter_subscriptions"
    # No email goes out without an explicit opt-in flow.
    notifier_name = None
    invalid_message = "Invalid email address"
    create_failed_message = "Failed to subscribe"
    list_failed_message = "Failed to fetch subscriptions"

    rate_limiter = newsletter_rate_limiter
    rate_limit_setting = "NEWSLETTER_RATE_LIMIT"


@method_decorator(csrf_exempt, name="dispatch")
class SampleNotificationsView(View):
    """Development only: store one sample of each kind and notify about them."""

    async def post(self, request: HttpRequest) -> JsonResponse:
        if not settings.DEBUG:
            raise Http404("Not available")

        storage = get_storage()
        contact = await storage.create_contact_message(
            {
                "name": "Test User",
                "email": "test@example.com",
                "phone": "+1 555 0100",
                "subject": "Test Contact",
                "message": f"This is a test contact message from the {settings.APP_NAME} test endpoint.",
            }
        )
        pickup = await storage.create_pickup_request(
            {
                "name": "Pickup Tester",
                "email": "pickup@test.com",
                "phone": "+1 555 0101",
                "address": "123 Green Street, Eco City",
                "scrap_types": ["Paper", "Plastic"],
                "estimated_quantity": "25 kg",
                "additional_notes": "Leave at gate.",
            }
        )
        career = await storage.create_career_application(
            {
                "name": "Applicant Test",
                "email": "applicant@test.com",
                "phone": "+1 555 0102",
                "position": "sorting-staff",
                "cover_letter": "I care deeply about sustainability and process.",
                "cv_file_name": "resume.pdf",
            }
        )
        await storage.create_newsletter_subscription({"email": "subscriber@test.com"})

        dispatcher = get_dispatcher()
        dispatcher.dispatch(services.send_contact_notification, contact)
        dispatcher.dispatch(services.send_pickup_request_notification, pickup)
        dispatcher.dispatch(services.send_career_application_notification, career)

        return JsonResponse(
            {"ok": True, "message": "Test notifications enqueued (check mail inbox and server logs)."},
        )
