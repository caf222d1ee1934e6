"""Submission storage with a durable backend and an in-memory fallback.

``HybridStorage`` prefers the database. The first failed operation flips the
shared ``BackendState`` to degraded and every later call, including the
retry of the failed one, is served from memory until the process restarts.
"""

import logging
from typing import Any

from django.conf import settings
from django.db import IntegrityError

from .models import CareerApplication, ContactMessage, NewsletterSubscription, PickupRequest

logger = logging.getLogger(__name__)

OPERATIONS = (
    "create_pickup_request",
    "list_pickup_requests",
    "create_contact_message",
    "list_contact_messages",
    "create_career_application",
    "list_career_applications",
    "create_newsletter_subscription",
    "list_newsletter_subscriptions",
)


class BackendState:
    """Process-wide record of whether the durable backend is still in use."""

    def __init__(self, durable_configured: bool):
        self._durable_active = durable_configured

    def is_durable_active(self) -> bool:
        return self._durable_active

    def mark_degraded(self) -> None:
        self._durable_active = False


class DatabaseStorage:
    """Durable backend on the Django ORM. Lists are newest first."""

    async def create_pickup_request(self, data: dict[str, Any]) -> PickupRequest:
        return await PickupRequest.objects.acreate(**data)

    async def list_pickup_requests(self) -> list[PickupRequest]:
        return [row async for row in PickupRequest.objects.order_by("-created_at")]

    async def create_contact_message(self, data: dict[str, Any]) -> ContactMessage:
        return await ContactMessage.objects.acreate(**data)

    async def list_contact_messages(self) -> list[ContactMessage]:
        return [row async for row in ContactMessage.objects.order_by("-created_at")]

    async def create_career_application(self, data: dict[str, Any]) -> CareerApplication:
        return await CareerApplication.objects.acreate(**data)

    async def list_career_applications(self) -> list[CareerApplication]:
        return [row async for row in CareerApplication.objects.order_by("-created_at")]

    async def create_newsletter_subscription(self, data: dict[str, Any]) -> NewsletterSubscription:
        email = data["email"]
        existing = await NewsletterSubscription.objects.filter(email__iexact=email).afirst()
        if existing:
            return existing
        try:
            return await NewsletterSubscription.objects.acreate(email=email)
        except IntegrityError:
            # Lost an insert race against the same address.
            existing = await NewsletterSubscription.objects.filter(email__iexact=email).afirst()
            if existing is None:
                raise
            return existing

    async def list_newsletter_subscriptions(self) -> list[NewsletterSubscription]:
        return [row async for row in NewsletterSubscription.objects.order_by("-created_at")]


class MemoryStorage:
    """Volatile backend keyed by id. Lists keep insertion order.

    Entities are unsaved model instances, fully built before they are added
    to a map, so no await ever separates construction from insertion.
    """

    def __init__(self):
        self.pickup_requests: dict[str, PickupRequest] = {}
        self.contact_messages: dict[str, ContactMessage] = {}
        self.career_applications: dict[str, CareerApplication] = {}
        self.newsletter_subscriptions: dict[str, NewsletterSubscription] = {}
        self.newsletter_by_email: dict[str, NewsletterSubscription] = {}

    async def create_pickup_request(self, data: dict[str, Any]) -> PickupRequest:
        request = PickupRequest(**data)
        self.pickup_requests[str(request.id)] = request
        return request

    async def list_pickup_requests(self) -> list[PickupRequest]:
        return list(self.pickup_requests.values())

    async def create_contact_message(self, data: dict[str, Any]) -> ContactMessage:
        message = ContactMessage(**data)
        self.contact_messages[str(message.id)] = message
        return message

    async def list_contact_messages(self) -> list[ContactMessage]:
        return list(self.contact_messages.values())

    async def create_career_application(self, data: dict[str, Any]) -> CareerApplication:
        application = CareerApplication(**data)
        self.career_applications[str(application.id)] = application
        return application

    async def list_career_applications(self) -> list[CareerApplication]:
        return list(self.career_applications.values())

    async def create_newsletter_subscription(self, data: dict[str, Any]) -> NewsletterSubscription:
        key = data["email"].lower()
        existing = self.newsletter_by_email.get(key)
        if existing:
            return existing
        subscription = NewsletterSubscription(email=data["email"])
        self.newsletter_subscriptions[str(subscription.id)] = subscription
        self.newsletter_by_email[key] = subscription
        return subscription

    async def list_newsletter_subscriptions(self) -> list[NewsletterSubscription]:
        return list(self.newsletter_subscriptions.values())


class HybridStorage:
    """Route every operation to the database until it fails once, then to memory."""

    def __init__(self, *, durable=None, memory=None, state: BackendState | None = None):
        self.durable = durable if durable is not None else DatabaseStorage()
        self.memory = memory if memory is not None else MemoryStorage()
        self.state = state if state is not None else BackendState(durable_configured=True)

    async def _call(self, operation: str, *args):
        if self.state.is_durable_active():
            try:
                return await getattr(self.durable, operation)(*args)
            except Exception as exc:
                logger.warning("Durable storage failed during %s; falling back to memory: %s", operation, exc)
                self.state.mark_degraded()
        return await getattr(self.memory, operation)(*args)

    async def create_pickup_request(self, data: dict[str, Any]) -> PickupRequest:
        return await self._call("create_pickup_request", data)

    async def list_pickup_requests(self) -> list[PickupRequest]:
        return await self._call("list_pickup_requests")

    async def create_contact_message(self, data: dict[str, Any]) -> ContactMessage:
        return await self._call("create_contact_message", data)

    async def list_contact_messages(self) -> list[ContactMessage]:
        return await self._call("list_contact_messages")

    async def create_career_application(self, data: dict[str, Any]) -> CareerApplication:
        return await self._call("create_career_application", data)

    async def list_career_applications(self) -> list[CareerApplication]:
        return await self._call("list_career_applications")

    async def create_newsletter_subscription(self, data: dict[str, Any]) -> NewsletterSubscription:
        return await self._call("create_newsletter_subscription", data)

    async def list_newsletter_subscriptions(self) -> list[NewsletterSubscription]:
        return await self._call("list_newsletter_subscriptions")


_storage: HybridStorage | None = None


def get_storage() -> HybridStorage:
    """Return the process-wide storage, built from settings on first use."""
    global _storage
    if _storage is None:
        state = BackendState(durable_configured=getattr(settings, "DURABLE_STORAGE_ENABLED", False))
        if not state.is_durable_active():
            logger.info("No DATABASE_URL configured; submissions are kept in memory.")
        _storage = HybridStorage(state=state)
    return _storage


def reset_storage() -> None:
    """Drop the process-wide storage so the next call rebuilds it."""
    global _storage
    _storage = None
