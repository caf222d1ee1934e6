"""Tests for the submission storage backends and the hybrid fallback."""

import logging
import uuid

import pytest
from asgiref.sync import async_to_sync

from apps.submissions.models import NewsletterSubscription, PickupRequest
from apps.submissions.storage import (
    OPERATIONS,
    BackendState,
    DatabaseStorage,
    HybridStorage,
    MemoryStorage,
    get_storage,
)

PICKUP = {
    "name": "Asha Rao",
    "email": "asha@example.com",
    "phone": None,
    "address": "12 MG Road, Bengaluru 560001",
    "scrap_types": ["Plastic", "Metal"],
    "estimated_quantity": None,
    "additional_notes": None,
}


class FlakyBackend(MemoryStorage):
    """Memory store that starts failing on its Nth call and can be healed."""

    def __init__(self, fail_on: int):
        super().__init__()
        self.fail_on = fail_on
        self.calls = 0
        self.healed = False

    def _tick(self) -> None:
        self.calls += 1
        if self.calls >= self.fail_on and not self.healed:
            raise ConnectionError("connection refused")

    async def create_pickup_request(self, data):
        self._tick()
        return await super().create_pickup_request(data)

    async def list_pickup_requests(self):
        self._tick()
        return await super().list_pickup_requests()


class TestBackendState:
    def test_starts_from_configuration(self) -> None:
        assert BackendState(durable_configured=True).is_durable_active()
        assert not BackendState(durable_configured=False).is_durable_active()

    def test_degrade_is_one_way(self) -> None:
        state = BackendState(durable_configured=True)
        state.mark_degraded()
        state.mark_degraded()
        assert not state.is_durable_active()


class TestMemoryStorage:
    @pytest.mark.asyncio
    async def test_create_assigns_identity_and_timestamp(self) -> None:
        storage = MemoryStorage()
        request = await storage.create_pickup_request(dict(PICKUP))
        assert isinstance(request.id, uuid.UUID)
        assert request.created_at is not None
        assert request.scrap_types == ["Plastic", "Metal"]

    @pytest.mark.asyncio
    async def test_list_in_insertion_order(self) -> None:
        storage = MemoryStorage()
        first = await storage.create_contact_message(
            {"name": "A1", "email": "a@x.com", "phone": "1234567", "subject": "One", "message": "m"}
        )
        second = await storage.create_contact_message(
            {"name": "B2", "email": "b@x.com", "phone": "1234567", "subject": "Two", "message": "m"}
        )
        assert [m.id for m in await storage.list_contact_messages()] == [first.id, second.id]

    @pytest.mark.asyncio
    async def test_newsletter_idempotent_case_insensitive(self) -> None:
        storage = MemoryStorage()
        first = await storage.create_newsletter_subscription({"email": "Sub@Example.com"})
        second = await storage.create_newsletter_subscription({"email": "sub@example.com"})
        third = await storage.create_newsletter_subscription({"email": "Sub@Example.com"})
        assert first.id == second.id == third.id
        assert len(await storage.list_newsletter_subscriptions()) == 1

    @pytest.mark.asyncio
    async def test_career_optional_fields_default_to_none(self) -> None:
        storage = MemoryStorage()
        application = await storage.create_career_application(
            {"name": "Meena", "email": "m@x.com", "phone": "1234567", "position": "driver"}
        )
        assert application.cover_letter is None
        assert application.resume_storage_path is None
        assert application.resume_url is None


class TestHybridStorage:
    @pytest.mark.asyncio
    async def test_healthy_durable_backend_used(self) -> None:
        durable, memory = MemoryStorage(), MemoryStorage()
        storage = HybridStorage(durable=durable, memory=memory, state=BackendState(True))
        await storage.create_pickup_request(dict(PICKUP))
        assert len(durable.pickup_requests) == 1
        assert memory.pickup_requests == {}

    @pytest.mark.asyncio
    async def test_unconfigured_durable_never_touched(self) -> None:
        durable = FlakyBackend(fail_on=1)
        memory = MemoryStorage()
        storage = HybridStorage(durable=durable, memory=memory, state=BackendState(False))
        await storage.create_pickup_request(dict(PICKUP))
        assert durable.calls == 0
        assert len(memory.pickup_requests) == 1

    @pytest.mark.asyncio
    async def test_failure_retries_on_memory(self, caplog) -> None:
        durable = FlakyBackend(fail_on=1)
        memory = MemoryStorage()
        storage = HybridStorage(durable=durable, memory=memory, state=BackendState(True))
        with caplog.at_level(logging.WARNING, logger="apps.submissions.storage"):
            request = await storage.create_pickup_request(dict(PICKUP))
        assert str(request.id) in memory.pickup_requests
        assert "falling back to memory" in caplog.text

    @pytest.mark.asyncio
    async def test_degradation_is_permanent(self) -> None:
        """After the Nth call fails, healing the database changes nothing."""
        durable = FlakyBackend(fail_on=3)
        memory = MemoryStorage()
        state = BackendState(True)
        storage = HybridStorage(durable=durable, memory=memory, state=state)

        await storage.create_pickup_request(dict(PICKUP))
        await storage.list_pickup_requests()
        assert durable.calls == 2
        assert state.is_durable_active()

        await storage.create_pickup_request(dict(PICKUP))
        assert not state.is_durable_active()

        durable.healed = True
        await storage.create_pickup_request(dict(PICKUP))
        listed = await storage.list_pickup_requests()

        assert durable.calls == 3
        assert len(durable.pickup_requests) == 1
        assert len(memory.pickup_requests) == 2
        assert len(listed) == 2

    @pytest.mark.asyncio
    async def test_both_backends_failing_propagates(self) -> None:
        durable = FlakyBackend(fail_on=1)
        memory = FlakyBackend(fail_on=1)
        storage = HybridStorage(durable=durable, memory=memory, state=BackendState(True))
        with pytest.raises(ConnectionError):
            await storage.create_pickup_request(dict(PICKUP))

    @pytest.mark.parametrize("operation", OPERATIONS)
    def test_exposes_every_operation(self, operation: str) -> None:
        for backend in (DatabaseStorage, MemoryStorage, HybridStorage):
            assert callable(getattr(backend, operation))


class TestGetStorage:
    def test_follows_settings(self, settings) -> None:
        settings.DURABLE_STORAGE_ENABLED = False
        assert not get_storage().state.is_durable_active()

    def test_is_shared(self) -> None:
        assert get_storage() is get_storage()


@pytest.mark.django_db
class TestDatabaseStorage:
    def test_create_and_list_newest_first(self) -> None:
        storage = DatabaseStorage()
        first = async_to_sync(storage.create_pickup_request)(dict(PICKUP))
        second = async_to_sync(storage.create_pickup_request)({**PICKUP, "name": "Second"})
        PickupRequest.objects.filter(pk=first.pk).update(created_at=second.created_at.replace(year=2000))

        listed = async_to_sync(storage.list_pickup_requests)()

        assert [r.pk for r in listed] == [second.pk, first.pk]
        assert listed[0].scrap_types == ["Plastic", "Metal"]

    def test_newsletter_returns_existing_row(self) -> None:
        storage = DatabaseStorage()
        first = async_to_sync(storage.create_newsletter_subscription)({"email": "Sub@Example.com"})
        second = async_to_sync(storage.create_newsletter_subscription)({"email": "sub@example.com"})
        assert first.pk == second.pk
        assert NewsletterSubscription.objects.count() == 1

    def test_hybrid_passes_through_when_healthy(self) -> None:
        storage = HybridStorage(state=BackendState(True))
        async_to_sync(storage.create_contact_message)(
            {"name": "Ravi", "email": "r@x.com", "phone": "1234567", "subject": "Hi", "message": "m"}
        )
        assert storage.state.is_durable_active()
        assert storage.memory.contact_messages == {}
