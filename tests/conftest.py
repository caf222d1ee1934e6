"""Pytest configuration for Kabadi tests."""

import pytest

from apps.submissions.dispatcher import get_dispatcher
from apps.submissions.storage import reset_storage
from apps.submissions.views import newsletter_rate_limiter


@pytest.fixture(autouse=True)
def fresh_storage():
    """Every test starts with a newly built storage and its durable flag set."""
    reset_storage()
    yield
    reset_storage()


@pytest.fixture(autouse=True)
def reset_rate_limits():
    """Rate-limit windows never leak between tests."""
    newsletter_rate_limiter.reset()
    yield
    newsletter_rate_limiter.reset()


@pytest.fixture(autouse=True)
def dispatcher():
    """The shared notification dispatcher, drained after every test."""
    dispatcher = get_dispatcher()
    yield dispatcher
    dispatcher.wait(timeout=5)


@pytest.fixture
def pickup_payload() -> dict:
    return {
        "name": "Asha Rao",
        "email": "asha@example.com",
        "phone": "+91 98765 43210",
        "address": "12 MG Road, Bengaluru 560001",
        "scrapTypes": ["Plastic", "Metal"],
    }


@pytest.fixture
def contact_payload() -> dict:
    return {
        "name": "Ravi Kumar",
        "email": "ravi@example.com",
        "phone": "+91 91234 56789",
        "subject": "Bulk pickup",
        "message": "We have 200 kg of cardboard at our warehouse.",
    }


@pytest.fixture
def career_payload() -> dict:
    return {
        "name": "Meena Iyer",
        "email": "meena@example.com",
        "phone": "+91 99887 76655",
        "position": "driver",
        "coverLetter": "Five years driving light commercial vehicles.",
    }
