"""
Pickup request wizard.

Models the four step request-a-pickup flow of the public site as a plain
state machine: choose scrap types, enter contact details, enter the address,
review and submit. Steps only move forward when the current step passes the
advisory rules; moving back is always allowed and never clears anything.
"""

import enum
import json
import logging
from collections.abc import Callable
from dataclasses import dataclass, fields
from urllib.error import HTTPError, URLError
from urllib.request import Request, urlopen

from . import rules

logger = logging.getLogger(__name__)

SUCCESS_NOTICE = "Request submitted! We'll contact you within 24 hours to schedule your pickup."
FAILURE_NOTICE = "Submission failed. Please try again or contact us directly."


class Step(enum.IntEnum):
    SELECT_TYPES = 1
    DETAILS = 2
    ADDRESS = 3
    REVIEW = 4


@dataclass(frozen=True)
class ScrapCategory:
    id: str
    name: str
    rate: int  # rupees per kg


SCRAP_CATEGORIES = (
    ScrapCategory("plastic", "Plastic", 20),
    ScrapCategory("metal", "Metal", 40),
    ScrapCategory("paper", "Paper", 12),
    ScrapCategory("cardboard", "Cardboard", 15),
    ScrapCategory("electronics", "Electronics", 35),
    ScrapCategory("glass", "Glass", 8),
)


@dataclass
class PickupDetails:
    name: str = ""
    email: str = ""
    phone: str = ""
    estimated_quantity: str = ""
    address: str = ""
    additional_notes: str = ""
    bot_field: str = ""


class SubmissionError(Exception):
    """The pickup request could not be delivered to the API."""


Transport = Callable[[dict], None]


def http_transport(base_url: str, timeout: float = 15) -> Transport:
    """Return a transport that POSTs the payload as JSON to the pickup endpoint."""
    url = f"{base_url.rstrip('/')}/api/pickup-requests"

    def post(payload: dict) -> None:
        req = Request(  # noqa: S310
            url,
            data=json.dumps(payload).encode(),
            headers={"Content-Type": "application/json"},
            method="POST",
        )
        try:
            with urlopen(req, timeout=timeout) as response:  # noqa: S310
                status = response.status
        except HTTPError as exc:
            raise SubmissionError(f"Pickup request rejected with HTTP {exc.code}") from exc
        except URLError as exc:
            raise SubmissionError(f"Pickup request not delivered: {exc.reason}") from exc
        if not 200 <= status < 300:
            raise SubmissionError(f"Pickup request rejected with HTTP {status}")

    return post


# Fields each step must get right before the wizard moves past it.
STEP_FIELDS = {
    Step.DETAILS: ("name", "email", "phone"),
    Step.ADDRESS: ("address",),
}


class PickupWizard:
    """State of one visitor's pickup request form."""

    def __init__(self, transport: Transport, categories: tuple[ScrapCategory, ...] = SCRAP_CATEGORIES):
        self._transport = transport
        self.categories = tuple(categories)
        self._category_ids = {category.id for category in self.categories}
        self.notice: str | None = None
        self.reset()

    def reset(self) -> None:
        """Back to step 1 with nothing selected or entered."""
        self.step = Step.SELECT_TYPES
        self.selected: list[str] = []
        self.details = PickupDetails()
        self.errors = {"name": False, "email": False, "phone": False, "address": False}
        self.submitting = False

    def toggle(self, category_id: str) -> None:
        if category_id not in self._category_ids:
            raise ValueError(f"Unknown scrap category: {category_id}")
        if category_id in self.selected:
            self.selected.remove(category_id)
        else:
            self.selected.append(category_id)

    def update(self, **values: str) -> None:
        known = {f.name for f in fields(PickupDetails)}
        for key, value in values.items():
            if key not in known:
                raise TypeError(f"Unknown pickup field: {key}")
            setattr(self.details, key, value)

    def blur(self, field_name: str) -> bool:
        """Validate one field as the visitor leaves it and record the error flag."""
        valid = rules.validate_field(field_name, getattr(self.details, field_name))
        if field_name in self.errors:
            self.errors[field_name] = not valid
        return valid

    def can_advance(self) -> bool:
        if self.step is Step.SELECT_TYPES:
            return bool(self.selected)
        if self.step in STEP_FIELDS:
            return all(rules.validate_field(name, getattr(self.details, name)) for name in STEP_FIELDS[self.step])
        return False

    def next(self) -> Step:
        """Advance one step if the current one is complete; otherwise stay put."""
        if self.can_advance():
            self.step = Step(self.step + 1)
        return self.step

    def back(self) -> Step:
        if self.step > Step.SELECT_TYPES:
            self.step = Step(self.step - 1)
        return self.step

    def selected_names(self) -> list[str]:
        """Names of the selected categories, in catalog order."""
        return [category.name for category in self.categories if category.id in self.selected]

    def review(self) -> dict[str, str]:
        """What the review step shows, values exactly as entered."""
        return {
            "scrapTypes": ", ".join(self.selected_names()),
            "name": self.details.name,
            "email": self.details.email,
            "phone": self.details.phone,
            "estimatedQuantity": self.details.estimated_quantity,
            "address": self.details.address,
            "additionalNotes": self.details.additional_notes,
        }

    def payload(self) -> dict:
        """Request body for ``POST /api/pickup-requests``."""
        return {
            "name": self.details.name,
            "email": self.details.email,
            "phone": self.details.phone or None,
            "address": self.details.address,
            "scrapTypes": self.selected_names(),
            "estimatedQuantity": self.details.estimated_quantity or None,
            "additionalNotes": self.details.additional_notes or None,
            "botField": self.details.bot_field,
        }

    @property
    def can_submit(self) -> bool:
        return self.step is Step.REVIEW and not self.submitting

    def submit(self) -> bool:
        """
        Send the request from the review step.

        On success the wizard starts over; on failure it stays on the review
        step with everything intact and shows an error notice.
        """
        if not self.can_submit:
            return False

        self.submitting = True
        try:
            self._transport(self.payload())
        except Exception as exc:
            logger.warning("Pickup request submission failed: %s", exc)
            self.notice = FAILURE_NOTICE
            return False
        finally:
            self.submitting = False

        self.reset()
        self.notice = SUCCESS_NOTICE
        return True
