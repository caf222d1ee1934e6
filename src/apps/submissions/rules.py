"""Advisory field rules used by the front-end forms and the pickup wizard.

These thresholds are deliberately not the server's. The forms in
``apps.submissions.forms`` are authoritative; a value can pass here and be
rejected there (or the other way round, e.g. a 2 character subject).
"""

import re

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PHONE_RE = re.compile(r"^\+?[\d\s\-()]{10,}$")
WHITESPACE_RE = re.compile(r"\s")


def is_valid_name(value: str) -> bool:
    return len(value.strip()) >= 2


def is_valid_email(value: str) -> bool:
    return bool(EMAIL_RE.fullmatch(value.strip()))


def is_valid_phone(value: str) -> bool:
    """Check an international-ish phone number, ignoring all whitespace."""
    return bool(PHONE_RE.fullmatch(WHITESPACE_RE.sub("", value)))


def is_valid_address(value: str) -> bool:
    return len(value.strip()) >= 10


def is_valid_subject(value: str) -> bool:
    return len(value.strip()) >= 3


def is_valid_message(value: str) -> bool:
    return len(value.strip()) >= 10


FIELD_RULES = {
    "name": is_valid_name,
    "email": is_valid_email,
    "phone": is_valid_phone,
    "address": is_valid_address,
    "subject": is_valid_subject,
    "message": is_valid_message,
}


def validate_field(field: str, value: str) -> bool:
    """Apply the rule for ``field``; fields without a rule are always valid."""
    rule = FIELD_RULES.get(field)
    return rule(value) if rule else True
