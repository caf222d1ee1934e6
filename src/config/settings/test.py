"""
Django test settings for the Kabadi web application.
"""

from .base import *  # noqa: F403
from .base import env

DEBUG = False

SECRET_KEY = "django-insecure-test-key-only"  # noqa: S105

ALLOWED_HOSTS = ["*"]

# Use in-memory email backend
EMAIL_BACKEND = "django.core.mail.backends.locmem.EmailBackend"
NOTIFICATION_EMAILS = ["ops@kabadi.test", "hiring@kabadi.test"]
DEFAULT_FROM_EMAIL = "Kabadi <no-reply@kabadi.test>"

# Use DATABASE_URL if set (Docker), otherwise an in-memory SQLite database
DATABASES = {
    "default": env.db("DATABASE_URL", default="sqlite://:memory:"),
}
DURABLE_STORAGE_ENABLED = True

RESUME_STORAGE = {
    "BUCKET": "",
    "ENDPOINT_URL": "",
    "REGION": "auto",
    "ACCESS_KEY_ID": "",
    "SECRET_ACCESS_KEY": "",
    "PUBLIC_URL": "",
    "TIMEOUT": 5,
}

# Use simple static files storage in tests
STORAGES = {
    "default": {
        "BACKEND": "django.core.files.storage.FileSystemStorage",
    },
    "staticfiles": {
        "BACKEND": "django.contrib.staticfiles.storage.StaticFilesStorage",
    },
}

# Let pytest's caplog see application logs
LOGGING["loggers"]["apps"] = {"level": "INFO", "propagate": True}  # noqa: F405
