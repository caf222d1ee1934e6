"""
Django base settings for the Kabadi web application.
"""

from pathlib import Path

import environ

# Build paths inside the project like this: BASE_DIR / 'subdir'.
BASE_DIR = Path(__file__).resolve().parent.parent.parent

env = environ.Env(
    DEBUG=(bool, False),
    ALLOWED_HOSTS=(list, []),
    NOTIFICATION_EMAILS=(list, []),
)

# Read .env file from project root (parent of src/)
env_file = BASE_DIR.parent / ".env"
if env_file.exists():
    environ.Env.read_env(str(env_file))

# SECURITY WARNING: keep the secret key used in production secret!
SECRET_KEY = env("SECRET_KEY", default="django-insecure-change-me-in-production")

# SECURITY WARNING: don't run with debug turned on in production!
DEBUG = env("DEBUG")

ALLOWED_HOSTS = env("ALLOWED_HOSTS")

APP_NAME = env("APP_NAME", default="Kabadi")

# Application definition
INSTALLED_APPS = [
    "django.contrib.staticfiles",
    # Third party
    "anymail",
    # Local apps
    "apps.core",
    "apps.submissions",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "whitenoise.middleware.WhiteNoiseMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "apps.core.middleware.ApiRequestLogMiddleware",
    "apps.core.middleware.JsonExceptionMiddleware",
]

ROOT_URLCONF = "config.urls"

TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [BASE_DIR / "templates"],
        "APP_DIRS": True,
        "OPTIONS": {
            "context_processors": [
                "django.template.context_processors.debug",
                "django.template.context_processors.request",
            ],
        },
    },
]

ASGI_APPLICATION = "config.asgi.application"
WSGI_APPLICATION = "config.wsgi.application"

# Database
# Without DATABASE_URL every submission lives in process memory.
DATABASE_URL = env("DATABASE_URL", default="")
DURABLE_STORAGE_ENABLED = bool(DATABASE_URL)

if DURABLE_STORAGE_ENABLED:
    DATABASES = {"default": env.db("DATABASE_URL")}
    if DATABASES["default"]["ENGINE"] == "django.db.backends.postgresql":
        DATABASES["default"].setdefault("OPTIONS", {})["connect_timeout"] = env.int("DATABASE_CONNECT_TIMEOUT", default=5)
        DATABASES["default"]["DISABLE_SERVER_SIDE_CURSORS"] = True
else:
    DATABASES = {"default": {"ENGINE": "django.db.backends.dummy"}}

# Internationalization
LANGUAGE_CODE = "en-us"
TIME_ZONE = "Asia/Kolkata"
USE_I18N = True
USE_TZ = True

# Static files (built front-end bundle)
STATIC_URL = "static/"
STATICFILES_DIRS = [p for p in [BASE_DIR / "static"] if p.exists()]
STATIC_ROOT = BASE_DIR.parent / "staticfiles"

# WhiteNoise configuration
STORAGES = {
    "default": {
        "BACKEND": "django.core.files.storage.FileSystemStorage",
    },
    "staticfiles": {
        "BACKEND": "whitenoise.storage.CompressedManifestStaticFilesStorage",
    },
}

# Default primary key field type
DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

# Email configuration (SMTP relay)
EMAIL_BACKEND = env("EMAIL_BACKEND", default="django.core.mail.backends.smtp.EmailBackend")
EMAIL_HOST = env("SMTP_HOST", default="")
EMAIL_PORT = env.int("SMTP_PORT", default=587)
EMAIL_HOST_USER = env("SMTP_USER", default="")
EMAIL_HOST_PASSWORD = env("SMTP_PASS", default="")
EMAIL_USE_TLS = env.bool("SMTP_USE_TLS", default=True)
EMAIL_TIMEOUT = env.int("SMTP_TIMEOUT", default=15)
DEFAULT_FROM_EMAIL = env("MAIL_FROM", default=EMAIL_HOST_USER or f"{APP_NAME} <no-reply@kabadi.in>")

# Staff recipients for submission notifications
NOTIFICATION_EMAILS = env("NOTIFICATION_EMAILS")

# Anymail (Mailgun)
ANYMAIL = {
    "MAILGUN_API_KEY": env("MAILGUN_API_KEY", default=""),
    "MAILGUN_SENDER_DOMAIN": env("MAILGUN_DOMAIN", default="kabadi.in"),
}

# Resume uploads (S3-compatible object storage)
RESUME_STORAGE = {
    "BUCKET": env("S3_BUCKET", default=""),
    "ENDPOINT_URL": env("S3_ENDPOINT_URL", default=""),
    "REGION": env("S3_REGION", default="auto"),
    "ACCESS_KEY_ID": env("S3_ACCESS_KEY_ID", default=""),
    "SECRET_ACCESS_KEY": env("S3_SECRET_ACCESS_KEY", default=""),
    "PUBLIC_URL": env("S3_PUBLIC_URL", default=""),
    "TIMEOUT": env.int("S3_TIMEOUT", default=10),
}

# Newsletter signups allowed per client IP per minute
NEWSLETTER_RATE_LIMIT = env.int("NEWSLETTER_RATE_LIMIT", default=10)

# Worker threads for fire-and-forget notifications
NOTIFICATION_WORKERS = env.int("NOTIFICATION_WORKERS", default=2)

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "simple": {
            "format": "%(asctime)s %(levelname)s [%(name)s] %(message)s",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "simple",
        },
    },
    "root": {
        "handlers": ["console"],
        "level": "WARNING",
    },
    "loggers": {
        "apps": {
            "handlers": ["console"],
            "level": env("LOG_LEVEL", default="INFO"),
            "propagate": False,
        },
    },
}
