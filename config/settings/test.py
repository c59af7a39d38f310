"""
Test settings.

SQLite keeps the suite self-contained. Tests that need real row locks
(SELECT ... FOR UPDATE) are skipped unless POSTGRES_HOST points at a server.
"""

import os
import tempfile

from .base import *  # noqa: F403,F405

SECRET_KEY = "test-secret-key-not-for-production"

DEBUG = False

ALLOWED_HOSTS = ["testserver", "localhost"]

if os.getenv("POSTGRES_HOST"):
    DATABASES = {
        "default": {
            "ENGINE": "django.db.backends.postgresql",
            "NAME": os.getenv("POSTGRES_DB", "shop_billing"),
            "USER": os.getenv("POSTGRES_USER", "postgres"),
            "PASSWORD": os.getenv("POSTGRES_PASSWORD", "postgres"),
            "HOST": os.getenv("POSTGRES_HOST"),
            "PORT": os.getenv("POSTGRES_PORT", "5432"),
        }
    }
else:
    DATABASES = {
        "default": {
            "ENGINE": "django.db.backends.sqlite3",
            "NAME": ":memory:",
        }
    }

PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]

# Run Celery tasks inline
CELERY_BROKER_URL = "memory://"
CELERY_RESULT_BACKEND = "cache+memory://"
CELERY_TASK_ALWAYS_EAGER = True
CELERY_TASK_EAGER_PROPAGATES = False

MEDIA_ROOT = tempfile.mkdtemp(prefix="shop-billing-media-")
SERVE_MEDIA = True

SHOP_NAME = "Test Store"
SHOP_ADDRESS = "12 Market Road"
SHOP_PHONE = "9800000000"
SHOP_EMAIL = "store@example.com"
API_BASE_URL = "http://api.testserver"
APP_BASE_URL = "http://app.testserver"

TWILIO_ACCOUNT_SID = ""
TWILIO_AUTH_TOKEN = ""

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "handlers": {
        "console": {
            "level": "WARNING",
            "class": "logging.StreamHandler",
        },
    },
    "root": {
        "handlers": ["console"],
        "level": "WARNING",
    },
}
