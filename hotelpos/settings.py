import datetime
import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent


def env_bool(name, default=False):
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def env_list(name, default=""):
    return [item.strip() for item in os.environ.get(name, default).split(",") if item.strip()]


SECRET_KEY = os.environ.get("DJANGO_SECRET_KEY", "django-insecure-hotelpos-development-key")
DEBUG = env_bool("DJANGO_DEBUG")
ALLOWED_HOSTS = env_list("DJANGO_ALLOWED_HOSTS", "localhost,127.0.0.1")

INSTALLED_APPS = [
    "django.contrib.admin",
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "django.contrib.messages",
    "django.contrib.staticfiles",
    "rooms",
    "guests",
    "invoices",
    "reservations",
    "pos",
    "tasks",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.contrib.auth.middleware.AuthenticationMiddleware",
    "django.contrib.messages.middleware.MessageMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
]

ROOT_URLCONF = "hotelpos.urls"

TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [],
        "APP_DIRS": True,
        "OPTIONS": {
            "context_processors": [
                "django.template.context_processors.request",
                "django.contrib.auth.context_processors.auth",
                "django.contrib.messages.context_processors.messages",
            ],
        },
    },
]

WSGI_APPLICATION = "hotelpos.wsgi.application"

DATABASES = {
    "default": {
        "ENGINE": os.environ.get("HOTELPOS_DB_ENGINE", "django.db.backends.sqlite3"),
        "NAME": os.environ.get("HOTELPOS_DB_NAME", str(BASE_DIR / "db.sqlite3")),
        "USER": os.environ.get("HOTELPOS_DB_USER", ""),
        "PASSWORD": os.environ.get("HOTELPOS_DB_PASSWORD", ""),
        "HOST": os.environ.get("HOTELPOS_DB_HOST", ""),
        "PORT": os.environ.get("HOTELPOS_DB_PORT", ""),
        "ATOMIC_REQUESTS": False,
    }
}

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

AUTH_PASSWORD_VALIDATORS = [
    {"NAME": "django.contrib.auth.password_validation.UserAttributeSimilarityValidator"},
    {"NAME": "django.contrib.auth.password_validation.MinimumLengthValidator"},
    {"NAME": "django.contrib.auth.password_validation.CommonPasswordValidator"},
    {"NAME": "django.contrib.auth.password_validation.NumericPasswordValidator"},
]

LANGUAGE_CODE = "en-us"
TIME_ZONE = os.environ.get("HOTELPOS_TIME_ZONE", "UTC")
USE_I18N = True
USE_TZ = True

STATIC_URL = "static/"
STATIC_ROOT = BASE_DIR / "staticfiles"

LOGIN_URL = "admin:login"

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "verbose": {
            "format": "{asctime} {levelname} {name}: {message}",
            "style": "{",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "verbose",
        },
    },
    "root": {
        "handlers": ["console"],
        "level": "WARNING",
    },
    "loggers": {
        name: {
            "handlers": ["console"],
            "level": os.environ.get("HOTELPOS_LOG_LEVEL", "INFO"),
            "propagate": False,
        }
        for name in ("hotelpos", "rooms", "guests", "invoices", "reservations", "pos", "tasks")
    },
}

# Invoice numbering. Check-in only uses its base to seed an empty sequence.
INVOICE_NUMBER_BASE = int(os.environ.get("HOTELPOS_INVOICE_NUMBER_BASE", 1220))
CANCELLED_INVOICE_NUMBER_BASE = int(os.environ.get("HOTELPOS_CANCELLED_INVOICE_NUMBER_BASE", 9000))
CHECK_IN_INVOICE_NUMBER_BASE = int(os.environ.get("HOTELPOS_CHECK_IN_INVOICE_NUMBER_BASE", 2000))
INVOICE_NUMBER_WIDTH = 6

# Reject recomputation of an invoice with no matching constituents.
STRICT_INVOICE_RECONCILIATION = env_bool("HOTELPOS_STRICT_INVOICE_RECONCILIATION", True)

HAPPY_HOUR_START = datetime.time(17, 0)
HAPPY_HOUR_END = datetime.time(19, 0)

RESERVATION_LIST_LIMIT = 100
