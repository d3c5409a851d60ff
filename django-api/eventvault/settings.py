"""Django settings for the eventvault project.

Values come from the environment; a ``.env`` file next to manage.py is
loaded first if present.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

BASE_DIR = Path(__file__).resolve().parent.parent

load_dotenv(BASE_DIR / ".env")


def env_bool(name: str, default: bool = False) -> bool:
    return os.getenv(name, str(default)).strip().lower() in ("1", "true", "yes", "on")


SECRET_KEY = os.getenv("DJANGO_SECRET_KEY", "insecure-dev-key-change-me")
DEBUG = env_bool("DJANGO_DEBUG")
ALLOWED_HOSTS = os.getenv("DJANGO_ALLOWED_HOSTS", "localhost,127.0.0.1,testserver").split(",")

INSTALLED_APPS = [
    "django.contrib.admin",
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "django.contrib.messages",
    "django.contrib.staticfiles",
    "rest_framework",
    "events.apps.EventsConfig",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.contrib.auth.middleware.AuthenticationMiddleware",
    "django.contrib.messages.middleware.MessageMiddleware",
]

ROOT_URLCONF = "eventvault.urls"
WSGI_APPLICATION = "eventvault.wsgi.application"

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

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": os.getenv("DB_PATH", str(BASE_DIR / "db.sqlite3")),
    }
}

CACHES = {
    "default": {
        "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
        "LOCATION": "eventvault",
    }
}

LANGUAGE_CODE = "en-us"
TIME_ZONE = os.getenv("EVENTVAULT_TIME_ZONE", "UTC")
USE_I18N = True
USE_TZ = True

STATIC_URL = "static/"

REST_FRAMEWORK = {
    "DEFAULT_AUTHENTICATION_CLASSES": [],
    "DEFAULT_PERMISSION_CLASSES": ["rest_framework.permissions.AllowAny"],
    "UNAUTHENTICATED_USER": None,
}

# Uploads and assets

UPLOAD_ROOT = Path(os.getenv("EVENTVAULT_UPLOAD_ROOT", str(BASE_DIR / "uploads")))
UPLOAD_URL = "/uploads/"
UPLOAD_MAX_BYTES = int(os.getenv("EVENTVAULT_UPLOAD_MAX_BYTES", str(500 * 1024 * 1024)))
UPLOAD_ALLOWED_EXTENSIONS = {".jpeg", ".jpg", ".png", ".gif", ".mp4", ".mov", ".avi", ".webm"}

# Multipart files are always spooled to disk, directly into the staging area.
FILE_UPLOAD_MAX_MEMORY_SIZE = 0
FILE_UPLOAD_TEMP_DIR = str(UPLOAD_ROOT / "events" / "temp")
DATA_UPLOAD_MAX_NUMBER_FILES = 50

# Event lifecycle

EVENT_DEFAULT_EXPIRY_DAYS = int(os.getenv("EVENTVAULT_DEFAULT_EXPIRY_DAYS", "14"))
EVENT_CLEANUP_INTERVAL_SECONDS = int(os.getenv("EVENTVAULT_CLEANUP_INTERVAL_SECONDS", str(6 * 60 * 60)))
EVENT_CACHE_TIMEOUT = 300
EVENT_QR_RENDERER = os.getenv("EVENTVAULT_QR_RENDERER") or None
PUBLIC_BASE_URL = os.getenv("EVENTVAULT_PUBLIC_BASE_URL") or None

# Remote mirror (SMB share, e.g. a Synology NAS)

MIRROR_ENABLED = env_bool("SYNOLOGY_ENABLED")
MIRROR_HOST = os.getenv("SYNOLOGY_HOST", "")
MIRROR_USERNAME = os.getenv("SYNOLOGY_USERNAME", "")
MIRROR_PASSWORD = os.getenv("SYNOLOGY_PASSWORD", "")
MIRROR_DOMAIN = os.getenv("SYNOLOGY_DOMAIN", "")
MIRROR_SHARE = os.getenv("SYNOLOGY_SHARE", "fotoapp")
MIRROR_BASE_PATH = os.getenv("SYNOLOGY_BASE_PATH", "fotoapp")
MIRROR_TIMEOUT_SECONDS = float(os.getenv("SYNOLOGY_TIMEOUT_SECONDS", "30"))

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "standard": {
            "format": "%(asctime)s %(levelname)s [%(name)s] %(message)s",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "standard",
        },
    },
    "loggers": {
        "events": {
            "handlers": ["console"],
            "level": os.getenv("EVENTVAULT_LOG_LEVEL", "INFO"),
            "propagate": True,
        },
    },
}
