"""Django settings for the enviro-apis project.

Every tunable is read from the environment with a safe local default so the
project boots with no configuration for development and tests.
"""

from __future__ import annotations

import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent


def _env_bool(name: str, default: bool = False) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _env_list(name: str, default: str = "") -> list[str]:
    raw = os.environ.get(name, default)
    return [item.strip() for item in raw.split(",") if item.strip()]


SECRET_KEY = os.environ.get("DJANGO_SECRET_KEY", "dev-only-not-for-prod")
DEBUG = _env_bool("DJANGO_DEBUG", default=False)
ALLOWED_HOSTS = _env_list("DJANGO_ALLOWED_HOSTS", "localhost,127.0.0.1,testserver")

INSTALLED_APPS = [
    "django.contrib.contenttypes",
    "django.contrib.auth",
    "django_prometheus",
    "rest_framework",
    "drf_spectacular",
    "climate",
    "airquality",
]

MIDDLEWARE = [
    "django_prometheus.middleware.PrometheusBeforeMiddleware",
    "django.middleware.security.SecurityMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django_prometheus.middleware.PrometheusAfterMiddleware",
]

ROOT_URLCONF = "config.urls"
WSGI_APPLICATION = "config.wsgi.application"
ASGI_APPLICATION = "config.asgi.application"

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": os.environ.get("DJANGO_SQLITE_PATH", str(BASE_DIR / "db.sqlite3")),
    }
}

CACHES = {
    "default": {
        "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
        "LOCATION": "enviro-apis",
        # Entries age out by TTL; MAX_ENTRIES is only a very high safety cap
        # past which LocMemCache culls.
        "OPTIONS": {"MAX_ENTRIES": int(os.environ.get("CACHE_MAX_ENTRIES", "100000"))},
    }
}

LANGUAGE_CODE = "en-us"
TIME_ZONE = "UTC"
USE_I18N = False
USE_TZ = True

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

REST_FRAMEWORK = {
    "DEFAULT_AUTHENTICATION_CLASSES": [],
    "DEFAULT_PERMISSION_CLASSES": ["rest_framework.permissions.AllowAny"],
    "UNAUTHENTICATED_USER": None,
    "DEFAULT_RENDERER_CLASSES": ["rest_framework.renderers.JSONRenderer"],
    "DEFAULT_SCHEMA_CLASS": "drf_spectacular.openapi.AutoSchema",
    "EXCEPTION_HANDLER": "config.api.exceptions.custom_exception_handler",
}

SPECTACULAR_SETTINGS = {
    "TITLE": "Enviro APIs",
    "DESCRIPTION": (
        "Climate aggregates sampled over a grid of NASA POWER points and "
        "air quality readings from WAQI."
    ),
    "VERSION": "1.0.0",
    "SERVE_INCLUDE_SCHEMA": False,
}

# ---- climate ----
CLIMATE_CACHE_ALIAS = os.environ.get("CLIMATE_CACHE_ALIAS", "default")
CLIMATE_POINT_CACHE_TTL_S = float(os.environ.get("CLIMATE_POINT_CACHE_TTL_S", "600"))
CLIMATE_REQUEST_CACHE_TTL_S = float(
    os.environ.get("CLIMATE_REQUEST_CACHE_TTL_S", "600")
)
CLIMATE_GRID_SIZE = int(os.environ.get("CLIMATE_GRID_SIZE", "5"))
CLIMATE_GRID_STEP_DEG = float(os.environ.get("CLIMATE_GRID_STEP_DEG", "0.03"))
CLIMATE_NOISE_PERCENT = float(os.environ.get("CLIMATE_NOISE_PERCENT", "0"))
CLIMATE_UPSTREAM_TIMEOUT_S = float(
    os.environ.get("CLIMATE_UPSTREAM_TIMEOUT_S", "8")
)
CLIMATE_DEFAULT_LOOKBACK_DAYS = int(
    os.environ.get("CLIMATE_DEFAULT_LOOKBACK_DAYS", "7")
)
CLIMATE_MAX_RANGE_DAYS = int(os.environ.get("CLIMATE_MAX_RANGE_DAYS", "366"))
NASA_POWER_BASE_URL = os.environ.get(
    "NASA_POWER_BASE_URL",
    "https://power.larc.nasa.gov/api/temporal/daily/point",
)

# ---- air quality ----
WAQI_BASE_URL = os.environ.get("WAQI_BASE_URL", "https://api.waqi.info")
WAQI_TOKEN = os.environ.get("WAQI_TOKEN", "demo")
AIR_QUALITY_CACHE_TTL_S = float(os.environ.get("AIR_QUALITY_CACHE_TTL_S", "600"))
AIR_QUALITY_TIMEOUT_S = float(os.environ.get("AIR_QUALITY_TIMEOUT_S", "8"))

LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "plain": {
            "format": "%(asctime)s %(levelname)s [%(name)s] %(message)s",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "plain",
        },
    },
    "root": {"handlers": ["console"], "level": "WARNING"},
    "loggers": {
        "climate": {"handlers": ["console"], "level": LOG_LEVEL, "propagate": False},
        "airquality": {
            "handlers": ["console"],
            "level": LOG_LEVEL,
            "propagate": False,
        },
        "config": {"handlers": ["console"], "level": LOG_LEVEL, "propagate": False},
    },
}
