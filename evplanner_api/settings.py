import os
from pathlib import Path

from dotenv import load_dotenv

BASE_DIR = Path(__file__).resolve().parent.parent
load_dotenv(BASE_DIR / ".env")


def env_bool(name: str, default: bool) -> bool:
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    return raw_value.strip().lower() in {"1", "true", "yes", "on"}


def env_list(name: str, default: str) -> list[str]:
    raw_value = os.getenv(name, default)
    return [item.strip() for item in raw_value.split(",") if item.strip()]


def env_int(name: str, default: int) -> int:
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    return int(raw_value)


def env_float(name: str, default: float) -> float:
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    return float(raw_value)


def env_optional_float(name: str, default: float | None = None) -> float | None:
    raw_value = os.getenv(name)
    if raw_value is None or raw_value.strip() == "":
        return default
    return float(raw_value)


SECRET_KEY = os.getenv("SECRET_KEY", "dev-insecure-secret-key-change-me")
DEBUG = env_bool("DEBUG", True)
ALLOWED_HOSTS = env_list("ALLOWED_HOSTS", "127.0.0.1,localhost,testserver")
CSRF_TRUSTED_ORIGINS = env_list("CSRF_TRUSTED_ORIGINS", "")

INSTALLED_APPS = [
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.staticfiles",
    "rest_framework",
    "drf_spectacular",
    "evplanner",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
]

ROOT_URLCONF = "evplanner_api.urls"

TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [],
        "APP_DIRS": True,
        "OPTIONS": {
            "context_processors": [
                "django.template.context_processors.request",
            ],
        },
    },
]

WSGI_APPLICATION = "evplanner_api.wsgi.application"

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": BASE_DIR / "db.sqlite3",
    }
}

LANGUAGE_CODE = "en-us"
TIME_ZONE = "UTC"
USE_I18N = True
USE_TZ = True

STATIC_URL = "static/"
DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

CACHES = {
    "default": {
        "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
        "LOCATION": "evplanner-locmem-cache",
        "TIMEOUT": 24 * 60 * 60,
    }
}

REST_FRAMEWORK = {
    "DEFAULT_AUTHENTICATION_CLASSES": [],
    "DEFAULT_PARSER_CLASSES": [
        "rest_framework.parsers.JSONParser",
    ],
    "DEFAULT_RENDERER_CLASSES": [
        "rest_framework.renderers.JSONRenderer",
    ],
    "DEFAULT_SCHEMA_CLASS": "drf_spectacular.openapi.AutoSchema",
}

SPECTACULAR_SETTINGS = {
    "TITLE": "EV Route Planner API",
    "DESCRIPTION": "EV journey planning with charging stop insertion.",
    "VERSION": "1.0.0",
    "SERVE_INCLUDE_SCHEMA": False,
}


LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").strip().upper()

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "standard": {
            "format": "%(asctime)s %(levelname)s %(name)s: %(message)s",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "standard",
        },
    },
    "root": {
        "handlers": ["console"],
        "level": "WARNING",
    },
    "loggers": {
        "evplanner": {
            "handlers": ["console"],
            "level": LOG_LEVEL,
            "propagate": False,
        },
    },
}

STATION_DATA_JSON_PATH = os.getenv(
    "STATION_DATA_JSON_PATH",
    str(BASE_DIR / "data" / "stations.json"),
)
OSRM_API_BASE_URL = os.getenv("OSRM_API_BASE_URL", "https://router.project-osrm.org")
NOMINATIM_API_BASE_URL = os.getenv(
    "NOMINATIM_API_BASE_URL",
    "https://nominatim.openstreetmap.org",
)
EXTERNAL_API_TIMEOUT_SECONDS = env_int("EXTERNAL_API_TIMEOUT_SECONDS", 15)
GEOLOOKUP_USER_AGENT = os.getenv(
    "GEOLOOKUP_USER_AGENT",
    "evplanner-api/1.0",
)
GEOCODER_COUNTRY_CODES = os.getenv("GEOCODER_COUNTRY_CODES", "in").strip().lower()
GEOCODER_LOCAL_COUNTRY = os.getenv("GEOCODER_LOCAL_COUNTRY", "in").strip().lower()
DEFAULT_REGION_HINT = os.getenv("DEFAULT_REGION_HINT", "Kerala, India")

MAP_PROVIDER = os.getenv("MAP_PROVIDER", "osrm").strip().lower()
MAPBOX_ACCESS_TOKEN = os.getenv("MAPBOX_ACCESS_TOKEN", "")
MAPBOX_DIRECTIONS_PROFILE = os.getenv("MAPBOX_DIRECTIONS_PROFILE", "driving")

DEFAULT_PLANNING_STRATEGY = os.getenv("DEFAULT_PLANNING_STRATEGY", "sequential").strip().lower()
DEFAULT_BATTERY_PERCENT = env_float("DEFAULT_BATTERY_PERCENT", 80.0)
DEFAULT_FULL_RANGE_KM = env_float("DEFAULT_FULL_RANGE_KM", 300.0)
DEFAULT_BATTERY_CAPACITY_KWH = env_float("DEFAULT_BATTERY_CAPACITY_KWH", 20.0)
DEFAULT_LATERAL_SEARCH_START_KM = env_float("DEFAULT_LATERAL_SEARCH_START_KM", 10.0)
DEFAULT_LATERAL_SEARCH_STEP_KM = env_float("DEFAULT_LATERAL_SEARCH_STEP_KM", 10.0)
DEFAULT_LATERAL_SEARCH_MAX_KM = env_float("DEFAULT_LATERAL_SEARCH_MAX_KM", 40.0)
DEFAULT_MAX_FULL_CHARGE_TIME_HOURS = env_optional_float("DEFAULT_MAX_FULL_CHARGE_TIME_HOURS", 3.0)
DEFAULT_MIN_BATTERY_THRESHOLD_PERCENT = env_float("DEFAULT_MIN_BATTERY_THRESHOLD_PERCENT", 0.0)
ROUTE_CORRIDOR_KM = env_float("ROUTE_CORRIDOR_KM", 25.0)
DISPLAY_STATION_CORRIDOR_KM = env_float("DISPLAY_STATION_CORRIDOR_KM", 15.0)
LOOKAHEAD_MARGIN_POINTS = env_int("LOOKAHEAD_MARGIN_POINTS", 10)
