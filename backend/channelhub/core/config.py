"""Environment-driven settings classes, selected by ``APP_ENV``."""

from __future__ import annotations

import os
from collections.abc import Mapping
from datetime import timedelta
from typing import Final

from dotenv import load_dotenv

ENV_VAR: Final[str] = "APP_ENV"  # development | testing | production

# A missing .env file is fine
load_dotenv()

_TRUTHY = frozenset({"1", "true", "yes", "y", "on"})


def env_bool(name: str, default: bool = False) -> bool:
    """Read a flag; ``1/true/yes/y/on`` (any case) count as ``True``."""
    raw = os.getenv(name)
    return default if raw is None else raw.strip().lower() in _TRUTHY


def env_int(name: str, default: int) -> int:
    """Read an integer; unset or blank falls back to ``default``."""
    raw = os.getenv(name)
    return default if raw is None or not raw.strip() else int(raw)


class BaseConfig:
    """Settings shared by every environment.

    Attributes
    ----------
    ACCESS_TOKEN_SECRET / REFRESH_TOKEN_SECRET: str
        Distinct HMAC keys for the two token kinds. The access secret is
        mirrored into ``JWT_SECRET_KEY`` for ``flask-jwt-extended``.
    ACCESS_TOKEN_EXPIRES / REFRESH_TOKEN_EXPIRES: timedelta
        Token lifetimes, from ``ACCESS_TOKEN_EXPIRES_MINUTES`` (15) and
        ``REFRESH_TOKEN_EXPIRES_DAYS`` (10). Cookie max-age follows them.
    ACCESS_TOKEN_COOKIE / REFRESH_TOKEN_COOKIE: str
        Session cookie names.
    COOKIE_SECURE / COOKIE_SAMESITE:
        ``Secure`` flag and ``SameSite`` policy of both session cookies.
    MEDIA_ROOT / MEDIA_URL_PREFIX: str
        Where the local object storage writes uploads, and the URL prefix
        they are served under.
    MAX_CONTENT_LENGTH: int
        Request body cap in bytes; larger uploads get a 413.
    CORS_ORIGINS: str
        Comma-separated origins. Blank or ``*`` disables credentialed CORS.
    """

    API_BASE_PREFIX = "/api"
    APP_VERSION = os.getenv("APP_VERSION", "dev")
    SECRET_KEY = os.getenv("SECRET_KEY", "CHANGE_ME")

    # Session tokens
    ACCESS_TOKEN_SECRET = os.getenv("ACCESS_TOKEN_SECRET", "CHANGE_ME_ACCESS")
    REFRESH_TOKEN_SECRET = os.getenv("REFRESH_TOKEN_SECRET", "CHANGE_ME_REFRESH")
    ACCESS_TOKEN_EXPIRES = timedelta(minutes=env_int("ACCESS_TOKEN_EXPIRES_MINUTES", 15))
    REFRESH_TOKEN_EXPIRES = timedelta(days=env_int("REFRESH_TOKEN_EXPIRES_DAYS", 10))
    JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
    JWT_SECRET_KEY = ACCESS_TOKEN_SECRET
    JWT_ACCESS_TOKEN_EXPIRES = ACCESS_TOKEN_EXPIRES

    # Session cookies
    ACCESS_TOKEN_COOKIE = "access_token"
    REFRESH_TOKEN_COOKIE = "refresh_token"
    COOKIE_SECURE = env_bool("COOKIE_SECURE", True)
    COOKIE_SAMESITE = os.getenv("COOKIE_SAMESITE", "Lax")

    # Uploads
    MEDIA_ROOT = os.getenv("MEDIA_ROOT", os.path.abspath("./media"))
    MEDIA_URL_PREFIX = os.getenv("MEDIA_URL_PREFIX", "/media")
    MAX_CONTENT_LENGTH = env_int("MAX_CONTENT_LENGTH", 10 * 1024 * 1024)

    # Database
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "sqlite:///./channelhub.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ECHO = env_bool("SQLALCHEMY_ECHO", False)

    # Web plumbing
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "http://localhost:5173")
    CORS_MAX_AGE = 600
    USE_PROXYFIX = env_bool("USE_PROXYFIX", True)
    PROXYFIX_HOPS = env_int("PROXYFIX_HOPS", 1)
    JSON_SORT_KEYS = False
    PROPAGATE_EXCEPTIONS = False

    DEBUG = False
    TESTING = False


class DevelopmentConfig(BaseConfig):
    """Local development: debug on, plain-HTTP cookies unless ``COOKIE_SECURE`` is set."""

    DEBUG = env_bool("FLASK_DEBUG", True)
    COOKIE_SECURE = env_bool("COOKIE_SECURE", False)


class TestingConfig(BaseConfig):
    """Test runs.

    In-memory SQLite (or ``TEST_DATABASE_URL``), fixed token secrets and
    lifetimes, no proxy middleware and quiet logs, so results never depend on
    the developer's environment.
    """

    TESTING = True
    SQLALCHEMY_DATABASE_URI = os.getenv("TEST_DATABASE_URL", "sqlite:///:memory:")
    SQLALCHEMY_ECHO = False
    ACCESS_TOKEN_SECRET = "test-access-secret-0123456789abcdef"
    REFRESH_TOKEN_SECRET = "test-refresh-secret-fedcba9876543210"
    ACCESS_TOKEN_EXPIRES = timedelta(minutes=15)
    REFRESH_TOKEN_EXPIRES = timedelta(days=10)
    JWT_SECRET_KEY = ACCESS_TOKEN_SECRET
    JWT_ACCESS_TOKEN_EXPIRES = ACCESS_TOKEN_EXPIRES
    COOKIE_SECURE = True
    USE_PROXYFIX = False
    LOG_LEVEL = "WARNING"


class ProductionConfig(BaseConfig):
    """Production: ``Secure`` cookies are forced regardless of the environment."""

    COOKIE_SECURE = True


CONFIG_MAP: Mapping[str, type[BaseConfig]] = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
}


def get_config() -> type[BaseConfig]:
    """Config class named by ``APP_ENV``; unknown or unset means development."""
    name = os.getenv(ENV_VAR, "development").strip().lower()
    return CONFIG_MAP.get(name, DevelopmentConfig)
