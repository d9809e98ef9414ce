"""Application configuration for termgate."""

from __future__ import annotations

import os
from datetime import timedelta
from typing import Dict, Tuple, Type

from dotenv import load_dotenv

load_dotenv()

# Access cookie lifetime: 12 x 30 days.
ACCESS_COOKIE_LIFETIME_SECONDS = 12 * 30 * 24 * 60 * 60


def _env_flag(name: str, default: str = "false") -> bool:
    return os.environ.get(name, default).lower() in ("1", "true", "yes")


def _env_list(name: str, default: str = "") -> Tuple[str, ...]:
    raw = os.environ.get(name, default)
    return tuple(item.strip() for item in raw.split(",") if item.strip())


class BaseConfig:
    """Base configuration loaded for all environments."""

    SECRET_KEY = os.environ.get("SECRET_KEY", "change-me")
    SQLALCHEMY_DATABASE_URI = os.environ.get("DATABASE_URL", "sqlite:///instance/termgate.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ENGINE_OPTIONS = {"pool_pre_ping": True}

    # Public base URL; its host is the only accepted redirect host.
    SITE_URL = os.environ.get("SITE_URL", "")

    # Gate settings
    PROTECTED_OBJECT_TYPES = _env_list("PROTECTED_OBJECT_TYPES")
    HUB_OBJECT_TYPE = os.environ.get("HUB_OBJECT_TYPE", "page")
    HUB_OBJECT_ID = int(os.environ.get("HUB_OBJECT_ID", "0"))
    LOGIN_URL = os.environ.get("LOGIN_URL", "")
    EXEMPT_ROLES = _env_list("EXEMPT_ROLES", "administrator,editor,shop_manager")
    ARCHIVE_REDIRECT = os.environ.get("ARCHIVE_REDIRECT", "hub")
    ALLOW_AUTOMATION_BYPASS = _env_flag("ALLOW_AUTOMATION_BYPASS")
    ADMIN_PATH_PREFIXES = _env_list("ADMIN_PATH_PREFIXES", "/admin")
    PREVIEW_QUERY_PARAM = os.environ.get("PREVIEW_QUERY_PARAM", "preview")

    # Access cookie; name is derived from SITE_URL when left empty.
    ACCESS_COOKIE_NAME = os.environ.get("ACCESS_COOKIE_NAME", "")
    ACCESS_COOKIE_MAX_AGE = int(
        os.environ.get("ACCESS_COOKIE_MAX_AGE", str(ACCESS_COOKIE_LIFETIME_SECONDS))
    )
    ACCESS_COOKIE_SAMESITE = "Lax"
    NONCE_MAX_AGE = int(os.environ.get("NONCE_MAX_AGE", "86400"))

    BCRYPT_LOG_ROUNDS = int(os.environ.get("BCRYPT_LOG_ROUNDS", "12"))
    BCRYPT_HANDLE_LONG_PASSWORDS = True

    # Operator identity for exemptions and bypasses.
    JWT_SECRET_KEY = os.environ.get("JWT_SECRET_KEY", SECRET_KEY)
    JWT_TOKEN_LOCATION = ["headers", "cookies"]
    JWT_COOKIE_CSRF_PROTECT = True
    JWT_COOKIE_SECURE = _env_flag("JWT_COOKIE_SECURE")
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(minutes=int(os.environ.get("JWT_ACCESS_MINUTES", "30")))


class DevelopmentConfig(BaseConfig):
    DEBUG = True
    ENV = "development"


class TestingConfig(BaseConfig):
    TESTING = True
    SECRET_KEY = "testing-secret"
    JWT_SECRET_KEY = "testing-jwt-secret"
    SQLALCHEMY_DATABASE_URI = os.environ.get("TEST_DATABASE_URL", "sqlite://")
    SQLALCHEMY_ENGINE_OPTIONS: dict = {}
    SITE_URL = "http://localhost"
    PROTECTED_OBJECT_TYPES = ("grower-news", "farmer-profiles")
    HUB_OBJECT_TYPE = "page"
    HUB_OBJECT_ID = 100
    LOGIN_URL = "/login"
    ACCESS_COOKIE_NAME = "termgate_access_test"
    BCRYPT_LOG_ROUNDS = 4
    JWT_TOKEN_LOCATION = ["headers"]
    JWT_COOKIE_CSRF_PROTECT = False


class ProductionConfig(BaseConfig):
    ENV = "production"
    JWT_COOKIE_SECURE = True


config_by_name: Dict[str, Type[BaseConfig]] = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
    # CI pipelines set APP_ENV=ci; map to testing defaults.
    "ci": TestingConfig,
}
