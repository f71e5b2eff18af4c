"""
Environment-aware configuration.
Security keys, token lifetimes, mail settings, CORS and env flags.
The database URL is read by DBStorage and the redis URL by TokenCache.
"""
import os
from dotenv import load_dotenv
from datetime import timedelta

from utils.env import DEV, PROD, TEST, resolve_env

load_dotenv()  # Read .env if present


def _env_bool(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes")


class BaseConfig:
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")  # Set a strong key in production
    DEBUG = False
    TESTING = False
    # CORS: in dev we usually allow '*', in prod supply a comma-separated list in env
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "*")
    APP_ENV = DEV
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    # jwt configurations; access and refresh tokens are signed with different secrets
    JWT_SECRET = os.getenv("JWT_SECRET", "dev-secret-change-me")
    JWT_REFRESH_SECRET = os.getenv("JWT_REFRESH_SECRET", "dev-refresh-secret-change-me")
    JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
    JWT_ISSUER = os.getenv("JWT_ISSUER", "auth-api")
    ACCESS_TOKEN_EXPIRES = timedelta(seconds=int(os.getenv("ACCESS_TOKEN_EXPIRES_SECONDS", "3600")))
    REFRESH_TOKEN_EXPIRES = timedelta(seconds=int(os.getenv("REFRESH_TOKEN_EXPIRES_SECONDS", "31536000")))
    RESET_PASSWORD_TOKEN_EXPIRES = timedelta(seconds=int(os.getenv("RESET_PASSWORD_TOKEN_EXPIRES_SECONDS", "900")))

    # SMTP
    MAIL_SERVER = os.getenv("MAIL_SERVER", "smtp.gmail.com")
    MAIL_PORT = int(os.getenv("MAIL_PORT", "587"))
    MAIL_USERNAME = os.getenv("MAIL_USERNAME")
    MAIL_PASSWORD = os.getenv("MAIL_PASSWORD")
    MAIL_FROM = os.getenv("MAIL_FROM", os.getenv("MAIL_USERNAME", "noreply@auth-api.local"))
    MAIL_USE_TLS = _env_bool("MAIL_USE_TLS", "true")
    # When set, emails are logged instead of sent
    MAIL_SUPPRESS_SEND = _env_bool("MAIL_SUPPRESS_SEND")


class DevelopmentConfig(BaseConfig):
    DEBUG = True
    LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")


class TestingConfig(BaseConfig):
    APP_ENV = TEST
    TESTING = True
    MAIL_SUPPRESS_SEND = True
    JWT_SECRET = "test-access-secret"
    JWT_REFRESH_SECRET = "test-refresh-secret"


class ProductionConfig(BaseConfig):
    APP_ENV = PROD
    DEBUG = False


def get_config(name: str | None):
    """
    Select config class.
    - If name is provided, choose by name.
    - Else choose based on APP_ENV (dev/test/prod and their long aliases).
    """
    env = resolve_env(name)
    if env == PROD:
        return ProductionConfig
    if env == TEST:
        return TestingConfig
    return DevelopmentConfig
