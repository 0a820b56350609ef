"""
Environment-aware configuration.
Values come from the process environment, with a .env file loaded first.
"""
import os
from dotenv import load_dotenv

load_dotenv()  # Read .env if present


def _csv(value):
    return [item.strip() for item in value.split(",") if item.strip()]


class BaseConfig:
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")  # Set a strong key in production
    DEBUG = False
    TESTING = False
    APP_ENV = os.getenv("APP_ENV", "dev")
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    # CORS: comma-separated list of allowed origins
    CORS_ORIGINS = _csv(os.getenv("CORS_ORIGINS", "http://localhost:3000"))
    DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///task-tracker.db")
    SQL_ECHO = os.getenv("SQL_ECHO", "0").lower() in ("1", "true", "yes")
    # Access and refresh tokens are signed with different secrets
    JWT_ACCESS_SECRET = os.getenv("JWT_ACCESS_SECRET", "access-secret-change-me-access-secret")
    JWT_REFRESH_SECRET = os.getenv("JWT_REFRESH_SECRET", "refresh-secret-change-me-refresh-secret")
    JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
    JWT_ISSUER = os.getenv("JWT_ISSUER", "task-tracker-api")
    # Durations: "15m", "7d", "12h", "30s" or plain seconds
    JWT_ACCESS_EXPIRY = os.getenv("JWT_ACCESS_EXPIRY", "15m")
    JWT_REFRESH_EXPIRY = os.getenv("JWT_REFRESH_EXPIRY", "7d")


class DevelopmentConfig(BaseConfig):
    DEBUG = True
    # In dev, propagate exceptions so our error handler has full context
    PROPAGATE_EXCEPTIONS = True


class TestingConfig(BaseConfig):
    TESTING = True
    APP_ENV = "testing"
    DATABASE_URL = "sqlite://"
    SQL_ECHO = False
    JWT_ACCESS_SECRET = "testing-access-secret-0123456789abcdef"
    JWT_REFRESH_SECRET = "testing-refresh-secret-0123456789abcdef"
    JWT_ACCESS_EXPIRY = "15m"
    JWT_REFRESH_EXPIRY = "7d"


class ProductionConfig(BaseConfig):
    DEBUG = False
    APP_ENV = "prod"
    REQUIRED_ENV = ("JWT_ACCESS_SECRET", "JWT_REFRESH_SECRET", "DATABASE_URL")


def check_required_settings(config_cls):
    """Raise RuntimeError naming every required variable missing from the environment."""
    missing = [key for key in getattr(config_cls, "REQUIRED_ENV", ()) if not os.getenv(key)]
    if missing:
        raise RuntimeError(f"Missing required environment variables: {', '.join(missing)}")


def get_config(name: str | None):
    """
    Select config class.
    - If name is provided, choose by name.
    - Else choose based on APP_ENV (dev/testing/prod).
    """
    env = (name or os.getenv("APP_ENV", "dev")).lower()
    if env in ["prod", "production"]:
        return ProductionConfig
    if env in ["test", "testing"]:
        return TestingConfig
    return DevelopmentConfig
