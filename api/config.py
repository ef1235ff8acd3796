"""
Environment-aware configuration.
Each value has an insecure development default that must be overridden in
production. The selected class is read once by create_app() and its values
are handed to the components that need them.
"""
import os
from dotenv import load_dotenv

load_dotenv()  # Read .env if present

DEFAULT_JWT_SECRET = "your-secret-key-change-in-production"


class BaseConfig:
    DEBUG = False
    TESTING = False
    # CORS: in dev we usually allow '*', in prod supply a comma-separated list in env
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "*")
    APP_ENV = os.getenv("APP_ENV", "dev")
    DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///auth-service.db")
    DB_ECHO = os.getenv("DB_ECHO", "false").lower() in ("1", "true", "yes")
    JWT_SECRET = os.getenv("JWT_SECRET", DEFAULT_JWT_SECRET)
    PORT = int(os.getenv("PORT", "8080"))


class DevelopmentConfig(BaseConfig):
    DEBUG = True


class TestingConfig(BaseConfig):
    TESTING = True
    DATABASE_URL = "sqlite://"
    DB_ECHO = False
    JWT_SECRET = "testing-secret-key-with-enough-length-for-hs256"


class ProductionConfig(BaseConfig):
    DEBUG = False


def get_config(name: str | None):
    """
    Select config class.
    - If name is provided, choose by name.
    - Else choose based on APP_ENV (dev/test/prod).
    """
    env = (name or os.getenv("APP_ENV", "dev")).lower()
    if env in ["prod", "production"]:
        return ProductionConfig
    if env in ["test", "testing"]:
        return TestingConfig
    return DevelopmentConfig
