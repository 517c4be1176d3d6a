"""
Environment-aware configuration.
Values come from the process environment, with a .env file loaded first when present.
Database selection lives in DBStorage (models/db_storage.py) and follows APP_ENV / DATABASE_URL.
"""
import os
from dotenv import load_dotenv
from datetime import timedelta

load_dotenv()  # Read .env if present


def _csv(value: str) -> list:
    return [item.strip() for item in value.split(",") if item.strip()]


class BaseConfig:
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")  # Set a strong key in production
    DEBUG = False
    TESTING = False
    # CORS: in dev we usually allow '*', in prod supply a comma-separated list in env
    CORS_ORIGINS = _csv(os.getenv("CORS_ORIGINS", "*"))
    APP_ENV = os.getenv("APP_ENV", "dev")
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    # Signed tokens (single shared HMAC secret)
    JWT_SECRET = os.getenv("JWT_SECRET", "dev-secret-change-me")
    JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
    JWT_ISSUER = os.getenv("JWT_ISSUER", "reading-club-api")
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(seconds=int(os.getenv("JWT_ACCESS_TOKEN_EXPIRES_SECONDS", "3600")))
    JWT_REFRESH_TOKEN_EXPIRES = timedelta(seconds=int(os.getenv("JWT_REFRESH_TOKEN_EXPIRES_SECONDS", "1209600")))

    # Kakao OAuth (authorization-code flow)
    KAKAO_CLIENT_ID = os.getenv("KAKAO_CLIENT_ID", "")
    KAKAO_CLIENT_SECRET = os.getenv("KAKAO_CLIENT_SECRET", "")
    KAKAO_REDIRECT_URI = os.getenv("KAKAO_REDIRECT_URI", "http://localhost:3000/auth/kakao/callback")
    KAKAO_TOKEN_URL = os.getenv("KAKAO_TOKEN_URL", "https://kauth.kakao.com/oauth/token")
    KAKAO_PROFILE_URL = os.getenv("KAKAO_PROFILE_URL", "https://kapi.kakao.com/v2/user/me")
    OAUTH_TIMEOUT_SECONDS = float(os.getenv("OAUTH_TIMEOUT_SECONDS", "10"))

    # Requests under these prefixes (plus exact "/") skip bearer-token extraction
    PUBLIC_PATH_PREFIXES = _csv(os.getenv(
        "PUBLIC_PATH_PREFIXES",
        "/api/auth/,/api/health,/apidocs,/flasgger_static,/swagger.json,/static/,/public/",
    ))


class DevelopmentConfig(BaseConfig):
    DEBUG = True
    LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")


class TestingConfig(BaseConfig):
    TESTING = True
    APP_ENV = "test"
    JWT_SECRET = "test-secret"
    KAKAO_CLIENT_ID = "test-client-id"
    KAKAO_CLIENT_SECRET = "test-client-secret"
    KAKAO_REDIRECT_URI = "http://localhost/callback"
    OAUTH_TIMEOUT_SECONDS = 2.0


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
