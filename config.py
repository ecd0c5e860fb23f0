"""
Configuration for the Briscola server.

Values come from (in order of precedence):
1. Environment variables
2. .env file (if exists)
3. Default values
"""

import os
from pathlib import Path

from dotenv import load_dotenv

BASE_DIR = Path(__file__).resolve().parent
INSTANCE_DIR = BASE_DIR / "instance"

env_path = BASE_DIR / ".env"
if env_path.exists():
    load_dotenv(env_path)


def get_env(key: str, default: str = "") -> str:
    """Get environment variable with default."""
    return os.environ.get(key, default)


def get_env_bool(key: str, default: bool = False) -> bool:
    """Get boolean environment variable."""
    val = os.environ.get(key, "").lower()
    if val in ("true", "1", "yes", "on"):
        return True
    if val in ("false", "0", "no", "off"):
        return False
    return default


def get_env_int(key: str, default: int = 0) -> int:
    """Get integer environment variable."""
    try:
        return int(os.environ.get(key, str(default)))
    except ValueError:
        return default


def get_env_list(key: str, default: str = "") -> list[str]:
    """Get comma-separated environment variable as a list."""
    return [x.strip() for x in get_env(key, default).split(",") if x.strip()]


class Config:
    ENVIRONMENT = get_env("ENVIRONMENT", "development")
    LOG_LEVEL = get_env("LOG_LEVEL", "INFO")
    PORT = get_env_int("PORT", 5000)

    SECRET_KEY = get_env("SECRET_KEY", "dev-secret-change-me")
    JWT_SECRET_KEY = get_env("JWT_SECRET_KEY", SECRET_KEY)
    JWT_ALGORITHM = get_env("JWT_ALGORITHM", "HS256")
    JWT_EXPIRES_MINUTES = get_env_int("JWT_EXPIRES_MINUTES", 60 * 24)

    SQLALCHEMY_DATABASE_URI = get_env(
        "DATABASE_URL", "sqlite:///" + str(INSTANCE_DIR / "briscola.db")
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    CORS_ORIGINS = get_env_list("ORIGIN_CORS_IP", "*")
    API_PREFIX = get_env("API_PREFIX", "/api")

    # None lets Flask-SocketIO pick eventlet when it is installed
    SOCKETIO_ASYNC_MODE = get_env("SOCKETIO_ASYNC_MODE") or None

    ROOM_CODE_LENGTH = get_env_int("ROOM_CODE_LENGTH", 4)
    ENFORCE_TURN_ORDER = get_env_bool("ENFORCE_TURN_ORDER", True)


class TestConfig(Config):
    TESTING = True
    ENVIRONMENT = "test"
    LOG_LEVEL = "WARNING"
    SECRET_KEY = "test-secret"
    JWT_SECRET_KEY = "test-jwt-secret"
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    SOCKETIO_ASYNC_MODE = "threading"
    CORS_ORIGINS = ["*"]
