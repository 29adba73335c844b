"""Configuration classes for applications using edge-cors."""

from __future__ import annotations

import os


def _get_env(name: str, default: str) -> str:
    value = os.getenv(name)
    return value if value is not None else default


def _split(value: str) -> list[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


class BaseConfig:
    """Base configuration shared across environments."""

    APP_NAME = "edge-cors"
    LOG_LEVEL = _get_env("LOG_LEVEL", "INFO")
    LOG_JSON_ENABLED = _get_env("LOG_JSON_ENABLED", "false").lower() == "true"
    LOG_FORMAT = _get_env("LOG_FORMAT", "%(asctime)s %(levelname)s [%(name)s] %(message)s")
    LOG_SETUP_ENABLED = _get_env("LOG_SETUP_ENABLED", "false").lower() == "true"
    CORS_ALLOWED_ORIGINS = _get_env("CORS_ALLOWED_ORIGINS", "http://localhost:5173")
    CORS_ALLOWED_METHODS = _get_env("CORS_ALLOWED_METHODS", "GET,HEAD,PUT,POST,DELETE,PATCH")
    CORS_ALLOWED_HEADERS = _get_env("CORS_ALLOWED_HEADERS", "")
    CORS_EXPOSE_HEADERS = _get_env("CORS_EXPOSE_HEADERS", "")
    CORS_MAX_AGE = _get_env("CORS_MAX_AGE", "600")
    CORS_ALLOW_CREDENTIALS = _get_env("CORS_ALLOW_CREDENTIALS", "false").lower() == "true"


class DevelopmentConfig(BaseConfig):
    """Configuration for local development."""

    DEBUG = True
    TESTING = False


class ProductionConfig(BaseConfig):
    """Configuration for production deployments."""

    DEBUG = False
    TESTING = False


CONFIG_BY_ENV = {
    "development": DevelopmentConfig,
    "production": ProductionConfig,
}


def get_config(config_name: str | None = None) -> type[BaseConfig]:
    """Return the config class for the requested environment.

    Args:
        config_name: Optional explicit config identifier. If omitted, the
            APP_ENV environment variable is consulted.

    Raises:
        KeyError: If the requested configuration is not defined.
        ValueError: If a wildcard origin is combined with credentials.
    """

    env_candidate = config_name if config_name is not None else os.getenv("APP_ENV", "development")
    env_name = (env_candidate or "development").lower()
    try:
        config_cls = CONFIG_BY_ENV[env_name]
    except KeyError as exc:
        raise KeyError(f"Unknown APP_ENV '{env_name}'") from exc

    _validate_cors(config_cls)
    return config_cls


def _validate_cors(config_cls: type[BaseConfig]) -> None:
    origins = _split(config_cls.CORS_ALLOWED_ORIGINS)
    if "*" in origins and config_cls.CORS_ALLOW_CREDENTIALS:
        raise ValueError(
            "CORS_ALLOWED_ORIGINS='*' cannot be combined with CORS_ALLOW_CREDENTIALS; "
            "list the allowed origins explicitly."
        )
