from pydantic_settings import BaseSettings
from pydantic import ConfigDict, ValidationError, field_validator
from functools import lru_cache
from typing import Optional

from domain.models import QueryDialect
from shared_utils.constants import Defaults, LogScope
from shared_utils.logging_utils import get_scoped_logger

logger = get_scoped_logger(LogScope.CONFIG)


class Settings(BaseSettings):
    """Application configuration with environment variable precedence.

    Precedence: 1) Environment Variables > 2) .env file > 3) Class defaults (required fields have no defaults)

    ``fireflies_api_key`` is the only required value; entrypoints exit
    non-zero when it is missing.
    """
    # Application metadata
    app_version: str = "1.0.0"

    # HTTP surface
    api_host: str = "localhost"
    api_port: int = 8000

    # Backend
    fireflies_api_key: str
    fireflies_api_url: str = Defaults.API_URL
    request_timeout_seconds: float = Defaults.REQUEST_TIMEOUT
    list_timeout_seconds: float = Defaults.LIST_TIMEOUT
    query_dialect: QueryDialect = QueryDialect.ISO_DATETIME

    # Environment
    environment: str = "development"
    log_level: str = Defaults.LOG_LEVEL

    model_config = ConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    @field_validator('fireflies_api_key')
    @classmethod
    def validate_api_key(cls, v: str) -> str:
        """Reject blank credentials."""
        if not v or not v.strip():
            raise ValueError("fireflies_api_key cannot be empty")
        return v.strip()

    @field_validator('query_dialect', mode='before')
    @classmethod
    def validate_query_dialect(cls, v):
        """Accept dialect names case-insensitively."""
        if isinstance(v, str):
            valid = {d.value for d in QueryDialect}
            if v.lower() not in valid:
                raise ValueError(f"query_dialect must be one of {valid}, got {v}")
            return v.lower()
        return v

    @field_validator('environment')
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Validate environment is recognized."""
        valid_envs = {"development", "staging", "production"}
        if v.lower() not in valid_envs:
            raise ValueError(f"environment must be one of {valid_envs}, got {v}")
        return v.lower()

    @field_validator('request_timeout_seconds', 'list_timeout_seconds')
    @classmethod
    def validate_timeouts(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("timeouts must be positive")
        return v


@lru_cache()
def get_settings() -> Settings:
    """Load and cache application settings.

    Returns:
        Validated Settings instance

    Raises:
        pydantic.ValidationError: If required settings are missing or invalid
    """
    settings = Settings()

    # Log loaded configuration (credential never logged)
    logger.info(
        "configuration_loaded",
        environment=settings.environment,
        api_url=settings.fireflies_api_url,
        query_dialect=settings.query_dialect.value,
        request_timeout=settings.request_timeout_seconds,
        list_timeout=settings.list_timeout_seconds,
    )

    return settings


def load_settings_or_none() -> Optional[Settings]:
    """Load settings for a process entrypoint.

    Returns None (after logging why) when the configuration is unusable,
    most commonly because FIREFLIES_API_KEY is missing. Entrypoints turn
    that into a non-zero exit before any tool runs.
    """
    try:
        return get_settings()
    except ValidationError as exc:
        missing = [
            ".".join(str(part) for part in err["loc"]).upper()
            for err in exc.errors()
        ]
        logger.error("configuration_invalid", fields=missing, error=str(exc))
        return None
