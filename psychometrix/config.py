"""Environment-driven settings for the test server and the admin console."""

from __future__ import annotations

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from psychometrix.constants.network_constants import (
    DEFAULT_ASSESSMENT_BACKEND_URL,
    DEFAULT_HOST,
    DEFAULT_PORT,
    DEFAULT_REPORT_BACKEND_URL,
    DEFAULT_REQUEST_TIMEOUT_SECONDS,
    DEFAULT_RESUME_BACKEND_URL,
)


class Settings(BaseSettings):
    """Settings read from PSYCHOMETRIX_* environment variables or a .env file."""

    model_config = SettingsConfigDict(
        env_prefix="PSYCHOMETRIX_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT

    assessment_backend_url: str = DEFAULT_ASSESSMENT_BACKEND_URL
    report_backend_url: str = DEFAULT_REPORT_BACKEND_URL
    resume_backend_url: str = DEFAULT_RESUME_BACKEND_URL
    request_timeout_seconds: float = DEFAULT_REQUEST_TIMEOUT_SECONDS

    # Administrator login is disabled while no passcode is configured.
    admin_passcode: str | None = None

    headless: bool = False
    log_level: str = "INFO"

    @field_validator(
        "assessment_backend_url", "report_backend_url", "resume_backend_url", mode="after"
    )
    @classmethod
    def strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    @field_validator("admin_passcode", mode="after")
    @classmethod
    def blank_passcode_disables_admin(cls, value: str | None) -> str | None:
        if value is None or not value.strip():
            return None
        return value


@lru_cache
def get_settings() -> Settings:
    return Settings()
