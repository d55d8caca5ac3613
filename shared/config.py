"""
Shared configuration management for the CRPT submission client.
"""

from typing import Literal, Optional

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


TimeUnitName = Literal["milliseconds", "seconds", "minutes", "hours", "days"]


class BaseConfig(BaseSettings):
    """Base configuration class with common settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="CRPT_",
        case_sensitive=False,
        extra="ignore"
    )

    # Environment
    env: str = Field(default="local")
    log_level: str = Field(default="info")

    # Observability
    metrics_port: Optional[int] = Field(default=None)


class SubmissionSettings(BaseConfig):
    """Settings for the document submission client."""

    service_name: str = "submission"

    # Registry
    base_url: str = Field(default="https://ismp.crpt.ru/api/v3")
    token: SecretStr = Field(default=SecretStr("<token>"))
    request_timeout: float = Field(default=10.0, gt=0)

    # Rate limiting: at most request_limit calls per one time_unit
    request_limit: int = Field(default=10)
    time_unit: TimeUnitName = Field(default="seconds")


def get_settings(**overrides) -> SubmissionSettings:
    """Get submission settings from the environment, with explicit overrides applied."""
    return SubmissionSettings(**overrides)
