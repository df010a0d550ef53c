"""Runtime settings, read from FIELDGUARD_* environment variables or `.env`."""
from functools import lru_cache
from typing import Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_prefix="FIELDGUARD_", extra="ignore")

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False  # JSON lines instead of colored console output

    # Sessions
    ERROR_MODE: Literal["failures", "messages"] = "failures"
    DEFAULT_TYPE: str = "string"  # type of rules that name none
    AUDIT_ON_EXIT: bool = True  # leaving a session's `with` block audits it

    @field_validator("LOG_LEVEL", mode="before")
    @classmethod
    def _upper_level(cls, value):
        return value.upper() if isinstance(value, str) else value

    @field_validator("ERROR_MODE", mode="before")
    @classmethod
    def _lower_mode(cls, value):
        return value.lower() if isinstance(value, str) else value


@lru_cache
def get_settings() -> Settings:
    return Settings()
