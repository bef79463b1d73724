from functools import lru_cache
from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Service settings, read from TIMETABLER_* environment variables or .env."""

    model_config = SettingsConfigDict(
        env_prefix="TIMETABLER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Search budget per request; None disables the limit
    time_limit_seconds: Optional[float] = Field(default=10.0, gt=0)
    node_limit: Optional[int] = Field(default=2_000_000, gt=0)

    log_level: str = "INFO"
    cors_origins: List[str] = ["*"]


@lru_cache()
def get_settings() -> Settings:
    return Settings()
