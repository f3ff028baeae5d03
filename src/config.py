from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class EngineSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="PAYMENTS_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # "single" applies the file on one thread, "shared" fans out to consumer threads
    engine_mode: Literal["single", "shared"] = "single"
    num_consumers: int = Field(default=4, ge=1)

    # Rejections log at WARNING; stdout is reserved for the accounts CSV
    log_level: str = "WARNING"


@lru_cache()
def get_settings() -> EngineSettings:
    """Get cached settings instance."""
    return EngineSettings()
