"""Settings for the presentation engine and the Streamlit host app.

Values come from the environment (``SPENDWISE_`` prefix) or a ``.env`` file.
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):

    model_config = SettingsConfigDict(
        env_prefix="SPENDWISE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    page_size: int = Field(default=10, description="Rows per table page")
    page_window: int = Field(default=5, description="Page buttons shown at once")
    recent_limit: int = Field(default=6, description="Rows in the collapsed recent feed")
    suggestion_limit: int = Field(default=5, description="Autocomplete candidates")

    api_url: str = Field(
        default="http://localhost:3000",
        description="Backend serving /api/transactions/<period>",
    )
    api_token: Optional[str] = Field(default=None, description="Bearer token for the backend")
    request_timeout: float = Field(default=10.0, description="Seconds before a period fetch fails")

    fallback_seed: Optional[int] = Field(
        default=None,
        description="Seed for placeholder chart values; random when unset",
    )
    seed_path: str = Field(default="data/seed.json", description="Entries loaded at startup")

    log_level: str = Field(default="INFO")
    log_json: bool = Field(default=False, description="Render logs as JSON lines")

    @field_validator("page_size", "page_window", "recent_limit", "suggestion_limit")
    @classmethod
    def must_be_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("must be at least 1")
        return v

    @field_validator("log_level")
    @classmethod
    def normalize_level(cls, v: str) -> str:
        return v.upper()


@lru_cache
def get_settings() -> Settings:
    return Settings()
