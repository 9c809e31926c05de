# src/dealdesk/adapters/config.py
from typing import Any

from pydantic import Field, ValidationInfo, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppConfig(BaseSettings):
    # App & logging
    ENV: str = Field(default="dev")
    LOG_LEVEL: str = Field(default="INFO")

    # -----------------------------
    # Lender catalog
    # -----------------------------
    # JSON file with {"version": ..., "lenders": [...]}; built-in catalog when unset
    LENDER_CATALOG_PATH: str | None = Field(default=None)

    # -----------------------------
    # Feed defaults
    # -----------------------------
    FEED_LIMIT: int = Field(default=50)

    # If true, /analyze writes score columns back through the deal repository
    SAVE_ANALYSES: bool = Field(default=True)
    # Analyses kept by the in-memory store before the oldest are evicted
    DEAL_STORE_LIMIT: int = Field(default=500)

    model_config = SettingsConfigDict(
        env_prefix="DEALDESK_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("LOG_LEVEL", mode="before")
    @classmethod
    def _upper_level(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip().upper()
        return v

    @field_validator("LENDER_CATALOG_PATH", mode="before")
    @classmethod
    def _blank_to_none(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("FEED_LIMIT", "DEAL_STORE_LIMIT", mode="before")
    @classmethod
    def _limit_positive(cls, v: Any, info: ValidationInfo) -> Any:
        n = int(v)
        if n <= 0:
            raise ValueError(f"{info.field_name} must be > 0")
        return n


config = AppConfig()
