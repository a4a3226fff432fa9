"""
Configuration and settings for the QSL card backend.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from qsl_backend.models import CollectionConfig


class Settings(BaseSettings):
    """Environment-backed settings for the FastAPI service and the SCF entry."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    api_prefix: str = Field(default="/api")
    log_level: str = Field(default="INFO", env="LOG_LEVEL")

    # S3-compatible storage (Tencent COS)
    cos_endpoint: Optional[str] = Field(default=None, env="COS_ENDPOINT")
    cos_region: Optional[str] = Field(default=None, env="COS_REGION")
    cos_bucket: Optional[str] = Field(default=None, env="COS_BUCKET")
    aws_access_key_id: Optional[str] = Field(
        default=None, env="AWS_ACCESS_KEY_ID"
    )
    aws_secret_access_key: Optional[str] = Field(
        default=None, env="AWS_SECRET_ACCESS_KEY"
    )

    # Object keys holding each role's collection
    sent_cards_key: str = Field(default="qsl/sent_cards.json", env="SENT_CARDS_KEY")
    received_cards_key: str = Field(
        default="qsl/received_cards.json", env="RECEIVED_CARDS_KEY"
    )

    # Development toggles
    use_in_memory_backends: bool = Field(
        default=False,
        validation_alias=AliasChoices(
            "QSL_USE_IN_MEMORY_BACKENDS", "use_in_memory_backends"
        ),
    )

    def collection_config(self) -> CollectionConfig:
        return CollectionConfig(
            sent_key=self.sent_cards_key,
            received_key=self.received_cards_key,
            bucket=self.cos_bucket or "",
            region=self.cos_region or "",
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached settings instance."""
    return Settings()
