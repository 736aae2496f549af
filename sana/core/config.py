# sana/core/config.py
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field
from pathlib import Path

class Settings(BaseSettings):
    app_name: str = Field(default="Sana Environment API", alias="APP_NAME")
    app_env: str = Field(default="dev", alias="APP_ENV")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Quality index provider. An empty key is passed through as-is;
    # the provider answers with an auth failure per metric.
    quality_api_key: str = Field(default="", alias="QUALITY_API_KEY")
    quality_api_base: str = Field(default="http://127.0.0.1:9000", alias="QUALITY_API_BASE")
    quality_api_timeout: float = Field(default=30.0, alias="QUALITY_API_TIMEOUT")

    # Cancel in-flight requests of a superseded fetch cycle
    cancel_superseded: bool = Field(default=True, alias="CANCEL_SUPERSEDED")

    model_config = SettingsConfigDict(
        env_file=str(Path(__file__).resolve().parents[1] / ".env"),  # sana/.env
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

settings = Settings()
