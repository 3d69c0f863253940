"""
Centralized configuration for SiteBoss.

All settings are loaded from environment variables via .env file.
The pricing/business-rule document lives separately in trade_core.json.
"""

from functools import lru_cache
from pathlib import Path
from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from dotenv import load_dotenv

load_dotenv()

DEFAULT_CORE_CONFIG_PATH = str(Path(__file__).resolve().parent / "trade_core.json")


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Brand
    brand_name: str = Field(default="SiteBoss")

    # Core pricing / rules document
    core_config_path: str = Field(default=DEFAULT_CORE_CONFIG_PATH)

    # Facebook Messenger
    fb_page_access_token: Optional[str] = Field(default=None)
    fb_verify_token: str = Field(default="")
    fb_graph_api_version: str = Field(default="v19.0")
    auto_reply_enabled: bool = Field(default=True)

    # API
    api_host: str = Field(default="0.0.0.0")
    api_port: int = Field(default=8000)
    api_title: str = Field(default="SiteBoss Quoting API")
    api_version: str = Field(default="1.0.0")
    cors_origins: str = Field(default="*")

    # Logging
    log_level: str = Field(default="INFO")

    @property
    def cors_origins_list(self) -> List[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    @property
    def messenger_enabled(self) -> bool:
        return bool(self.fb_page_access_token)


@lru_cache()
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings()
