from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import field_validator
from typing import List, Optional
import os
from pathlib import Path


class Settings(BaseSettings):
    """Application settings - reads from environment variables"""

    # Telegram
    telegram_bot_token: str = ""

    # Supabase
    supabase_url: str = ""
    supabase_key: str = ""
    supabase_service_key: str = ""
    db_schema: str = "public"

    # Gate staff
    admin_telegram_ids: List[int] = []

    # Scanner tuning
    scan_cooldown_seconds: float = 5.0
    scan_reset_delay_seconds: float = 1.0
    history_limit: int = 50

    # Camera
    camera_device_index: Optional[int] = None
    camera_frame_interval: float = 0.05

    # Web dashboard
    dashboard_token: str = ""
    port: int = 8080

    # Environment
    env: str = "development"
    debug: bool = False

    @field_validator('admin_telegram_ids', mode='before')
    @classmethod
    def parse_admin_ids(cls, v):
        if isinstance(v, str):
            return [int(x.strip()) for x in v.split(",") if x.strip()]
        if isinstance(v, int):
            return [v]
        if isinstance(v, list):
            return v
        return []

    @field_validator('camera_device_index', mode='before')
    @classmethod
    def parse_device_index(cls, v):
        if v == "" or v is None:
            return None
        return v

    @field_validator('scan_cooldown_seconds', 'scan_reset_delay_seconds')
    @classmethod
    def non_negative(cls, v: float) -> float:
        if v < 0:
            raise ValueError("scanner delays must not be negative")
        return v

    @property
    def supabase_api_key(self) -> str:
        """Service key wins over the anon key when both are set"""
        return self.supabase_service_key or self.supabase_key

    # Pydantic v2 config
    model_config = SettingsConfigDict(
        env_file=".env" if Path(".env").exists() else None,
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,  # SUPABASE_URL == supabase_url
    )


# Create settings instance
settings = Settings()

if os.getenv("DEBUG", "").lower() == "true":
    print(f"Settings loaded:")
    print(f"  SUPABASE_URL: {'set' if settings.supabase_url else 'MISSING'}")
    print(f"  SUPABASE_KEY: {'set' if settings.supabase_api_key else 'MISSING'}")
