from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    database_url: str = "sqlite:///./sleep.db"
    subject: str = "default"
    owner_name: str = "George"
    local_timezone: str = "America/Chicago"
    cache_expiry_hour: int = 7
    cache_expiry_minute: int = 35
    window_cutoff_utc_hour: int = 18  # noon Central at a fixed UTC-6, not DST-aware
    interruption_threshold_minutes: int = 15

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
