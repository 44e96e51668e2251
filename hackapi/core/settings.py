from __future__ import annotations

from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    database_url: str = "sqlite+aiosqlite:///./hackapi.db"

    # shared secret every attendee signs in with
    hackbot_password: str = ""

    slack_api_token: str = ""
    slack_api_url: str = "https://slack.com/api"

    pusher_url: Optional[str] = None
    pusher_channel: str = "api_events"
    pusher_timeout: float = 2.0

    log_level: str = "INFO"
