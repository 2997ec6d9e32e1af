from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_env: str = Field(default="dev", alias="APP_ENV")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    database_url: str = Field(alias="DATABASE_URL")

    telegram_bot_token: str = Field(default="", alias="TELEGRAM_BOT_TOKEN")
    quest_group_chat_id: str = Field(default="-1002301616820", alias="QUEST_GROUP_CHAT_ID")

    referral_bonus_points: int = Field(default=100, alias="REFERRAL_BONUS_POINTS")
    whitelist_bonus_points: int = Field(default=300, alias="WHITELIST_BONUS_POINTS")

    celery_broker_url: str = Field(default="redis://localhost:6379/1", alias="CELERY_BROKER_URL")
    celery_result_backend: str = Field(
        default="redis://localhost:6379/2",
        alias="CELERY_RESULT_BACKEND",
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
