"""
Runtime configuration helpers for the AlumniConnect backend.

Loads storage, session and assist settings from the environment and the
.env file located in the project root.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Resolve the project root
BASE_DIR = Path(__file__).resolve().parents[1]

# Absolute path to .env
ENV_PATH = BASE_DIR / ".env"

# Load .env defaults without overriding environment variables provided by the platform
load_dotenv(dotenv_path=ENV_PATH, override=False)


class Settings(BaseSettings):
    app_name: str = Field(default="AlumniConnect", alias="APP_NAME")
    api_version: str = Field(default="0.1.0", alias="API_VERSION")

    # Key-value storage
    storage_backend: Literal["memory", "file", "sql"] = Field(default="file", alias="STORAGE_BACKEND")
    storage_dir: Path = Field(default=BASE_DIR / ".alumniconnect", alias="STORAGE_DIR")
    storage_namespace: str = Field(default="alumniconnect", alias="STORAGE_NAMESPACE")
    database_url: str = Field(default="sqlite+pysqlite:///./alumniconnect.db", alias="DATABASE_URL")
    seed_demo_data: bool = Field(default=True, alias="SEED_DEMO_DATA")

    # Session refresh
    session_poll_seconds: float = Field(default=5.0, gt=0, alias="SESSION_POLL_SECONDS")
    disable_session_polling: bool = Field(default=False, alias="DISABLE_SESSION_POLLING")

    avatar_base_url: str = Field(default="https://picsum.photos", alias="AVATAR_BASE_URL")

    # Text generation assist
    gemini_api_key: str | None = Field(default=None, alias="GEMINI_API_KEY")
    gemini_model: str = Field(default="gemini-2.5-flash", alias="GEMINI_MODEL")
    gemini_base_url: str = Field(
        default="https://generativelanguage.googleapis.com/v1beta", alias="GEMINI_BASE_URL"
    )
    gemini_timeout: float = Field(default=20.0, alias="GEMINI_TIMEOUT")

    model_config = SettingsConfigDict(
        env_file=str(ENV_PATH),
        env_file_encoding="utf-8",
        extra="ignore"
    )


@lru_cache()
def get_settings() -> Settings:
    return Settings()


__all__ = ["Settings", "get_settings"]
