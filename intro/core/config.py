from __future__ import annotations

from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load .env file explicitly
ENV_FILE_NAME = ".env"
env_path = Path(__file__).parent.parent.parent / ENV_FILE_NAME
load_dotenv(env_path, override=False)


class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite+aiosqlite:///./data/intro.db"
    SITE_ROOT: Optional[Path] = None  # None means the directory of the input page
    TRANSLATIONS_BASE_URL: str = ""  # Set to fetch dictionaries over HTTP instead of from SITE_ROOT
    HTTP_TIMEOUT: float = 10.0
    DEFAULT_REGION: str = "SG"
    LOG_DIR: Path = Path("logs")
    LOG_MAX_BYTES: int = 5 * 1024 * 1024
    LOG_BACKUP_COUNT: int = 3

    @field_validator("DEFAULT_REGION", mode="before")
    @classmethod
    def normalize_region(cls, v):  # type: ignore
        v = (v or "SG").strip().upper()
        if v not in ("MY", "SG"):
            raise ValueError("DEFAULT_REGION must be MY or SG")
        return v

    @field_validator("SITE_ROOT", mode="before")
    @classmethod
    def empty_site_root(cls, v):  # type: ignore
        if v in (None, ""):
            return None
        return v

    model_config = SettingsConfigDict(
        env_file=ENV_FILE_NAME,
        env_file_encoding="utf-8",
        extra="ignore",
    )


settings = Settings()
