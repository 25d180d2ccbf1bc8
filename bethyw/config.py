"""
Settings
========

Values come from, in order of priority: environment variables prefixed with
`BETHYW_` (e.g. `BETHYW_DATA_DIR`), a `.env` file in the working directory,
then the defaults below.

    from bethyw.config import get_settings
    get_settings().DATA_DIR
"""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="BETHYW_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # directory holding areas.csv and the dataset files
    DATA_DIR: str = "datasets"
    LOG_LEVEL: str = "WARNING"


@lru_cache()
def get_settings() -> Settings:
    """Settings singleton. Tests call get_settings.cache_clear()."""
    return Settings()
