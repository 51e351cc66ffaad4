# backend/courtbook/config.py

from decimal import Decimal
from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

BASE_DIR = Path(__file__).resolve().parents[2]  # repo root


class Settings(BaseSettings):
    database_url: str = "sqlite:///./data/sqlite/court.db"
    # Without Redis the change feed stays in-process (single worker only)
    redis_url: str | None = None

    court_open_hour: int = 8
    court_close_hour: int = 22
    price_per_block: Decimal = Decimal("67.50")
    currency: str = "BRL"

    auto_create_schema: bool = True
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=BASE_DIR / ".env",
        extra="ignore",
    )

    @property
    def resolved_database_url(self) -> str:
        url = self.database_url
        if url.startswith("sqlite:///./"):
            # Relative sqlite paths are anchored at the repo root
            relative_path = url.replace("sqlite:///./", "")
            absolute_path = BASE_DIR / relative_path
            return f"sqlite:///{absolute_path}"
        return url


@lru_cache
def get_settings() -> Settings:
    return Settings()
