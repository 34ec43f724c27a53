"""Application configuration via pydantic-settings."""

from functools import lru_cache
from typing import Literal

from pydantic import computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # API Settings
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 8000

    # CORS - comma-separated origins (env var: CORS_ORIGINS)
    cors_origins: str = "http://localhost:5173,http://127.0.0.1:5173"

    @computed_field
    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS origins as a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    # League database (DuckDB file built by scripts/build_duckdb.py)
    database_path: str = "data/league_data.duckdb"
    league_slug: str = "babylon-league"
    query_cache_ttl_seconds: float = 300.0

    # Roster source for the tier list
    roster_source: Literal["static", "database", "http"] = "static"
    roster_data_dir: str = "data/roster"
    roster_api_url: str = ""

    # Rankings persistence (one JSON file per storage key)
    rankings_storage_dir: str = "data/storage"

    # Drag-end grace before an undelivered drop is cancelled
    drag_grace_seconds: float = 0.05

    # Feature flags
    allow_duplicate_placements: bool = True
    enable_export_import: bool = True


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()
