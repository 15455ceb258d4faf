"""Runtime configuration for the Radix Tribes server."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings, read from the environment or a ``.env`` file."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", env_prefix="RADIX_"
    )

    data_dir: Path = Field(default=Path("data"), description="Where game data files live")
    data_file: Path | None = Field(
        default=None, description="Primary game data file (defaults to data_dir/game-data.json)"
    )
    backup_file: Path | None = Field(
        default=None,
        description="Previous generation of the data file (defaults to data_dir/game-data.backup.json)",
    )
    save_debounce_seconds: float = Field(
        default=2.0,
        description="Window in which repeated save requests collapse into one write",
        ge=0.0,
    )
    shutdown_timeout_seconds: float = Field(
        default=5.0,
        description="Upper bound on the final save during shutdown",
        gt=0.0,
    )
    map_radius: int = Field(default=40, description="Radius of freshly generated maps", gt=0)
    map_seed: int | None = Field(
        default=None, description="Fixed map seed for fresh worlds; wall-clock when unset"
    )
    admin_username: str = Field(default="Admin", min_length=1)
    admin_password: str = Field(default="snoopy", min_length=1)
    cors_origins: list[str] = Field(
        default_factory=lambda: ["http://localhost:5173", "http://127.0.0.1:5173"],
        description="Origins allowed to call the HTTP API",
    )
    log_level: str = Field(default="INFO", description="Root logging level")

    @property
    def primary_path(self) -> Path:
        return self.data_file or self.data_dir / "game-data.json"

    @property
    def backup_path(self) -> Path:
        return self.backup_file or self.data_dir / "game-data.backup.json"


@lru_cache
def get_settings() -> Settings:
    """Return a cached Settings instance."""

    return Settings()
