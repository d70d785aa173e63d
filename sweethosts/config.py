"""Configuration settings for sweethosts.

Uses pydantic-settings for config parsing from environment variables
and defaults. Configuration precedence: CLI flags > env vars > defaults.
"""

from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def _default_data_dir() -> Path:
    """Return the default data directory.

    Home-relative dotfolder when a home directory can be determined,
    otherwise a folder under the current directory.
    """
    try:
        return Path.home() / ".sweethosts"
    except RuntimeError:
        return Path(".") / "sweethosts"


class Settings(BaseSettings):
    """Application settings.

    Settings are loaded from environment variables with the SWEETHOSTS_ prefix.
    CLI flags can override these at runtime.
    """

    model_config = SettingsConfigDict(
        env_prefix="SWEETHOSTS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Paths
    data_dir: Path = Field(
        default_factory=_default_data_dir,
        description="Directory holding list, trash, history and content files",
    )
    hosts_path: Path | None = Field(
        default=None,
        description="System hosts file (uses the platform default if not set)",
    )
    tmp_dir: Path | None = Field(
        default=None,
        description="Temporary directory for sandbox and elevation files",
    )

    # Operational modes
    safe_mode: bool = Field(
        default=False,
        description="Sandbox mode - write hosts to a temp file, never the system",
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )

    # Timeouts (in seconds)
    elevation_timeout: int = Field(
        default=60,
        ge=1,
        description="Timeout for the privileged hosts copy",
    )
    hook_timeout: int = Field(
        default=120,
        ge=1,
        description="Timeout for the post-apply command",
    )


def get_settings() -> Settings:
    """Get the application settings.

    Returns:
        Settings instance loaded from environment.
    """
    return Settings()


def print_settings_json(settings: Settings | None = None) -> str:
    """Render effective settings as JSON.

    Args:
        settings: Optional settings instance; uses default if not provided.

    Returns:
        JSON string of effective settings.
    """
    if settings is None:
        settings = get_settings()
    return settings.model_dump_json(indent=2)


__all__ = ["Settings", "get_settings", "print_settings_json"]
