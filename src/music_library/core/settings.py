"""Application settings loaded from the environment."""
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .. import __version__


class AppSettings(BaseSettings):
    """Runtime configuration for the music library service."""

    model_config = SettingsConfigDict(env_prefix="MUSIC_LIBRARY_", extra="ignore")

    app_name: str = "Music Library API"
    app_version: str = __version__
    api_prefix: str = "/api"

    database_url: str = "sqlite+aiosqlite:///./music_library.db"
    database_echo: bool = False

    log_level: str = "INFO"
    log_format: str = Field("json", description="json or console")

    default_page_size: int = Field(20, ge=1)
    max_page_size: int = Field(100, ge=1)

    host: str = "0.0.0.0"
    port: int = 8000


app_settings = AppSettings()
