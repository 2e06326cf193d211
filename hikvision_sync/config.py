"""Application configuration loaded from environment variables."""

from functools import lru_cache

from pydantic_settings import BaseSettings

from hikvision_sync.errors import ConfigurationError


class Settings(BaseSettings):
    """All configuration is loaded from environment variables (or .env file).

    Device and database settings are optional at load time.  They are
    checked by ``require_device()`` / ``require_database()`` when a sync or
    query actually needs them, so the API can start without them.
    """

    # --- App ---
    app_name: str = "Hikvision Sync"
    app_version: str = "0.1.0"
    log_level: str = "INFO"
    environment: str = "development"  # development | staging | production

    # --- Device ---
    hikvision_ip: str = ""
    hikvision_username: str = ""
    hikvision_password: str = ""
    hikvision_start_time: str = "2025-11-03T00:00:00+05:30"
    hikvision_page_size: int = 30
    hikvision_max_pages: int = 50  # 50 * 30 = 1500 logs max per run
    hikvision_timeout_seconds: float = 30.0

    # --- Database ---
    database_url: str = ""  # postgres connection string for asyncpg

    # --- Background sync ---
    sync_interval_seconds: int = 0  # 0 disables the periodic sync

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    def require_device(self) -> None:
        missing = [
            name
            for name, value in (
                ("HIKVISION_IP", self.hikvision_ip),
                ("HIKVISION_USERNAME", self.hikvision_username),
                ("HIKVISION_PASSWORD", self.hikvision_password),
            )
            if not value
        ]
        if missing:
            raise ConfigurationError(
                "Hikvision env variables missing. Please set "
                + ", ".join(missing)
                + "."
            )

    def require_database(self) -> None:
        if not self.database_url:
            raise ConfigurationError(
                "DATABASE_URL is not set. Please add it to .env or your "
                "deployment environment settings."
            )


@lru_cache
def get_settings() -> Settings:
    return Settings()
