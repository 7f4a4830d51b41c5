"""
Configuration module for the Maternity Health Service.
Uses Pydantic BaseSettings so misconfigured values fail at startup.
"""
import logging
from pathlib import Path

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """
    Application settings read from the environment and an optional .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Key-value store (SQLite) configuration
    maternity_svc_db_dir: str = Field(default="data", description="Database directory")
    maternity_svc_db_file: str = Field(default="maternity.db", description="Database filename")
    maternity_svc_db_busy_timeout: int = Field(default=5000, description="SQLite busy timeout in milliseconds")

    # Logical keys inside the key-value store
    maternity_svc_patients_key: str = Field(
        default="registeredUsers",
        description="Key holding the patient registry (each patient embeds its health records)"
    )
    maternity_svc_notifications_key: str = Field(
        default="doctorNotifications",
        description="Key holding the global clinician notification log"
    )

    # Dashboard configuration
    maternity_svc_recent_records_limit: int = Field(
        default=3, ge=1, description="Number of records shown in the dashboard's recent panel"
    )

    # API Configuration
    maternity_svc_host: str = Field(default="0.0.0.0", description="API host")
    maternity_svc_port: int = Field(default=8000, description="API port")
    maternity_svc_reload: bool = Field(default=False, description="Enable hot reload")

    @model_validator(mode="after")
    def validate_keys(self) -> "Settings":
        """The registry and the notification log must never share a key."""
        if self.maternity_svc_patients_key == self.maternity_svc_notifications_key:
            raise ValueError(
                "MATERNITY_SVC_PATIENTS_KEY and MATERNITY_SVC_NOTIFICATIONS_KEY must differ"
            )
        return self

    @property
    def database_path(self) -> str:
        """Get the full database path."""
        return str(Path(self.maternity_svc_db_dir) / self.maternity_svc_db_file)


settings = Settings()

DATABASE_PATH = settings.database_path
DATABASE_BUSY_TIMEOUT = settings.maternity_svc_db_busy_timeout

PATIENTS_KEY = settings.maternity_svc_patients_key
NOTIFICATIONS_KEY = settings.maternity_svc_notifications_key
RECENT_RECORDS_LIMIT = settings.maternity_svc_recent_records_limit

API_HOST = settings.maternity_svc_host
API_PORT = settings.maternity_svc_port
API_RELOAD = settings.maternity_svc_reload
