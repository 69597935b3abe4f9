"""Application settings and configuration."""

from functools import lru_cache
from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore"
    )

    # Application settings
    APP_NAME: str = "Serverless Spark Logs"
    VERSION: str = "1.0.0"
    ENVIRONMENT: str = Field(default="development", description="Environment: development, staging, production")
    DEBUG: bool = Field(default=False, description="Enable debug mode for development")

    # Server settings
    HOST: str = Field(default="0.0.0.0", description="Server host")
    PORT: int = Field(default=8000, description="Server port")

    # Logging settings
    LOG_LEVEL: str = Field(default="INFO", description="Logging level")
    LOG_FILE: Optional[str] = Field(default=None, description="Optional rotating log file path")

    # CORS settings
    CORS_ORIGINS: List[str] = Field(
        default=[
            "http://localhost:3000",
            "http://127.0.0.1:3000"
        ],
        description="CORS allowed origins"
    )

    # GCP settings
    GCP_PROJECT_ID: str = Field(..., min_length=1, description="GCP Project ID queried for batches, sessions and logs")
    GCP_LOCATION: str = Field(default="us-central1", description="Dataproc Serverless region")
    GCP_CREDENTIALS_PATH: Optional[str] = Field(
        default=None,
        description="Path to a service account JSON key; Application Default Credentials when unset"
    )

    # Log query settings
    DEFAULT_LOG_LIMIT: int = Field(default=20, gt=0, description="Entries returned when no limit is given")
    LOG_QUERY_DEADLINE_SECONDS: Optional[float] = Field(
        default=None,
        description="Stop pulling log entries after this many seconds; no deadline when unset"
    )

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.ENVIRONMENT.lower() == "production"


@lru_cache()
def get_settings() -> Settings:
    """Get application settings (cached)."""
    return Settings()
