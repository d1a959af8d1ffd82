from typing import List, Optional
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from dotenv import load_dotenv

# Load environment variables from .env into os.environ
load_dotenv()


class Settings(BaseSettings):
    """Application configuration settings backed by environment variables."""

    api_base_url: str = Field(
        default="https://api.cloudflare.com/client/v4",
        validation_alias="D1_API_BASE_URL",
        description="Base URL of the remote D1 REST API."
    )
    local_database: Optional[str] = Field(
        default=None,
        validation_alias="D1_LOCAL_DATABASE",
        description="Path or SQLAlchemy URL of the local SQLite database. Unset disables local mode."
    )
    local_database_name: str = Field(
        default="local-dev-db",
        validation_alias="D1_LOCAL_DATABASE_NAME",
        description="Name reported for the local database in the database listing."
    )
    api_prefix: str = Field(default="/api", validation_alias="D1_API_PREFIX")
    remote_timeout_sec: Optional[float] = Field(
        default=None,
        validation_alias="D1_REMOTE_TIMEOUT_SEC",
        description="Timeout for remote API calls. Unset means the call waits indefinitely."
    )
    cors_origins: List[str] = Field(default=["*"], validation_alias="D1_CORS_ORIGINS")

    log_level: str = Field(default="INFO", validation_alias="D1_LOG_LEVEL")
    log_json: bool = Field(default=False, validation_alias="D1_LOG_JSON")

    host: str = Field(default="127.0.0.1", validation_alias="D1_HOST")
    port: int = Field(default=8787, validation_alias="D1_PORT")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True
    )

    def configure_env(self, env: str) -> None:
        """Loads environment-specific variables and reloads settings."""
        if not env:
            return

        load_dotenv(f".env.{env}", override=True)
        new_settings = Settings()
        self.__dict__.update(new_settings.__dict__)


settings = Settings()

# Configure logging during import
from d1_manager.common.logger import configure_logging
configure_logging(level=settings.log_level, json_format=settings.log_json)
