"""Application configuration for ICHI Core.

Configuration is loaded from environment variables (and an optional ``.env``
file), making the service suitable for container-based deployments.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    database_url: str = "sqlite:///./ichi.db"

    cors_origins: list[str] = ["http://localhost:3000"]
    log_level: str = "INFO"

    search_default_limit: int = 100
    search_max_limit: int = 1000
    search_default_depth: int = 1

    @property
    def sqlalchemy_database_uri(self) -> str:
        uri = self.database_url
        if uri.startswith("postgres://"):
            return uri.replace("postgres://", "postgresql+psycopg2://", 1)
        if uri.startswith("postgresql://"):
            return uri.replace("postgresql://", "postgresql+psycopg2://", 1)
        return uri


settings = Settings()
