"""Application configuration using pydantic-settings."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Recipe store (short-lived hand-off between requests)
    store_ttl_seconds: float = 600.0  # 10 minutes
    store_sweep_interval_seconds: float = 60.0

    # Scaling
    default_target_servings: int = 4  # used when the servings label has no number

    # Server (single worker: the recipe store is in-process)
    host: str = "0.0.0.0"
    port: int = 8000

    # Application
    environment: str = "development"
    log_level: str = "INFO"
    allowed_origins: str = "http://localhost:3000,http://localhost:8000"

    @property
    def allowed_origin_list(self) -> list[str]:
        """Get CORS origins as a list."""
        return [origin.strip() for origin in self.allowed_origins.split(",") if origin.strip()]


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
