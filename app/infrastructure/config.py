"""Application configuration.

Loads settings from environment variables with sensible defaults.
"""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # API
    api_version: str = "0.1.0"
    debug: bool = False

    # Database
    database_url: str = "postgresql+asyncpg://catalog:catalog_dev_password@db:5432/catalog"

    # Authentication (tokens are minted by the identity provider)
    jwt_secret: str = "dev-jwt-secret-change-in-production"
    jwt_algorithms: str = "HS256"
    jwt_audience: str | None = None
    role_claim: str = "https://catalog.example.com/roles"

    # Listing
    default_page_size: int = 10
    max_page_size: int = 100

    # Logging
    log_level: str = "INFO"

    class Config:
        """Pydantic configuration."""

        env_file = ".env"
        env_file_encoding = "utf-8"

    @property
    def jwt_algorithms_list(self) -> list[str]:
        """Accepted signature algorithms."""
        return [a.strip() for a in self.jwt_algorithms.split(",") if a.strip()]


settings = Settings()
