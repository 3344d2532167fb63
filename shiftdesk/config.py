"""Application configuration settings."""
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database Configuration
    database_url: str = "sqlite:///./shiftdesk.db"
    db_pool_recycle: int = 3600

    # Session Settings
    jwt_secret: str
    jwt_algorithm: str = "HS256"
    session_ttl_hours: int = 24

    # Shift Rules
    min_shift_hours: int = 4
    max_shift_hours: int = 12

    # Identity Defaults
    default_department: str = "General"

    # Application Settings
    debug: bool = False
    log_level: str = "INFO"
    api_prefix: str = "/api"

    # CORS Settings
    frontend_url: str = "http://localhost:5173"

    class Config:
        env_file = ".env"
        case_sensitive = False

    @property
    def is_sqlite(self) -> bool:
        """Check if the configured database is SQLite."""
        return self.database_url.startswith("sqlite")


# Global settings instance
settings = Settings()
