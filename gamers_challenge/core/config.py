"""
Core configuration for the Gamers Challenge backend
All settings are read once from the environment (or .env) at startup
"""

import secrets
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings

from gamers_challenge import __version__


class Settings(BaseSettings):
    """Application settings"""

    # Application Settings
    APP_NAME: str = "Gamers Challenge"
    APP_VERSION: str = __version__
    APP_DESCRIPTION: str = "Quiz, profile and leaderboard backend"
    DEBUG: bool = Field(default=False)
    ENVIRONMENT: str = Field(default="development")

    # Database
    MONGODB_URI: str = Field(default="mongodb://localhost:27017")
    MONGODB_DB: str = Field(default="gamers_challenge")
    MONGODB_TIMEOUT_MS: int = Field(default=5000)

    # Security
    SECRET_KEY: str = Field(default_factory=lambda: secrets.token_urlsafe(32))
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60
    BCRYPT_ROUNDS: int = 10

    # Uploads
    UPLOAD_DIR: str = Field(default="uploads")
    UPLOAD_URL_PREFIX: str = Field(default="/uploads")
    MAX_UPLOAD_SIZE: int = Field(default=10 * 1024 * 1024)  # 10 MB

    # Leaderboard
    LEADERBOARD_LIMIT: int = Field(default=10)

    # CORS
    BACKEND_CORS_ORIGINS: str = Field(default="*")

    # Logging
    LOG_LEVEL: str = Field(default="INFO")
    LOG_FORMAT: str = Field(default="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    LOG_FILE: Optional[str] = Field(default=None)
    LOG_MAX_BYTES: int = Field(default=10 * 1024 * 1024)
    LOG_BACKUP_COUNT: int = Field(default=5)

    # Sentry
    SENTRY_DSN: Optional[str] = Field(default=None)

    class Config:
        env_file = ".env"
        case_sensitive = True

    def get_cors_origins(self) -> list[str]:
        """Get CORS origins as list"""
        if self.BACKEND_CORS_ORIGINS.strip() == "*":
            return ["*"]
        return [origin.strip() for origin in self.BACKEND_CORS_ORIGINS.split(",") if origin.strip()]

    def is_production(self) -> bool:
        return self.ENVIRONMENT.lower() == "production"


settings = Settings()
