from pydantic_settings import BaseSettings
from typing import List, Any
import json


def parse_cors_origins(v: Any) -> List[str]:
    """Parse CORS origins from string or list"""
    if isinstance(v, list):
        return v
    if isinstance(v, str):
        # Try JSON parsing first
        if v.startswith('['):
            try:
                return json.loads(v)
            except json.JSONDecodeError:
                pass
        # Fall back to comma-separated
        return [origin.strip() for origin in v.split(',') if origin.strip()]
    return []


class Settings(BaseSettings):
    """Application settings - all configurable via environment variables"""

    # ==========================================
    # Application
    # ==========================================
    APP_NAME: str = "Bac-Hub Tchad"
    APP_VERSION: str = "1.0.0"
    ENVIRONMENT: str = "development"
    DEBUG: bool = False
    API_PREFIX: str = "/api"

    # Server Configuration
    SERVER_HOST: str = "0.0.0.0"
    SERVER_PORT: int = 8000

    # ==========================================
    # Database / Storage
    # ==========================================
    DATABASE_URL: str = "sqlite+aiosqlite:///./bachub.db"
    DB_ECHO: bool = False

    # "database" (SQLAlchemy) or "memory" (in-process, not persisted)
    STORAGE_BACKEND: str = "database"

    # Demo content (subjects, sample documents, accounts, footer settings)
    SEED_ON_STARTUP: bool = True
    SEED_ADMIN_PASSWORD: str = "admindouleinnova"  # demo credentials shown on the login page
    SEED_STUDENT_PASSWORD: str = "elevedouleinnova"

    # ==========================================
    # Authentication / Sessions
    # ==========================================
    SECRET_KEY: str = "CHANGE_ME"
    JWT_ALGORITHM: str = "HS256"
    SESSION_COOKIE_NAME: str = "bachub_session"
    SESSION_TTL_MINUTES: int = 60 * 24 * 7  # one week
    SESSION_COOKIE_SECURE: bool = False
    BCRYPT_ROUNDS: int = 12  # 4 for dev (fast), 12 for prod (secure)

    # ==========================================
    # CORS (stored as comma-separated string, parsed to list)
    # ==========================================
    CORS_ORIGINS_STR: str = "http://localhost:5173,http://localhost:3000,http://127.0.0.1:5173"

    @property
    def CORS_ORIGINS(self) -> List[str]:
        """Parse CORS origins from comma-separated string"""
        return parse_cors_origins(self.CORS_ORIGINS_STR)

    # ==========================================
    # Rate Limiting
    # ==========================================
    RATE_LIMIT_ENABLED: bool = True
    RATE_LIMIT_PER_MINUTE: int = 120
    AUTH_RATE_LIMIT: str = "10/minute"
    RATE_LIMIT_STORAGE_URI: str = "memory://"

    # ==========================================
    # Request limits
    # ==========================================
    MAX_REQUEST_SIZE: int = 1024 * 1024  # 1MB, no file uploads go through the API

    # ==========================================
    # Logging
    # ==========================================
    LOG_LEVEL: str = "INFO"
    LOG_FILE: str = ""

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"  # Ignore extra fields in .env that aren't defined in Settings

    def is_dev_mode(self) -> bool:
        """Check if running in development mode"""
        return self.ENVIRONMENT == "development" or self.DEBUG


# Create settings instance
settings = Settings()
