from pydantic_settings import BaseSettings
from pydantic import field_validator
from typing import Optional
from functools import lru_cache
import json


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database
    DATABASE_URL: str

    # Database Connection Pool Settings
    DB_POOL_SIZE: int = 10  # Base number of connections in pool
    DB_MAX_OVERFLOW: int = 20  # Extra connections allowed beyond pool_size
    DB_POOL_TIMEOUT: int = 30  # Seconds to wait for connection from pool
    DB_POOL_RECYCLE: int = 1800  # Recycle connections after 30 minutes

    # App Settings
    APP_NAME: str = "PEPL HRMS"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    TIMEZONE: str = "Asia/Kolkata"

    # CORS - accepts JSON string, comma-separated, or list
    CORS_ENABLED: bool = True
    CORS_ORIGINS: list[str] = [
        "http://localhost:3000",
        "http://localhost:3001",
    ]

    # Clerk (identity provider)
    CLERK_JWT_KEY: str = ""  # PEM public key from the Clerk dashboard (networkless verification)
    CLERK_JWT_ALGORITHM: str = "RS256"
    CLERK_AUTHORIZED_PARTIES: list[str] = []  # Allowed `azp` claims; empty disables the check
    CLERK_WEBHOOK_SECRET: Optional[str] = None  # whsec_... signing secret for Svix-delivered events
    WEBHOOK_TOLERANCE_SECONDS: int = 300

    # Defaults for employees created from identity webhooks
    DEFAULT_GROUP_ID: Optional[str] = None
    DEFAULT_COMPANY_ID: Optional[str] = None

    # Google Gemini
    GEMINI_API_KEY: str = ""
    GEMINI_MODEL: str = "gemini-2.0-flash"
    GEMINI_API_URL: str = "https://generativelanguage.googleapis.com/v1beta"
    GEMINI_TIMEOUT_SECONDS: float = 30.0

    # Supabase Storage Settings
    SUPABASE_URL: str = ""  # e.g., "https://xxxx.supabase.co"
    SUPABASE_SERVICE_KEY: str = ""  # Service role key (NOT anon key)
    SUPABASE_STORAGE_BUCKET: str = "documents"

    # Dual-path reader (clients of this API)
    HRMS_API_URL: str = "http://localhost:8000/api/v1"
    HTTP_TIMEOUT_SECONDS: float = 30.0

    # Background jobs
    SCHEDULER_ENABLED: bool = True
    ATTENDANCE_LOCK_HOUR: int = 2  # Local hour at which previous days' attendance is locked

    @field_validator('CORS_ORIGINS', 'CLERK_AUTHORIZED_PARTIES', mode='before')
    @classmethod
    def parse_list(cls, v):
        if isinstance(v, str):
            try:
                return json.loads(v)
            except json.JSONDecodeError:
                return [item.strip() for item in v.split(',') if item.strip()]
        return v

    @property
    def cors_origins_list(self) -> list[str]:
        return list(self.CORS_ORIGINS)

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
