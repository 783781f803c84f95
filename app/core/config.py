"""
Configuration settings for the application
"""

import os
from typing import List, Optional
from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    """Application settings"""

    # Supabase
    SUPABASE_URL: Optional[str] = os.getenv("SUPABASE_URL")
    SUPABASE_ANON_KEY: Optional[str] = os.getenv("SUPABASE_ANON_KEY")
    GUESTS_TABLE: str = os.getenv("GUESTS_TABLE", "wedding_guests")
    MASTER_TABLE: str = os.getenv("MASTER_TABLE", "invitados_maestro")

    # Local fallback store
    USE_LOCAL_FALLBACK: bool = os.getenv("USE_LOCAL_FALLBACK", "true").lower() in ("1", "true", "yes")
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./wedding_rsvp.db")

    # Companions
    DEFAULT_COMPANIONS: int = 2
    MAX_COMPANIONS: int = 2
    COMPANIONS_FROM_TRIGGER: bool = False

    # Display
    DISPLAY_TIMEZONE: str = os.getenv("DISPLAY_TIMEZONE", "America/Mexico_City")

    # Security
    ADMIN_TOKEN: str = os.getenv("ADMIN_TOKEN", "admin_token_123")

    # CORS
    ALLOW_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://localhost:5000",
        "http://localhost:8000",
    ]

    # Rate limiting
    RATE_LIMIT_PER_MINUTE: int = 30

    class Config:
        env_file = ".env"

    @property
    def supabase_configured(self) -> bool:
        return bool(self.SUPABASE_URL and self.SUPABASE_ANON_KEY)

settings = Settings()
