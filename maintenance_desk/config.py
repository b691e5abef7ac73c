"""
Application Configuration
"""
from pydantic_settings import BaseSettings
from typing import List


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    environment: str = "development"

    # API Configuration
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    api_reload: bool = True
    cors_origins: List[str] = [
        "http://localhost:3000",
        "http://localhost:5173",
    ]

    # Ticket lifecycle
    strict_transitions: bool = False
    enforce_authorization: bool = True
    min_schedule_lead_minutes: int = 0

    # Startup data
    seed_demo_data: bool = True

    # Logging
    log_level: str = "INFO"
    log_format: str = "text"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False


# Global settings instance
settings = Settings()
