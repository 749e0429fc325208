# 🔹 FILE: jobportal/config.py
from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field

class Settings(BaseSettings):
    # Read from .env and ignore unknown keys instead of failing
    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="",
        extra="ignore",
    )

    # --- APP ---
    APP_NAME: str = "Job Portal API"
    APP_ENV: str = "dev"
    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: List[str] = Field(
        default=["http://localhost:5173", "http://localhost:3000"]
    )

    # --- SECURITY (required) ---
    SECRET_KEY: str
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 1440
    BCRYPT_ROUNDS: int = 12

    # --- DATABASE (required) ---
    DATABASE_URL: str

    # --- MEETINGS ---
    MEETING_BASE_URL: str = "https://meet.jit.si"
    MEETING_ROOM_PREFIX: str = "JobPortal"

# Missing DATABASE_URL / SECRET_KEY fails here, at import time.
settings = Settings()
