"""
ReasonBridge Configuration

Central settings loaded from environment variables.
Scoring constants live in code (aggregator.py), not here.
"""

import os
from dataclasses import dataclass
from dotenv import load_dotenv

load_dotenv()


@dataclass(frozen=True)
class Settings:
    """Immutable application settings."""

    # --- Storage ---
    DB_PATH: str = os.getenv("REASONBRIDGE_DB_PATH", "reasonbridge_feedback.db")

    # --- Preview ---
    PREVIEW_MIN_LENGTH: int = int(os.getenv("REASONBRIDGE_PREVIEW_MIN_LENGTH", "20"))
    PREVIEW_MAX_LENGTH: int = int(os.getenv("REASONBRIDGE_PREVIEW_MAX_LENGTH", "10000"))

    # --- Preview cache ---
    CACHE_TTL_SECONDS: int = int(os.getenv("REASONBRIDGE_CACHE_TTL", "300"))
    CACHE_MAX_ENTRIES: int = int(os.getenv("REASONBRIDGE_CACHE_MAX", "500"))

    # --- Analytics ---
    ANALYTICS_DEFAULT_DAYS: int = int(os.getenv("REASONBRIDGE_ANALYTICS_DAYS", "30"))

    # --- Server ---
    HOST: str = os.getenv("REASONBRIDGE_HOST", "0.0.0.0")
    PORT: int = int(os.getenv("REASONBRIDGE_PORT", "8000"))

    # --- CORS ---
    CORS_ORIGINS: str = os.getenv("REASONBRIDGE_CORS_ORIGINS", "*")


settings = Settings()
