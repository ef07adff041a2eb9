"""
Configuration settings for the application
"""

import os
from typing import List
from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    """Application settings"""

    # Waitlist storage
    WAITLIST_BACKEND: str = os.getenv("WAITLIST_BACKEND", "file")  # memory, file, jsonbin, firestore
    WAITLIST_FILE_PATH: str = os.getenv("WAITLIST_FILE_PATH", "data/waitlist.json")
    WAITLIST_CACHE_SECONDS: float = 5.0
    WAITLIST_MIN_REQUEST_INTERVAL: float = 1.0

    # JSONBin remote document store
    JSONBIN_API_KEY: str | None = os.getenv("JSONBIN_API_KEY")
    JSONBIN_BIN_ID: str | None = os.getenv("JSONBIN_BIN_ID")
    JSONBIN_BASE_URL: str = "https://api.jsonbin.io/v3"
    JSONBIN_TIMEOUT: float = 10.0

    # Firestore remote document store
    FIREBASE_CREDENTIALS_JSON: str | None = os.getenv("FIREBASE_CREDENTIALS_JSON")
    FIREBASE_CREDENTIALS_FILE: str | None = os.getenv("FIREBASE_CREDENTIALS_FILE")
    FIREBASE_CREDENTIALS_B64: str | None = os.getenv("FIREBASE_CREDENTIALS_B64")
    FIRESTORE_COLLECTION: str = "waitlists"
    FIRESTORE_DOCUMENT: str = "default"

    # Security
    ADMIN_TOKEN: str = os.getenv("ADMIN_TOKEN", "admin_token_123")

    # CORS
    ALLOW_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://localhost:8000",
    ]

    # Rate limiting
    RATE_LIMIT_PER_MINUTE: int = 30

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    class Config:
        env_file = ".env"

settings = Settings()
