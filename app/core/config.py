# app/core/config.py
from __future__ import annotations

from typing import List

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Firebase service account json (Firestore + Admin auth)
    FIREBASE_CREDENTIALS: str = "app/core/firebase_key.json"

    # Web API key, needed for email/password sign-in through Identity Toolkit
    FIREBASE_WEB_API_KEY: str = ""

    # Gemini
    GEMINI_API_KEY: str = Field(
        default="",
        validation_alias=AliasChoices("GEMINI_API_KEY", "GOOGLE_API_KEY"),
    )
    GEMINI_MODEL: str = "gemini-2.0-flash"
    GEMINI_TIMEOUT_SECONDS: float = 30.0

    # When Gemini returns nothing, use the keyword fallback instead of failing
    AI_FALLBACK_ON_NO_RESPONSE: bool = True

    # How many recent records are sent along with a chat message
    CHAT_CONTEXT_RECORDS: int = 5

    AI_DEBUG_MODE: bool = False

    RATE_LIMIT_ENABLED: bool = True

    CORS_ORIGINS: List[str] = ["*"]

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


settings = Settings()
