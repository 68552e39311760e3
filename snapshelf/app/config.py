from __future__ import annotations

from pydantic import AnyUrl, Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8-sig",
        case_sensitive=False,
        extra="ignore",
    )

    SUPABASE_URL: AnyUrl
    SUPABASE_ANON_KEY: str
    GEMINI_API_KEY: SecretStr
    GEMINI_MODEL: str = "gemini-2.5-flash"
    APP_ENV: str = "local"
    FRONTEND_CORS_ORIGINS: list[str] = Field(
        default_factory=lambda: ["http://localhost:5173", "http://127.0.0.1:5173"],
    )

    # Recommendation rules
    SUGGESTION_PRICE_CEILING: str = "£20"
    SUGGESTION_MIN_ITEMS: int = 3

    # Output token budgets per model call
    ANALYZE_MAX_TOKENS: int = 4000
    SUGGESTIONS_MAX_TOKENS: int = 4000
    CHAT_MAX_TOKENS: int = 2000


settings = Settings()
