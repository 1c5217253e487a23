from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    log_level: str = "INFO"

    # AI
    ai_mode: str = "mock"  # "mock" or "gemini"
    gemini_api_key: Optional[str] = None
    # Cascade order matters: cheapest first, first success wins
    extraction_models: list[str] = [
        "gemini-2.5-flash-lite",
        "gemini-2.5-flash",
        "gemini-2.5-pro",
    ]
    structuring_model: str = "gemini-2.5-flash-lite"
    ai_max_input_chars: int = 8000
    ai_max_output_tokens: int = 2000
    ai_temperature: float = 0.1
    ai_timeout_seconds: float = 60.0

    # Page fetching
    http_timeout_seconds: float = 20.0
    max_page_chars: int = 2_000_000
    user_agent: str = (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36"
    )

    # Video metadata
    youtube_api_key: Optional[str] = None
    video_min_description_chars: int = 100
    video_min_shorts_description_chars: int = 30

    # API
    extract_rate_limit: str = "20/minute"
    cors_origins: list[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
        "http://localhost:5173",
        "http://127.0.0.1:5173",
    ]


settings = Settings()
