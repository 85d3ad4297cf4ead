# settings.py
import os
from typing import List, Optional

from pydantic import BaseModel

DEFAULT_MODELS = "gemini-2.5-flash,gemini-2.5-pro,gemini-2.5-flash-lite"


def _split_csv(value: str) -> List[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


class Settings(BaseModel):
    API_KEY: str = os.getenv("GOOGLE_API_KEY", "")
    # fallback order, first entry is tried first
    MODEL_NAMES: List[str] = _split_csv(os.getenv("MODEL_NAMES", DEFAULT_MODELS))
    CHAT_MODEL: str = os.getenv("CHAT_MODEL", "gemini-2.5-pro")
    TEMPERATURE: Optional[float] = (
        float(os.environ["TEMPERATURE"]) if os.getenv("TEMPERATURE") else None
    )
    # overload retry knobs, per model
    MAX_ATTEMPTS: int = int(os.getenv("MAX_ATTEMPTS", "3"))
    RETRY_DELAY_SECONDS: float = float(os.getenv("RETRY_DELAY_SECONDS", "2.0"))
    REQUEST_TIMEOUT_MS: int = int(os.getenv("REQUEST_TIMEOUT_MS", "120000"))
    # server
    CORS_ALLOW_ORIGINS: List[str] = _split_csv(os.getenv("CORS_ALLOW_ORIGINS", "*"))
    STATIC_DIR: str = os.getenv("STATIC_DIR", "static")
    HOST: str = os.getenv("HOST", "0.0.0.0")
    PORT: int = int(os.getenv("PORT", "3000"))
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
