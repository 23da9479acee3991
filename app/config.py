# /app/config.py

import os
from functools import lru_cache
from typing import List, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field

# --- CONFIGURATION ---
load_dotenv()

DEFAULT_MODELS = "gemini-2.5-flash"


def _first_env(*names: str) -> Optional[str]:
    """Returns the first non-empty environment variable among `names`."""
    for name in names:
        value = os.getenv(name)
        if value:
            return value
    return None


def _env_bool(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


class Settings(BaseModel):
    """
    Process-wide configuration, read once from the environment (and a local
    .env file, if present).
    """
    gemini_api_key: Optional[str] = None
    unsplash_access_key: Optional[str] = None
    port: int = 3000

    # --- Text generation ---
    gemini_models: List[str] = Field(default_factory=lambda: [DEFAULT_MODELS])
    gemini_max_retries: int = 2
    gemini_retry_base_ms: int = 1000
    gemini_rate_limit_base_ms: int = 2000

    # --- Image sourcing ---
    enable_ai_images: bool = False
    imagen_model: str = "imagen-3.0-generate-002"
    ai_image_cooldown_seconds: float = 60.0
    http_timeout_seconds: float = 10.0

    @classmethod
    def from_env(cls) -> "Settings":
        models = [m.strip() for m in os.getenv("GEMINI_MODELS", DEFAULT_MODELS).split(",") if m.strip()]
        return cls(
            gemini_api_key=_first_env("GEMINI_API_KEY", "GOOGLE_API_KEY", "VITE_GEMINI_API_KEY"),
            unsplash_access_key=_first_env("UNSPLASH_ACCESS_KEY", "VITE_UNSPLASH_ACCESS_KEY"),
            port=int(os.getenv("PORT", "3000")),
            gemini_models=models or [DEFAULT_MODELS],
            gemini_max_retries=int(os.getenv("GEMINI_MAX_RETRIES", "2")),
            gemini_retry_base_ms=int(os.getenv("GEMINI_RETRY_BASE_MS", "1000")),
            gemini_rate_limit_base_ms=int(os.getenv("GEMINI_RATE_LIMIT_BASE_MS", "2000")),
            enable_ai_images=_env_bool("ENABLE_AI_IMAGES"),
            imagen_model=os.getenv("IMAGEN_MODEL", "imagen-3.0-generate-002"),
            ai_image_cooldown_seconds=float(os.getenv("AI_IMAGE_COOLDOWN_SECONDS", "60")),
            http_timeout_seconds=float(os.getenv("HTTP_TIMEOUT_SECONDS", "10")),
        )


@lru_cache
def get_settings() -> Settings:
    return Settings.from_env()
