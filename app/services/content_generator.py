# /app/services/content_generator.py

import asyncio
from typing import Awaitable, Callable, List, Optional, Sequence

from . import gemini_service

# (model_name, prompt) -> generated text
ModelCall = Callable[[str, str], Awaitable[str]]
Sleeper = Callable[[float], Awaitable[None]]

EXHAUSTED_MESSAGE = (
    "All models failed after retries. Free tier quota may be exceeded. "
    "Please check your API billing at https://ai.google.dev/"
)


class AllModelsExhaustedError(Exception):
    """Raised when every model in the fallback chain has failed on every attempt."""

    def __init__(self, message: str = EXHAUSTED_MESSAGE, last_error: Optional[BaseException] = None):
        super().__init__(message)
        self.last_error = last_error


# --- Error Classification ---

def get_error_status(error: BaseException) -> Optional[int]:
    """
    Pulls an HTTP-like status out of an upstream exception. google-api-core
    errors carry it as `.code`; HTTP client errors as `.status_code` or `.status`.
    """
    for attr in ("code", "status_code", "status"):
        value = getattr(error, attr, None)
        if isinstance(value, int) and not isinstance(value, bool):
            return int(value)
    return None


def is_rate_limit_error(error: BaseException) -> bool:
    message = str(error)
    return get_error_status(error) == 429 or "quota" in message.lower() or "429" in message


def is_not_found_error(error: BaseException) -> bool:
    return get_error_status(error) == 404


# --- Model Fallback Loop ---

class ModelFallbackGenerator:
    """
    Tries an ordered list of models until one returns text.

    Each model gets up to `max_retries` attempts. A 404 abandons the model at
    once; rate-limit and other errors wait `base * (attempt + 1)` milliseconds
    and retry the same model while attempts remain. There is no sleep after a
    model's last attempt.
    """

    def __init__(
        self,
        models: Sequence[str],
        call_model: Optional[ModelCall] = None,
        max_retries: int = 2,
        base_delay_ms: int = 1000,
        rate_limit_base_ms: int = 2000,
        sleep: Sleeper = asyncio.sleep,
    ):
        if not models:
            raise ValueError("At least one model identifier is required.")
        if max_retries < 1:
            raise ValueError("max_retries must be at least 1.")
        self.models: List[str] = list(models)
        self.call_model: ModelCall = call_model or gemini_service.generate_text
        self.max_retries = max_retries
        self.base_delay_ms = base_delay_ms
        self.rate_limit_base_ms = rate_limit_base_ms
        self._sleep = sleep

    async def generate(self, prompt: str) -> str:
        last_error: Optional[BaseException] = None

        for model_name in self.models:
            for attempt in range(self.max_retries):
                try:
                    text = await self.call_model(model_name, prompt)
                    if not text:
                        raise ValueError(f"AI model {model_name} returned an empty response.")
                    print(f"[CONTENT-GENERATOR] {model_name} succeeded on attempt {attempt + 1}.")
                    return text
                except Exception as e:
                    last_error = e
                    has_attempts_left = attempt < self.max_retries - 1

                    if is_rate_limit_error(e):
                        print(f"[CONTENT-GENERATOR] Rate limited on {model_name}: quota exceeded. Waiting before retry...")
                        if has_attempts_left:
                            await self._sleep(self.rate_limit_base_ms * (attempt + 1) / 1000)
                    elif is_not_found_error(e):
                        print(f"[CONTENT-GENERATOR] Model {model_name} not available, trying next...")
                        break
                    else:
                        print(f"[CONTENT-GENERATOR] Attempt {attempt + 1} with {model_name} failed: {e}")
                        if has_attempts_left:
                            await self._sleep(self.base_delay_ms * (attempt + 1) / 1000)

        raise AllModelsExhaustedError(last_error=last_error)
