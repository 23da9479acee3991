# /app/services/dependencies.py

from dataclasses import dataclass

from fastapi import Request

from ..config import Settings
from .content_generator import ModelFallbackGenerator
from .image_service import ImageSourcer
from .rate_limiter import CooldownRateLimiter


@dataclass
class GenerationDependencies:
    """The collaborators the generate endpoint needs, built once per process."""
    content_generator: ModelFallbackGenerator
    image_sourcer: ImageSourcer
    rate_limiter: CooldownRateLimiter


def build_generation_dependencies(settings: Settings) -> GenerationDependencies:
    rate_limiter = CooldownRateLimiter(cooldown_seconds=settings.ai_image_cooldown_seconds)
    content_generator = ModelFallbackGenerator(
        models=settings.gemini_models,
        max_retries=settings.gemini_max_retries,
        base_delay_ms=settings.gemini_retry_base_ms,
        rate_limit_base_ms=settings.gemini_rate_limit_base_ms,
    )
    image_sourcer = ImageSourcer(
        unsplash_access_key=settings.unsplash_access_key,
        rate_limiter=rate_limiter,
        enable_ai_images=settings.enable_ai_images,
        imagen_model=settings.imagen_model,
        timeout_seconds=settings.http_timeout_seconds,
    )
    return GenerationDependencies(
        content_generator=content_generator,
        image_sourcer=image_sourcer,
        rate_limiter=rate_limiter,
    )


# Dependency used by the routers. The instance is created in the app lifespan.
def get_generation_dependencies(request: Request) -> GenerationDependencies:
    return request.app.state.generation_deps
