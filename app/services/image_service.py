# /app/services/image_service.py

import time
from typing import Awaitable, Callable, List, Optional, Sequence

import httpx

from ..models.generation_model import ImageResult, ImageSource, MAX_IMAGES
from . import gemini_service, prompt_library
from .rate_limiter import CooldownRateLimiter

UNSPLASH_SEARCH_URL = "https://api.unsplash.com/search/photos"
PLACEHOLDER_URL_TEMPLATE = "https://picsum.photos/800/600?random={image_id}&t={cache_buster}"

# Used only when sourcing blows up in a way the per-step handlers did not catch.
STATIC_FALLBACK_IMAGES = [
    ImageResult(url="https://picsum.photos/800/600?random=1", source=ImageSource.STOCK),
    ImageResult(url="https://picsum.photos/800/600?random=2", source=ImageSource.STOCK),
    ImageResult(url="https://picsum.photos/800/600?random=3", source=ImageSource.STOCK),
]

# prompt -> image URL or data URI
AIImageCall = Callable[[str], Awaitable[str]]


def _now_ms() -> int:
    return int(time.time() * 1000)


def build_placeholder_images(existing_count: int, base_time_ms: int, total: int = MAX_IMAGES) -> List[ImageResult]:
    """
    Placeholder stock photos for slots `existing_count .. total-1`. Both the
    photo id and the cache buster depend on the slot index, so placeholders
    in one response never share a URL.
    """
    placeholders = []
    for index in range(existing_count, total):
        image_id = ((base_time_ms + index * 100) % 1000) + 1
        cache_buster = base_time_ms + index
        placeholders.append(ImageResult(
            url=PLACEHOLDER_URL_TEMPLATE.format(image_id=image_id, cache_buster=cache_buster),
            source=ImageSource.STOCK,
        ))
    return placeholders


class ImageSourcer:
    """
    Finds three images to go with a piece of content.

    Order of preference: one AI-generated image (only when enabled and the
    rate limiter is not in cooldown), then one Unsplash photo per keyword,
    then placeholder stock photos for whatever slots are left. Nothing in
    here raises to the caller.
    """

    def __init__(
        self,
        unsplash_access_key: Optional[str] = None,
        rate_limiter: Optional[CooldownRateLimiter] = None,
        enable_ai_images: bool = False,
        ai_image_call: Optional[AIImageCall] = None,
        imagen_model: str = gemini_service.IMAGEN_MODEL,
        timeout_seconds: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        clock_ms: Callable[[], int] = _now_ms,
    ):
        self.unsplash_access_key = unsplash_access_key
        self.rate_limiter = rate_limiter or CooldownRateLimiter()
        self.enable_ai_images = enable_ai_images
        self.imagen_model = imagen_model
        self._ai_image_call = ai_image_call
        self.timeout_seconds = timeout_seconds
        self._transport = transport
        self._clock_ms = clock_ms

    async def source_images(self, keywords: Sequence[str]) -> List[ImageResult]:
        try:
            print("[IMAGE-SOURCER] Sourcing images for keywords:", list(keywords))
            results: List[ImageResult] = []

            ai_image = await self.try_ai_image(keywords)
            if ai_image:
                results.append(ai_image)

            if len(results) < MAX_IMAGES:
                unsplash_images = await self.fetch_unsplash_images(list(keywords)[:MAX_IMAGES - len(results)])
                results.extend(unsplash_images)

            if len(results) < MAX_IMAGES:
                print(f"[IMAGE-SOURCER] Adding {MAX_IMAGES - len(results)} placeholder images.")
                results.extend(build_placeholder_images(len(results), self._clock_ms()))

            final = results[:MAX_IMAGES]
            sources = [img.source.value for img in final]
            print(f"[IMAGE-SOURCER] Final result: {len(final)} images, sources={sources}")
            return final
        except Exception as e:
            print(f"ERROR in ImageSourcer.source_images: {e}")
            return [img.model_copy() for img in STATIC_FALLBACK_IMAGES]

    async def try_ai_image(self, keywords: Sequence[str]) -> Optional[ImageResult]:
        """One Imagen attempt per request, skipped entirely while in cooldown."""
        if not self.enable_ai_images:
            return None
        if self.rate_limiter.is_suppressed():
            remaining = self.rate_limiter.seconds_remaining()
            print(f"[IMAGE-SOURCER] AI images suppressed for another {remaining:.0f}s, using stock images.")
            return None

        subject = ", ".join(keywords) if keywords else "professional business content"
        prompt = prompt_library.AI_IMAGE_PROMPT.format(subject=subject)
        try:
            if self._ai_image_call:
                url = await self._ai_image_call(prompt)
            else:
                url = await gemini_service.generate_image_data_uri(prompt, model_name=self.imagen_model)
            return ImageResult(url=url, source=ImageSource.AI_GENERATED)
        except Exception as e:
            print(f"[IMAGE-SOURCER] AI image generation failed, entering cooldown: {e}")
            self.rate_limiter.record_failure()
            return None

    async def fetch_unsplash_images(self, keywords: Sequence[str]) -> List[ImageResult]:
        """One landscape photo per keyword, in keyword order. Failed keywords are skipped."""
        if not self.unsplash_access_key:
            print("[IMAGE-SOURCER] Unsplash API key not configured, using fallback images only.")
            return []

        images: List[ImageResult] = []
        headers = {"Authorization": f"Client-ID {self.unsplash_access_key}"}
        async with httpx.AsyncClient(timeout=self.timeout_seconds, transport=self._transport) as client:
            for keyword in keywords:
                try:
                    response = await client.get(
                        UNSPLASH_SEARCH_URL,
                        params={"query": keyword, "per_page": 1, "orientation": "landscape"},
                        headers=headers,
                    )
                    response.raise_for_status()
                    results = response.json().get("results") or []
                    if not results:
                        print(f"[IMAGE-SOURCER] No Unsplash results for keyword: '{keyword}'")
                        continue
                    image_url = results[0]["urls"]["regular"]
                    images.append(ImageResult(url=image_url, source=ImageSource.UNSPLASH))
                except httpx.HTTPStatusError as e:
                    print(f"[IMAGE-SOURCER] Unsplash API error for '{keyword}': {e.response.status_code}")
                except (httpx.HTTPError, ValueError, KeyError, TypeError) as e:
                    print(f"[IMAGE-SOURCER] Error fetching image for keyword '{keyword}': {e}")

        print(f"[IMAGE-SOURCER] Fetched {len(images)} images from Unsplash.")
        return images
