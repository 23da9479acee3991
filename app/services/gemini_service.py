# /app/services/gemini_service.py

import base64
from typing import Optional

import google.generativeai as genai
from google.generativeai.types import GenerationConfig
from google import genai as google_genai
from google.genai import types as genai_types

# --- CONFIGURATION ---
GEMINI_FLASH_MODEL = 'gemini-2.5-flash'
IMAGEN_MODEL = 'imagen-3.0-generate-002'

_is_configured = False
# Imagen is only served through the google-genai client.
_image_client: Optional[google_genai.Client] = None


def configure(api_key: Optional[str]) -> bool:
    """
    Configures the SDKs once at startup. A missing key is not fatal: the
    process still serves /health and exports, and every generation attempt
    fails with a clear upstream error instead.
    """
    global _is_configured, _image_client
    if not api_key:
        print("WARNING: GEMINI_API_KEY is not set. Content generation requests will fail.")
        _is_configured = False
        _image_client = None
        return False
    genai.configure(api_key=api_key)
    _image_client = google_genai.Client(api_key=api_key)
    _is_configured = True
    return True


# --- CORE GENERATIVE FUNCTIONS ---

async def generate_text(model_name: str, prompt: str, temperature: float = 0.7) -> str:
    """
    The workhorse for text-only, non-streaming generation against a single
    model. Errors propagate untouched so the caller can classify them by
    status (429 quota, 404 unknown model, ...).
    """
    if not _is_configured:
        raise RuntimeError("Gemini API key is not configured.")
    model = genai.GenerativeModel(model_name)
    config = GenerationConfig(temperature=temperature)
    response = await model.generate_content_async(prompt, generation_config=config)
    if not response.parts:
        raise ValueError(f"AI model {model_name} returned an empty response.")
    return response.text


async def generate_image_data_uri(prompt: str, model_name: str = IMAGEN_MODEL) -> str:
    """
    Generates a single image with an Imagen model and returns it inline as a
    base64 data URI.
    """
    if _image_client is None:
        raise RuntimeError("Gemini API key is not configured.")
    response = await _image_client.aio.models.generate_images(
        model=model_name,
        prompt=prompt,
        config=genai_types.GenerateImagesConfig(number_of_images=1),
    )
    generated = response.generated_images or []
    image = generated[0].image if generated else None
    if image is None or not image.image_bytes:
        raise ValueError(f"Image model {model_name} returned no images.")
    encoded = base64.b64encode(image.image_bytes).decode("ascii")
    return f"data:{image.mime_type or 'image/png'};base64,{encoded}"
