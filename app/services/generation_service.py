# /app/services/generation_service.py

from typing import List

from ..models.generation_model import (
    GenerationRequest, GenerationResponse, ImageResult,
    DEFAULT_WORD_COUNT, MIN_WORD_COUNT, MAX_WORD_COUNT,
)
from . import keyword_service, prompt_library
from .dependencies import GenerationDependencies

PROMPT_REQUIRED_MESSAGE = "Prompt is required"
QUOTA_HINT = "Free tier quota exceeded. Please upgrade your plan at https://ai.google.dev/"


# --- Prompt Composition ---

def get_platform_instruction(platform: str) -> str:
    return prompt_library.PLATFORM_INSTRUCTIONS.get(
        (platform or "").lower(),
        prompt_library.PLATFORM_INSTRUCTIONS[prompt_library.DEFAULT_PLATFORM],
    )


def resolve_word_count(word_count) -> int:
    if not word_count:
        return DEFAULT_WORD_COUNT
    return max(MIN_WORD_COUNT, min(MAX_WORD_COUNT, round(word_count)))


def compose_generation_prompt(request: GenerationRequest) -> str:
    platform = request.platform or prompt_library.DEFAULT_PLATFORM
    return prompt_library.CONTENT_GENERATION_PROMPT.format(
        content_type=request.contentType or "content",
        tone=request.tone or "professional",
        word_count=resolve_word_count(request.wordCount),
        platform=platform,
        platform_instruction=get_platform_instruction(platform),
        prompt=request.prompt,
    )


def count_words(text: str) -> int:
    return len(text.split())


def describe_generation_failure(error: BaseException) -> str:
    """The message returned to the caller in a 500 body."""
    message = str(error)
    return "Failed to generate content. " + (QUOTA_HINT if "quota" in message else message)


# --- Main Orchestration Function ---

async def generate_content(request: GenerationRequest, deps: GenerationDependencies) -> GenerationResponse:
    """
    Generates the text, then sources images for it. Text failures propagate;
    image failures only cost the response its images.
    """
    if not request.prompt or not request.prompt.strip():
        raise ValueError(PROMPT_REQUIRED_MESSAGE)

    prompt = compose_generation_prompt(request)
    text = await deps.content_generator.generate(prompt)

    images: List[ImageResult] = []
    try:
        keywords = keyword_service.extract_keywords(request.prompt, request.contentType)
        print("[GENERATE] Keywords extracted:", keywords)
        images = await deps.image_sourcer.source_images(keywords)
    except Exception as e:
        print(f"WARNING: Image sourcing failed, returning content without images: {e}")
        images = []

    return GenerationResponse(
        content=text,
        wordCount=count_words(text),
        platform=request.platform or prompt_library.DEFAULT_PLATFORM,
        images=[img.url for img in images],
        imageTypes=[img.source for img in images],
    )
