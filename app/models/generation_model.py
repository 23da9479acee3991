# /app/models/generation_model.py

# --- Core Imports ---
from pydantic import BaseModel, Field, model_validator
from typing import List, Optional
from enum import Enum

# --- Enumerations for Generation Settings ---
class Tone(str, Enum):
    PROFESSIONAL = "professional"
    CASUAL = "casual"
    FORMAL = "formal"
    FRIENDLY = "friendly"

class ContentType(str, Enum):
    ARTICLE = "article"
    BLOG = "blog"
    ESSAY = "essay"
    AD = "ad"
    SCRIPT = "script"
    EMAIL = "email"
    SEO = "seo"
    SOCIAL = "social"

class Platform(str, Enum):
    STANDARD = "standard"
    LINKEDIN = "linkedin"
    FACEBOOK = "facebook"
    MEDIUM = "medium"
    TWITTER = "twitter"
    INSTAGRAM = "instagram"
    BLOG = "blog"

class ImageSource(str, Enum):
    UNSPLASH = "unsplash"
    STOCK = "stock"
    AI_GENERATED = "ai-generated"

# --- Limits ---
MIN_WORD_COUNT = 100
MAX_WORD_COUNT = 2000
DEFAULT_WORD_COUNT = 500
MAX_IMAGES = 3

# --- Request / Response Models ---
class GenerationRequest(BaseModel):
    """
    The body of POST /api/generate. Field names are camelCase to match the
    JSON the browser client sends. Only `prompt` is required; the handler
    checks it itself so that a missing prompt maps to a 400, not a 422.
    """
    prompt: Optional[str] = Field(None, description="The content prompt or topic.")
    tone: Optional[str] = Field(None, description="One of professional, casual, formal, friendly.")
    wordCount: Optional[float] = Field(None, description="Approximate word count (100-2000).")
    contentType: Optional[str] = Field(None, description="The kind of content to write.")
    platform: Optional[str] = Field(None, description="Target platform for formatting.")

    model_config = {
        "json_schema_extra": {
            "example": {
                "prompt": "Write about the benefits of AI in education",
                "tone": "professional",
                "wordCount": 500,
                "contentType": "article",
                "platform": "linkedin"
            }
        }
    }

class ImageResult(BaseModel):
    url: str
    source: ImageSource

class GenerationResponse(BaseModel):
    content: str
    wordCount: int
    platform: str
    images: List[str] = Field(default_factory=list)
    imageTypes: List[ImageSource] = Field(default_factory=list)

    @model_validator(mode="after")
    def _images_match_tags(self) -> "GenerationResponse":
        if len(self.images) != len(self.imageTypes):
            raise ValueError("images and imageTypes must have the same length.")
        if len(self.images) > MAX_IMAGES:
            raise ValueError(f"At most {MAX_IMAGES} images may be returned.")
        return self

class ErrorResponse(BaseModel):
    error: str
