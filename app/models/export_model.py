# /app/models/export_model.py

from pydantic import BaseModel, Field
from typing import List, Optional
from enum import Enum


class ExportFormat(str, Enum):
    TEXT = "txt"
    MARKDOWN = "md"
    HTML = "html"
    PDF = "pdf"


class ExportRequest(BaseModel):
    """
    The draft to render. Mirrors what the editor holds at the moment the user
    clicks a download button.
    """
    content: str = Field(..., description="The current draft, in the model's markdown-like format.")
    images: List[str] = Field(default_factory=list, description="Image URLs or data URIs to embed.")
    tone: Optional[str] = "professional"
    platform: Optional[str] = "standard"
    contentType: Optional[str] = "article"
    wordCount: Optional[float] = None
