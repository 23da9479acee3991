# /app/models/editor_model.py

from pydantic import BaseModel, Field
from typing import List
from datetime import datetime, timezone
from enum import Enum


class ContentStatus(str, Enum):
    DRAFT = "draft"
    APPROVED = "approved"
    REJECTED = "rejected"


class ContentVersion(BaseModel):
    """A single snapshot of the draft, as it was when it entered the history."""
    content: str
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class EditorState(BaseModel):
    """
    Everything the editor holds for one browser session. Instances are treated
    as immutable; the transition functions in `app.client.editor_state`
    return new copies.

    `history` is most-recent-first and `current_version` indexes into it.
    """
    draft: str = ""
    word_count: int = 0
    status: ContentStatus = ContentStatus.DRAFT
    history: List[ContentVersion] = Field(default_factory=list)
    current_version: int = 0
    images: List[str] = Field(default_factory=list)
    is_editing: bool = False
    editable_content: str = ""
    busy: bool = False
    error: str = ""
