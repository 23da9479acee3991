# /app/client/editor_state.py

"""
Pure transition functions for the editor. Each takes an EditorState and
returns a new one; nothing here performs I/O, so the history rules can be
tested without a UI or a server.

History is most-recent-first. Every successful generate, refine or saved
edit prepends a version and points `current_version` back at 0; only
`reject` ever removes entries (it clears everything).
"""

import random
import time
from typing import List, Optional

from ..models.editor_model import ContentStatus, ContentVersion, EditorState

PLACEHOLDER_URL_TEMPLATE = "https://picsum.photos/800/600?random={image_id}&t={cache_buster}"


def count_words(text: str) -> int:
    return len(text.split())


def _with_new_version(state: EditorState, content: str, **updates) -> EditorState:
    history = [ContentVersion(content=content)] + list(state.history)
    return state.model_copy(update={"history": history, "current_version": 0, **updates})


# --- Request lifecycle ---

def begin_request(state: EditorState, clear_draft: bool = True) -> EditorState:
    updates = {"busy": True, "error": ""}
    if clear_draft:
        updates.update({"draft": "", "word_count": 0})
    return state.model_copy(update=updates)


def fail_request(state: EditorState, message: str) -> EditorState:
    return state.model_copy(update={"busy": False, "error": message})


def apply_generation(
    state: EditorState,
    content: str,
    images: Optional[List[str]] = None,
    word_count: Optional[int] = None,
) -> EditorState:
    """A generated (or refined) result becomes the new draft and newest version."""
    updates = {
        "draft": content,
        "word_count": word_count if word_count is not None else count_words(content),
        "status": ContentStatus.DRAFT,
        "busy": False,
        "error": "",
    }
    if images is not None:
        updates["images"] = list(images)
    return _with_new_version(state, content, **updates)


# --- Editing ---

def start_editing(state: EditorState) -> EditorState:
    return state.model_copy(update={"is_editing": True, "editable_content": state.draft})


def cancel_edit(state: EditorState) -> EditorState:
    return state.model_copy(update={"is_editing": False, "editable_content": ""})


def save_edit(state: EditorState, edited_content: Optional[str] = None) -> EditorState:
    content = edited_content if edited_content is not None else state.editable_content
    return _with_new_version(
        state,
        content,
        draft=content,
        word_count=count_words(content),
        is_editing=False,
        editable_content="",
        status=ContentStatus.DRAFT,
    )


# --- Review ---

def approve(state: EditorState) -> EditorState:
    return state.model_copy(update={"status": ContentStatus.APPROVED})


def reject(state: EditorState) -> EditorState:
    # Destructive: the draft and every version are discarded.
    return state.model_copy(update={
        "status": ContentStatus.REJECTED,
        "draft": "",
        "word_count": 0,
        "history": [],
        "current_version": 0,
        "images": [],
        "is_editing": False,
        "editable_content": "",
    })


def load_version(state: EditorState, index: int) -> EditorState:
    if index < 0 or index >= len(state.history):
        raise IndexError(f"No version at index {index}; history has {len(state.history)} entries.")
    content = state.history[index].content
    return state.model_copy(update={
        "current_version": index,
        "draft": content,
        "word_count": count_words(content),
    })


# --- Images ---

def remove_image(state: EditorState, index: int) -> EditorState:
    images = list(state.images)
    if 0 <= index < len(images):
        del images[index]
    return state.model_copy(update={"images": images})


def replace_broken_image(state: EditorState, index: int, rng: Optional[random.Random] = None) -> EditorState:
    """Swaps an image that failed to load for a fresh random placeholder."""
    images = list(state.images)
    if not 0 <= index < len(images):
        return state
    image_id = (rng or random).randint(1, 1000)
    images[index] = PLACEHOLDER_URL_TEMPLATE.format(image_id=image_id, cache_buster=int(time.time() * 1000))
    return state.model_copy(update={"images": images})
