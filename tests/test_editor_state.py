# /tests/test_editor_state.py

import random

import pytest

from app.client import editor_state
from app.models.editor_model import ContentStatus, EditorState


@pytest.fixture
def generated_state():
    """An editor holding one generated draft with two images."""
    return editor_state.apply_generation(
        EditorState(), "First draft about solar energy", images=["https://a.example/1.jpg", "https://a.example/2.jpg"]
    )


def test_history_is_most_recent_first_after_n_transitions():
    state = EditorState()
    contents = []
    for i in range(5):
        content = f"version {i}"
        contents.append(content)
        if i % 2 == 0:
            state = editor_state.apply_generation(state, content)
        else:
            state = editor_state.save_edit(editor_state.start_editing(state), content)

    assert len(state.history) == 5
    assert [v.content for v in state.history] == list(reversed(contents))
    assert state.current_version == 0
    assert state.draft == "version 4"
    timestamps = [v.timestamp for v in state.history]
    assert timestamps == sorted(timestamps, reverse=True)


def test_transitions_do_not_mutate_the_previous_state(generated_state):
    after = editor_state.apply_generation(generated_state, "Second draft")
    assert len(generated_state.history) == 1
    assert len(after.history) == 2


def test_apply_generation_sets_draft_fields(generated_state):
    assert generated_state.draft == "First draft about solar energy"
    assert generated_state.word_count == 5
    assert generated_state.status == ContentStatus.DRAFT
    assert generated_state.images == ["https://a.example/1.jpg", "https://a.example/2.jpg"]
    assert not generated_state.busy


def test_save_edit_resets_status_to_draft(generated_state):
    approved = editor_state.approve(generated_state)
    assert approved.status == ContentStatus.APPROVED

    editing = editor_state.start_editing(approved)
    assert editing.is_editing and editing.editable_content == approved.draft

    saved = editor_state.save_edit(editing, "Edited draft text")
    assert saved.status == ContentStatus.DRAFT
    assert saved.draft == "Edited draft text"
    assert saved.word_count == 3
    assert not saved.is_editing
    assert [v.content for v in saved.history] == ["Edited draft text", "First draft about solar energy"]


def test_cancel_edit_keeps_the_draft(generated_state):
    editing = editor_state.start_editing(generated_state)
    cancelled = editor_state.cancel_edit(editing)
    assert cancelled.draft == generated_state.draft
    assert not cancelled.is_editing
    assert cancelled.editable_content == ""
    assert len(cancelled.history) == 1


def test_reject_clears_draft_and_history(generated_state):
    state = editor_state.apply_generation(generated_state, "Second draft")
    rejected = editor_state.reject(state)

    assert rejected.status == ContentStatus.REJECTED
    assert rejected.draft == ""
    assert rejected.history == []
    assert rejected.images == []


def test_load_version(generated_state):
    state = editor_state.apply_generation(generated_state, "Second draft, much shorter")
    loaded = editor_state.load_version(state, 1)

    assert loaded.current_version == 1
    assert loaded.draft == "First draft about solar energy"
    assert loaded.word_count == 5
    assert len(loaded.history) == 2

    with pytest.raises(IndexError):
        editor_state.load_version(state, 2)


def test_request_lifecycle_flags():
    busy = editor_state.begin_request(EditorState(draft="old"))
    assert busy.busy and busy.draft == ""

    failed = editor_state.fail_request(busy, "Failed to generate content. Please try again.")
    assert not failed.busy
    assert failed.error.startswith("Failed")

    refining = editor_state.begin_request(EditorState(draft="old"), clear_draft=False)
    assert refining.draft == "old"


def test_image_removal_and_replacement(generated_state):
    removed = editor_state.remove_image(generated_state, 0)
    assert removed.images == ["https://a.example/2.jpg"]
    assert editor_state.remove_image(generated_state, 9).images == generated_state.images

    replaced = editor_state.replace_broken_image(generated_state, 1, rng=random.Random(7))
    assert replaced.images[0] == "https://a.example/1.jpg"
    assert replaced.images[1].startswith("https://picsum.photos/800/600?random=")
