# /tests/test_generate_router.py

import pytest
from unittest.mock import AsyncMock
from fastapi.testclient import TestClient

from app.main import app
from app.services.content_generator import ModelFallbackGenerator
from app.services.dependencies import GenerationDependencies, get_generation_dependencies
from app.services.generation_service import compose_generation_prompt, resolve_word_count
from app.services.image_service import ImageSourcer
from app.services.rate_limiter import CooldownRateLimiter
from app.models.generation_model import GenerationRequest

GENERATED_TEXT = "## AI in Healthcare\n\nArtificial intelligence is **transforming** patient care.\n\n• Faster diagnosis\n• Better outcomes"


# --- Fixtures ---

@pytest.fixture
def call_model():
    """The stand-in for the Gemini SDK call."""
    return AsyncMock(return_value=GENERATED_TEXT)


@pytest.fixture
def deps(call_model):
    limiter = CooldownRateLimiter()
    return GenerationDependencies(
        content_generator=ModelFallbackGenerator(["gemini-test"], call_model=call_model, max_retries=1),
        image_sourcer=ImageSourcer(unsplash_access_key=None, rate_limiter=limiter),
        rate_limiter=limiter,
    )


@pytest.fixture
def client(deps):
    app.dependency_overrides[get_generation_dependencies] = lambda: deps
    yield TestClient(app)
    app.dependency_overrides.clear()


# --- Validation ---

@pytest.mark.parametrize("body", [{}, {"prompt": ""}, {"prompt": "   \n\t"}, {"tone": "casual"}])
def test_missing_prompt_is_rejected_without_external_calls(client, call_model, body):
    response = client.post("/api/generate", json=body)

    assert response.status_code == 400
    assert response.json() == {"error": "Prompt is required"}
    call_model.assert_not_awaited()


def test_malformed_body_is_a_client_error(client, call_model):
    response = client.post("/api/generate", json={"prompt": ["not", "a", "string"]})

    assert response.status_code == 400
    assert "error" in response.json()
    call_model.assert_not_awaited()


# --- Happy path ---

def test_linkedin_article_without_image_credential(client, call_model):
    """
    GIVEN: a full request and no Unsplash key configured.
    WHEN:  POST /api/generate is called.
    THEN:  the text comes back with three placeholder images.
    """
    response = client.post("/api/generate", json={
        "prompt": "Write about AI in healthcare",
        "tone": "professional",
        "wordCount": 500,
        "contentType": "article",
        "platform": "linkedin",
    })

    assert response.status_code == 200
    data = response.json()
    assert data["content"] == GENERATED_TEXT
    assert data["wordCount"] == len(GENERATED_TEXT.split())
    assert data["platform"] == "linkedin"
    assert len(data["images"]) == 3
    assert data["imageTypes"] == ["stock", "stock", "stock"]
    assert all(url.startswith("https://picsum.photos/800/600?random=") for url in data["images"])

    model_name, sent_prompt = call_model.await_args.args
    assert model_name == "gemini-test"
    assert "Generate article with a professional tone, approximately 500 words." in sent_prompt
    assert "Format for LinkedIn" in sent_prompt
    assert "Content request: Write about AI in healthcare" in sent_prompt
    print("\n✅ SUCCESS: test_linkedin_article_without_image_credential passed.")


def test_fractional_word_count_is_accepted_and_rounded(client, call_model):
    response = client.post("/api/generate", json={"prompt": "Benefits of remote work", "wordCount": 500.6})

    assert response.status_code == 200
    assert "approximately 501 words." in call_model.await_args.args[1]


def test_defaults_are_applied_for_optional_fields(client, call_model):
    response = client.post("/api/generate", json={"prompt": "Benefits of remote work"})

    assert response.status_code == 200
    assert response.json()["platform"] == "standard"
    sent_prompt = call_model.await_args.args[1]
    assert "Generate content with a professional tone, approximately 500 words." in sent_prompt
    assert "Use clear paragraphs with proper spacing." in sent_prompt


def test_image_sourcing_failure_still_returns_content(client, deps, mocker):
    mocker.patch.object(deps.image_sourcer, "source_images", side_effect=RuntimeError("images down"))

    response = client.post("/api/generate", json={"prompt": "Write about AI in healthcare"})

    assert response.status_code == 200
    data = response.json()
    assert data["images"] == []
    assert data["imageTypes"] == []


# --- Upstream failures ---

def test_exhausted_models_return_quota_hint(client, call_model):
    call_model.side_effect = Exception("429 You exceeded your current quota")

    response = client.post("/api/generate", json={"prompt": "Write about AI in healthcare"})

    assert response.status_code == 500
    assert response.json()["error"].startswith("Failed to generate content. Free tier quota exceeded.")


def test_unexpected_error_is_an_opaque_500(client, deps, mocker):
    mocker.patch.object(deps.content_generator, "generate", side_effect=RuntimeError("socket closed"))

    response = client.post("/api/generate", json={"prompt": "Write about AI in healthcare"})

    assert response.status_code == 500
    assert response.json() == {"error": "Failed to generate content. socket closed"}


# --- Health ---

def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


# --- Prompt composition ---

def test_unknown_platform_falls_back_to_standard_instructions():
    prompt = compose_generation_prompt(GenerationRequest(prompt="Topic", platform="myspace"))
    assert "Platform: myspace" in prompt
    assert "Formatting: Use clear paragraphs with proper spacing." in prompt


@pytest.mark.parametrize("requested, expected", [(None, 500), (0, 500), (50, 100), (750, 750), (749.5, 750), (99.2, 100), (5000, 2000)])
def test_word_count_is_clamped(requested, expected):
    assert resolve_word_count(requested) == expected
