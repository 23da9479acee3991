# /app/client/studio_client.py

from typing import Optional

import httpx

from ..models.editor_model import EditorState
from ..models.export_model import ExportFormat
from ..models.generation_model import GenerationRequest
from ..services import prompt_library
from . import editor_state

DEFAULT_BASE_URL = "http://localhost:3000/api"


class StudioClient:
    """
    A scripted stand-in for the browser editor: it talks to the backend over
    HTTP and keeps the editor state with the pure transitions in
    `editor_state`.

    Generate and refine both replace the draft, so only one may be in flight;
    while `state.busy` is set, further calls return the state unchanged.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout_seconds: float = 120.0,
    ):
        self.base_url = base_url.rstrip("/")
        self._transport = transport
        self.timeout_seconds = timeout_seconds
        self.state = EditorState()
        self.last_request: Optional[GenerationRequest] = None

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(base_url=self.base_url, timeout=self.timeout_seconds, transport=self._transport)

    async def _post_generate(self, request: GenerationRequest) -> dict:
        async with self._client() as client:
            response = await client.post("/generate", json=request.model_dump(exclude_none=True))
            response.raise_for_status()
            return response.json()

    async def generate(
        self,
        prompt: str,
        tone: str = "professional",
        word_count: int = 500,
        content_type: str = "article",
        platform: str = "standard",
    ) -> EditorState:
        if self.state.busy:
            return self.state
        if not prompt or not prompt.strip():
            self.state = self.state.model_copy(update={"error": "Please enter a prompt"})
            return self.state

        request = GenerationRequest(
            prompt=prompt, tone=tone, wordCount=word_count, contentType=content_type, platform=platform
        )
        self.state = editor_state.begin_request(self.state)
        try:
            data = await self._post_generate(request)
            self.state = editor_state.apply_generation(
                self.state, data["content"], images=data.get("images") or [], word_count=data.get("wordCount")
            )
        except (httpx.HTTPError, ValueError, KeyError, TypeError) as e:
            print(f"ERROR generating content: {e}")
            self.state = editor_state.fail_request(self.state, "Failed to generate content. Please try again.")
            return self.state

        self.last_request = request
        return self.state

    async def refine(self, instruction: str) -> EditorState:
        """
        Asks the model to apply one change to the current draft. The images
        that came with the original generation are kept.
        """
        if self.state.busy or not instruction or not instruction.strip() or not self.state.draft:
            return self.state

        base = self.last_request or GenerationRequest()
        request = GenerationRequest(
            prompt=prompt_library.REFINEMENT_PROMPT.format(
                original_content=self.state.draft,
                refinement_request=instruction,
                word_count=self.state.word_count,
            ),
            tone=base.tone or "professional",
            wordCount=self.state.word_count,
            contentType=base.contentType or "article",
            platform=base.platform or "standard",
        )
        self.state = editor_state.begin_request(self.state, clear_draft=False)
        try:
            data = await self._post_generate(request)
            self.state = editor_state.apply_generation(self.state, data["content"], word_count=data.get("wordCount"))
        except (httpx.HTTPError, ValueError, KeyError, TypeError) as e:
            print(f"ERROR refining content: {e}")
            self.state = editor_state.fail_request(self.state, "Failed to refine content. Please try again.")
        return self.state

    async def export(self, export_format: ExportFormat) -> bytes:
        """Downloads the current draft in the given format."""
        if not self.state.draft:
            raise ValueError("There is no content to export.")
        base = self.last_request or GenerationRequest()
        payload = {
            "content": self.state.draft,
            "images": list(self.state.images),
            "tone": base.tone or "professional",
            "platform": base.platform or "standard",
            "contentType": base.contentType or "article",
            "wordCount": self.state.word_count,
        }
        async with self._client() as client:
            response = await client.post(f"/export/{export_format.value}", json=payload)
            response.raise_for_status()
            return response.content
