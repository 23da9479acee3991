# /app/routers/generate_router.py

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from ..models import generation_model
from ..services import generation_service
from ..services.dependencies import GenerationDependencies, get_generation_dependencies

router = APIRouter()

@router.post(
    "", # Maps to /api/generate
    response_model=generation_model.GenerationResponse,
    summary="Generate AI Content",
    description="Generate content with Gemini from a prompt, tone, word count, content type and platform, plus up to three related images.",
    responses={
        400: {"model": generation_model.ErrorResponse, "description": "Prompt is required"},
        500: {"model": generation_model.ErrorResponse, "description": "Generation failed"},
    }
)
async def generate_content(
    request: generation_model.GenerationRequest,
    deps: GenerationDependencies = Depends(get_generation_dependencies)
):
    """Validates the prompt, generates the text, then attaches images."""
    if not request.prompt or not request.prompt.strip():
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": generation_service.PROMPT_REQUIRED_MESSAGE}
        )

    try:
        return await generation_service.generate_content(request, deps)
    except Exception as e:
        print(f"ERROR generating content: {e}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": generation_service.describe_generation_failure(e)}
        )
