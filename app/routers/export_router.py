# /app/routers/export_router.py

from fastapi import APIRouter, status, Response
from fastapi.responses import JSONResponse

from ..config import get_settings
from ..models import export_model, generation_model
from ..services import export_service

router = APIRouter()

@router.post(
    "/{export_format}",
    summary="Export a Draft",
    description="Renders the current draft (and its images) as plain text, Markdown, HTML or a paginated PDF download.",
    response_class=Response,
    responses={
        200: {"description": "The rendered file, served as an attachment."},
        400: {"model": generation_model.ErrorResponse, "description": "Missing content"},
        500: {"model": generation_model.ErrorResponse, "description": "Rendering failed"},
    }
)
async def export_draft(
    export_format: export_model.ExportFormat,
    payload: export_model.ExportRequest
):
    try:
        body, media_type, filename = await export_service.export_content(
            export_format,
            payload,
            timeout_seconds=get_settings().http_timeout_seconds
        )
    except ValueError as e:
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": str(e)})
    except Exception as e:
        print(f"ERROR during {export_format.value} export: {e}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Failed to export content. Please try again."}
        )

    return Response(
        content=body,
        media_type=media_type,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'}
    )
