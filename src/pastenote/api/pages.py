"""Static markdown pages."""

from fastapi import APIRouter, Depends, HTTPException, status

from ..config import Settings, get_settings
from ..core.rendering import load_markdown_file
from ..core.schemas.notes import PageResponse

router = APIRouter(tags=["pages"])


@router.get("/tos", response_model=PageResponse)
async def terms_of_service(settings: Settings = Depends(get_settings)):
    """Terms of service, rendered to HTML."""
    content = load_markdown_file(settings.tos_file)
    if content is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Page not found")
    return PageResponse(name="TOS", content=content)
