"""FastAPI dependencies shared by the routers."""

from typing import Optional, Tuple

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from ..config import Settings, get_settings
from ..core.accounting import ViewCounter, ViewCountFlusher
from ..core.schemas.notes import NoteView
from ..core.services import CaptchaService, LoadStatus, NoteService, ReportService
from ..database import get_db_session


def get_view_counter(request: Request) -> ViewCounter:
    """The process-wide counter created by ``create_app``."""
    return request.app.state.view_counter


def get_view_flusher(request: Request) -> Optional[ViewCountFlusher]:
    return getattr(request.app.state, "view_flusher", None)


async def get_note_service(
    session: AsyncSession = Depends(get_db_session),
    view_counter: ViewCounter = Depends(get_view_counter),
    settings: Settings = Depends(get_settings),
) -> NoteService:
    return NoteService(session, view_counter, settings)


async def load_note(
    note_id: str,
    note_service: NoteService = Depends(get_note_service),
) -> Tuple[NoteView, LoadStatus]:
    """Load the note named in the path.

    FastAPI caches dependency results per request, so everything in one
    request that depends on this shares a single load and a single view.
    """
    return await note_service.load(note_id)


def get_captcha_service(settings: Settings = Depends(get_settings)) -> CaptchaService:
    return CaptchaService(settings)


def get_report_service(settings: Settings = Depends(get_settings)) -> ReportService:
    return ReportService(settings)
