"""Notes API endpoints."""

from http import HTTPStatus
from typing import Tuple

from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import JSONResponse, PlainTextResponse

from ..config import Settings, get_settings
from ..core.exceptions import NoteError, NoteNotFoundError
from ..core.logging import get_logger
from ..core.rendering import render_markdown
from ..core.schemas.notes import (
    NoteEditResponse,
    NoteSaveRequest,
    NoteStats,
    NoteView,
    ReportRequest,
    SaveResponse,
)
from ..core.services import CaptchaService, LoadStatus, NoteService, ReportService
from .dependencies import get_captcha_service, get_note_service, get_report_service, load_note

logger = get_logger("api.notes")

router = APIRouter(prefix="/notes", tags=["notes"])

# shown in place of ads when no ads file is configured
DEFAULT_SPAM_NOTICE = (
    "<p><strong>Careful:</strong> this note is mostly links and may be spam.</p>"
)


def _found(loaded: Tuple[NoteView, LoadStatus]) -> NoteView:
    note, status = loaded
    if status is LoadStatus.NOT_FOUND:
        raise NoteNotFoundError(note.id)
    return note


def _save_error(code: int, message: str = "") -> JSONResponse:
    payload = HTTPStatus(code).phrase
    if message:
        payload = f"{payload}: {message}"
    return JSONResponse(
        status_code=code, content=SaveResponse(success=False, payload=payload).model_dump()
    )


@router.get("/{note_id}", response_model=NoteView)
async def read_note(
    request: Request,
    loaded: Tuple[NoteView, LoadStatus] = Depends(load_note),
):
    """Get a note with its rendered body."""
    note, status = loaded
    logger.debug(f"/{note.id} requested; status: {status.value}")
    note = _found(loaded)
    note.content = render_markdown(note.text)
    if note.spam:
        logger.info("Serving note flagged as spam", extra={"note_id": note.id, "views": note.views})
        note.ads = request.app.state.ads_html or DEFAULT_SPAM_NOTICE
    return note


@router.get("/{note_id}/export", response_class=PlainTextResponse)
async def export_note(loaded: Tuple[NoteView, LoadStatus] = Depends(load_note)):
    """Get the raw note text."""
    note = _found(loaded)
    logger.debug(f"/{note.id}/export requested")
    return PlainTextResponse(note.text)


@router.get("/{note_id}/edit", response_model=NoteEditResponse)
async def edit_note(loaded: Tuple[NoteView, LoadStatus] = Depends(load_note)):
    """Get what the edit form needs."""
    note = _found(loaded)
    logger.debug(f"/{note.id}/edit requested")
    return NoteEditResponse(id=note.id, text=note.text)


@router.get("/{note_id}/stats", response_model=NoteStats)
async def note_stats(
    loaded: Tuple[NoteView, LoadStatus] = Depends(load_note),
    note_service: NoteService = Depends(get_note_service),
):
    """Get view count and publication dates."""
    note = _found(loaded)
    logger.debug(f"/{note.id}/stats requested")
    return note_service.stats(note)


@router.post("/{note_id}/report", status_code=204)
async def report_note(
    note_id: str,
    request: ReportRequest,
    report_service: ReportService = Depends(get_report_service),
):
    """Report an abusive note."""
    if request.report.strip():
        await report_service.submit(note_id, request.report)
    return Response(status_code=204)


@router.post("", response_model=SaveResponse, status_code=201)
async def save_note(
    body: NoteSaveRequest,
    request: Request,
    response: Response,
    note_service: NoteService = Depends(get_note_service),
    captcha: CaptchaService = Depends(get_captcha_service),
    settings: Settings = Depends(get_settings),
):
    """Create, update or delete a note."""
    client_ip = request.client.host if request.client else None
    if not await captcha.verify(body.token, client_ip):
        return _save_error(403, "robot check failed")
    if not body.tos:
        logger.error("POST /notes error: 412")
        return _save_error(412)

    length = len(body.text)
    # empty text is only fine for deleting an existing note
    if (not body.id or length != 0) and not (
        settings.min_text_length <= length <= settings.max_text_length
    ):
        logger.error("POST /notes error: 400", extra={"length": length})
        return _save_error(400, "note length not accepted")

    try:
        note = await note_service.save(body.id, body.text, body.password, body.custom_id)
    except NoteError as e:
        logger.error(f"POST /notes error: {e.status_code}", extra={"reason": e.message})
        return _save_error(e.status_code, e.message)

    if body.id:
        response.status_code = 200
    return SaveResponse(success=True, payload=note.id)
