"""Note service implementation."""

from typing import Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from ...config import Settings, get_settings
from ..accounting import ViewCounter
from ..exceptions import NoteBadRequestError, NoteNotFoundError
from ..fraud import is_fraudulent
from ..logging import get_logger
from ..models.note import Note
from ..repositories.note_repository import NoteRepository
from ..schemas.notes import NoteStats, NoteView
from .interfaces import INoteService, LoadStatus

logger = get_logger("services.notes")


class NoteService(INoteService):
    """Orchestrates reads and writes between the repository and view accounting."""

    def __init__(
        self,
        session: AsyncSession,
        view_counter: ViewCounter,
        settings: Optional[Settings] = None,
    ):
        self.session = session
        self.note_repo = NoteRepository(session)
        self.view_counter = view_counter
        self.settings = settings or get_settings()

    async def load(self, note_id: str) -> Tuple[NoteView, LoadStatus]:
        """Load a note for display.

        A missing or deleted note gives an empty ``NoteView`` and
        ``LoadStatus.NOT_FOUND``. A found note counts exactly one view, even
        if building the view fails afterwards. Store failures propagate.
        """
        try:
            note = await self.note_repo.fetch(note_id)
        except NoteNotFoundError:
            return NoteView(id=note_id), LoadStatus.NOT_FOUND

        try:
            view = self._to_view(note)
        finally:
            self.view_counter.increment(note_id)
        # include our own view and everything not flushed yet
        view.views = note.views + self.view_counter.pending(note_id)
        view.spam = is_fraudulent(
            view,
            self.settings.fraud_view_threshold,
            self.settings.fraud_link_percent_threshold,
        )
        return view, LoadStatus.OK

    async def save(
        self, note_id: str, text: str, password: str, custom_id: Optional[str] = None
    ) -> NoteView:
        """Create (empty ``note_id``), update, or delete (empty ``text``) a note.

        A ``custom_id`` only names a new note; combining it with
        ``note_id`` is a bad request. Repository errors are raised unchanged.
        """
        if note_id and custom_id:
            raise NoteBadRequestError(
                "custom id only applies to new notes", {"note_id": note_id, "custom_id": custom_id}
            )
        if not note_id:
            note = await self.note_repo.create(text, password, note_id=custom_id)
            logger.info("Note created", extra={"note_id": note.id})
            return self._to_view(note)

        note = await self.note_repo.update(note_id, password, text)
        if text == "":
            logger.info("Note deleted", extra={"note_id": note_id})
        else:
            logger.info("Note updated", extra={"note_id": note_id})
        return self._to_view(note)

    def stats(self, note: NoteView) -> NoteStats:
        return NoteStats(
            id=note.id,
            views=note.views,
            published=note.created_at,
            edited=note.updated_at if note.edited else None,
        )

    def _to_view(self, note: Note) -> NoteView:
        return NoteView(
            id=note.id,
            text=note.text,
            views=note.views,
            created_at=note.created_at,
            updated_at=note.updated_at,
        )
