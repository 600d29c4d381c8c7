"""Note repository for database operations."""

import hmac
from typing import Mapping, Optional

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..exceptions import (
    NoteConflictError,
    NoteNotFoundError,
    NoteUnauthorizedError,
    ServiceUnavailableError,
)
from ..logging import get_logger
from ..models.base import utcnow
from ..models.note import Note
from ..validation import generate_note_id, validate_note_id, validate_text

logger = get_logger("repositories.notes")

# generated IDs collide rarely; give up after this many tries
ID_GENERATION_ATTEMPTS = 5


class NoteRepository:
    """Repository for note database operations.

    Write methods commit or roll back before returning. Store failures
    surface as ``ServiceUnavailableError``; nothing is retried here.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, text: str, password: str = "", note_id: Optional[str] = None) -> Note:
        """Create a note, generating an ID when none is requested."""
        validate_text(text)

        if note_id:
            validate_note_id(note_id)
            return await self._insert(note_id, text, password)

        for attempt in range(1, ID_GENERATION_ATTEMPTS + 1):
            candidate = generate_note_id()
            try:
                return await self._insert(candidate, text, password)
            except NoteConflictError:
                logger.warning(
                    "Generated note id collided, retrying",
                    extra={"note_id": candidate, "attempt": attempt},
                )
        raise ServiceUnavailableError("could not allocate a note id")

    async def fetch(self, note_id: str) -> Note:
        """Get a live note by ID."""
        try:
            stmt = (
                select(Note)
                .where(Note.id == note_id)
                .execution_options(populate_existing=True)
            )
            result = await self.session.execute(stmt)
            note = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            raise ServiceUnavailableError(f"couldn't load note {note_id}") from e

        if note is None or note.is_deleted:
            raise NoteNotFoundError(note_id)
        return note

    async def update(self, note_id: str, password: str, new_text: str) -> Note:
        """Replace the text of a note; empty text deletes it."""
        if new_text == "":
            return await self._tombstone(note_id, password)

        validate_text(new_text)
        try:
            note = await self._lock_for_write(note_id, password)
            note.text = new_text
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise ServiceUnavailableError(f"couldn't update note {note_id}") from e

        logger.debug("Note updated", extra={"note_id": note_id, "length": len(new_text)})
        return note

    async def delete(self, note_id: str, password: str) -> None:
        """Tombstone a note: the text is cleared, the row and ID stay."""
        await self._tombstone(note_id, password)

    async def _tombstone(self, note_id: str, password: str) -> Note:
        try:
            note = await self._lock_for_write(note_id, password)
            note.text = ""
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise ServiceUnavailableError(f"couldn't delete note {note_id}") from e

        logger.debug("Note deleted", extra={"note_id": note_id})
        return note

    async def flush_counts(self, deltas: Mapping[str, int]) -> int:
        """Add view increments to the stored counters in one transaction.

        IDs that no longer exist (or were deleted) are skipped silently.
        Returns the number of notes that were updated.
        """
        touched = 0
        try:
            for note_id, delta in deltas.items():
                if delta <= 0:
                    continue
                stmt = (
                    update(Note)
                    .where(Note.id == note_id, Note.text != "")
                    # keep updated_at: a view is not an edit
                    .values(views=Note.views + delta, updated_at=Note.updated_at)
                    .execution_options(synchronize_session=False)
                )
                result = await self.session.execute(stmt)
                touched += result.rowcount or 0
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise ServiceUnavailableError("couldn't persist view counts") from e
        return touched

    async def _insert(self, note_id: str, text: str, password: str) -> Note:
        try:
            existing = await self.session.get(Note, note_id)
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise ServiceUnavailableError(f"couldn't create note {note_id}") from e
        if existing is not None:
            raise NoteConflictError(note_id)

        # a concurrent insert of the same id still ends in IntegrityError below
        now = utcnow()
        note = Note(
            id=note_id, text=text, password=password, views=0, created_at=now, updated_at=now
        )
        self.session.add(note)
        try:
            await self.session.commit()
            await self.session.refresh(note)
        except IntegrityError as e:
            await self.session.rollback()
            raise NoteConflictError(note_id) from e
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise ServiceUnavailableError(f"couldn't create note {note_id}") from e
        return note

    async def _lock_for_write(self, note_id: str, password: str) -> Note:
        """Load the row for update and check the edit password.

        Leaves the transaction open on success and ends it on refusal.
        """
        stmt = (
            select(Note)
            .where(Note.id == note_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        note = result.scalar_one_or_none()

        if note is None or note.is_deleted:
            await self._release()
            raise NoteNotFoundError(note_id)
        if note.is_protected and not hmac.compare_digest(
            note.password.encode(), password.encode()
        ):
            await self._release()
            logger.info("Wrong password for note", extra={"note_id": note_id})
            raise NoteUnauthorizedError(note_id)
        return note

    async def _release(self) -> None:
        # nothing was written; committing ends the transaction and drops the
        # row lock without expiring objects the caller still holds
        await self.session.commit()
